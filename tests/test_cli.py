import pytest

from deskkit.blocks.cli import CliArguments, UsageError, parse_arguments


def test_no_arguments():
    assert parse_arguments([]) == CliArguments(is_debug_mode=False)


def test_debug_flag():
    assert parse_arguments(["-d"]).is_debug_mode is True


def test_help_raises_usage():
    with pytest.raises(UsageError, match=r"usage: dwmblocks \[-d\]"):
        parse_arguments(["-h"])


def test_unknown_option_reported():
    with pytest.raises(UsageError) as info:
        parse_arguments(["-x"])
    assert "unknown option `-x'" in str(info.value)
    assert "usage: dwmblocks [-d]" in str(info.value)


def test_debug_with_positional_arguments():
    assert parse_arguments(["extra", "-d"]).is_debug_mode is True