import dataclasses

import pytest

from deskkit.blocks.config import BlockSpec, StatusConfig, default_config


def test_default_limits_and_delimiters():
    config = default_config()
    assert config.delimiter == " | "
    assert config.max_block_output_length == 45
    assert config.clickable_blocks is True
    assert config.leading_delimiter is False
    assert config.trailing_delimiter is False


def test_default_block_list():
    config = default_config()
    assert len(config.blocks) == 11
    assert config.blocks[0] == BlockSpec("", "~/.local/bin/disk.sh", 900, 19)
    assert config.blocks[-1].interval == 21600


def test_default_signals_are_unique_and_positive():
    signals = [b.signal for b in default_config().blocks]
    assert len(set(signals)) == len(signals)
    assert all(s > 0 for s in signals)


def test_default_commands_are_scripts():
    assert all(b.command.endswith(".sh") for b in default_config().blocks)


def test_block_spec_is_immutable():
    spec = BlockSpec("x", "true", 1, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        spec.interval = 5
    assert spec.interval == 1
    assert spec.command == "true"


def test_empty_config_has_no_blocks():
    assert StatusConfig().blocks == ()