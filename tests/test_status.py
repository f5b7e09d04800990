import io

from deskkit.blocks.block import Block
from deskkit.blocks.config import StatusConfig
from deskkit.blocks.status import Status


def make(icon, output, signal=0):
    block = Block(icon, "true", 0, signal, 45)
    block.output = output
    return block


class RecordingConnection:
    def __init__(self):
        self.names = []

    def set_root_name(self, name):
        self.names.append(name)


def test_outputs_joined_with_delimiter():
    status = Status([make("", "a"), make("", "b")], StatusConfig())
    status.update()
    assert status.current == "a | b"


def test_icons_prefix_outputs():
    status = Status([make("I:", "x")], StatusConfig())
    status.update()
    assert status.current == "I:x"


def test_clickable_signal_byte_precedes_block():
    status = Status([make("", "a", 5), make("", "b", 7)], StatusConfig())
    status.update()
    assert status.current == "\x05a | \x07b"


def test_signals_omitted_when_not_clickable():
    config = StatusConfig(clickable_blocks=False)
    status = Status([make("", "a", 5), make("", "b", 7)], config)
    status.update()
    assert status.current == "a | b"


def test_empty_outputs_skipped():
    status = Status([make("", ""), make("", "b"), make("", "")], StatusConfig())
    status.update()
    assert status.current == "b"


def test_leading_and_trailing_delimiters():
    config = StatusConfig(leading_delimiter=True, trailing_delimiter=True)
    status = Status([make("", "a")], config)
    status.update()
    assert status.current == " | a | "


def test_trailing_delimiter_not_added_to_empty_status():
    config = StatusConfig(trailing_delimiter=True)
    status = Status([make("", "")], config)
    status.update()
    assert status.current == ""


def test_update_reports_change_only_once():
    blocks = [make("", "a")]
    status = Status(blocks, StatusConfig())
    assert status.update() is True
    assert status.update() is False
    blocks[0].output = "z"
    assert status.update() is True
    assert status.previous == "a"


def test_write_debug_prints_line():
    status = Status([make("", "a"), make("", "b")], StatusConfig())
    status.update()
    out = io.StringIO()
    status.write(True, None, out)
    assert out.getvalue() == "a | b\n"


def test_write_sets_root_name():
    status = Status([make("", "a")], StatusConfig())
    status.update()
    connection = RecordingConnection()
    status.write(False, connection)
    assert connection.names == ["a"]