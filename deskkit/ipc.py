"""Client for the window manager's IPC socket and the ``dwm-msg`` command."""

import json
import math
import socket
import struct
import sys
from enum import IntEnum
from typing import List, Sequence, Tuple, Union

__all__ = [
    "IPC_MAGIC",
    "HEADER_SIZE",
    "DEFAULT_SOCKET_PATH",
    "EVENTS",
    "MessageType",
    "ProtocolError",
    "IpcClient",
    "encode_message",
    "decode_header",
    "is_float",
    "is_signed_int",
    "is_unsigned_int",
    "convert_argument",
    "main",
]

IPC_MAGIC = b"DWM-IPC"
_HEADER = struct.Struct("=7sIB")
HEADER_SIZE = _HEADER.size
DEFAULT_SOCKET_PATH = "/tmp/dwm.sock"
PROG_NAME = "dwm-msg"

EVENT_TAG_CHANGE = "tag_change_event"
EVENT_CLIENT_FOCUS_CHANGE = "client_focus_change_event"
EVENT_LAYOUT_CHANGE = "layout_change_event"
EVENT_MONITOR_FOCUS_CHANGE = "monitor_focus_change_event"
EVENT_FOCUSED_TITLE_CHANGE = "focused_title_change_event"
EVENT_FOCUSED_STATE_CHANGE = "focused_state_change_event"
EVENTS = (
    EVENT_TAG_CHANGE,
    EVENT_CLIENT_FOCUS_CHANGE,
    EVENT_LAYOUT_CHANGE,
    EVENT_MONITOR_FOCUS_CHANGE,
    EVENT_FOCUSED_TITLE_CHANGE,
    EVENT_FOCUSED_STATE_CHANGE,
)

_DIGITS = frozenset("0123456789")
_EMPTY_PAYLOAD = b"\0"


class MessageType(IntEnum):
    RUN_COMMAND = 0
    GET_MONITORS = 1
    GET_TAGS = 2
    GET_LAYOUTS = 3
    GET_DWM_CLIENT = 4
    SUBSCRIBE = 5
    EVENT = 6


class ProtocolError(Exception):
    """Raised when a message from the socket is truncated or malformed."""


def encode_message(msg_type: int, payload: bytes) -> bytes:
    """Frame ``payload`` with the magic string, its size and the message type."""
    payload = bytes(payload)
    return _HEADER.pack(IPC_MAGIC, len(payload), int(msg_type)) + payload


def decode_header(header: bytes) -> Tuple[int, int]:
    """Return ``(message type, payload size)`` from a message header."""
    header = bytes(header)
    if len(header) != HEADER_SIZE:
        raise ProtocolError(
            f"Read {len(header)} bytes, expected {HEADER_SIZE} total bytes."
        )
    magic, size, msg_type = _HEADER.unpack(header)
    if magic != IPC_MAGIC:
        raise ProtocolError(
            f"Invalid magic string. Got '{magic.decode('latin-1')}', "
            f"expected '{IPC_MAGIC.decode()}'"
        )
    return msg_type, size


def is_float(s: str) -> bool:
    """Digits with an optional leading minus and one inner decimal point."""
    dot_used = minus_used = False
    last = len(s) - 1
    for i, c in enumerate(s):
        if c in _DIGITS:
            continue
        if not dot_used and c == "." and i not in (0, last):
            dot_used = True
        elif not minus_used and c == "-" and i == 0:
            minus_used = True
        else:
            return False
    return True


def is_unsigned_int(s: str) -> bool:
    """Only digits (an empty string qualifies)."""
    return all(c in _DIGITS for c in s)


def is_signed_int(s: str) -> bool:
    """Digits with an optional leading minus sign."""
    return all(c in _DIGITS or (i == 0 and c == "-") for i, c in enumerate(s))


def _to_single(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def convert_argument(arg: str) -> Union[int, float, str]:
    """Turn a command-line argument into an integer, a float or a string."""
    if is_signed_int(arg):
        digits = arg.lstrip("-")
        number = int(digits) if digits else 0
        return -number if arg.startswith("-") else number
    if is_float(arg):
        return _to_single(float(arg))
    return arg


def _dumps(obj) -> bytes:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class IpcClient:
    """A connection to the window manager's IPC socket."""

    def __init__(self, sock):
        self._sock = sock

    @classmethod
    def connect(cls, path=DEFAULT_SOCKET_PATH):
        """Connect to the Unix socket at ``path``."""
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(path)
        except OSError:
            sock.close()
            raise
        return cls(sock)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def send_message(self, msg_type, payload) -> None:
        """Send one framed message."""
        self._sock.sendall(encode_message(msg_type, payload))

    def _read_exact(self, size: int, what: str) -> bytes:
        data = bytearray()
        while len(data) < size:
            chunk = self._sock.recv(size - len(data))
            if not chunk:
                raise ProtocolError(
                    f"Unexpectedly reached EOF while reading {what}. "
                    f"Read {len(data)} bytes, expected {size} bytes."
                )
            data += chunk
        return bytes(data)

    def recv_message(self) -> Tuple[int, bytes]:
        """Receive one message; return its type and payload."""
        msg_type, size = decode_header(self._read_exact(HEADER_SIZE, "header"))
        return msg_type, self._read_exact(size, "payload")

    def _request(self, msg_type, payload) -> bytes:
        self.send_message(msg_type, payload)
        return self.recv_message()[1]

    def run_command(self, name, args: Sequence[str] = ()) -> bytes:
        """Run a named command with converted arguments; return the reply."""
        message = {"command": name, "args": [convert_argument(a) for a in args]}
        return self._request(MessageType.RUN_COMMAND, _dumps(message))

    def get_monitors(self) -> bytes:
        return self._request(MessageType.GET_MONITORS, _EMPTY_PAYLOAD)

    def get_tags(self) -> bytes:
        return self._request(MessageType.GET_TAGS, _EMPTY_PAYLOAD)

    def get_layouts(self) -> bytes:
        return self._request(MessageType.GET_LAYOUTS, _EMPTY_PAYLOAD)

    def get_dwm_client(self, window) -> bytes:
        """Ask for the properties of the client with the given window id."""
        return self._request(
            MessageType.GET_DWM_CLIENT, _dumps({"client_window_id": int(window)})
        )

    def subscribe(self, event) -> bytes:
        """Subscribe to an event; return the acknowledgement."""
        return self._request(
            MessageType.SUBSCRIBE, _dumps({"event": event, "action": "subscribe"})
        )

    def close(self) -> None:
        self._sock.close()


def _usage(name: str) -> str:
    event_lines = ",\n".join(
        " " * 34 + ("Options: " if i == 0 else "") + event
        for i, event in enumerate(EVENTS)
    )
    return "\n".join(
        [
            f"usage: {name} [options] <command> [...]",
            "",
            "Commands:",
            "  run_command <name> [args...]    Run an IPC command",
            "",
            "  get_monitors                    Get monitor properties",
            "",
            "  get_tags                        Get list of tags",
            "",
            "  get_layouts                     Get list of layouts",
            "",
            "  get_dwm_client <window_id>      Get dwm client proprties",
            "",
            "  subscribe [events...]           Subscribe to specified events",
            event_lines,
            "",
            "  help                            Display this message",
            "",
            "Options:",
            "  --ignore-reply                  Don't print reply messages from",
            "                                  run_command and subscribe.",
            "",
        ]
    )


def _usage_error(message: str) -> int:
    print(
        f"Error: {message}\nusage: {PROG_NAME} <command> [...]\n"
        f"Try '{PROG_NAME} help'",
        file=sys.stderr,
    )
    return 1


def _print_reply(reply: bytes) -> None:
    text = reply.split(b"\0", 1)[0].decode("utf-8", "replace")
    print(text, flush=True)


def main(argv=None) -> int:
    """Run the ``dwm-msg`` command; return its exit status."""
    args: List[str] = list(sys.argv[1:] if argv is None else argv)
    ignore_reply = False
    if args and args[0] == "--ignore-reply":
        ignore_reply = True
        args.pop(0)

    if not args:
        return _usage_error("Expected an argument, got none")
    command, rest = args[0], args[1:]

    if command == "help":
        print(_usage(PROG_NAME))
        return 0
    if command == "run_command" and not rest:
        return _usage_error("No command specified")
    if command == "get_dwm_client":
        if not rest:
            return _usage_error("Expected the window id")
        if not is_unsigned_int(rest[0]):
            return _usage_error("Expected unsigned integer argument")
    if command == "subscribe" and not rest:
        return _usage_error("Expected event name")
    if command not in (
        "run_command", "get_monitors", "get_tags", "get_layouts",
        "get_dwm_client", "subscribe",
    ):
        return _usage_error(f"Invalid argument '{command}'")

    try:
        client = IpcClient.connect(DEFAULT_SOCKET_PATH)
    except OSError:
        print("Failed to connect to socket", file=sys.stderr)
        return 1

    with client:
        try:
            if command == "run_command":
                reply = client.run_command(rest[0], rest[1:])
                if not ignore_reply:
                    _print_reply(reply)
            elif command == "get_monitors":
                _print_reply(client.get_monitors())
            elif command == "get_tags":
                _print_reply(client.get_tags())
            elif command == "get_layouts":
                _print_reply(client.get_layouts())
            elif command == "get_dwm_client":
                _print_reply(client.get_dwm_client(int(rest[0] or "0")))
            else:
                for event in rest:
                    reply = client.subscribe(event)
                    if not ignore_reply:
                        _print_reply(reply)
                while True:
                    _print_reply(client.recv_message()[1])
        except (ProtocolError, OSError) as exc:
            print(
                f"Error receiving response from socket. {exc}\n"
                "The connection might have been lost.",
                file=sys.stderr,
            )
            return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())