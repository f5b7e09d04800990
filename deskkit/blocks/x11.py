"""Minimal X11 protocol client that sets the root window name."""

import os
import socket
import struct
from pathlib import Path
from typing import Iterator, Optional, Tuple

__all__ = [
    "X11Error",
    "X11Connection",
    "parse_display",
    "build_change_property",
]

_BYTE_ORDER_LSB = 0x6C
_PROTOCOL_MAJOR = 11
_PROTOCOL_MINOR = 0
_CHANGE_PROPERTY = 18
_GET_INPUT_FOCUS = 43
_PROP_MODE_REPLACE = 0
_ATOM_STRING = 31
_ATOM_WM_NAME = 39
_X_TCP_PORT = 6000
_FAMILY_LOCAL = 256
_FAMILY_WILD = 65535
_MIT_COOKIE = b"MIT-MAGIC-COOKIE-1"


class X11Error(Exception):
    """Raised when the X server cannot be reached or rejects a request."""


def _pad(data: bytes) -> bytes:
    return data + b"\0" * (-len(data) % 4)


def parse_display(display: Optional[str]) -> Tuple[str, int, int]:
    """Split a display name ``[host]:number[.screen]`` into its parts.

    A host starting with ``/`` is taken as the path of a local socket.
    """
    if not display:
        raise X11Error("no display specified")
    host, sep, rest = display.rpartition(":")
    if not sep:
        raise X11Error(f"invalid display name {display!r}")
    number, _, screen = rest.partition(".")
    try:
        return host, int(number), int(screen) if screen else 0
    except ValueError:
        raise X11Error(f"invalid display name {display!r}") from None


def build_change_property(window: int, name) -> bytes:
    """Encode a request replacing ``WM_NAME`` of ``window`` with ``name``."""
    data = name.encode("utf-8") if isinstance(name, str) else bytes(name)
    padded = _pad(data)
    header = struct.pack(
        "<BBHIIIB3xI",
        _CHANGE_PROPERTY,
        _PROP_MODE_REPLACE,
        6 + len(padded) // 4,
        window,
        _ATOM_WM_NAME,
        _ATOM_STRING,
        8,
        len(data),
    )
    return header + padded


def _is_local(host: str) -> bool:
    return host in ("", "unix") or host.startswith("/")


def _read_xauth(data: bytes) -> Iterator[Tuple[int, bytes, bytes, bytes, bytes]]:
    pos = 0
    while pos + 2 <= len(data):
        (family,) = struct.unpack_from(">H", data, pos)
        pos += 2
        fields = []
        for _ in range(4):
            if pos + 2 > len(data):
                return
            (length,) = struct.unpack_from(">H", data, pos)
            pos += 2
            fields.append(data[pos:pos + length])
            pos += length
        if pos > len(data):
            return
        address, number, name, cookie = fields
        yield family, address, number, name, cookie


def _find_auth(host: str, number: int) -> Tuple[bytes, bytes]:
    path = os.environ.get("XAUTHORITY") or os.path.join(
        os.path.expanduser("~"), ".Xauthority"
    )
    try:
        data = Path(path).read_bytes()
    except OSError:
        return b"", b""
    if _is_local(host):
        addresses = {socket.gethostname().encode(), b"localhost"}
    else:
        addresses = {host.encode()}
    wanted = str(number).encode()
    for family, address, entry_number, name, cookie in _read_xauth(data):
        if entry_number and entry_number != wanted:
            continue
        if family != _FAMILY_WILD and address not in addresses:
            continue
        if name == _MIT_COOKIE:
            return name, cookie
    return b"", b""


def _connect(host: str, number: int) -> socket.socket:
    try:
        if _is_local(host):
            path = host if host.startswith("/") else f"/tmp/.X11-unix/X{number}"
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.connect(path)
            except OSError:
                sock.close()
                raise
            return sock
        return socket.create_connection((host, _X_TCP_PORT + number))
    except OSError as exc:
        raise X11Error("could not connect to X server") from exc


class X11Connection:
    """An open connection to an X server, with the first screen's root window."""

    def __init__(self, sock):
        self._sock = sock
        self.root = 0

    @classmethod
    def open(cls, display=None):
        """Connect to ``display`` (``$DISPLAY`` by default) and complete setup."""
        if display is None:
            display = os.environ.get("DISPLAY")
        host, number, _screen = parse_display(display)
        connection = cls(_connect(host, number))
        try:
            connection._handshake(*_find_auth(host, number))
        except BaseException:
            connection.close()
            raise
        return connection

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _recv(self, size: int) -> bytes:
        chunks = bytearray()
        while len(chunks) < size:
            try:
                chunk = self._sock.recv(size - len(chunks))
            except OSError as exc:
                raise X11Error("lost connection to X server") from exc
            if not chunk:
                raise X11Error("X server closed the connection")
            chunks += chunk
        return bytes(chunks)

    def _send(self, data: bytes) -> None:
        try:
            self._sock.sendall(data)
        except OSError as exc:
            raise X11Error("could not flush X output buffer") from exc

    def _handshake(self, auth_name: bytes, auth_data: bytes) -> None:
        request = struct.pack(
            "<BxHHHHxx",
            _BYTE_ORDER_LSB,
            _PROTOCOL_MAJOR,
            _PROTOCOL_MINOR,
            len(auth_name),
            len(auth_data),
        )
        self._send(request + _pad(auth_name) + _pad(auth_data))
        status, reason_len, _major, _minor, length = struct.unpack("<BBHHH", self._recv(8))
        body = self._recv(length * 4)
        if status == 0:
            reason = body[:reason_len].decode("latin-1")
            raise X11Error(f"X server refused the connection: {reason}")
        if status != 1:
            reason = body.rstrip(b"\0").decode("latin-1")
            raise X11Error(f"X server requires further authentication: {reason}")
        try:
            (vendor_len,) = struct.unpack_from("<H", body, 16)
            num_formats = body[21]
            offset = 32 + vendor_len + (-vendor_len % 4) + 8 * num_formats
            (self.root,) = struct.unpack_from("<I", body, offset)
        except (struct.error, IndexError):
            raise X11Error("malformed setup reply from X server") from None

    def set_root_name(self, name) -> None:
        """Set ``WM_NAME`` of the root window and wait for the server to accept it."""
        self._send(build_change_property(self.root, name) + struct.pack("<BxH", _GET_INPUT_FOCUS, 1))
        while True:
            packet = self._recv(32)
            kind = packet[0]
            if kind == 0:
                raise X11Error("could not set X root name")
            if kind == 1:
                (extra,) = struct.unpack_from("<I", packet, 4)
                if extra:
                    self._recv(extra * 4)
                return

    def close(self) -> None:
        self._sock.close()