"""Turning dropped URI lists into text suitable for pasting into a shell."""

from typing import Union

__all__ = ["url_decode", "paste_data"]

_FILE_PREFIX = b"file://"
_HEX = b"0123456789abcdefABCDEF"


def _as_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8", "surrogateescape") if isinstance(value, str) else bytes(value)


def _decode(src: bytes, escape: bytes) -> bytearray:
    out = bytearray()
    i = 0
    while i < len(src):
        if (
            src[i] == ord("%")
            and i + 2 < len(src) + 0
            and src[i + 1] in _HEX
            and src[i + 2] in _HEX
        ):
            c = int(src[i + 1:i + 3], 16)
            i += 3
        else:
            c = src[i]
            i += 1
        if c in escape:
            out.append(ord("\\"))
        out.append(c)
    out.append(ord(" "))
    return out


def url_decode(src: Union[str, bytes], escape_chars: Union[str, bytes]) -> str:
    """Decode %xx escapes, backslash-escape the given characters, append a space."""
    return _decode(_as_bytes(src), _as_bytes(escape_chars)).decode("utf-8", "surrogateescape")


def paste_data(data: Union[str, bytes], escape_chars: Union[str, bytes]) -> str:
    """Convert a dropped URI list into one line of space-separated paths.

    Lines are split on CR and LF. When the data starts with ``file://`` that
    prefix is removed from every entry.
    """
    raw = _as_bytes(data)
    escape = _as_bytes(escape_chars)
    strip_prefix = raw.startswith(_FILE_PREFIX)
    out = bytearray()
    for token in raw.replace(b"\r", b"\n").split(b"\n"):
        if not token:
            continue
        if strip_prefix:
            token = token[len(_FILE_PREFIX):]
        out += _decode(token, escape)
    return out.decode("utf-8", "surrogateescape")