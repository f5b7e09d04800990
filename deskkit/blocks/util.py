"""Small numeric and text helpers shared by the status blocks."""

import math

__all__ = ["UTF8_MAX_BYTE_COUNT", "gcd", "truncate_utf8"]

UTF8_MAX_BYTE_COUNT = 4


def gcd(a: int, b: int) -> int:
    """Greatest common divisor; ``gcd(n, 0)`` is ``n``."""
    return math.gcd(a, b)


def _sequence_length(lead: int) -> int:
    """Number of bytes a UTF-8 sequence starting with ``lead`` claims to use."""
    if not lead & 0x80:
        return 1
    count = 0
    while lead & 0x80:
        count += 1
        lead = (lead << 1) & 0xFF
    return count


def truncate_utf8(data: bytes, size: int, char_limit: int) -> bytes:
    """Cut UTF-8 ``data`` to at most ``char_limit`` characters.

    ``size`` is the size of the buffer the text must fit into, including a
    terminating NUL, so at most ``size - 1`` bytes are kept. Scanning also
    stops at the first NUL byte, and a multibyte character is never split.
    """
    data = bytes(data)
    count = 0
    i = 0
    while count < char_limit and i < len(data):
        lead = data[i]
        if lead == 0:
            break
        skip = _sequence_length(lead)
        if i + skip >= size:
            break
        count += 1
        i += skip
    return data[:i]