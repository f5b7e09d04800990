"""Tag, layout and client-factor arithmetic used by key bindings."""

from typing import Sequence, TypeVar

__all__ = ["shift_tags", "adjust_cfact", "cycle_layout_index", "tag_icon"]

T = TypeVar("T")

CFACT_MIN = 0.25
CFACT_MAX = 4.0


def shift_tags(tagset: int, step: int, numtags: int, other_tags: int = 0) -> int:
    """Rotate a tag mask by ``step`` tags (positive moves left).

    When ``other_tags`` is non-zero, rotation continues until the result
    shares a tag with it, so empty tags are skipped.
    """
    if numtags <= 0:
        raise ValueError("numtags must be positive")
    mask = (1 << numtags) - 1
    amount = step % numtags
    shifted = tagset & mask
    for _ in range(numtags):
        shifted = ((shifted << amount) | (shifted >> (numtags - amount))) & mask
        if not other_tags or shifted & other_tags:
            break
    return shifted


def adjust_cfact(current: float, delta: float) -> float:
    """Return the new client factor.

    A zero ``delta`` resets to 1.0, a ``delta`` above 4.0 sets the factor to
    ``delta - 4.0``, anything else is added. The result is kept in [0.25, 4.0].
    """
    if not delta:
        factor = 1.0
    elif delta > 4.0:
        factor = delta - 4.0
    else:
        factor = delta + current
    return min(max(factor, CFACT_MIN), CFACT_MAX)


def cycle_layout_index(current: int, step: int, count: int) -> int:
    """Index of the layout ``step`` places from ``current``, wrapping around."""
    if count <= 0:
        raise ValueError("there are no layouts to cycle through")
    return (current + step) % count


def tag_icon(icons: Sequence[T], monitor_num: int, tag: int, numtags: int) -> T:
    """Icon for a tag on a monitor; later monitors continue through the list."""
    if not icons:
        raise ValueError("no tag icons configured")
    index = tag + numtags * monitor_num
    if index >= len(icons):
        index %= len(icons)
    return icons[index]