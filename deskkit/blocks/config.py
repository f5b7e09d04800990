"""Configuration of the status feed: delimiters, limits and the block list."""

from dataclasses import dataclass, field
from typing import Tuple

__all__ = ["BlockSpec", "StatusConfig", "default_config"]


@dataclass(frozen=True)
class BlockSpec:
    """One block: icon prefix, shell command, refresh interval in seconds, signal offset."""

    icon: str
    command: str
    interval: int
    signal: int


@dataclass(frozen=True)
class StatusConfig:
    """How block outputs are combined into the status line."""

    delimiter: str = " | "
    max_block_output_length: int = 45
    clickable_blocks: bool = True
    leading_delimiter: bool = False
    trailing_delimiter: bool = False
    blocks: Tuple[BlockSpec, ...] = field(default_factory=tuple)


def default_config() -> StatusConfig:
    """Return the stock configuration with its eleven script blocks."""
    blocks = (
        BlockSpec("", "~/.local/bin/disk.sh", 900, 19),
        BlockSpec("", "~/.local/bin/memory.sh", 4, 18),
        BlockSpec("", "~/.local/bin/cpu_temp.sh", 3, 17),
        BlockSpec("", "~/.local/bin/cpu-usage.sh", 2, 16),
        BlockSpec("", "~/.local/bin/volume.sh", 0, 15),
        BlockSpec("", "~/.local/bin/battery.sh", 10, 14),
        BlockSpec("", "~/.local/bin/weather2.sh", 7200, 12),
        BlockSpec("", "~/.local/bin/date.sh", 7200, 13),
        BlockSpec("", "~/.local/bin/time.sh", 60, 11),
        BlockSpec("", "~/.local/bin/wifi.sh", 30, 10),
        BlockSpec("", "~/.local/bin/prayertimes.sh", 21600, 20),
    )
    return StatusConfig(blocks=blocks)