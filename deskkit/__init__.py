"""Tiling-desktop helpers: sixel decoding, box drawing, a status-bar runner, IPC and layouts."""

__version__ = "0.1.0"