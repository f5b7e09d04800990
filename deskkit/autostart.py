"""Running the user's autostart scripts when the window manager starts."""

import os
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

__all__ = [
    "DWM_DIR",
    "LOCAL_SHARE",
    "BLOCKING_SCRIPT",
    "SCRIPT",
    "autostart_dir",
    "run_autostart",
]

DWM_DIR = "dwm"
LOCAL_SHARE = ".local/share"
BLOCKING_SCRIPT = "autostart_blocking.sh"
SCRIPT = "autostart.sh"


def autostart_dir(environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Directory holding the autostart scripts, or ``None`` without ``HOME``.

    ``$XDG_DATA_HOME/dwm`` is used when that variable is set and non-empty,
    otherwise ``~/.local/share/dwm``; if that is not a directory, ``~/.dwm``.
    """
    env = os.environ if environ is None else environ
    home = env.get("HOME")
    if home is None:
        return None
    xdg = env.get("XDG_DATA_HOME")
    prefix = Path(xdg, DWM_DIR) if xdg else Path(home, LOCAL_SHARE, DWM_DIR)
    if not prefix.is_dir():
        prefix = Path(home, "." + DWM_DIR)
    return prefix


def _runnable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def run_autostart(environ: Optional[Mapping[str, str]] = None) -> List[Path]:
    """Run the blocking script and wait, then start the other in the background.

    Returns the scripts that were started, in order.
    """
    env = os.environ if environ is None else environ
    directory = autostart_dir(env)
    if directory is None:
        return []

    started = []
    blocking = directory / BLOCKING_SCRIPT
    if _runnable(blocking):
        subprocess.run([str(blocking)], env=dict(env), check=False)
        started.append(blocking)

    script = directory / SCRIPT
    if _runnable(script):
        subprocess.Popen([str(script)], env=dict(env), start_new_session=True)
        started.append(script)
    return started