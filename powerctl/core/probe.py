from __future__ import annotations
from pathlib import Path

from powerctl.core import paths

def logind_running(seats_dir: Path | None = None) -> bool:
    """
    Live check that systemd-logind is managing this machine.

    Not cached: the init system may come up (or go away) after start-up.
    """
    seats_dir = seats_dir or paths.LOGIND_SEATS_DIR
    try:
        return seats_dir.is_dir()
    except OSError:
        return False
