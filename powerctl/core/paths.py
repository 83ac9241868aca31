import os
from pathlib import Path

CONFIG_DIR = Path(os.environ.get("POWERCTL_CONFIG_DIR") or Path.home() / ".config" / "powerctl")
CACHE_DIR = Path.home() / ".cache" / "powerctl"

SETTINGS_FILE = CONFIG_DIR / "settings.json"
LOG_FILE = CACHE_DIR / "powerctl.log"

# systemd creates this directory once logind manages seats
LOGIND_SEATS_DIR = Path("/run/systemd/seats")

def ensure_directories():
    for d in (CONFIG_DIR, CACHE_DIR):
        d.mkdir(parents=True, exist_ok=True)
