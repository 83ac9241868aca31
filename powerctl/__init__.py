"""
powerctl - Suspend, hibernate and shutdown controller for Linux desktops
"""

__version__ = "0.1.0"

# The main submodules are exposed here for easy access:
# from powerctl import core, cli

__all__ = [
    "core",
    "cli",
]
