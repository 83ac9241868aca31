"""
Core power-state logic for powerctl.

This module is UI-agnostic and can be used by the CLI or by a session daemon.
"""

from powerctl.core import (
    control,
    keyring,
    logind,
    logs,
    network,
    paths,
    probe,
    results,
    settings,
    signals,
)

__all__ = [
    "control",
    "keyring",
    "logind",
    "logs",
    "network",
    "paths",
    "probe",
    "results",
    "settings",
    "signals",
]
