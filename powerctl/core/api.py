"""
Core API - Wires the controller to the real system services.

Used by the CLI (and any session daemon) so that callers never build the
adapters themselves.
"""

from __future__ import annotations

from powerctl.core import keyring, paths, probe, settings
from powerctl.core.control import PowerControl
from powerctl.core.logind import Login1Manager
from powerctl.core.network import NetworkManagerLink
from powerctl.core.settings import PowerSettings


def build_control(power_settings: PowerSettings | None = None) -> PowerControl:
    """
    Create a controller talking to logind, the keyring and NetworkManager.

    Args:
        power_settings: Fixed settings. If None, settings are loaded from disk
            (or GSettings) at the start of every transition.

    Returns:
        A new PowerControl
    """
    paths.ensure_directories()

    if power_settings is None:
        backend = settings.load_settings().keyring_backend
        source = settings.load_settings
    else:
        backend = power_settings.keyring_backend
        source = power_settings

    return PowerControl(
        source,
        probe=probe.logind_running,
        login1=Login1Manager(),
        keyring=keyring.make_keyring(backend),
        network=NetworkManagerLink(),
    )


# Shared instance, reference counted
_control_instance: PowerControl | None = None
_control_refs = 0


def get_control() -> PowerControl:
    """Return the shared PowerControl, creating it on first use"""
    global _control_instance, _control_refs
    if _control_instance is None:
        _control_instance = build_control()
        _control_refs = 0
    _control_refs += 1
    return _control_instance


def release_control() -> None:
    """Drop one reference; the instance goes away with the last one"""
    global _control_instance, _control_refs
    if _control_instance is None:
        return
    _control_refs -= 1
    if _control_refs <= 0:
        _control_instance = None
        _control_refs = 0
