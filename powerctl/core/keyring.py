"""
Credential store locking.

One adapter interface with swappable back-ends:
- secret: freedesktop Secret Service through libsecret
- gnome-keyring: the legacy gnome-keyring client library
- none: locking disabled

Locking is a best-effort hardening step before sleep, so every back-end
reports a StepOutcome and never raises on service errors.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from powerctl.core.results import StepOutcome

logger = logging.getLogger(__name__)

STEP = "keyring-lock"


class CredentialStoreAdapter:
    name = "base"

    def lock_all(self) -> StepOutcome:
        raise NotImplementedError

    def _warn(self, message: str, count: int | None = None) -> StepOutcome:
        logger.warning(message)
        return StepOutcome(step=STEP, ok=False, detail=message, count=count)


def _secret_service() -> Any:
    import gi
    gi.require_version("Secret", "1")
    from gi.repository import Secret

    return Secret.Service.get_sync(Secret.ServiceFlags.LOAD_COLLECTIONS, None)


class SecretServiceKeyring(CredentialStoreAdapter):
    """Locks every collection exposed by the Secret Service"""

    name = "secret"

    def __init__(self, get_service: Callable[[], Any] | None = None):
        self._get_service = get_service or _secret_service

    def lock_all(self) -> StepOutcome:
        try:
            service = self._get_service()
        except Exception as e:
            logger.debug("Secret service lookup raised: %s", e)
            service = None
        if service is None:
            return self._warn("failed to connect to secret service")

        try:
            collections = service.get_collections()
        except Exception as e:
            logger.debug("Listing secret collections raised: %s", e)
            collections = None
        if not collections:
            return self._warn("failed to get secret collections")

        try:
            count, _locked = service.lock_sync(collections, None)
        except Exception as e:
            return self._warn(f"could not lock keyring: {e}")

        if count <= 0:
            return self._warn("could not lock keyring", count=count)

        logger.info("Locked %d keyring collection(s)", count)
        return StepOutcome(step=STEP, ok=True, count=count)


def _gnome_keyring_lock_all() -> bool:
    import gi
    gi.require_version("GnomeKeyring", "1.0")
    from gi.repository import GnomeKeyring

    return GnomeKeyring.lock_all_sync() == GnomeKeyring.Result.OK


class GnomeKeyringLegacy(CredentialStoreAdapter):
    name = "gnome-keyring"

    def __init__(self, lock_all: Callable[[], bool] | None = None):
        self._lock_all = lock_all or _gnome_keyring_lock_all

    def lock_all(self) -> StepOutcome:
        try:
            ok = self._lock_all()
        except Exception as e:
            return self._warn(f"could not lock keyring: {e}")

        if not ok:
            return self._warn("could not lock keyring")
        return StepOutcome(step=STEP, ok=True)


class NoKeyring(CredentialStoreAdapter):
    name = "none"

    def lock_all(self) -> StepOutcome:
        return StepOutcome(step=STEP, ok=True, detail="keyring locking disabled")


_BACKENDS: dict[str, type[CredentialStoreAdapter]] = {
    "secret": SecretServiceKeyring,
    "gnome-keyring": GnomeKeyringLegacy,
    "none": NoKeyring,
}


def make_keyring(backend: str) -> CredentialStoreAdapter:
    try:
        return _BACKENDS[backend]()
    except KeyError:
        raise ValueError(
            f"Unknown keyring backend '{backend}' (known: {', '.join(_BACKENDS)})"
        ) from None
