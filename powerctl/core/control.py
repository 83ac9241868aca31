"""
Power-state transition controller.

Drives the machine through suspend, hibernate and shutdown:

    gate -> keyring lock -> network sleep -> "sleep" -> logind action
         -> "resume" -> network wake -> result

Only the gate and the logind action decide the returned result. Keyring and
network steps are best-effort; once any of them ran, the resume notification
and the network wake always follow, even when the action itself fails.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Union

from powerctl.core.keyring import CredentialStoreAdapter
from powerctl.core.logind import Login1Manager
from powerctl.core.network import NetworkManagerLink
from powerctl.core.results import StepOutcome, TransitionKind, TransitionResult
from powerctl.core.settings import PowerSettings
from powerctl.core.signals import SignalHub

logger = logging.getLogger(__name__)

NOT_RUNNING = "init-system power manager is not running"

SettingsSource = Union[PowerSettings, Callable[[], PowerSettings]]


class PowerControl:
    """
    Performs a requested transition and reports how it went.

    Signals (payload: TransitionKind):
        sleep:  emitted right before the logind action is issued
        resume: emitted after it returns, paired with every "sleep"

    Calls are expected to be serialized by the caller; the controller holds
    no lock.
    """

    SIGNALS = ("sleep", "resume")

    def __init__(
        self,
        settings: SettingsSource,
        *,
        probe: Callable[[], bool],
        login1: Login1Manager,
        keyring: CredentialStoreAdapter,
        network: NetworkManagerLink,
    ):
        self._settings = settings
        self._probe = probe
        self._login1 = login1
        self._keyring = keyring
        self._network = network
        self._signals = SignalHub(self.SIGNALS)

        # Best-effort outcomes of the most recent call
        self.last_steps: list[StepOutcome] = []

    def connect(self, name: str, callback: Callable[[TransitionKind], Any]) -> int:
        return self._signals.connect(name, callback)

    def disconnect(self, handler_id: int) -> bool:
        return self._signals.disconnect(handler_id)

    def settings(self) -> PowerSettings:
        """Settings snapshot for one call"""
        s = self._settings
        return s() if callable(s) else s

    def shutdown(self) -> TransitionResult:
        """Ask logind to power the machine off. No notifications are emitted."""
        self.last_steps = []

        if not self._probe():
            logger.warning("Cannot shutdown: %s", NOT_RUNNING)
            return TransitionResult.failed("shutdown", NOT_RUNNING)

        reply = self._login1.power_off()
        if not reply.ok:
            return TransitionResult.failed("shutdown", reply.error or "PowerOff failed")
        return TransitionResult.ok("shutdown")

    def suspend(self) -> TransitionResult:
        return self._sleep(TransitionKind.SUSPEND)

    def hibernate(self) -> TransitionResult:
        return self._sleep(TransitionKind.HIBERNATE)

    def _sleep(self, kind: TransitionKind) -> TransitionResult:
        self.last_steps = []

        # Hard gate: nothing happens unless logind is there
        if not self._probe():
            logger.warning("Cannot %s: %s", kind.label, NOT_RUNNING)
            return TransitionResult.failed(kind.label, NOT_RUNNING)

        settings = self.settings()

        if kind is TransitionKind.SUSPEND:
            lock_keyring = settings.lock_keyring_on_suspend
        else:
            lock_keyring = settings.lock_keyring_on_hibernate

        if lock_keyring:
            self._best_effort("keyring-lock", self._keyring.lock_all)

        # Wake is tied to this decision, not to a later re-read of settings
        network_slept = settings.network_sleep
        if network_slept:
            self._best_effort("network-sleep", self._network.sleep)

        logger.debug("emitting sleep")
        self._signals.emit("sleep", kind)
        try:
            result = self._perform(kind, settings)
        finally:
            logger.debug("emitting resume")
            self._signals.emit("resume", kind)

            if network_slept:
                self._best_effort("network-wake", self._network.wake)

        if result:
            logger.info("%s finished", kind.label.capitalize())
        else:
            logger.warning("%s failed: %s", kind.label.capitalize(), result.error)
        return result

    def _perform(self, kind: TransitionKind, settings: PowerSettings) -> TransitionResult:
        # logind may have gone away while the preparation steps ran
        if not self._probe():
            logger.warning("Cannot %s: %s", kind.label, NOT_RUNNING)
            return TransitionResult.failed(kind.label, NOT_RUNNING)

        reply = self._login1.call(kind.action)
        if reply.ok:
            return TransitionResult.ok(kind.label)

        if reply.no_reply and settings.assume_resume_on_no_reply:
            # The call blocks across the sleep itself; a lost reply usually
            # means the machine slept and came back.
            logger.warning("No reply to %s from logind, assuming the machine resumed", kind.action)
            return TransitionResult.ok(kind.label)

        return TransitionResult.failed(kind.label, reply.error or f"{kind.action} failed")

    def _best_effort(self, step: str, fn: Callable[[], StepOutcome]) -> StepOutcome:
        try:
            outcome = fn()
        except Exception as e:
            logger.warning("%s failed: %s", step, e)
            outcome = StepOutcome(step=step, ok=False, detail=str(e))

        self.last_steps.append(outcome)
        return outcome
