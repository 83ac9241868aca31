from __future__ import annotations

import logging
from typing import Callable, Protocol

from powerctl.core.results import StepOutcome

logger = logging.getLogger(__name__)

NM_NAME = "org.freedesktop.NetworkManager"
NM_PATH = "/org/freedesktop/NetworkManager"
NM_IFACE = "org.freedesktop.NetworkManager"


class NetworkBus(Protocol):
    def send(self, method: str, value: bool) -> None: ...


class _GioNetworkBus:
    """Sends one-way method calls to NetworkManager, no reply awaited"""

    def __init__(self):
        from gi.repository import Gio

        self._bus = Gio.bus_get_sync(Gio.BusType.SYSTEM, None)

    def send(self, method: str, value: bool) -> None:
        from gi.repository import Gio, GLib

        msg = Gio.DBusMessage.new_method_call(NM_NAME, NM_PATH, NM_IFACE, method)
        msg.set_body(GLib.Variant("(b)", (value,)))
        msg.set_flags(Gio.DBusMessageFlags.NO_REPLY_EXPECTED)
        self._bus.send_message(msg, Gio.DBusSendMessageFlags.NONE)


class NetworkManagerLink:
    """
    Puts NetworkManager to sleep and wakes it up again.

    Fire-and-forget: a send error is logged and reported as a soft outcome.
    """

    def __init__(self, connect: Callable[[], NetworkBus] | None = None):
        self._connect = connect or _GioNetworkBus

    def _send(self, step: str, verb: str, sleeping: bool) -> StepOutcome:
        try:
            self._connect().send("Sleep", sleeping)
        except Exception as e:
            logger.warning("Failed to %s NetworkManager: %s", verb, e)
            return StepOutcome(step=step, ok=False, detail=str(e))

        logger.debug("Sent %s to NetworkManager", step)
        return StepOutcome(step=step, ok=True)

    def sleep(self) -> StepOutcome:
        return self._send("network-sleep", "suspend", True)

    def wake(self) -> StepOutcome:
        return self._send("network-wake", "wake", False)
