"""
Init-system power manager adapter (systemd-logind over the system bus).

The only adapter whose outcome decides a transition's result.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from powerctl.core.results import ActionReply

logger = logging.getLogger(__name__)

LOGIN1_NAME = "org.freedesktop.login1"
LOGIN1_PATH = "/org/freedesktop/login1"
LOGIN1_IFACE = "org.freedesktop.login1.Manager"

ACTIONS = ("PowerOff", "Suspend", "Hibernate")

# Errors meaning the bus stopped waiting, not that logind refused
NO_REPLY_MARKERS = (
    "org.freedesktop.DBus.Error.NoReply",
    "org.freedesktop.DBus.Error.Timeout",
    "Timeout was reached",
)


class Login1Proxy(Protocol):
    def call(self, action: str, interactive: bool) -> None: ...


class _GioLogin1Proxy:
    """Synchronous Gio.DBusProxy on the logind manager object"""

    def __init__(self):
        from gi.repository import Gio

        self._proxy = Gio.DBusProxy.new_for_bus_sync(
            Gio.BusType.SYSTEM,
            Gio.DBusProxyFlags.DO_NOT_LOAD_PROPERTIES,
            None,
            LOGIN1_NAME,
            LOGIN1_PATH,
            LOGIN1_IFACE,
            None,
        )

    def call(self, action: str, interactive: bool) -> None:
        from gi.repository import Gio, GLib

        # -1: default bus timeout
        self._proxy.call_sync(
            action,
            GLib.Variant("(b)", (interactive,)),
            Gio.DBusCallFlags.NONE,
            -1,
            None,
        )


def is_no_reply(error: Exception) -> bool:
    text = str(error)
    return any(marker in text for marker in NO_REPLY_MARKERS)


class Login1Manager:
    """
    Issues PowerOff / Suspend / Hibernate to logind.

    Args:
        connect: Factory returning a proxy with call(action, interactive).
            Defaults to a Gio proxy on the system bus.
    """

    def __init__(self, connect: Callable[[], Login1Proxy] | None = None):
        self._connect = connect or _GioLogin1Proxy

    def call(self, action: str) -> ActionReply:
        if action not in ACTIONS:
            raise ValueError(f"Unknown logind action '{action}'")

        logger.debug("Requesting logind to %s", action)

        try:
            proxy = self._connect()
        except Exception as e:
            msg = f"Error connecting to dbus - {e}"
            logger.warning(msg)
            return ActionReply(ok=False, error=msg)

        try:
            # Never ask logind for interactive authorization
            proxy.call(action, False)
        except Exception as e:
            msg = f"Error in dbus - {e}"
            logger.warning(msg)
            return ActionReply(ok=False, error=msg, no_reply=is_no_reply(e))

        return ActionReply(ok=True)

    def power_off(self) -> ActionReply:
        return self.call("PowerOff")

    def suspend(self) -> ActionReply:
        return self.call("Suspend")

    def hibernate(self) -> ActionReply:
        return self.call("Hibernate")
