"""Tests for the logind, keyring and NetworkManager adapters.

No test talks to a real bus: each adapter takes a factory that is replaced
by a MagicMock or a small fake.
"""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from powerctl.core.keyring import (
    GnomeKeyringLegacy,
    NoKeyring,
    SecretServiceKeyring,
    make_keyring,
)
from powerctl.core.logind import Login1Manager, is_no_reply
from powerctl.core.network import NetworkManagerLink


class TestLogin1Manager:

    def test_unknown_action_rejected(self):
        manager = Login1Manager(connect=MagicMock())
        with pytest.raises(ValueError):
            manager.call("Reboot")

    def test_success(self):
        proxy = MagicMock()
        manager = Login1Manager(connect=lambda: proxy)

        reply = manager.suspend()

        assert reply.ok
        assert reply.error is None
        proxy.call.assert_called_once_with("Suspend", False)

    def test_helpers_map_to_actions(self):
        proxy = MagicMock()
        manager = Login1Manager(connect=lambda: proxy)
        manager.power_off()
        manager.hibernate()
        assert [c.args[0] for c in proxy.call.call_args_list] == ["PowerOff", "Hibernate"]

    def test_connect_error(self):
        manager = Login1Manager(connect=MagicMock(side_effect=RuntimeError("no system bus")))

        reply = manager.power_off()

        assert not reply.ok
        assert reply.error == "Error connecting to dbus - no system bus"
        assert not reply.no_reply

    def test_call_error(self):
        proxy = MagicMock()
        proxy.call.side_effect = RuntimeError("GDBus.Error:org.freedesktop.DBus.Error.AccessDenied: denied")
        manager = Login1Manager(connect=lambda: proxy)

        reply = manager.hibernate()

        assert not reply.ok
        assert reply.error.startswith("Error in dbus - ")
        assert not reply.no_reply

    @pytest.mark.parametrize("text,expected", [
        ("GDBus.Error:org.freedesktop.DBus.Error.NoReply: Message recipient disconnected", True),
        ("Timeout was reached", True),
        ("GDBus.Error:org.freedesktop.DBus.Error.Timeout: timed out", True),
        ("GDBus.Error:org.freedesktop.DBus.Error.AccessDenied: denied", False),
    ])
    def test_is_no_reply(self, text, expected):
        assert is_no_reply(RuntimeError(text)) is expected


class TestSecretServiceKeyring:

    def _service(self, collections=("login", "work"), locked=2):
        service = MagicMock()
        service.get_collections.return_value = list(collections)
        service.lock_sync.return_value = (locked, list(collections)[:locked])
        return service

    def test_locks_all_collections(self):
        service = self._service()
        outcome = SecretServiceKeyring(get_service=lambda: service).lock_all()

        assert outcome.ok
        assert outcome.count == 2
        service.lock_sync.assert_called_once_with(["login", "work"], None)

    def test_service_unavailable(self):
        outcome = SecretServiceKeyring(get_service=lambda: None).lock_all()
        assert not outcome.ok
        assert outcome.detail == "failed to connect to secret service"

    def test_service_lookup_raises(self):
        outcome = SecretServiceKeyring(get_service=MagicMock(side_effect=RuntimeError("x"))).lock_all()
        assert not outcome.ok
        assert outcome.detail == "failed to connect to secret service"

    def test_no_collections(self):
        service = self._service(collections=())
        outcome = SecretServiceKeyring(get_service=lambda: service).lock_all()
        assert not outcome.ok
        assert outcome.detail == "failed to get secret collections"
        service.lock_sync.assert_not_called()

    def test_listing_collections_raises(self):
        service = MagicMock()
        service.get_collections.side_effect = RuntimeError("org.freedesktop.Secret.Error.NoSession")

        outcome = SecretServiceKeyring(get_service=lambda: service).lock_all()

        assert not outcome.ok
        assert outcome.detail == "failed to get secret collections"
        service.lock_sync.assert_not_called()

    def test_nothing_locked(self, caplog):
        service = self._service(locked=0)
        outcome = SecretServiceKeyring(get_service=lambda: service).lock_all()
        assert not outcome.ok
        assert outcome.count == 0
        assert "could not lock keyring" in caplog.text


class TestOtherKeyrings:

    def test_legacy_ok(self):
        assert GnomeKeyringLegacy(lock_all=lambda: True).lock_all().ok

    def test_legacy_failure(self):
        outcome = GnomeKeyringLegacy(lock_all=lambda: False).lock_all()
        assert not outcome.ok
        assert outcome.detail == "could not lock keyring"

    def test_legacy_missing_library(self):
        outcome = GnomeKeyringLegacy(lock_all=MagicMock(side_effect=ImportError("no GnomeKeyring"))).lock_all()
        assert not outcome.ok

    def test_none_backend(self):
        assert NoKeyring().lock_all().ok

    @pytest.mark.parametrize("name,cls", [
        ("secret", SecretServiceKeyring),
        ("gnome-keyring", GnomeKeyringLegacy),
        ("none", NoKeyring),
    ])
    def test_make_keyring(self, name, cls):
        assert isinstance(make_keyring(name), cls)

    def test_make_keyring_unknown(self):
        with pytest.raises(ValueError):
            make_keyring("kwallet")


class TestNetworkManagerLink:

    def test_sleep_and_wake(self):
        bus = MagicMock()
        link = NetworkManagerLink(connect=lambda: bus)

        assert link.sleep().ok
        assert link.wake().ok

        assert [c.args for c in bus.send.call_args_list] == [("Sleep", True), ("Sleep", False)]

    def test_send_error_is_soft(self):
        bus = MagicMock()
        bus.send.side_effect = RuntimeError("org.freedesktop.NetworkManager was not provided")
        outcome = NetworkManagerLink(connect=lambda: bus).sleep()

        assert not outcome.ok
        assert outcome.step == "network-sleep"
        assert "not provided" in outcome.detail

    def test_no_bus(self):
        outcome = NetworkManagerLink(connect=MagicMock(side_effect=RuntimeError("no bus"))).wake()
        assert not outcome.ok
        assert outcome.step == "network-wake"
