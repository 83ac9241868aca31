"""
Pytest fixtures for powerctl tests.

Every system service is replaced by a recording fake so that no test touches
the real system bus. All fakes append to one shared event list, which lets
tests assert on the exact order of side effects.
"""

from __future__ import annotations

import pytest

from powerctl.core import paths, settings
from powerctl.core.control import PowerControl
from powerctl.core.keyring import STEP, CredentialStoreAdapter
from powerctl.core.logind import Login1Manager
from powerctl.core.network import NetworkManagerLink
from powerctl.core.results import StepOutcome
from powerctl.core.settings import PowerSettings


class FakeProbe:
    def __init__(self, answers=(True,)):
        # The last answer repeats once the list is used up
        self.answers = list(answers)
        self.calls = 0

    def __call__(self) -> bool:
        i = min(self.calls, len(self.answers) - 1)
        self.calls += 1
        return self.answers[i]


class FakeLogin1Proxy:
    def __init__(self, events, error=None):
        self.events = events
        self.error = error
        self.calls = []

    def call(self, action, interactive):
        self.calls.append((action, interactive))
        self.events.append(("action", action))
        if self.error is not None:
            raise self.error


class FakeNetworkBus:
    def __init__(self, events, error=None):
        self.events = events
        self.error = error

    def send(self, method, value):
        if self.error is not None:
            raise self.error
        self.events.append("network-sleep" if value else "network-wake")


class FakeKeyring(CredentialStoreAdapter):
    name = "fake"

    def __init__(self, events, outcome=None, error=None):
        self.events = events
        self.outcome = outcome or StepOutcome(step=STEP, ok=True, count=1)
        self.error = error

    def lock_all(self):
        self.events.append("keyring-lock")
        if self.error is not None:
            raise self.error
        return self.outcome


class Harness:
    """A PowerControl wired to fakes, with sleep/resume listeners attached"""

    def __init__(self, **settings_kwargs):
        self.events = []
        self.settings = PowerSettings(**settings_kwargs)
        self.probe = FakeProbe()
        self.proxy = FakeLogin1Proxy(self.events)
        self.connects = 0
        self.keyring = FakeKeyring(self.events)
        self.network_bus = FakeNetworkBus(self.events)

        def connect_login1():
            self.connects += 1
            return self.proxy

        self.control = PowerControl(
            lambda: self.settings,
            probe=self.probe,
            login1=Login1Manager(connect=connect_login1),
            keyring=self.keyring,
            network=NetworkManagerLink(connect=lambda: self.network_bus),
        )
        self.control.connect("sleep", lambda kind: self.events.append(("sleep", kind)))
        self.control.connect("resume", lambda kind: self.events.append(("resume", kind)))


@pytest.fixture
def harness():
    """Factory: harness(**PowerSettings fields) -> Harness"""
    return Harness


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point every on-disk location at a temporary directory."""
    monkeypatch.setattr(paths, "CONFIG_DIR", tmp_path / "config")
    monkeypatch.setattr(paths, "CACHE_DIR", tmp_path / "cache")
    monkeypatch.setattr(paths, "SETTINGS_FILE", tmp_path / "config" / "settings.json")
    monkeypatch.setattr(paths, "LOG_FILE", tmp_path / "cache" / "powerctl.log")
    monkeypatch.setattr(settings, "load_gsettings", lambda *a, **kw: None)
    return tmp_path
