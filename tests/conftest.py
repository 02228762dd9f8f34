"""Shared fixtures for proctop tests."""

import pytest

from proctop.engine import Dashboard
from proctop.errors import DataAcquisitionError
from proctop.events import KeyEvent
from proctop.models import ProcessRecord

USERS = {0: "root", 1000: "alice", 1001: "bob"}


def fake_resolve_username(uid: int) -> str:
    """uid lookup against a fixed passwd table."""
    try:
        return USERS[uid]
    except KeyError:
        raise DataAcquisitionError(f"no user with uid {uid}") from None


class FakeSource:
    """Snapshot source returning canned records."""

    def __init__(self, records=(), fail: bool = False) -> None:
        self.records = list(records)
        self.fail = fail
        self.calls = 0

    def get_snapshot(self) -> list[ProcessRecord]:
        self.calls += 1
        if self.fail:
            raise DataAcquisitionError("snapshot unavailable")
        return list(self.records)


class ScriptedEvents:
    """Event source replaying a list, then answering 'q' forever."""

    def __init__(self, events) -> None:
        self._events = list(events)

    async def next_event(self):
        if self._events:
            return self._events.pop(0)
        return KeyEvent("q", "q")


class RecordingRenderer:
    """Renderer that keeps every frame it is given."""

    def __init__(self, viewport_height: int = 10, fail_on: int | None = None) -> None:
        self.viewport_height = viewport_height
        self.frames = []
        self.closed = False
        self._fail_on = fail_on

    def render(self, frame) -> None:
        if self._fail_on is not None and len(self.frames) == self._fail_on:
            raise RuntimeError("paint failed")
        self.frames.append(frame)

    def close(self) -> None:
        self.closed = True


def keys(*names: str) -> list[KeyEvent]:
    """KeyEvents for key names; single characters carry themselves as text."""
    return [KeyEvent(name, name if len(name) == 1 else None) for name in names]


@pytest.fixture()
def spec_records():
    return [
        ProcessRecord(pid=42, name="b", path="/usr/b", owner_uid=1000, cpu_percent=1.5),
        ProcessRecord(pid=1, name="a", path="/bin/a", owner_uid=0, cpu_percent=0.0),
    ]


@pytest.fixture()
def mixed_records():
    return [
        ProcessRecord(pid=300, name="bash", path="/usr/bin/bash", owner_uid=1000),
        ProcessRecord(pid=1, name="systemd", path="/usr/lib/systemd/systemd", owner_uid=0),
        ProcessRecord(pid=57, name="kworker/0:1", path=None, owner_uid=0),
        ProcessRecord(pid=812, name="python3", path="/usr/bin/python3.12", owner_uid=1001),
        ProcessRecord(pid=90, name="sshd", path="/usr/sbin/sshd", owner_uid=0),
        ProcessRecord(pid=4000, name="vim", path="/usr/bin/vim", owner_uid=4242),
        ProcessRecord(pid=2048, name="node", path="/opt/node/bin/node", owner_uid=None),
    ]


@pytest.fixture()
def make_dashboard():
    """Build a Dashboard over a FakeSource holding the given records."""

    def factory(records=(), **kwargs) -> Dashboard:
        kwargs.setdefault("resolve_username", fake_resolve_username)
        return Dashboard(FakeSource(records), **kwargs)

    return factory
