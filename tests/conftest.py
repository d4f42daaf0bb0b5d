import pytest

from roulette.lifecycle import LifecycleController


class Recorder:
    """Notifier that remembers every outbound event."""

    def __init__(self):
        self.events = []

    def __call__(self, session_id, event, payload):
        self.events.append((session_id, event, payload))

    def for_session(self, session_id):
        return [(event, payload) for sid, event, payload in self.events if sid == session_id]

    def clear(self):
        self.events.clear()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def controller(recorder):
    ctl = LifecycleController(recorder)
    for session_id in ("a", "b", "c", "d"):
        ctl.connect(session_id)
    return ctl
