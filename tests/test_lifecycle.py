import time

import pytest

from roulette.errors import DuplicateSession, UnknownSession
from roulette.lifecycle import LifecycleController
from roulette.models import SessionState


def counts(controller):
    stats = controller.stats()
    stats.pop("oldest_session_age")
    return stats


def test_first_join_waits_without_notification(controller, recorder):
    assert controller.join("a") is None
    assert controller.state_of("a") is SessionState.WAITING
    assert controller.pool.snapshot() == ["a"]
    assert recorder.events == []


def test_arriving_session_is_initiator(controller, recorder):
    controller.join("a")
    room = controller.join("b")

    assert room.members == ("a", "b")
    assert recorder.for_session("a") == [("paired", {"room": room.id, "isInitiator": False})]
    assert recorder.for_session("b") == [("paired", {"room": room.id, "isInitiator": True})]
    assert controller.state_of("a") is SessionState.PAIRED
    assert controller.state_of("b") is SessionState.PAIRED
    assert len(controller.pool) == 0


def test_partner_selection_is_fifo(controller):
    controller.join("a")
    controller.join("b")  # pairs with a
    controller.join("c")
    controller.join("d")
    assert controller.rooms.partner_of("d") == "c"


def test_scenario_offer_then_disconnect(controller, recorder):
    controller.join("a")
    assert controller.state_of("a") is SessionState.WAITING

    room = controller.join("b")
    paired = [e for e in recorder.events if e[1] == "paired"]
    assert {sid for sid, _, _ in paired} == {"a", "b"}
    assert {p["room"] for _, _, p in paired} == {room.id}

    recorder.clear()
    assert controller.relay("a", room.id, "signal.offer", "X") is True
    assert recorder.events == [("b", "signal.offer", {"offer": "X"})]

    recorder.clear()
    controller.disconnect("b")
    assert recorder.events == [("a", "partnerLeft", {})]
    assert room.id not in controller.rooms
    assert len(controller.pool) == 0
    assert controller.state_of("a") is SessionState.IDLE
    assert controller.state_of("b") is None


def test_skip_with_nobody_waiting(controller, recorder):
    controller.join("a")
    room = controller.join("b")
    recorder.clear()

    assert controller.skip("a") is None

    assert room.id not in controller.rooms
    assert recorder.for_session("b") == [("partnerLeft", {})]
    assert recorder.for_session("a") == []
    assert controller.state_of("a") is SessionState.WAITING
    assert controller.state_of("b") is SessionState.IDLE
    assert controller.pool.snapshot() == ["a"]


def test_skip_pairs_with_someone_new(controller, recorder):
    controller.join("a")
    old = controller.join("b")
    controller.join("c")
    recorder.clear()

    new = controller.skip("a")

    assert old.id not in controller.rooms
    assert set(new.members) == {"a", "c"}
    assert new.initiator == "a"
    assert recorder.for_session("b") == [("partnerLeft", {})]
    assert recorder.for_session("c") == [("paired", {"room": new.id, "isInitiator": False})]
    assert recorder.for_session("a") == [("paired", {"room": new.id, "isInitiator": True})]


def test_skip_while_idle_behaves_like_join(controller, recorder):
    assert controller.skip("a") is None
    assert controller.state_of("a") is SessionState.WAITING
    assert recorder.events == []


def test_join_while_paired_leaves_old_room(controller, recorder):
    controller.join("a")
    old = controller.join("b")
    recorder.clear()

    controller.join("b")

    assert old.id not in controller.rooms
    assert recorder.for_session("a") == [("partnerLeft", {})]
    assert controller.state_of("b") is SessionState.WAITING


def test_repeated_join_while_waiting_is_ignored(controller, recorder):
    controller.join("a")
    assert controller.join("a") is None
    assert controller.pool.snapshot() == ["a"]
    assert recorder.events == []


def test_disconnect_while_waiting_leaves_pool(controller, recorder):
    controller.join("a")
    controller.disconnect("a")
    assert len(controller.pool) == 0
    assert not controller.registry.exists("a")

    # nobody left to match b with
    assert controller.join("b") is None
    assert recorder.events == []


def test_disconnect_twice_emits_once(controller, recorder):
    controller.join("a")
    controller.join("b")
    recorder.clear()

    controller.disconnect("a")
    after_first = (counts(controller), list(recorder.events))
    controller.disconnect("a")

    assert (counts(controller), recorder.events) == after_first
    assert recorder.events == [("b", "partnerLeft", {})]


def test_stale_relay_after_skip_is_dropped(controller, recorder):
    controller.join("a")
    room = controller.join("b")
    controller.skip("b")
    recorder.clear()

    assert controller.relay("a", room.id, "signal.ice", {"candidate": "c"}) is False
    assert recorder.events == []


def test_unregistered_session_fails_fast(controller):
    with pytest.raises(UnknownSession):
        controller.join("ghost")
    with pytest.raises(UnknownSession):
        controller.skip("ghost")
    with pytest.raises(UnknownSession):
        controller.relay("ghost", "room_a_b", "signal.offer", "X")


def test_duplicate_connect_fails_fast(controller):
    with pytest.raises(DuplicateSession):
        controller.connect("a")


def test_stats(controller):
    controller.join("a")
    controller.join("b")
    controller.join("c")
    assert counts(controller) == {"sessions": 4, "waiting": 1, "rooms": 1}


def test_stats_reports_oldest_session_age(controller):
    controller.registry.get("c").connected_at = time.time() - 30
    assert controller.stats()["oldest_session_age"] >= 30

    controller.disconnect("c")
    assert controller.stats()["oldest_session_age"] < 30


def test_stats_age_is_zero_without_sessions(recorder):
    assert LifecycleController(recorder).stats()["oldest_session_age"] == 0.0
