import numpy as np
import pytest

from airspace.core.state import Priority, Status
from airspace.errors import UnknownAgentError
from airspace.negotiation.events import EventLog, EventType, NegotiationEvent


def make_event(n, kind=EventType.CONFLICT_DETECTED):
    return NegotiationEvent(
        id=f"E{n}",
        timestamp=float(n),
        tick=n,
        participants=("DRONE-001",),
        type=kind,
        description="same text",
        priority=Priority.LOW,
    )


def test_agent_state_coerces_tags_and_arrays(make_agent):
    a = make_agent("DRONE-001", [1, 2, 3], (4, 5, 6), priority="high", status="rerouting")
    assert a.priority is Priority.HIGH
    assert a.status is Status.REROUTING
    assert isinstance(a.pos, np.ndarray) and a.pos.dtype == float


def test_invalid_status_tag_is_rejected(make_agent):
    with pytest.raises(ValueError):
        make_agent("DRONE-001", [0, 0, 0], [1, 1, 1], status="landed")


def test_battery_never_negative(make_agent):
    a = make_agent("DRONE-001", [0, 0, 0], [1, 1, 1], battery=0.25)
    a.drain_battery(0.1)
    assert a.battery == pytest.approx(0.15)
    a.drain_battery(5.0)
    assert a.battery == 0.0


def test_path_history_keeps_latest_twenty(make_agent):
    a = make_agent("DRONE-001", [0, 0, 0], [100, 0, 0])
    for x in range(25):
        a.pos = np.array([float(x), 0.0, 0.0])
        a.record_path()
    assert len(a.path) == 20
    assert a.path[0][0] == 5.0
    assert a.path[-1][0] == 24.0


def test_snapshot_is_detached_from_live_state(make_agent):
    a = make_agent("DRONE-001", [0, 0, 0], [10, 0, 0])
    snap = a.snapshot()
    a.pos[0] = 99.0
    assert snap.pos == (0.0, 0.0, 0.0)
    assert snap.to_dict()["status"] == "active"


def test_event_log_is_bounded():
    log = EventLog(capacity=50)
    for n in range(30):
        log.extend([make_event(2 * n), make_event(2 * n + 1)])
    assert len(log) == 50
    ids = [e.id for e in log]
    # the ten oldest were dropped
    assert "E9" not in ids
    assert "E10" in ids


def test_event_log_newest_batch_first_in_creation_order():
    log = EventLog()
    log.extend([make_event(1), make_event(2)])
    log.extend([make_event(3), make_event(4)])
    assert [e.id for e in log] == ["E3", "E4", "E1", "E2"]


def test_event_log_keeps_duplicates_and_counts():
    log = EventLog()
    log.extend([make_event(1), make_event(2, EventType.RESOLUTION_COMPLETE)])
    log.extend([make_event(3, EventType.RESOLUTION_COMPLETE)])
    assert len(log) == 3
    assert log.count(EventType.RESOLUTION_COMPLETE) == 2
    assert all(e.description == "same text" for e in log)
    log.clear()
    assert log.snapshot() == ()


def test_event_log_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        EventLog(capacity=0)


def test_unknown_agent_lookup(make_sim, make_agent):
    sim = make_sim([make_agent("DRONE-001", [10, 10, 20], [90, 10, 20])])
    assert sim.snapshot().agent("DRONE-001").id == "DRONE-001"
    with pytest.raises(UnknownAgentError):
        sim.snapshot().agent("DRONE-404")
