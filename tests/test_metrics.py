import json
import math

from airspace.core.metrics import (
    min_separation,
    resolution_count,
    separation_violations,
    status_counts,
    total_negotiations,
)
from airspace.core.state import Status
from airspace.viz.logger import SwarmLogger, tick_events


def test_counts_from_snapshot(make_sim, make_agent):
    sim = make_sim([
        make_agent("A", [10, 10, 20], [90, 90, 20], priority="high"),
        make_agent("B", [12, 10, 20], [88, 90, 20]),
        make_agent("C", [70, 70, 50], [71, 70, 50]),
    ])
    state = sim.tick()
    counts = status_counts(state)
    assert counts[Status.ACTIVE] == 2
    assert counts[Status.REROUTING] == 1
    assert counts[Status.NEGOTIATING] == 0
    assert counts[Status.RESOLVED] == 0
    assert total_negotiations(state) == 3
    assert resolution_count(state) == 1


def test_separation_metrics(make_sim, make_agent):
    sim = make_sim([
        make_agent("A", [10, 10, 20], [10, 90, 20], safety_radius=8),
        make_agent("B", [13, 14, 20], [13, 90, 20], safety_radius=10),
        make_agent("C", [80, 80, 20], [80, 10, 20], safety_radius=8),
    ])
    state = sim.snapshot()
    assert min_separation(state) == 5.0
    assert separation_violations(state) == 1


def test_separation_metrics_with_one_agent(make_sim, make_agent):
    state = make_sim([make_agent("A", [10, 10, 20], [10, 90, 20])]).snapshot()
    assert math.isinf(min_separation(state))
    assert separation_violations(state) == 0


def test_logger_writes_new_events_once(tmp_path, make_sim, make_agent):
    sim = make_sim([
        make_agent("A", [10, 10, 20], [90, 90, 20], priority="high"),
        make_agent("B", [12, 10, 20], [88, 90, 20]),
    ])
    path = tmp_path / "logs" / "run.json"
    logger = SwarmLogger(path, include_events=True)
    for _ in range(3):
        logger.log_state(sim.tick())
    logger.flush()

    records = json.loads(path.read_text())
    assert [r["tick"] for r in records] == [1, 2, 3]
    assert [e["type"] for e in records[0]["events"]] == ["conflict_detected", "priority_exchange"]
    assert records[1]["events"] == []
    assert records[0]["agents"]["B"]["status"] == "rerouting"
    assert records[0]["counts"]["rerouting"] == 1


def test_logger_keeps_events_after_reset(tmp_path, make_sim, make_agent):
    def pair():
        return [
            make_agent("A", [10, 10, 20], [90, 90, 20], priority="high"),
            make_agent("B", [12, 10, 20], [88, 90, 20]),
        ]

    sim = make_sim(pair())
    logger = SwarmLogger(tmp_path / "run.json", include_events=True)
    logger.log_state(sim.tick())
    sim.reset(agents=pair())
    logger.log_state(sim.tick())

    kinds = [[e["type"] for e in r["events"]] for r in logger.records]
    assert kinds == [["conflict_detected", "priority_exchange"]] * 2


def test_tick_events_only_returns_latest_tick(make_sim, make_agent):
    sim = make_sim([
        make_agent("A", [10, 10, 20], [90, 90, 20], priority="high"),
        make_agent("B", [12, 10, 20], [88, 90, 20]),
    ])
    sim.tick()
    state = sim.tick()
    assert len(state.events) == 2
    assert tick_events(state) == []
