import json
from pathlib import Path

from ..core.metrics import status_counts
from ..core.state import SwarmState


def tick_events(state: SwarmState) -> list:
    """Events raised by the tick that produced `state`, in creation order."""
    return [e for e in state.events if e.tick == state.tick]


class SwarmLogger:
    def __init__(self, path: str | Path, include_events: bool = False):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.include_events = include_events
        self.records = []

    def log_state(self, state: SwarmState):
        snapshot = {
            "tick": state.tick,
            "t": state.t,
            "agents": {
                a.id: {
                    "pos": list(a.pos),
                    "target": list(a.target),
                    "status": a.status.value,
                    "priority": a.priority.value,
                    "battery": a.battery,
                }
                for a in state.agents
            },
            "counts": {s.value: n for s, n in status_counts(state).items()},
        }
        if self.include_events:
            snapshot["events"] = [e.to_dict() for e in tick_events(state)]
        self.records.append(snapshot)

    def flush(self):
        with self.path.open("w") as f:
            json.dump(self.records, f, indent=2)
