from collections import deque
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from ..errors import UnknownAgentError


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Status(str, Enum):
    ACTIVE = "active"
    NEGOTIATING = "negotiating"
    REROUTING = "rerouting"
    RESOLVED = "resolved"  # terminal: grounded on battery depletion


PATH_CAPACITY = 20
HISTORY_CAPACITY = 20


@dataclass
class AgentState:
    id: str
    pos: np.ndarray        # shape (3,): x, y, altitude
    target: np.ndarray     # same shape as pos
    speed: float           # horizontal step per tick
    priority: Priority
    safety_radius: float
    battery: float = 100.0  # 0..100
    intent: str = ""
    status: Status = Status.ACTIVE
    path: deque = field(default_factory=lambda: deque(maxlen=PATH_CAPACITY))
    negotiation_history: deque = field(default_factory=lambda: deque(maxlen=HISTORY_CAPACITY))

    def __post_init__(self):
        self.pos = np.asarray(self.pos, dtype=float)
        self.target = np.asarray(self.target, dtype=float)
        self.priority = Priority(self.priority)
        self.status = Status(self.status)

    def remaining(self) -> float:
        return float(np.linalg.norm(self.target - self.pos))

    def remaining_horizontal(self) -> float:
        return float(np.linalg.norm(self.target[:2] - self.pos[:2]))

    def drain_battery(self, amount: float) -> float:
        self.battery = max(0.0, self.battery - amount)
        return self.battery

    def record_path(self):
        self.path.append(self.pos.copy())

    def snapshot(self) -> "AgentSnapshot":
        return AgentSnapshot(
            id=self.id,
            pos=tuple(float(v) for v in self.pos),
            target=tuple(float(v) for v in self.target),
            speed=self.speed,
            priority=self.priority,
            status=self.status,
            intent=self.intent,
            safety_radius=self.safety_radius,
            battery=self.battery,
            path=tuple(tuple(float(v) for v in p) for p in self.path),
            negotiation_history=tuple(self.negotiation_history),
        )


@dataclass(frozen=True)
class AgentSnapshot:
    id: str
    pos: tuple
    target: tuple
    speed: float
    priority: Priority
    status: Status
    intent: str
    safety_radius: float
    battery: float
    path: tuple
    negotiation_history: tuple

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pos": list(self.pos),
            "target": list(self.target),
            "speed": self.speed,
            "priority": self.priority.value,
            "status": self.status.value,
            "intent": self.intent,
            "safety_radius": self.safety_radius,
            "battery": self.battery,
            "path": [list(p) for p in self.path],
        }


@dataclass(frozen=True)
class SwarmState:
    """
    Committed post-tick view of the simulation, safe to hand to renderers.
    """
    tick: int
    t: float
    running: bool
    agents: tuple = ()
    events: tuple = ()   # newest first

    def agent(self, agent_id: str) -> AgentSnapshot:
        for a in self.agents:
            if a.id == agent_id:
                return a
        raise UnknownAgentError(agent_id)

    def to_dict(self) -> dict:
        return {
            "tick": self.tick,
            "t": self.t,
            "running": self.running,
            "agents": {a.id: a.to_dict() for a in self.agents},
            "events": [e.to_dict() for e in self.events],
        }
