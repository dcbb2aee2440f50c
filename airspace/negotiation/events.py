from collections import deque
from dataclasses import dataclass
from enum import Enum

from ..core.state import Priority


class EventType(str, Enum):
    CONFLICT_DETECTED = "conflict_detected"
    PATH_NEGOTIATION = "path_negotiation"
    PRIORITY_EXCHANGE = "priority_exchange"
    RESOLUTION_COMPLETE = "resolution_complete"


@dataclass(frozen=True)
class NegotiationEvent:
    id: str
    timestamp: float
    tick: int
    participants: tuple     # one or two agent ids
    type: EventType
    description: str
    priority: Priority      # urgency of the event, not of the agents

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "tick": self.tick,
            "participants": list(self.participants),
            "type": self.type.value,
            "description": self.description,
            "priority": self.priority.value,
        }


class EventLog:
    """
    Bounded, newest-first record of negotiation activity.

    A tick's events are merged as one batch and the log is trimmed afterwards,
    so the oldest entries are the ones dropped. The batch keeps its creation
    order at the head of the log, so a conflict is listed right before the
    resolution it produced.
    """

    def __init__(self, capacity: int = 50):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._events: deque = deque()

    def extend(self, batch):
        self._events.extendleft(reversed(list(batch)))
        while len(self._events) > self.capacity:
            self._events.pop()

    def clear(self):
        self._events.clear()

    def count(self, event_type: EventType) -> int:
        return sum(1 for e in self._events if e.type is event_type)

    def snapshot(self) -> tuple:
        return tuple(self._events)

    def __len__(self):
        return len(self._events)

    def __iter__(self):
        return iter(tuple(self._events))
