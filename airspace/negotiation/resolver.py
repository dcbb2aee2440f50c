import logging
from dataclasses import dataclass

import numpy as np

from ..core.state import AgentState, Priority, Status
from .detector import Conflict
from .events import EventType, NegotiationEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    winner: AgentState
    loser: AgentState
    event: NegotiationEvent


def conflict_event(conflict: Conflict, tick: int, timestamp: float) -> NegotiationEvent:
    a, b = conflict.first, conflict.second
    urgent = Priority.HIGH in (a.priority, b.priority)
    return NegotiationEvent(
        id=f"NEG-{tick}-{conflict.i}-{conflict.j}",
        timestamp=timestamp,
        tick=tick,
        participants=(a.id, b.id),
        type=EventType.CONFLICT_DETECTED,
        description=f"Potential collision detected between {a.id} and {b.id}",
        priority=Priority.HIGH if urgent else Priority.MEDIUM,
    )


class NegotiationResolver:
    """
    Decides which side of a conflict yields.

    A lone HIGH priority agent always keeps its course. Otherwise the agent
    closer (horizontally) to its own target keeps it; on an exact tie the
    lower agent id keeps it. The yielding agent is set to REROUTING and its
    target is pushed by a fixed offset.
    """

    def __init__(self, priority_offset=(0.0, 15.0, 10.0), efficiency_offset=(12.0, 0.0, 8.0)):
        self.priority_offset = np.asarray(priority_offset, dtype=float)
        self.efficiency_offset = np.asarray(efficiency_offset, dtype=float)

    def pick_winner(self, a: AgentState, b: AgentState) -> tuple[AgentState, AgentState, EventType]:
        a_high = a.priority is Priority.HIGH
        b_high = b.priority is Priority.HIGH
        if a_high != b_high:
            return (a, b, EventType.PRIORITY_EXCHANGE) if a_high else (b, a, EventType.PRIORITY_EXCHANGE)
        da, db = a.remaining_horizontal(), b.remaining_horizontal()
        if da < db or (da == db and a.id < b.id):
            return a, b, EventType.PATH_NEGOTIATION
        return b, a, EventType.PATH_NEGOTIATION

    def resolve(self, conflict: Conflict, tick: int, timestamp: float) -> Resolution:
        a, b = conflict.first, conflict.second
        winner, loser, kind = self.pick_winner(a, b)

        loser.status = Status.REROUTING
        if kind is EventType.PRIORITY_EXCHANGE:
            loser.target = loser.target + self.priority_offset
            description = f"{winner.id} (HIGH priority) maintains path, {loser.id} rerouting"
            priority = Priority.HIGH
        else:
            loser.target = loser.target + self.efficiency_offset
            description = f"Efficiency-based path negotiation completed: {winner.id} holds course, {loser.id} rerouting"
            priority = Priority.MEDIUM

        event = NegotiationEvent(
            id=f"RES-{tick}-{conflict.i}-{conflict.j}",
            timestamp=timestamp,
            tick=tick,
            participants=(a.id, b.id),
            type=kind,
            description=description,
            priority=priority,
        )
        logger.debug("tick %d: %s", tick, description)
        return Resolution(winner=winner, loser=loser, event=event)
