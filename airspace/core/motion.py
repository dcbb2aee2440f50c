import logging

import numpy as np

from .state import AgentState, Priority, Status
from ..negotiation.events import EventType, NegotiationEvent

logger = logging.getLogger(__name__)


def horizontal_velocity(state: AgentState, arrival_threshold: float = 2.0, eps: float = 1e-6) -> np.ndarray:
    """
    Per-tick (vx, vy) the integrator applies to this agent; zero once it is
    within the arrival threshold or grounded.
    """
    if state.status is Status.RESOLVED:
        return np.zeros(2)
    delta = state.target - state.pos
    d = float(np.linalg.norm(delta))
    if d <= arrival_threshold:
        return np.zeros(2)
    return delta[:2] / max(d, eps) * state.speed


class MotionIntegrator:
    def __init__(self, env, arrival_threshold=2.0, vertical_factor=0.5, battery_drain=0.1,
                 ground_on_depletion=False, eps=1e-6):
        self.env = env
        self.arrival_threshold = arrival_threshold
        self.vertical_factor = vertical_factor
        self.battery_drain = battery_drain
        self.ground_on_depletion = ground_on_depletion
        self.eps = eps

    def step(self, agents, tick: int, timestamp: float) -> list[NegotiationEvent]:
        """
        Advance every agent one tick toward its target. Returns the events
        raised by arrivals (and groundings), in store order.
        """
        events = []
        for state in agents:
            if state.status is Status.RESOLVED:
                continue
            delta = state.target - state.pos
            d = float(np.linalg.norm(delta))
            if d > self.arrival_threshold:
                step = delta / max(d, self.eps) * state.speed
                step[2] *= self.vertical_factor
                state.pos = state.pos + step
                state.record_path()
                if state.status is Status.NEGOTIATING:
                    # negotiation winner keeps its course and is released
                    state.status = Status.ACTIVE
            else:
                state.target = self.env.sample_target()
                state.status = Status.ACTIVE
                events.append(NegotiationEvent(
                    id=f"COMPLETE-{tick}-{state.id}",
                    timestamp=timestamp,
                    tick=tick,
                    participants=(state.id,),
                    type=EventType.RESOLUTION_COMPLETE,
                    description=f"{state.id} reached destination, selecting new target",
                    priority=Priority.LOW,
                ))

            state.drain_battery(self.battery_drain)
            if self.ground_on_depletion and state.battery <= 0:
                state.status = Status.RESOLVED
                logger.info("%s battery depleted at tick %d, grounded", state.id, tick)
                events.append(NegotiationEvent(
                    id=f"GROUNDED-{tick}-{state.id}",
                    timestamp=timestamp,
                    tick=tick,
                    participants=(state.id,),
                    type=EventType.RESOLUTION_COMPLETE,
                    description=f"{state.id} battery depleted, grounded",
                    priority=Priority.HIGH,
                ))
        return events
