from dataclasses import dataclass

import numpy as np

from ..core.motion import horizontal_velocity
from ..core.state import AgentState, Status


@dataclass(frozen=True)
class Conflict:
    first: AgentState       # lower store index
    second: AgentState
    i: int
    j: int
    distance: float
    predicted_distance: float

    @property
    def required_separation(self) -> float:
        return max(self.first.safety_radius, self.second.safety_radius)


def separation(a: AgentState, b: AgentState) -> float:
    return float(np.linalg.norm(a.pos - b.pos))


def predict_distance(a: AgentState, b: AgentState, lookahead: int = 5, arrival_threshold: float = 2.0) -> float:
    """
    Distance between the two agents after `lookahead` ticks of their current
    horizontal velocity. Altitude is held where it is.
    """
    pa = a.pos.copy()
    pb = b.pos.copy()
    pa[:2] += horizontal_velocity(a, arrival_threshold) * lookahead
    pb[:2] += horizontal_velocity(b, arrival_threshold) * lookahead
    return float(np.linalg.norm(pa - pb))


class ConflictDetector:
    def __init__(self, lookahead: int = 5, arrival_threshold: float = 2.0):
        self.lookahead = lookahead
        self.arrival_threshold = arrival_threshold

    def check(self, a: AgentState, b: AgentState, i: int = 0, j: int = 1) -> Conflict | None:
        if a.status is not Status.ACTIVE or b.status is not Status.ACTIVE:
            return None
        predicted = predict_distance(a, b, self.lookahead, self.arrival_threshold)
        if predicted < max(a.safety_radius, b.safety_radius):
            return Conflict(a, b, i, j, separation(a, b), predicted)
        return None

    def scan(self, agents: list[AgentState]):
        """
        Lazily yield conflicts over all unordered pairs in store order.

        Statuses are read when a pair is reached, so once the caller moves a
        participant out of ACTIVE its later pairs in the same scan are skipped.
        """
        n = len(agents)
        for i in range(n):
            for j in range(i + 1, n):
                conflict = self.check(agents[i], agents[j], i, j)
                if conflict is not None:
                    yield conflict
