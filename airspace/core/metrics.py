import numpy as np

from .state import Status, SwarmState
from ..negotiation.events import EventType


def status_counts(state: SwarmState) -> dict:
    """
    Number of agents in each status, every status present (zero if unused).
    """
    counts = {s: 0 for s in Status}
    for a in state.agents:
        counts[a.status] += 1
    return counts


def total_negotiations(state: SwarmState) -> int:
    """Events currently retained in the log."""
    return len(state.events)


def resolution_count(state: SwarmState) -> int:
    return sum(1 for e in state.events if e.type is EventType.RESOLUTION_COMPLETE)


def _pairwise(state: SwarmState) -> np.ndarray:
    positions = np.array([a.pos for a in state.agents], dtype=float)
    return np.linalg.norm(positions[:, None, :] - positions[None, :, :], axis=-1)


def min_separation(state: SwarmState) -> float:
    """
    Smallest current 3-D distance between any two agents (inf with fewer than two).
    """
    if len(state.agents) < 2:
        return float("inf")
    dists = _pairwise(state)
    np.fill_diagonal(dists, np.inf)
    return float(dists.min())


def separation_violations(state: SwarmState) -> int:
    """
    Count agent pairs currently closer than the larger of their safety radii.
    """
    if len(state.agents) < 2:
        return 0
    dists = _pairwise(state)
    radii = np.array([a.safety_radius for a in state.agents], dtype=float)
    required = np.maximum(radii[:, None], radii[None, :])
    violations = (dists < required).astype(int)
    # zero diagonal and double counted pairs
    violations = np.triu(violations, k=1)
    return int(violations.sum())
