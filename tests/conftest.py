import pytest

from airspace.config import SimulationConfig
from airspace.core.simulator import Simulator
from airspace.core.state import AgentState


@pytest.fixture
def make_agent():
    def _make(agent_id, pos, target, speed=1.0, priority="medium", safety_radius=8.0, battery=100.0, status="active"):
        return AgentState(
            id=agent_id,
            pos=pos,
            target=target,
            speed=speed,
            priority=priority,
            safety_radius=safety_radius,
            battery=battery,
            status=status,
        )
    return _make


@pytest.fixture
def make_sim():
    """Simulator over hand-placed agents with a frozen clock."""
    def _make(agents, **cfg):
        cfg.setdefault("seed", 0)
        return Simulator(SimulationConfig.from_dict(cfg), agents=agents, time_source=lambda: 1000.0)
    return _make
