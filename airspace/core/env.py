from collections import deque

import numpy as np

from .state import AgentState, Priority


INTENTS = (
    "Emergency medical delivery",
    "Surveillance patrol",
    "Package delivery",
    "Infrastructure inspection",
    "Search and rescue",
    "Commercial transport",
)

PRIORITIES = (Priority.HIGH, Priority.MEDIUM, Priority.LOW)


class AirspaceEnv:
    def __init__(self, config, rng=None):
        self.config = config
        self.bounds = config.world_bounds    # [xmin, xmax, ymin, ymax, zmin, zmax]
        self.target_bounds = config.target_bounds
        self.rng = rng or np.random.default_rng(config.seed)

    def sample_target(self) -> np.ndarray:
        """
        Uniform point inside the operating volume that arriving agents fly to next.
        """
        xmin, xmax, ymin, ymax, zmin, zmax = self.target_bounds
        return self.rng.uniform([xmin, ymin, zmin], [xmax, ymax, zmax])

    def in_target_volume(self, point, tol: float = 1e-9) -> bool:
        xmin, xmax, ymin, ymax, zmin, zmax = self.target_bounds
        x, y, z = point
        return (
            xmin - tol <= x <= xmax + tol
            and ymin - tol <= y <= ymax + tol
            and zmin - tol <= z <= zmax + tol
        )

    def spawn_agents(self, count: int) -> list[AgentState]:
        """
        Lay agents out on a loose 4-wide grid, each heading roughly across the
        field to the mirrored corner.
        """
        cfg = self.config
        agents = []
        for i in range(count):
            x = 10 + (i % 4) * 20 + self.rng.uniform(0, 10)
            y = 10 + (i // 4) * 25 + self.rng.uniform(0, 10)
            z = 20 + self.rng.uniform(0, 30)
            target = np.array([
                80 - x + self.rng.uniform(0, 20),
                80 - y + self.rng.uniform(0, 20),
                z + self.rng.uniform(-10, 10),
            ])
            agents.append(AgentState(
                id=f"DRONE-{i + 1:03d}",
                pos=np.array([x, y, z]),
                target=target,
                speed=float(self.rng.uniform(*cfg.speed_range)),
                priority=PRIORITIES[int(self.rng.integers(len(PRIORITIES)))],
                safety_radius=float(self.rng.uniform(*cfg.safety_radius_range)),
                battery=float(self.rng.uniform(*cfg.battery_range)),
                intent=INTENTS[int(self.rng.integers(len(INTENTS)))],
                path=deque(maxlen=cfg.path_capacity),
            ))
        return agents
