import logging
import time
from collections import deque
from dataclasses import replace

import numpy as np

from .env import AirspaceEnv
from .motion import MotionIntegrator
from .state import AgentState, Status, SwarmState
from ..config import SimulationConfig
from ..errors import ConfigError, SimulationStateError
from ..negotiation.detector import ConflictDetector
from ..negotiation.events import EventLog
from ..negotiation.resolver import NegotiationResolver, conflict_event

logger = logging.getLogger(__name__)


class Simulator:
    """
    Owns the agent store and event log and runs the tick pipeline:
    detect + resolve -> move -> arrivals -> merge events -> publish snapshot.

    No locks of its own; SimulationClock serializes ticks and resets across
    threads. Readers only ever get the last published SwarmState, never the
    live agent records.
    """

    def __init__(self, config: SimulationConfig | None = None, agents: list[AgentState] | None = None,
                 rng=None, time_source=time.time):
        self.time_source = time_source
        self._rng_override = rng
        self._in_tick = False
        self.running = False
        self.reset(config, agents=agents)

    def reset(self, config: SimulationConfig | dict | None = None, agents: list[AgentState] | None = None):
        """
        Drop every agent and event and rebuild from `config` (the current one
        when omitted). Explicit `agents` replace the spawned population.

        The config always goes through `SimulationConfig.from_dict`, so unsafe
        values are clamped however it was built. Nothing is replaced until the
        new population has been accepted.
        """
        if self._in_tick:
            raise SimulationStateError("reset() called from inside a tick")
        if config is None:
            config = getattr(self, "config", None) or SimulationConfig()
        if isinstance(config, SimulationConfig):
            config = config.to_dict()
        config = SimulationConfig.from_dict(config)

        rng = self._rng_override or np.random.default_rng(config.seed)
        env = AirspaceEnv(config, rng=rng)
        if agents is None:
            agents = env.spawn_agents(config.agent_count)
        store: dict[str, AgentState] = {}
        for a in agents:
            if a.id in store:
                raise ConfigError(f"Duplicate agent id: {a.id}")
            self._admit(a, config)
            store[a.id] = a

        self.config = config
        self.env = env
        self.detector = ConflictDetector(config.lookahead, config.arrival_threshold)
        self.resolver = NegotiationResolver()
        self.integrator = MotionIntegrator(
            env,
            arrival_threshold=config.arrival_threshold,
            vertical_factor=config.vertical_factor,
            battery_drain=config.battery_drain,
            ground_on_depletion=config.ground_on_depletion,
        )
        self.events = EventLog(config.event_capacity)
        self.agents = store
        self.tick_count = 0
        self.t = 0.0
        self._publish()
        logger.info("Simulation reset with %d agents (seed=%s)", len(self.agents), config.seed)

    def _admit(self, agent: AgentState, config: SimulationConfig):
        if not agent.speed > 0:
            raise ConfigError(f"{agent.id}: speed must be positive, got {agent.speed!r}")
        if not agent.safety_radius > 0:
            raise ConfigError(f"{agent.id}: safety radius must be positive, got {agent.safety_radius!r}")
        if not 0 <= agent.battery <= 100:
            clamped = min(100.0, max(0.0, float(agent.battery)))
            logger.warning("%s: battery %r outside [0, 100], clamped to %r", agent.id, agent.battery, clamped)
            agent.battery = clamped
        agent.path = deque(agent.path, maxlen=config.path_capacity)

    def tick(self) -> SwarmState:
        if self._in_tick:
            raise SimulationStateError("tick() re-entered while a tick is in progress")
        self._in_tick = True
        try:
            tick = self.tick_count + 1
            now = self.time_source()
            agents = list(self.agents.values())
            batch = []

            for conflict in self.detector.scan(agents):
                a, b = conflict.first, conflict.second
                a.status = Status.NEGOTIATING
                b.status = Status.NEGOTIATING
                detected = conflict_event(conflict, tick, now)
                logger.debug(
                    "tick %d: conflict %s/%s distance %.2f predicted %.2f",
                    tick, a.id, b.id, conflict.distance, conflict.predicted_distance,
                )
                resolution = self.resolver.resolve(conflict, tick, now)
                for st in (a, b):
                    st.negotiation_history.append(detected.id)
                    st.negotiation_history.append(resolution.event.id)
                batch.append(detected)
                batch.append(resolution.event)

            batch.extend(self.integrator.step(agents, tick, now))
            self.events.extend(batch)

            self.tick_count = tick
            self.t += self.config.tick_interval
        finally:
            self._in_tick = False
        return self._publish()

    def run(self, ticks: int) -> SwarmState:
        for _ in range(ticks):
            self.tick()
        return self.snapshot()

    def snapshot(self) -> SwarmState:
        return self._snapshot

    def _publish(self) -> SwarmState:
        self._snapshot = SwarmState(
            tick=self.tick_count,
            t=self.t,
            running=self.running,
            agents=tuple(a.snapshot() for a in self.agents.values()),
            events=self.events.snapshot(),
        )
        return self._snapshot

    def set_running(self, running: bool) -> SwarmState:
        self.running = running
        self._snapshot = replace(self._snapshot, running=running)
        return self._snapshot
