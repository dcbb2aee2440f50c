"""Error hierarchy for the airspace simulation core."""


class AirspaceError(Exception):
    """Base for all airspace simulation errors."""

    pass


class ConfigError(AirspaceError):
    """Configuration rejected at load or reset time."""

    pass


class SimulationStateError(AirspaceError):
    """Simulation in invalid state for requested operation."""

    pass


class UnknownAgentError(AirspaceError, KeyError):
    """No agent with the requested id in the current snapshot."""

    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(f"Unknown agent: {agent_id}")
