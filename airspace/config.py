import logging
import pathlib
from dataclasses import asdict, dataclass, fields

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    "agent_count": 12,
    "seed": None,
    "tick_interval": 0.1,
    "lookahead": 5,
    # [xmin, xmax, ymin, ymax, zmin, zmax]
    "world_bounds": [0.0, 100.0, 0.0, 100.0, 0.0, 100.0],
    "target_bounds": [20.0, 80.0, 20.0, 80.0, 15.0, 55.0],
    "arrival_threshold": 2.0,
    "vertical_factor": 0.5,
    "battery_drain": 0.1,
    "path_capacity": 20,
    "event_capacity": 50,
    "speed_range": [0.8, 2.0],
    "safety_radius_range": [8.0, 12.0],
    "battery_range": [60.0, 100.0],
    "ground_on_depletion": False,
}


def deep_update(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: pathlib.Path | None) -> dict:
    """
    Read a YAML config. A top-level `inherits: other.yaml` key loads that file
    first (relative to this one) and overlays this file's keys on top.
    """
    if path is None:
        return dict(DEFAULT_CONFIG)
    path = pathlib.Path(path)
    try:
        cfg = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if cfg is None:
        return dict(DEFAULT_CONFIG)
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    if "inherits" in cfg:
        base_path = path.parent / cfg["inherits"]
        base_cfg = load_config(base_path)
        cfg = {k: v for k, v in cfg.items() if k != "inherits"}
        return deep_update(base_cfg, cfg)
    return deep_update(DEFAULT_CONFIG, cfg)


def _positive_range(value) -> bool:
    return len(value) == 2 and 0 < value[0] <= value[1]


def _ordered_box(value) -> bool:
    return len(value) == 6 and all(value[k] < value[k + 1] for k in (0, 2, 4))


def _contains(outer, inner) -> bool:
    return all(outer[k] <= inner[k] and inner[k + 1] <= outer[k + 1] for k in (0, 2, 4))


@dataclass(frozen=True)
class SimulationConfig:
    agent_count: int = 12
    seed: int | None = None
    tick_interval: float = 0.1
    lookahead: int = 5
    world_bounds: tuple = (0.0, 100.0, 0.0, 100.0, 0.0, 100.0)
    target_bounds: tuple = (20.0, 80.0, 20.0, 80.0, 15.0, 55.0)
    arrival_threshold: float = 2.0
    vertical_factor: float = 0.5
    battery_drain: float = 0.1
    path_capacity: int = 20
    event_capacity: int = 50
    speed_range: tuple = (0.8, 2.0)
    safety_radius_range: tuple = (8.0, 12.0)
    battery_range: tuple = (60.0, 100.0)
    ground_on_depletion: bool = False

    @classmethod
    def from_dict(cls, cfg: dict, strict: bool = False) -> "SimulationConfig":
        """
        Build a config from a plain mapping (e.g. parsed YAML).

        Values that would put the simulation in an unsafe state are replaced by
        their defaults with a warning, or rejected when `strict` is set.
        Unknown keys are always rejected.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(cfg) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        merged = deep_update(DEFAULT_CONFIG, dict(cfg))
        for key in ("world_bounds", "target_bounds", "speed_range", "safety_radius_range", "battery_range"):
            try:
                merged[key] = tuple(float(v) for v in merged[key])
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"{key} must be a list of numbers, got {merged[key]!r}") from exc

        checks = {
            "agent_count": lambda v: int(v) == v and v > 0,
            "tick_interval": lambda v: v > 0,
            "lookahead": lambda v: int(v) == v and v >= 0,
            "arrival_threshold": lambda v: v > 0,
            "vertical_factor": lambda v: v >= 0,
            "battery_drain": lambda v: v >= 0,
            "path_capacity": lambda v: int(v) == v and v > 0,
            "event_capacity": lambda v: int(v) == v and v > 0,
            "speed_range": _positive_range,
            "safety_radius_range": _positive_range,
            "battery_range": lambda v: len(v) == 2 and 0 <= v[0] <= v[1] <= 100,
            "world_bounds": _ordered_box,
            "target_bounds": lambda v: _ordered_box(v) and _contains(merged["world_bounds"], v),
        }
        for key, ok in checks.items():
            try:
                valid = ok(merged[key])
            except (TypeError, ValueError):
                valid = False
            if valid:
                continue
            if strict:
                raise ConfigError(f"Invalid value for {key}: {merged[key]!r}")
            default = DEFAULT_CONFIG[key]
            logger.warning("Invalid value for %s (%r), falling back to %r", key, merged[key], default)
            merged[key] = tuple(default) if isinstance(default, list) else default

        for key in ("agent_count", "lookahead", "path_capacity", "event_capacity"):
            merged[key] = int(merged[key])
        return cls(**merged)

    def to_dict(self) -> dict:
        out = asdict(self)
        for k, v in out.items():
            if isinstance(v, tuple):
                out[k] = list(v)
        return out
