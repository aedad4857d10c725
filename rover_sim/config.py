from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

import yaml

from .navigation import DEFAULT_WAYPOINTS
from .rover import RoverConfig
from .sensors import SensorConfig


T = TypeVar("T")


@dataclass
class GridSimConfig:
    grid_size: int = 10
    cell_size: float = 1.0
    time_step: float = 0.1
    realtime: bool = False
    stop_on_obstacle: bool = True
    map_file: Optional[str] = None


@dataclass
class AutopilotConfig:
    waypoints: List[Tuple[float, float]] = field(
        default_factory=lambda: list(DEFAULT_WAYPOINTS)
    )
    terrain: str = "rocky"


@dataclass
class RenderConfig:
    window_size: int = 600
    fps: int = 30


@dataclass
class LoggingConfig:
    telemetry_path: Optional[str] = "telemetry_logs/rover.jsonl"


@dataclass
class SimConfig:
    """Top-level simulator configuration, one attribute per YAML section."""

    seed: int = 0
    sim: GridSimConfig = field(default_factory=GridSimConfig)
    rover: RoverConfig = field(default_factory=RoverConfig)
    sensors: SensorConfig = field(default_factory=SensorConfig)
    autopilot: AutopilotConfig = field(default_factory=AutopilotConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, cfg: Optional[Dict[str, Any]]) -> "SimConfig":
        cfg = cfg or {}
        autopilot = _section(AutopilotConfig, cfg.get("autopilot"))
        autopilot.waypoints = [_waypoint(w) for w in autopilot.waypoints or []]
        if not autopilot.waypoints:
            raise ValueError("autopilot.waypoints must not be empty")
        sim = _section(GridSimConfig, cfg.get("sim"))
        if sim.grid_size < 1:
            raise ValueError(f"sim.grid_size must be >= 1, got {sim.grid_size}")
        if sim.cell_size <= 0.0:
            raise ValueError(f"sim.cell_size must be positive, got {sim.cell_size}")
        return cls(
            seed=int(cfg.get("seed", 0)),
            sim=sim,
            rover=_section(RoverConfig, cfg.get("rover")),
            sensors=_section(SensorConfig, cfg.get("sensors")),
            autopilot=autopilot,
            render=_section(RenderConfig, cfg.get("render")),
            logging=_section(LoggingConfig, cfg.get("logging")),
        )


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: str) -> SimConfig:
    """Read a YAML config file into a SimConfig."""
    return SimConfig.from_dict(load_yaml(path))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _section(cls: Type[T], data: Optional[Dict[str, Any]]) -> T:
    """Build dataclass ``cls`` from a YAML mapping; unknown keys are rejected."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"{cls.__name__} section must be a mapping, got {type(data).__name__}")
    known = {f.name: f for f in fields(cls)}
    unknown = set(data) - set(known)
    if unknown:
        raise ValueError(f"unknown {cls.__name__} keys: {sorted(unknown)}")
    kwargs: Dict[str, Any] = {}
    for name, value in data.items():
        default = getattr(cls(), name)
        kwargs[name] = _coerce(value, default, f"{cls.__name__}.{name}")
    return cls(**kwargs)


def _coerce(value: Any, default: Any, name: str) -> Any:
    if value is None or default is None:
        return value
    try:
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise TypeError("expected true/false")
            return value
        if isinstance(default, int):
            if isinstance(value, float) and not value.is_integer():
                raise TypeError("expected a whole number")
            return int(value)
        if isinstance(default, float):
            return float(value)
        if isinstance(default, str):
            return str(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid value for {name}: {value!r} ({exc})") from exc
    return value


def _waypoint(value: Any) -> Tuple[float, float]:
    try:
        x, y = value
        return (float(x), float(y))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid autopilot waypoint: {value!r}") from exc
