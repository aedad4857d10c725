from __future__ import annotations

from pathlib import Path

import pytest

from rover_sim.config import SimConfig, load_config
from rover_sim.grid import GridMap


ROOT = Path(__file__).resolve().parents[1]


def test_default_config_file_loads() -> None:
    cfg = load_config(str(ROOT / "configs" / "sim.yaml"))
    assert cfg.sim.grid_size == 10
    assert cfg.sim.time_step == pytest.approx(0.1)
    assert cfg.rover.move_energy_per_meter == pytest.approx(0.5)
    assert cfg.sensors.camera_detection_prob == pytest.approx(0.2)
    assert cfg.autopilot.waypoints == [(10.0, 10.0), (-5.0, -5.0)]
    assert cfg.autopilot.terrain == "rocky"
    assert cfg.logging.telemetry_path == "telemetry_logs/rover.jsonl"


def test_missing_sections_use_defaults() -> None:
    cfg = SimConfig.from_dict({})
    assert cfg.seed == 0
    assert cfg.sim.grid_size == 10
    assert cfg.sim.map_file is None
    assert cfg.rover.battery_capacity == 100.0
    assert cfg.sensors.scan_duration == 0.0


def test_values_are_coerced() -> None:
    cfg = SimConfig.from_dict({"sim": {"grid_size": "12", "cell_size": 2}})
    assert cfg.sim.grid_size == 12
    assert isinstance(cfg.sim.cell_size, float)


@pytest.mark.parametrize(
    "data",
    [
        {"sim": {"grid_size": 0}},
        {"sim": {"cell_size": -1.0}},
        {"sim": {"gridsize": 10}},
        {"rover": {"drive_power": "fast"}},
        {"sim": {"realtime": "yes"}},
        {"sensors": [1, 2]},
        {"autopilot": {"waypoints": [[1.0]]}},
        {"autopilot": {"waypoints": []}},
        {"sim": {"grid_size": 10.7}},
    ],
)
def test_malformed_config_raises(data) -> None:
    with pytest.raises(ValueError):
        SimConfig.from_dict(data)


def test_sample_map_loads() -> None:
    grid = GridMap.from_map_file(str(ROOT / "maps" / "crater_field.json"))
    assert grid.size == 10
    assert grid.is_blocked((2, 2))
    assert not grid.is_blocked((0, 0))


def test_whole_number_floats_are_accepted_as_ints() -> None:
    cfg = SimConfig.from_dict({"sim": {"grid_size": 12.0}})
    assert cfg.sim.grid_size == 12
