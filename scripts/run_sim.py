from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Optional

# Ensure project root is on path when running this script directly
_script_dir = Path(__file__).resolve().parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from rover_sim.comms import CommunicationModule
from rover_sim.config import SimConfig, load_config
from rover_sim.console import RoverConsole
from rover_sim.grid import GridMap
from rover_sim.navigation import Navigator
from rover_sim.rover import Rover
from rover_sim.sensors import SensorSuite
from telemetry.logger import TelemetryLogger


def build_grid(cfg: SimConfig) -> GridMap:
    if cfg.sim.map_file:
        grid = GridMap.from_map_file(cfg.sim.map_file)
        if grid.size != cfg.sim.grid_size:
            print(
                f"Map '{cfg.sim.map_file}' is {grid.size}x{grid.size}; "
                f"overriding sim.grid_size={cfg.sim.grid_size}."
            )
        return grid
    return GridMap(cfg.sim.grid_size)


def main() -> None:
    parser = argparse.ArgumentParser(description="Interactive rover grid simulator.")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/sim.yaml",
        help="Path to sim YAML config.",
    )
    parser.add_argument(
        "--map",
        type=str,
        default=None,
        help="JSON occupancy map; overrides sim.map_file.",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Show a pygame window with the grid, route and rover.",
    )
    parser.add_argument(
        "--no-telemetry",
        action="store_true",
        help="Do not write the JSONL telemetry log.",
    )
    args = parser.parse_args()

    cfg = load_config(args.config)
    if args.map:
        cfg.sim.map_file = args.map

    rng = random.Random(int(cfg.seed))
    grid = build_grid(cfg)
    rover = Rover(cfg.rover)
    navigator = Navigator(rover, cell_size=cfg.sim.cell_size)
    sensors = SensorSuite(cfg.sensors, rng)

    telemetry: Optional[TelemetryLogger] = None
    if cfg.logging.telemetry_path and not args.no_telemetry:
        telemetry = TelemetryLogger(cfg.logging.telemetry_path)
    comms = CommunicationModule(telemetry=telemetry)

    renderer = None
    on_update = None
    if args.render:
        from rover_sim.render import GridRenderer

        renderer = GridRenderer(
            grid,
            cell_size=cfg.sim.cell_size,
            window_size=cfg.render.window_size,
        )

        def on_update(console: RoverConsole) -> None:
            renderer.draw(console.state, console.last_route)
            renderer.tick(cfg.render.fps)

    console = RoverConsole(
        rover=rover,
        navigator=navigator,
        grid=grid,
        sensors=sensors,
        comms=comms,
        config=cfg,
        telemetry=telemetry,
        on_update=on_update,
    )
    if on_update is not None:
        on_update(console)

    try:
        console.run()
    except KeyboardInterrupt:
        print("\nStopping simulator (KeyboardInterrupt).")
    except Exception as exc:  # noqa: BLE001
        print(f"Exception in command loop: {exc}", file=sys.stderr)
        raise
    finally:
        if renderer is not None:
            renderer.close()
        if telemetry is not None:
            telemetry.close()


if __name__ == "__main__":
    main()
