"""
Top-level package for the rover grid simulator.

Components:
- grid: N x N occupancy grid, neighbours and cell metrics
- planner: A* shortest-route search over the grid
- rover: two-motor motion model with energy bookkeeping (immutable state)
- sensors: simulated camera/LiDAR obstacle detection
- comms: communication-module stub feeding the telemetry log
- navigation: route-to-command translation and scripted manoeuvres
- console: interactive command loop
- config: YAML-backed configuration
- render: pygame-based visualization
- geometry_utils: grid metrics and angle helpers
"""

from .grid import GridMap, InvalidCoordinateError
from .planner import SearchResult, find_path, route_cost, search
from .rover import Motor, RoverConfig, RoverState, Rover
from .sensors import SensorConfig, SensorSuite
from .navigation import NavCommand, Navigator, UnknownTerrainError, route_to_commands

__all__ = [
    "GridMap",
    "InvalidCoordinateError",
    "SearchResult",
    "find_path",
    "route_cost",
    "search",
    "Motor",
    "RoverConfig",
    "RoverState",
    "Rover",
    "SensorConfig",
    "SensorSuite",
    "NavCommand",
    "Navigator",
    "UnknownTerrainError",
    "route_to_commands",
]
