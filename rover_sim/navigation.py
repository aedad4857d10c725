"""
Route execution: turns planner output into discrete motion commands.

A route is a list of orthogonally adjacent grid cells. Cells map to world
coordinates with ``row`` along +x and ``col`` along +y, scaled by
``cell_size`` meters, so a route step is always a move of one cell along
one of the four headings 0, 90, 180 or -90 degrees.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Dict, List, Optional, Sequence, Tuple

from .geometry_utils import distance, heading_deg, is_orthogonal_step, wrap_angle_deg
from .grid import Coord, GridMap, InvalidCoordinateError
from .rover import Rover, RoverState
from .sensors import ScanReport, SensorSuite


# Heading error below which navigate_to drives straight without turning.
HEADING_TOLERANCE_DEG = 1.0

# Scripted manoeuvres per terrain type.
TERRAIN_MANEUVERS: Dict[str, List[Tuple[str, float]]] = {
    "rocky": [("forward", 2.0), ("turn_left", 45.0), ("forward", 1.5)],
    "sand": [("forward", 3.0), ("turn_right", 30.0), ("backward", 1.0)],
}

DEFAULT_WAYPOINTS: List[Tuple[float, float]] = [(10.0, 10.0), (-5.0, -5.0)]


class UnknownTerrainError(ValueError):
    """Raised for a terrain type with no scripted manoeuvre."""


@dataclass(frozen=True)
class NavCommand:
    """One discrete actuation step: ``kind`` is forward, backward, turn_left or turn_right."""

    kind: str
    amount: float


def cell_to_world(coord: Coord, cell_size: float = 1.0) -> Tuple[float, float]:
    r, c = coord
    return (r * cell_size, c * cell_size)


def current_cell(state: RoverState, cell_size: float, grid: GridMap) -> Coord:
    """Grid cell nearest to the rover's continuous position."""
    if not (math.isfinite(state.x) and math.isfinite(state.y)):
        raise InvalidCoordinateError((state.x, state.y), grid.size)
    cell = (int(round(state.x / cell_size)), int(round(state.y / cell_size)))
    return grid.validate(cell)


def turn_command(from_heading: float, to_heading: float) -> Optional[NavCommand]:
    """Smallest rotation taking ``from_heading`` to ``to_heading``, or None."""
    delta = wrap_angle_deg(to_heading - from_heading)
    if abs(delta) < 1e-9:
        return None
    if delta > 0.0:
        return NavCommand("turn_left", delta)
    return NavCommand("turn_right", -delta)


def route_to_commands(
    route: Sequence[Coord],
    heading: float = 0.0,
    cell_size: float = 1.0,
) -> List[NavCommand]:
    """Translate a route into turn/forward commands.

    Parameters
    ----------
    route : sequence of Coord
        Orthogonally adjacent cells, start first.
    heading : float
        Rover heading in degrees before the first step.
    cell_size : float
        Edge length of a grid cell in meters.

    Returns
    -------
    list[NavCommand]
        Straight runs along one heading are merged into a single forward.
    """
    commands: List[NavCommand] = []
    for a, b in zip(route, route[1:]):
        if not is_orthogonal_step(a, b):
            raise ValueError(f"route step {a} -> {b} is not between adjacent cells")
        ax, ay = cell_to_world(a, cell_size)
        bx, by = cell_to_world(b, cell_size)
        target = heading_deg(ax, ay, bx, by)
        turn = turn_command(heading, target)
        if turn is not None:
            commands.append(turn)
            heading = target
        if commands and commands[-1].kind == "forward":
            commands[-1] = NavCommand("forward", commands[-1].amount + cell_size)
        else:
            commands.append(NavCommand("forward", cell_size))
    return commands


class Navigator:
    """Drives a Rover through commands, routes, waypoints and terrain."""

    def __init__(self, rover: Rover, cell_size: float = 1.0) -> None:
        self.rover = rover
        self.cell_size = cell_size

    def apply(self, state: RoverState, command: NavCommand) -> RoverState:
        if command.kind == "forward":
            return self.rover.move_forward(state, command.amount)
        if command.kind == "backward":
            return self.rover.move_backward(state, command.amount)
        if command.kind == "turn_left":
            return self.rover.turn_left(state, command.amount)
        if command.kind == "turn_right":
            return self.rover.turn_right(state, command.amount)
        raise ValueError(f"unknown command kind: {command.kind!r}")

    def execute(self, state: RoverState, commands: Sequence[NavCommand]) -> RoverState:
        for command in commands:
            state = self.apply(state, command)
        return state

    def follow_route(self, state: RoverState, route: Sequence[Coord]) -> RoverState:
        """Drive along ``route``, starting from the rover's current heading.

        The rover first drives onto the centre of the route's start cell, so an
        offset left by free-form moves does not carry through to the goal.
        """
        if route:
            state = self.navigate_to(state, *cell_to_world(route[0], self.cell_size))
        commands = route_to_commands(route, heading=state.orientation, cell_size=self.cell_size)
        return self.execute(state, commands)

    def navigate_to(self, state: RoverState, target_x: float, target_y: float) -> RoverState:
        """Turn toward the target if needed, then drive straight to it."""
        dist = distance(state.x, state.y, target_x, target_y)
        if dist < 1e-9:
            return state
        target_heading = heading_deg(state.x, state.y, target_x, target_y)
        if abs(wrap_angle_deg(target_heading - state.orientation)) > HEADING_TOLERANCE_DEG:
            turn = turn_command(state.orientation, target_heading)
            if turn is not None:
                state = self.apply(state, turn)
        return self.rover.move_forward(state, dist)

    def traverse_terrain(self, state: RoverState, terrain: str) -> RoverState:
        steps = TERRAIN_MANEUVERS.get(terrain)
        if steps is None:
            raise UnknownTerrainError(f"unknown terrain type: {terrain!r}")
        return self.execute(state, [NavCommand(kind, amount) for kind, amount in steps])

    def autopilot(
        self,
        state: RoverState,
        sensors: SensorSuite,
        waypoints: Optional[Sequence[Tuple[float, float]]] = None,
        terrain: str = "rocky",
    ) -> Tuple[RoverState, ScanReport]:
        """Scripted mission: first waypoint, scan, terrain, remaining waypoints."""
        waypoints = list(waypoints) if waypoints is not None else list(DEFAULT_WAYPOINTS)
        if not waypoints:
            raise ValueError("autopilot needs at least one waypoint")
        state = self.navigate_to(state, *waypoints[0])
        report = sensors.scan_environment()
        state = self.traverse_terrain(state, terrain)
        for x, y in waypoints[1:]:
            state = self.navigate_to(state, x, y)
        return state, report

