from __future__ import annotations

import math
import random

import pytest

from rover_sim.grid import GridMap, InvalidCoordinateError
from rover_sim.navigation import (
    NavCommand,
    Navigator,
    UnknownTerrainError,
    current_cell,
    route_to_commands,
)
from rover_sim.planner import find_path
from rover_sim.rover import Rover, RoverConfig, RoverState
from rover_sim.sensors import SensorConfig, SensorSuite


def make_navigator(cell_size: float = 1.0) -> Navigator:
    return Navigator(Rover(RoverConfig()), cell_size=cell_size)


def test_straight_run_is_merged_after_turn() -> None:
    commands = route_to_commands([(5, 5), (5, 6), (5, 7)], heading=0.0)
    assert commands == [NavCommand("turn_left", 90.0), NavCommand("forward", 2.0)]


def test_route_with_corner() -> None:
    commands = route_to_commands([(0, 0), (1, 0), (2, 0), (2, 1)], heading=0.0)
    assert commands == [
        NavCommand("forward", 2.0),
        NavCommand("turn_left", 90.0),
        NavCommand("forward", 1.0),
    ]


def test_turns_take_the_short_way() -> None:
    assert route_to_commands([(0, 1), (0, 0)], heading=0.0) == [
        NavCommand("turn_right", 90.0),
        NavCommand("forward", 1.0),
    ]
    assert route_to_commands([(0, 1), (0, 0)], heading=450.0)[0] == NavCommand("turn_left", 180.0)


def test_cell_size_scales_forward_moves() -> None:
    commands = route_to_commands([(0, 0), (1, 0), (2, 0)], heading=0.0, cell_size=2.5)
    assert commands == [NavCommand("forward", 5.0)]


def test_trivial_routes_yield_no_commands() -> None:
    assert route_to_commands([]) == []
    assert route_to_commands([(3, 3)]) == []


def test_non_adjacent_step_is_rejected() -> None:
    with pytest.raises(ValueError):
        route_to_commands([(0, 0), (1, 1)])


def test_follow_planned_route_reaches_goal_cell() -> None:
    nav = make_navigator()
    grid = GridMap(10, blocked=[(1, 0), (1, 1), (1, 2)])
    route = find_path((0, 0), (3, 2), grid)
    state = nav.follow_route(nav.rover.initial_state(), route)
    assert state.x == pytest.approx(3.0, abs=1e-9)
    assert state.y == pytest.approx(2.0, abs=1e-9)
    assert state.energy_consumed > 0.0


def test_navigate_to_turns_toward_target() -> None:
    nav = make_navigator()
    state = nav.navigate_to(nav.rover.initial_state(), 3.0, 4.0)
    heading = math.degrees(math.atan2(4.0, 3.0))
    assert state.x == pytest.approx(3.0)
    assert state.y == pytest.approx(4.0)
    assert state.orientation == pytest.approx(heading)
    assert state.energy_consumed == pytest.approx(5.0 * 0.5 + heading * 0.1)


def test_navigate_to_target_behind_turns_right() -> None:
    nav = make_navigator()
    state = nav.navigate_to(nav.rover.initial_state(), -5.0, -5.0)
    assert state.orientation == pytest.approx(-135.0)
    assert state.x == pytest.approx(-5.0)
    assert state.y == pytest.approx(-5.0)


def test_navigate_to_small_heading_error_does_not_turn() -> None:
    nav = make_navigator()
    state = nav.navigate_to(RoverState(orientation=0.5), 10.0, 0.0)
    assert state.orientation == 0.5
    assert state.energy_consumed == pytest.approx(5.0)


def test_rocky_terrain_manoeuvre() -> None:
    nav = make_navigator()
    state = nav.traverse_terrain(nav.rover.initial_state(), "rocky")
    assert state.orientation == 45.0
    assert state.x == pytest.approx(2.0 + 1.5 * math.cos(math.radians(45.0)))
    assert state.y == pytest.approx(1.5 * math.sin(math.radians(45.0)))


def test_sand_terrain_manoeuvre() -> None:
    nav = make_navigator()
    state = nav.traverse_terrain(nav.rover.initial_state(), "sand")
    assert state.orientation == -30.0
    assert state.x == pytest.approx(3.0 - math.cos(math.radians(30.0)))


def test_unknown_terrain_raises() -> None:
    nav = make_navigator()
    with pytest.raises(UnknownTerrainError):
        nav.traverse_terrain(nav.rover.initial_state(), "lava")


def test_autopilot_ends_at_last_waypoint() -> None:
    nav = make_navigator()
    sensors = SensorSuite(SensorConfig(), random.Random(0))
    state, report = nav.autopilot(nav.rover.initial_state(), sensors)
    assert state.x == pytest.approx(-5.0)
    assert state.y == pytest.approx(-5.0)
    assert report.instruments == ["camera", "lidar"]


def test_current_cell_rounds_position() -> None:
    grid = GridMap(10)
    assert current_cell(RoverState(x=2.6, y=0.4), 1.0, grid) == (3, 0)
    assert current_cell(RoverState(x=4.0, y=6.0), 2.0, grid) == (2, 3)
    with pytest.raises(InvalidCoordinateError):
        current_cell(RoverState(x=-3.0, y=0.0), 1.0, grid)


def test_current_cell_rejects_non_finite_position() -> None:
    grid = GridMap(10)
    with pytest.raises(InvalidCoordinateError):
        current_cell(RoverState(x=float("inf"), y=0.0), 1.0, grid)
    with pytest.raises(InvalidCoordinateError):
        current_cell(RoverState(x=0.0, y=float("nan")), 1.0, grid)


def test_follow_route_recentres_an_offset_rover() -> None:
    nav = make_navigator()
    grid = GridMap(10)
    start = RoverState(x=0.3, y=0.2)
    route = find_path(current_cell(start, 1.0, grid), (3, 2), grid)
    state = nav.follow_route(start, route)
    assert state.x == pytest.approx(3.0, abs=1e-6)
    assert state.y == pytest.approx(2.0, abs=1e-6)


def test_follow_route_from_cell_centre_adds_no_moves() -> None:
    nav = make_navigator()
    route = [(0, 0), (0, 1)]
    state = nav.follow_route(nav.rover.initial_state(), route)
    # One 90 degree turn and one meter forward.
    assert state.energy_consumed == pytest.approx(90.0 * 0.1 + 1.0 * 0.5)
