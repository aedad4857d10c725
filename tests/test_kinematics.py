from __future__ import annotations

import dataclasses
import math

import pytest

from rover_sim.rover import Motor, Rover, RoverConfig, RoverState


def make_rover() -> Rover:
    return Rover(RoverConfig())


def test_rover_forward_motion() -> None:
    rover = make_rover()
    state = rover.initial_state()
    moved = rover.move_forward(state, 10.0)

    assert math.isclose(moved.x, 10.0)
    assert math.isclose(moved.y, 0.0, abs_tol=1e-9)
    assert math.isclose(moved.vx, 10.0)
    assert math.isclose(moved.battery, 95.0)
    assert math.isclose(moved.energy_consumed, 5.0)
    assert moved.motor_left.power == 0.0
    assert moved.motor_right.power == 0.0


def test_transitions_do_not_mutate_input_state() -> None:
    rover = make_rover()
    state = rover.initial_state()
    rover.move_forward(state, 3.0)
    rover.turn_left(state, 45.0)
    assert state == rover.initial_state()
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.x = 1.0  # type: ignore[misc]


def test_turn_then_move() -> None:
    rover = make_rover()
    state = rover.turn_left(rover.initial_state(), 90.0)
    assert state.orientation == 90.0
    state = rover.move_forward(state, 2.0)

    assert math.isclose(state.x, 0.0, abs_tol=1e-9)
    assert math.isclose(state.y, 2.0)
    assert math.isclose(state.battery, 100.0 - 9.0 - 1.0)
    assert math.isclose(state.energy_consumed, 10.0)


def test_turn_right_and_backward() -> None:
    rover = make_rover()
    state = rover.turn_right(rover.initial_state(), 30.0)
    assert state.orientation == -30.0
    assert math.isclose(state.energy_consumed, 3.0)

    back = rover.move_backward(rover.initial_state(), 1.0)
    assert math.isclose(back.x, -1.0)
    assert math.isclose(back.energy_consumed, 0.5)


def test_battery_never_goes_negative() -> None:
    rover = make_rover()
    state = rover.move_forward(rover.initial_state(), 500.0)
    assert state.battery == 0.0
    assert math.isclose(state.energy_consumed, 250.0)


def test_motor_force_and_friction() -> None:
    motor = Motor(power=50.0)
    assert math.isclose(motor.apply_force(), 0.4)
    assert math.isclose(motor.apply_friction(2.0), -0.2)
    assert motor.with_power(10.0).power == 10.0
    assert motor.power == 50.0


def test_update_velocity_applies_motor_force() -> None:
    rover = make_rover()
    state = rover.drive_motors(rover.initial_state(), 50.0, 50.0)
    state = rover.update_velocity(state)
    assert math.isclose(state.vx, 0.8)
    assert math.isclose(state.vy, 0.0, abs_tol=1e-9)


def test_tick_decays_velocity_and_integrates_position() -> None:
    rover = make_rover()
    state = RoverState(vx=10.0, vy=-5.0)
    state = rover.tick(state, 0.1)
    assert math.isclose(state.vx, 9.0)
    assert math.isclose(state.vy, -4.5)
    assert math.isclose(state.x, 0.9)
    assert math.isclose(state.y, -0.45)


def test_state_to_dict() -> None:
    rover = make_rover()
    record = rover.move_forward(rover.initial_state(), 1.0).to_dict()
    assert record["x"] == pytest.approx(1.0)
    assert record["battery"] == pytest.approx(99.5)
    assert record["motor_left"] == 0.0
