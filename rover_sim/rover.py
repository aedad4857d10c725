from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple
import math

from .geometry_utils import clamp


@dataclass(frozen=True)
class Motor:
    """One drive motor.

    Attributes
    ----------
    power : float
        Commanded power in percent; negative drives in reverse.
    efficiency : float
        Fraction of power converted into force.
    friction : float
        Linear drag coefficient applied against velocity.
    """

    power: float = 0.0
    efficiency: float = 0.8
    friction: float = 0.1

    def apply_force(self) -> float:
        return self.power * self.efficiency * 0.01

    def apply_friction(self, velocity: float) -> float:
        return -self.friction * velocity

    def with_power(self, power: float) -> "Motor":
        return replace(self, power=float(power))


@dataclass(frozen=True)
class RoverState:
    """Immutable snapshot of the rover.

    Attributes
    ----------
    x, y : float
        Position in meters.
    vx, vy : float
        Velocity in m/s.
    orientation : float
        Heading in degrees, CCW from +x. Not wrapped.
    battery : float
        Remaining charge in percent, never below zero.
    energy_consumed : float
        Total energy drawn so far (J).
    """

    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    orientation: float = 0.0
    battery: float = 100.0
    energy_consumed: float = 0.0
    motor_left: Motor = field(default_factory=Motor)
    motor_right: Motor = field(default_factory=Motor)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def velocity(self) -> Tuple[float, float]:
        return (self.vx, self.vy)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize state to a dict for logging/telemetry."""
        return {
            "x": self.x,
            "y": self.y,
            "vx": self.vx,
            "vy": self.vy,
            "orientation": self.orientation,
            "battery": self.battery,
            "energy_consumed": self.energy_consumed,
            "motor_left": self.motor_left.power,
            "motor_right": self.motor_right.power,
        }


@dataclass
class RoverConfig:
    """Physical and energy parameters of the rover."""

    motor_efficiency: float = 0.8
    motor_friction: float = 0.1
    battery_capacity: float = 100.0
    move_energy_per_meter: float = 0.5
    turn_energy_per_degree: float = 0.1
    drive_power: float = 50.0
    turn_power: float = 30.0


class Rover:
    """Two-motor rover motion model.

    Every operation takes a RoverState and returns a new one; the model
    itself holds only configuration.
    """

    def __init__(self, config: RoverConfig) -> None:
        self.config = config

    def initial_state(self, x: float = 0.0, y: float = 0.0, orientation: float = 0.0) -> RoverState:
        motor = Motor(
            power=0.0,
            efficiency=self.config.motor_efficiency,
            friction=self.config.motor_friction,
        )
        return RoverState(
            x=x,
            y=y,
            orientation=orientation,
            battery=self.config.battery_capacity,
            motor_left=motor,
            motor_right=motor,
        )

    # ------------------------------------------------------------------
    # Discrete actuation
    # ------------------------------------------------------------------
    def move_forward(self, state: RoverState, distance: float) -> RoverState:
        """Drive ``distance`` meters along the current heading."""
        p = self.config.drive_power
        return self._translate(state, distance, p)

    def move_backward(self, state: RoverState, distance: float) -> RoverState:
        """Reverse ``distance`` meters against the current heading."""
        p = self.config.drive_power
        return self._translate(state, -distance, -p)

    def turn_left(self, state: RoverState, angle: float) -> RoverState:
        """Rotate CCW by ``angle`` degrees."""
        p = self.config.turn_power
        return self._rotate(state, angle, -p, p)

    def turn_right(self, state: RoverState, angle: float) -> RoverState:
        """Rotate CW by ``angle`` degrees."""
        p = self.config.turn_power
        return self._rotate(state, -angle, p, -p)

    def drive_motors(self, state: RoverState, power_left: float, power_right: float) -> RoverState:
        return replace(
            state,
            motor_left=state.motor_left.with_power(power_left),
            motor_right=state.motor_right.with_power(power_right),
        )

    def stop_motors(self, state: RoverState) -> RoverState:
        return self.drive_motors(state, 0.0, 0.0)

    # ------------------------------------------------------------------
    # Dynamics integration
    # ------------------------------------------------------------------
    def update_velocity(self, state: RoverState) -> RoverState:
        """Apply motor force along the heading, then per-axis friction."""
        force = state.motor_left.apply_force() + state.motor_right.apply_force()
        yaw = math.radians(state.orientation)
        ax = force * math.cos(yaw)
        ay = force * math.sin(yaw)
        vx = state.vx + ax + state.motor_left.apply_friction(state.vx)
        vy = state.vy + ay + state.motor_right.apply_friction(state.vy)
        return replace(state, vx=vx, vy=vy)

    def update_position(self, state: RoverState, dt: float) -> RoverState:
        return replace(state, x=state.x + state.vx * dt, y=state.y + state.vy * dt)

    def tick(self, state: RoverState, dt: float) -> RoverState:
        """One integrator step: velocity update followed by position update."""
        return self.update_position(self.update_velocity(state), dt)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _translate(self, state: RoverState, distance: float, power: float) -> RoverState:
        yaw = math.radians(state.orientation)
        dx = distance * math.cos(yaw)
        dy = distance * math.sin(yaw)
        driven = self.drive_motors(state, power, power)
        moved = replace(
            driven,
            x=state.x + dx,
            y=state.y + dy,
            vx=state.vx + dx,
            vy=state.vy + dy,
        )
        moved = self._consume(moved, abs(distance) * self.config.move_energy_per_meter)
        return self.stop_motors(moved)

    def _rotate(self, state: RoverState, delta: float, power_left: float, power_right: float) -> RoverState:
        driven = self.drive_motors(state, power_left, power_right)
        turned = replace(driven, orientation=state.orientation + delta)
        turned = self._consume(turned, abs(delta) * self.config.turn_energy_per_degree)
        return self.stop_motors(turned)

    def _consume(self, state: RoverState, energy: float) -> RoverState:
        battery = clamp(state.battery - energy, 0.0, self.config.battery_capacity)
        return replace(
            state,
            battery=battery,
            energy_consumed=state.energy_consumed + energy,
        )
