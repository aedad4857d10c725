from __future__ import annotations

from typing import Callable, Dict, List, Optional, TextIO
import math
import sys
import time

from telemetry.logger import TelemetryLogger

from .comms import CommunicationModule
from .config import SimConfig
from .grid import Coord, GridMap, InvalidCoordinateError
from .navigation import Navigator, UnknownTerrainError, current_cell
from .planner import search
from .rover import Rover, RoverState
from .sensors import SensorSuite


PROMPT = (
    "Enter command ('forward 10', 'left 90', 'navigate 5 5', 'scan', 'terrain rocky', "
    "'connect', 'send_data', 'autopilot', 'pathfind 0 0 9 9', 'drive 9 9', 'help', 'exit'):"
)

HELP_TEXT = """\
forward D | backward D      drive D meters along / against the heading
left A | right A            turn A degrees
navigate X Y                turn toward (X, Y) and drive there
scan                        scan the environment
terrain rocky|sand          run a terrain manoeuvre
connect | disconnect        toggle the communication link
send_data                   send a status report
autopilot                   run the scripted mission
pathfind R0 C0 R1 C1        plan a grid route
drive R C                   plan from the current cell and follow the route
block R C | unblock R C     mark or clear an obstacle cell
status                      print rover state
exit | quit                 leave the simulator"""


class CommandError(ValueError):
    """Raised for malformed console input."""


class RoverConsole:
    """Interactive command loop around the rover simulation.

    The console owns the single mutable reference to the current
    RoverState; every command replaces it with the state returned by the
    motion model.
    """

    def __init__(
        self,
        rover: Rover,
        navigator: Navigator,
        grid: GridMap,
        sensors: SensorSuite,
        comms: CommunicationModule,
        config: SimConfig,
        out: Optional[TextIO] = None,
        telemetry: Optional[TelemetryLogger] = None,
        on_update: Optional[Callable[["RoverConsole"], None]] = None,
    ) -> None:
        self.rover = rover
        self.navigator = navigator
        self.grid = grid
        self.sensors = sensors
        self.comms = comms
        self.config = config
        self.out = out if out is not None else sys.stdout
        self.telemetry = telemetry
        self.on_update = on_update

        self.state: RoverState = rover.initial_state()
        self.last_route: Optional[List[Coord]] = None
        self._commands: Dict[str, Callable[[List[str]], None]] = {
            "forward": self._cmd_forward,
            "backward": self._cmd_backward,
            "left": self._cmd_left,
            "right": self._cmd_right,
            "navigate": self._cmd_navigate,
            "scan": self._cmd_scan,
            "terrain": self._cmd_terrain,
            "connect": self._cmd_connect,
            "disconnect": self._cmd_disconnect,
            "send_data": self._cmd_send_data,
            "autopilot": self._cmd_autopilot,
            "pathfind": self._cmd_pathfind,
            "drive": self._cmd_drive,
            "block": self._cmd_block,
            "unblock": self._cmd_unblock,
            "status": self._cmd_status,
            "help": self._cmd_help,
        }

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------
    def run(self, stream: Optional[TextIO] = None) -> None:
        """Read commands from ``stream`` (stdin by default) until exit or EOF."""
        stream = stream if stream is not None else sys.stdin
        dt = self.config.sim.time_step
        while True:
            self.state = self.rover.tick(self.state, dt)

            self._print(PROMPT)
            self._print("> ", end="")
            self.out.flush()
            line = stream.readline()
            if not line:
                self._print("")
                break
            if not line.strip():
                continue
            if not self.handle(line):
                break

            if self.config.sim.stop_on_obstacle and self.sensors.detect_obstacle():
                self._print("Stopping due to obstacle!")
                self._log("obstacle")
                break

            self._print(f"Current Velocity: ({self.state.vx:.2f}, {self.state.vy:.2f})")
            if self.config.sim.realtime:
                time.sleep(dt)

    def handle(self, line: str) -> bool:
        """Dispatch one command line; returns False when the session should end."""
        parts = line.split()
        if not parts:
            return True
        name, args = parts[0].lower(), parts[1:]
        if name in ("exit", "quit"):
            self._print("Exiting program.")
            return False
        command = self._commands.get(name)
        if command is None:
            self._print("Invalid command.")
            return True
        try:
            command(args)
        except (CommandError, InvalidCoordinateError, UnknownTerrainError) as exc:
            self._print(f"Error: {exc}")
            return True
        self._log("command", command=line.strip())
        if self.on_update is not None:
            self.on_update(self)
        return True

    # ------------------------------------------------------------------
    # Motion commands
    # ------------------------------------------------------------------
    def _cmd_forward(self, args: List[str]) -> None:
        distance = _floats(args, 1, "forward DISTANCE")[0]
        self.state = self.rover.move_forward(self.state, distance)
        self._print(f"Moving forward by {distance:.2f} meters")
        self._report_position()

    def _cmd_backward(self, args: List[str]) -> None:
        distance = _floats(args, 1, "backward DISTANCE")[0]
        self.state = self.rover.move_backward(self.state, distance)
        self._print(f"Moving backward by {distance:.2f} meters")
        self._report_position()

    def _cmd_left(self, args: List[str]) -> None:
        angle = _floats(args, 1, "left ANGLE")[0]
        self.state = self.rover.turn_left(self.state, angle)
        self._print(f"Turning left by {angle:.2f} degrees")
        self._report_orientation()

    def _cmd_right(self, args: List[str]) -> None:
        angle = _floats(args, 1, "right ANGLE")[0]
        self.state = self.rover.turn_right(self.state, angle)
        self._print(f"Turning right by {angle:.2f} degrees")
        self._report_orientation()

    def _cmd_navigate(self, args: List[str]) -> None:
        x, y = _floats(args, 2, "navigate X Y")
        self._print(f"Navigating to ({x:.2f}, {y:.2f})")
        self.state = self.navigator.navigate_to(self.state, x, y)
        self._print(f"Arrived at: ({self.state.x:.2f}, {self.state.y:.2f})")
        self._report_energy()

    def _cmd_terrain(self, args: List[str]) -> None:
        if len(args) != 1:
            raise CommandError("usage: terrain TYPE")
        self._print(f"Traversing {args[0]} terrain...")
        self.state = self.navigator.traverse_terrain(self.state, args[0])
        self._print("Terrain traversal complete.")
        self._report_position()

    def _cmd_autopilot(self, args: List[str]) -> None:
        ap = self.config.autopilot
        self._print("Activating auto-pilot mode...")
        self.state, report = self.navigator.autopilot(
            self.state, self.sensors, waypoints=ap.waypoints, terrain=ap.terrain
        )
        self._print(f"Scanned with: {', '.join(report.instruments) or 'no instruments'}")
        self._print("Auto-pilot mode complete.")
        self._report_position()

    # ------------------------------------------------------------------
    # Planning commands
    # ------------------------------------------------------------------
    def _cmd_pathfind(self, args: List[str]) -> None:
        r0, c0, r1, c1 = _ints(args, 4, "pathfind R0 C0 R1 C1")
        start = self.grid.validate((r0, c0))
        goal = self.grid.validate((r1, c1))
        self._plan(start, goal)

    def _cmd_drive(self, args: List[str]) -> None:
        r, c = _ints(args, 2, "drive ROW COL")
        goal = self.grid.validate((r, c))
        start = current_cell(self.state, self.config.sim.cell_size, self.grid)
        route = self._plan(start, goal)
        if route is None:
            return
        self.state = self.navigator.follow_route(self.state, route)
        self._print(f"Route complete at: ({self.state.x:.2f}, {self.state.y:.2f})")
        self._report_energy()

    def _plan(self, start: Coord, goal: Coord) -> Optional[List[Coord]]:
        result = search(start, goal, self.grid)
        self.last_route = result.route
        self._log(
            "plan",
            start=list(start),
            goal=list(goal),
            route=[list(c) for c in result.route] if result.route else None,
            cost=result.cost,
            expansions=result.expansions,
        )
        if result.route is None:
            self._print("No path found.")
            return None
        self._print(f"Path found: {result.route}")
        self._print(f"Path cost: {result.cost:.2f} ({result.expansions} expansions)")
        return result.route

    def _cmd_block(self, args: List[str]) -> None:
        r, c = _ints(args, 2, "block ROW COL")
        self.grid.set_blocked((r, c), True)
        self._print(f"Cell ({r}, {c}) blocked")

    def _cmd_unblock(self, args: List[str]) -> None:
        r, c = _ints(args, 2, "unblock ROW COL")
        self.grid.set_blocked((r, c), False)
        self._print(f"Cell ({r}, {c}) cleared")

    # ------------------------------------------------------------------
    # Sensors and communication
    # ------------------------------------------------------------------
    def _cmd_scan(self, args: List[str]) -> None:
        self._print("Scanning environment...")
        report = self.sensors.scan_environment()
        for instrument in report.instruments:
            self._print(f"Using {instrument} for environment scan.")
        self._print("Environment scan complete.")

    def _cmd_connect(self, args: List[str]) -> None:
        self.comms.connect()
        self._print("Communication module connected")

    def _cmd_disconnect(self, args: List[str]) -> None:
        self.comms.disconnect()
        self._print("Communication module disconnected")

    def _cmd_send_data(self, args: List[str]) -> None:
        payload = {"message": "Rover status report", "state": self.state.to_dict()}
        if self.comms.send_data(payload):
            self._print("Sending data: Rover status report")
        else:
            self._print("Communication module not connected. Cannot send data.")

    def _cmd_status(self, args: List[str]) -> None:
        self._report_position()
        self._report_orientation()

    def _cmd_help(self, args: List[str]) -> None:
        self._print(HELP_TEXT)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def _print(self, text: str, end: str = "\n") -> None:
        print(text, end=end, file=self.out)

    def _report_position(self) -> None:
        self._print(f"Current Position: ({self.state.x:.2f}, {self.state.y:.2f})")
        self._report_energy()

    def _report_orientation(self) -> None:
        self._print(f"Current Orientation: {self.state.orientation:.2f} degrees")
        self._report_energy()

    def _report_energy(self) -> None:
        self._print(f"Battery Level: {self.state.battery:.2f}%")
        self._print(f"Energy Consumed: {self.state.energy_consumed:.2f} J")

    def _log(self, kind: str, **fields) -> None:
        if self.telemetry is None:
            return
        self.telemetry.log_event(kind, state=self.state.to_dict(), **fields)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _floats(args: List[str], count: int, usage: str) -> List[float]:
    if len(args) != count:
        raise CommandError(f"usage: {usage}")
    try:
        values = [float(a) for a in args]
    except ValueError as exc:
        raise CommandError(f"usage: {usage}") from exc
    if not all(math.isfinite(v) for v in values):
        raise CommandError(f"usage: {usage}")
    return values


def _ints(args: List[str], count: int, usage: str) -> List[int]:
    if len(args) != count:
        raise CommandError(f"usage: {usage}")
    try:
        return [int(a) for a in args]
    except ValueError as exc:
        raise CommandError(f"usage: {usage}") from exc
