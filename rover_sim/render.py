from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
import math

import pygame

from .grid import Coord, GridMap
from .rover import RoverState


Color = Tuple[int, int, int]

THEME = {
    "bg": (18, 22, 32),
    "cell": (28, 34, 48),
    "grid": (45, 52, 70),
    "blocked_fill": (85, 60, 50),
    "blocked_edge": (120, 85, 70),
    "route": (0, 180, 140),
    "route_start": (100, 220, 120),
    "route_goal": (255, 170, 80),
    "rover_fill": (100, 220, 255),
    "rover_outline": (40, 140, 200),
    "rover_arrow": (140, 240, 255),
    "hud_bg": (28, 34, 48),
    "hud_border": (55, 65, 88),
    "hud_text": (200, 220, 255),
}


class GridRenderer:
    """Top-down view of the occupancy grid, the last route and the rover.

    Coordinates:
    - Cell (row, col) is centred at world (row * cell_size, col * cell_size).
    - World +x runs right and +y runs up; screen y is flipped.
    """

    def __init__(
        self,
        grid: GridMap,
        cell_size: float = 1.0,
        window_size: int = 600,
    ) -> None:
        pygame.init()
        pygame.display.set_caption("Rover Grid Simulation")
        self.screen = pygame.display.set_mode((window_size, window_size))
        self.clock = pygame.time.Clock()

        self.grid = grid
        self.cell_size = cell_size
        self.window_size = window_size
        self.px_per_cell = window_size / grid.size
        self.trail: List[Tuple[float, float]] = []

    # ------------------------------------------------------------------
    # Coordinate transforms
    # ------------------------------------------------------------------
    def _world_to_screen(self, x: float, y: float) -> Tuple[int, int]:
        """Convert world meters to pygame screen pixels."""
        scale = self.px_per_cell / self.cell_size
        sx = int((x + self.cell_size / 2.0) * scale)
        sy = int(self.window_size - (y + self.cell_size / 2.0) * scale)
        return sx, sy

    def _cell_rect(self, coord: Coord) -> pygame.Rect:
        r, c = coord
        left = int(r * self.px_per_cell)
        top = int(self.window_size - (c + 1) * self.px_per_cell)
        size = int(math.ceil(self.px_per_cell))
        return pygame.Rect(left, top, size, size)

    def _cell_center(self, coord: Coord) -> Tuple[int, int]:
        return self._world_to_screen(coord[0] * self.cell_size, coord[1] * self.cell_size)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def draw(
        self,
        rover_state: RoverState,
        route: Optional[Sequence[Coord]] = None,
    ) -> None:
        """Render one frame."""
        pygame.event.pump()
        self.screen.fill(THEME["bg"])
        self._draw_cells()
        if route:
            self._draw_route(route)
        self.trail.append((rover_state.x, rover_state.y))
        if len(self.trail) >= 2:
            pts = [self._world_to_screen(x, y) for x, y in self.trail]
            pygame.draw.lines(self.screen, THEME["rover_outline"], False, pts, 1)
        self._draw_rover(rover_state)
        self._draw_hud(rover_state)
        pygame.display.flip()

    def _draw_cells(self) -> None:
        for r in range(self.grid.size):
            for c in range(self.grid.size):
                rect = self._cell_rect((r, c))
                if self.grid.is_blocked((r, c)):
                    pygame.draw.rect(self.screen, THEME["blocked_fill"], rect)
                    pygame.draw.rect(self.screen, THEME["blocked_edge"], rect, 2)
                else:
                    pygame.draw.rect(self.screen, THEME["cell"], rect)
                    pygame.draw.rect(self.screen, THEME["grid"], rect, 1)

    def _draw_route(self, route: Sequence[Coord]) -> None:
        pts = [self._cell_center(c) for c in route]
        if len(pts) >= 2:
            pygame.draw.lines(self.screen, THEME["route"], False, pts, 3)
        radius = max(3, int(self.px_per_cell * 0.2))
        pygame.draw.circle(self.screen, THEME["route_start"], pts[0], radius)
        pygame.draw.circle(self.screen, THEME["route_goal"], pts[-1], radius)

    def _draw_rover(self, state: RoverState) -> None:
        center = self._world_to_screen(state.x, state.y)
        radius_px = max(4, int(self.px_per_cell * 0.3))
        pygame.draw.circle(self.screen, THEME["rover_fill"], center, radius_px, 0)
        pygame.draw.circle(self.screen, THEME["rover_outline"], center, radius_px, 2)

        yaw = math.radians(state.orientation)
        arrow_len = 0.6 * self.cell_size
        head = self._world_to_screen(
            state.x + math.cos(yaw) * arrow_len,
            state.y + math.sin(yaw) * arrow_len,
        )
        pygame.draw.line(self.screen, THEME["rover_arrow"], center, head, 3)

    def _draw_hud(self, state: RoverState) -> None:
        pad = 10
        font = pygame.font.SysFont("monospace", 13)
        text = (
            f"  pos=({state.x:.1f},{state.y:.1f})  hdg={state.orientation:.0f}  "
            f"bat={state.battery:.1f}%  "
        )
        surf = font.render(text, True, THEME["hud_text"])
        r = surf.get_rect(topleft=(pad, pad))
        panel = r.inflate(pad, pad)
        pygame.draw.rect(self.screen, THEME["hud_bg"], panel)
        pygame.draw.rect(self.screen, THEME["hud_border"], panel, 1)
        self.screen.blit(surf, (panel.x + 4, panel.y + 4))

    def tick(self, target_fps: int) -> float:
        """Cap frame rate and return achieved FPS."""
        fps = self.clock.get_fps()
        self.clock.tick(target_fps)
        return fps

    def close(self) -> None:
        pygame.quit()
