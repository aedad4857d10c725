from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple
import json

import numpy as np

from .geometry_utils import euclidean, manhattan


Coord = Tuple[int, int]


class InvalidCoordinateError(ValueError):
    """Raised when a coordinate lies outside the grid."""

    def __init__(self, coord: Coord, size: int) -> None:
        super().__init__(
            f"coordinate {tuple(coord)} is outside the {size}x{size} grid"
        )
        self.coord = coord
        self.size = size


class GridMap:
    """Square occupancy grid used for route planning.

    Cells are addressed as ``(row, col)`` with ``0 <= row, col < size``.
    Every cell is traversable unless explicitly marked blocked.

    Parameters
    ----------
    size : int
        Side length N of the N x N grid. Must be >= 1.
    blocked : iterable of (row, col), optional
        Cells to mark as blocked at construction time.
    """

    def __init__(self, size: int, blocked: Optional[Iterable[Coord]] = None) -> None:
        if isinstance(size, float) and not size.is_integer():
            raise ValueError(f"grid size must be a whole number, got {size}")
        size = int(size)
        if size < 1:
            raise ValueError(f"grid size must be >= 1, got {size}")
        self.size = size
        self._blocked = np.zeros((size, size), dtype=bool)
        for cell in blocked or ():
            self.set_blocked(cell, True)

    # ------------------------------------------------------------------
    # Map loading / serialization
    # ------------------------------------------------------------------
    @classmethod
    def from_map_dict(cls, data: Dict[str, Any]) -> "GridMap":
        """Create a grid from ``{"size": N, "blocked": [[r, c], ...]}``."""
        blocked = [(int(r), int(c)) for r, c in data.get("blocked", [])]
        return cls(size=data["size"], blocked=blocked)

    @classmethod
    def from_map_file(cls, path: str) -> "GridMap":
        """Create a grid from a JSON map file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_map_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize grid description to a Python dict."""
        return {
            "size": self.size,
            "blocked": [[r, c] for r, c in self.blocked_cells()],
        }

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------
    def in_bounds(self, coord: Coord) -> bool:
        r, c = coord
        return 0 <= r < self.size and 0 <= c < self.size

    def validate(self, coord: Coord) -> Coord:
        """Return ``coord`` unchanged, or raise InvalidCoordinateError."""
        if not self.in_bounds(coord):
            raise InvalidCoordinateError(coord, self.size)
        return coord

    def is_blocked(self, coord: Coord) -> bool:
        """Return True for blocked cells; out-of-bounds cells count as blocked."""
        if not self.in_bounds(coord):
            return True
        r, c = coord
        return bool(self._blocked[r, c])

    def set_blocked(self, coord: Coord, blocked: bool = True) -> None:
        """Mark or clear a cell. Not to be called while a search is running."""
        r, c = self.validate(coord)
        self._blocked[r, c] = blocked

    def blocked_cells(self) -> List[Coord]:
        """Sorted list of blocked cells."""
        return [(int(r), int(c)) for r, c in np.argwhere(self._blocked)]

    # ------------------------------------------------------------------
    # Search support
    # ------------------------------------------------------------------
    def neighbors(self, coord: Coord) -> List[Coord]:
        """Traversable N/S/E/W neighbours of ``coord`` inside the grid."""
        r, c = coord
        candidates = [(r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)]
        return [p for p in candidates if self.in_bounds(p) and not self.is_blocked(p)]

    @staticmethod
    def distance(a: Coord, b: Coord) -> float:
        """Edge cost between two cells (Euclidean)."""
        return euclidean(a, b)

    @staticmethod
    def heuristic(a: Coord, b: Coord) -> float:
        """Manhattan estimate of the remaining cost from ``a`` to ``b``."""
        return manhattan(a, b)
