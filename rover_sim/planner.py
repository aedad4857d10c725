"""
A* route planning over a GridMap.

Edges join orthogonal neighbours and cost their Euclidean length; the
heuristic is Manhattan distance, which is admissible and consistent for
this edge structure, so the first time the goal is popped its route is
cost-optimal. Ties between equal f-scores are broken by whatever order
the heap yields; callers should rely on route cost, not on a specific
route, when several optimal routes exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import heapq
import math

from .grid import Coord, GridMap


@dataclass
class SearchResult:
    """Outcome of a single A* search.

    Attributes
    ----------
    route : list[Coord] or None
        Cells from start to goal inclusive, or None when the goal is unreachable.
    cost : float or None
        Total Euclidean length of ``route``.
    expansions : int
        Number of frontier entries processed (stale entries excluded).
    """

    route: Optional[List[Coord]]
    cost: Optional[float]
    expansions: int

    @property
    def found(self) -> bool:
        return self.route is not None


def search(start: Coord, goal: Coord, grid: GridMap) -> SearchResult:
    """Run A* from ``start`` to ``goal``.

    ``start`` and ``goal`` must already be validated against ``grid``; only
    neighbour expansion is bounds-checked here.
    """
    g_score: Dict[Coord, float] = {start: 0.0}
    f_score: Dict[Coord, float] = {start: grid.heuristic(start, goal)}
    came_from: Dict[Coord, Coord] = {}

    frontier: List[Tuple[float, Coord]] = []
    heapq.heappush(frontier, (f_score[start], start))
    expansions = 0

    while frontier:
        f_cur, current = heapq.heappop(frontier)
        # Lazy deletion: a cheaper entry for this cell was pushed later.
        if f_cur > f_score[current]:
            continue
        expansions += 1

        if current == goal:
            return SearchResult(
                route=_reconstruct_path(came_from, current),
                cost=g_score[current],
                expansions=expansions,
            )

        for nb in grid.neighbors(current):
            tentative = g_score[current] + grid.distance(current, nb)
            if tentative < g_score.get(nb, math.inf):
                came_from[nb] = current
                g_score[nb] = tentative
                f_score[nb] = tentative + grid.heuristic(nb, goal)
                heapq.heappush(frontier, (f_score[nb], nb))

    return SearchResult(route=None, cost=None, expansions=expansions)


def find_path(start: Coord, goal: Coord, grid: GridMap) -> Optional[List[Coord]]:
    """Shortest route from ``start`` to ``goal``, or None if there is none."""
    return search(start, goal, grid).route


def route_cost(route: List[Coord], grid: GridMap) -> float:
    """Sum of edge lengths along ``route``."""
    return float(sum(grid.distance(a, b) for a, b in zip(route, route[1:])))


def _reconstruct_path(came_from: Dict[Coord, Coord], current: Coord) -> List[Coord]:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path
