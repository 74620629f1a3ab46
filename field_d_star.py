# Field D* Path Planner (simplified grid variant)
# Scout Pathfinder
#
# 8-connected search with continuous edge costs (1 orthogonal, sqrt(2)
# diagonal). Every call replans from a blank slate.

import heapq
import math
from typing import Optional

import numpy as np
from loguru import logger

from pathfinder import Coord, Pathfinder


class FieldDStar(Pathfinder):
    """
    Best-first search over an 8-connected grid with Euclidean heuristic.

    No incremental repair: update_obstacle() only flips occupancy and the
    next compute_path() recomputes everything.
    """

    def __init__(self, grid: np.ndarray):
        super().__init__(grid)

        # 8-connected neighbors: (dx, dy, cost)
        self.SQRT2 = math.sqrt(2.0)
        self.neighbors = (
            (0, -1, 1.0), (0, 1, 1.0), (-1, 0, 1.0), (1, 0, 1.0),
            (-1, -1, self.SQRT2), (1, -1, self.SQRT2),
            (-1, 1, self.SQRT2), (1, 1, self.SQRT2),
        )

        self.reset()

    def reset(self):
        """Clear all planning data."""
        self.g = np.full((self.width, self.height), np.inf)
        self.parent = {}
        self.open_list = []
        self.start = None
        self.goal = None

    def _heuristic(self, a: Coord, b: Coord) -> float:
        dx = a[0] - b[0]
        dy = a[1] - b[1]
        return math.sqrt(dx * dx + dy * dy)

    def _expand(self, u: Coord):
        """Relax every free neighbor through u."""
        x, y = u
        g_u = self.g[u]
        for dx, dy, move_cost in self.neighbors:
            nbr = (x + dx, y + dy)
            if not self.is_free(nbr):
                continue
            tentative = g_u + move_cost
            if tentative < self.g[nbr]:
                self.g[nbr] = tentative
                self.parent[nbr] = u
                f = tentative + self._heuristic(nbr, self.goal)
                heapq.heappush(self.open_list, (f, nbr))

    def _build_path(self) -> list[Coord]:
        path = [self.goal]
        current = self.goal
        while current != self.start:
            current = self.parent[current]
            path.append(current)
        path.reverse()
        return path

    def compute_path(self, start: Coord, goal: Coord) -> Optional[list[Coord]]:
        if not self.is_free(start) or not self.is_free(goal):
            return None

        self.reset()
        self.start = start
        self.goal = goal

        self.g[start] = 0.0
        heapq.heappush(self.open_list, (self._heuristic(start, goal), start))

        expanded = 0
        while self.open_list:
            f, u = heapq.heappop(self.open_list)

            if u == goal:
                logger.debug(f"Field D*: {expanded} expansions, path found")
                return self._build_path()

            # Skip entries superseded by a cheaper route
            if f > self.g[u] + self._heuristic(u, goal) + 1e-9:
                continue

            self._expand(u)
            expanded += 1

        logger.debug(f"Field D*: {expanded} expansions, path NOT FOUND")
        return None
