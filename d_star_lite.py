# D* Lite Path Planner
# Scout Pathfinder

import heapq
from typing import Optional

import numpy as np
from loguru import logger

from pathfinder import Coord, Pathfinder


class DStarLite(Pathfinder):
    """
    D* Lite incremental path planner on a 4-connected grid.

    Plans from goal to start so replanning is efficient when the rover moves
    forward. Search state (g, rhs, open list, km) survives between
    compute_path() calls; update_obstacle() repairs it locally.
    """

    def __init__(self, grid: np.ndarray, max_iterations: int = 100000):
        super().__init__(grid)
        self.max_iterations = max_iterations

        # 4-connected neighbors: (dx, dy), up/down/left/right
        self.neighbors = ((0, -1), (0, 1), (-1, 0), (1, 0))

        self.reset()

    def reset(self):
        """Clear all planning data."""
        self.g = np.full((self.width, self.height), np.inf)
        self.rhs = np.full((self.width, self.height), np.inf)
        self.open_list = []
        self.open_keys = {}  # cell -> key of its live open list entry
        self.km = 0.0
        self.start = None
        self.goal = None
        self.last_start = None
        self.expansions = 0

    def initialize(self, start: Coord, goal: Coord):
        self.reset()
        self.start = start
        self.last_start = start
        self.goal = goal

        self.rhs[goal] = 0.0
        self._push(goal, self._key(goal))

    def _heuristic(self, a: Coord, b: Coord) -> float:
        """Manhattan distance heuristic."""
        return float(abs(a[0] - b[0]) + abs(a[1] - b[1]))

    def _key(self, cell: Coord) -> tuple[float, float]:
        """Calculate priority key for a cell."""
        min_val = min(self.g[cell], self.rhs[cell])
        h = self._heuristic(cell, self.start) if self.start else 0.0
        return (min_val + h + self.km, min_val)

    def _edge_cost(self, a: Coord, b: Coord) -> float:
        if self.grid[a] or self.grid[b]:
            return np.inf
        return 1.0

    def _cells_around(self, cell: Coord) -> list[Coord]:
        """In-bounds 4-neighbors of a cell, blocked or not."""
        x, y = cell
        cells = []
        for dx, dy in self.neighbors:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                cells.append((nx, ny))
        return cells

    def _push(self, cell: Coord, key: tuple[float, float]):
        self.open_keys[cell] = key
        heapq.heappush(self.open_list, (key, cell))

    def _top(self):
        """Peek the live minimum entry, discarding superseded ones."""
        open_list = self.open_list
        while open_list:
            key, cell = open_list[0]
            if self.open_keys.get(cell) == key:
                return key, cell
            heapq.heappop(open_list)
        return None

    def _update_vertex(self, cell: Coord):
        """Update a cell's rhs and open list status."""
        if cell != self.goal:
            if self.grid[cell]:
                self.rhs[cell] = np.inf
            else:
                min_rhs = np.inf
                for nbr in self._cells_around(cell):
                    total = self.g[nbr] + self._edge_cost(cell, nbr)
                    if total < min_rhs:
                        min_rhs = total
                self.rhs[cell] = min_rhs

        # Remove from open list if present
        self.open_keys.pop(cell, None)

        # Add back if inconsistent
        if self.g[cell] != self.rhs[cell]:
            self._push(cell, self._key(cell))

    def compute_shortest_path(self) -> bool:
        """Expand cells until start is consistent."""
        iterations = 0
        start = self.start

        while iterations < self.max_iterations:
            top = self._top()
            if top is None:
                break

            k_old, u = top
            if not (k_old < self._key(start) or self.g[start] != self.rhs[start]):
                break

            iterations += 1
            heapq.heappop(self.open_list)
            del self.open_keys[u]

            k_new = self._key(u)
            if k_old < k_new:
                # Key went stale while queued (start moved)
                self._push(u, k_new)
            elif self.g[u] > self.rhs[u]:
                # Overconsistent - lower g
                self.g[u] = self.rhs[u]
                for nbr in self._cells_around(u):
                    self._update_vertex(nbr)
            else:
                # Underconsistent - raise g
                self.g[u] = np.inf
                self._update_vertex(u)
                for nbr in self._cells_around(u):
                    self._update_vertex(nbr)

        self.expansions += iterations
        path_exists = bool(np.isfinite(self.rhs[start]))
        logger.debug(
            f"D* Lite: {iterations} iterations, path={'found' if path_exists else 'NOT FOUND'}"
        )
        return path_exists

    def _extract_path(self) -> Optional[list[Coord]]:
        """Extract path from start to goal by following best neighbors."""
        if not np.isfinite(self.rhs[self.start]):
            return None

        path = [self.start]
        current = self.start
        visited = {self.start}

        for _ in range(self.width * self.height):
            if current == self.goal:
                return path

            best_next = None
            best_cost = np.inf
            for nbr in self._cells_around(current):
                if nbr in visited or self.grid[nbr]:
                    continue
                total = self.g[nbr] + self._edge_cost(current, nbr)
                if total < best_cost:
                    best_cost = total
                    best_next = nbr

            if best_next is None:
                return None

            path.append(best_next)
            visited.add(best_next)
            current = best_next

        return path if current == self.goal else None

    def compute_path(self, start: Coord, goal: Coord) -> Optional[list[Coord]]:
        if not self.is_free(start) or not self.is_free(goal):
            return None

        if self.start is None or goal != self.goal:
            self.initialize(start, goal)
        elif start != self.last_start:
            # Rover moved: shift every queued key by the distance traveled
            self.km += self._heuristic(self.last_start, start)
            self.last_start = start
        self.start = start

        self.compute_shortest_path()
        return self._extract_path()

    def update_obstacle(self, coord: Coord, is_blocked: bool):
        if not self.in_bounds(coord):
            return
        self.grid[coord] = is_blocked

        # Nothing seeded yet; the first compute_path will see the new grid
        if self.goal is None:
            return

        self._update_vertex(coord)
        for nbr in self._cells_around(coord):
            self._update_vertex(nbr)
