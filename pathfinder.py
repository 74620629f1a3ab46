# Pathfinder interface shared by A*, D*-Lite and Field D*
# Scout Pathfinder

from abc import ABC, abstractmethod
from typing import Iterable, Optional

import numpy as np

Coord = tuple[int, int]


class Pathfinder(ABC):
    """
    Common contract for the grid planners.

    Planners work on a boolean occupancy grid of shape (width, height),
    indexed grid[x, y], where True means blocked.
    """

    def __init__(self, grid: np.ndarray):
        self.grid = np.array(grid, dtype=bool)
        self.width, self.height = self.grid.shape

    def in_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def is_free(self, coord: Coord) -> bool:
        return self.in_bounds(coord) and not self.grid[coord[0], coord[1]]

    @abstractmethod
    def compute_path(self, start: Coord, goal: Coord) -> Optional[list[Coord]]:
        """Return the cells from start to goal inclusive, or None if unreachable."""

    def update_obstacle(self, coord: Coord, is_blocked: bool):
        """Mark a single cell as (un)blocked."""
        if self.in_bounds(coord):
            self.grid[coord[0], coord[1]] = is_blocked


def build_grid(width: int, height: int, obstacles: Iterable[Coord]) -> np.ndarray:
    """Build an occupancy grid from a collection of blocked cells."""
    if width <= 0 or height <= 0:
        raise ValueError(f"grid dimensions must be positive, got {width}x{height}")

    grid = np.zeros((width, height), dtype=bool)
    for x, y in obstacles:
        if 0 <= x < width and 0 <= y < height:
            grid[x, y] = True
    return grid


def make_pathfinder(name: str, grid: np.ndarray) -> Pathfinder:
    """Construct a planner by its display name."""
    # Imported here so the planner modules can subclass Pathfinder
    from a_star import AStar
    from d_star_lite import DStarLite
    from field_d_star import FieldDStar

    planners = {
        "A*": AStar,
        "D*-Lite": DStarLite,
        "Field D*": FieldDStar,
    }
    if name not in planners:
        raise ValueError(f"unknown algorithm {name!r}, expected one of {list(planners)}")
    return planners[name](grid)
