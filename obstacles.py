# Obstacle Map: static + converted obstacles
# Scout Pathfinder

from typing import Iterable

import numpy as np
from loguru import logger

from pathfinder import Coord, build_grid

OBSTACLE_SHAPES = [
    ((0, 0),),
    ((0, 0), (1, 0)),
    ((0, 0), (0, 1)),
    ((0, 0), (1, 0), (1, 1)),
    ((0, 0), (1, 0), (0, 1), (1, 1)),
    ((0, 1), (1, 0), (1, 1), (1, 2), (2, 1)),
]


class ObstacleMap:
    """
    Authoritative blocked-cell set handed to the planners.

    Static obstacles are placed during setup. Converted obstacles are dynamic
    obstacles the rover has detected; they only grow during a journey.
    """

    def __init__(self, static: Iterable[Coord] = ()):
        self.static = set(static)
        self.converted = set()

    def obstacle_union(self) -> set[Coord]:
        """All blocked cells: static and converted."""
        return self.static | self.converted

    def is_occupied(self, coord: Coord) -> bool:
        return coord in self.static or coord in self.converted

    def add_converted(self, coord: Coord):
        if coord in self.converted:
            return
        self.converted.add(coord)
        logger.debug(f"Obstacle map: converted obstacle at {coord}")

    def set_static(self, coords: Iterable[Coord]):
        self.static = set(coords)
        logger.info(f"Obstacle map: {len(self.static)} static obstacles")

    def toggle_static(self, coord: Coord) -> bool:
        """Flip a static obstacle. Returns True if the cell is now blocked."""
        if coord in self.static:
            self.static.discard(coord)
            return False
        self.static.add(coord)
        return True

    def clear_converted(self):
        self.converted.clear()

    def as_grid(self, width: int, height: int) -> np.ndarray:
        return build_grid(width, height, self.obstacle_union())


def scatter_obstacles(width, height, count, rng=None, protected=()):
    """
    Randomly place small obstacle shapes on the grid.

    Args:
        width, height: Grid dimensions (cells)
        count: Number of shapes to place
        rng: numpy Generator (a fresh default_rng() if omitted)
        protected: Cells that must stay free (start, goal, rover)

    Returns:
        Set of blocked (x, y) cells
    """
    if rng is None:
        rng = np.random.default_rng()

    blocked = set()
    for _ in range(count):
        shape = OBSTACLE_SHAPES[rng.integers(len(OBSTACLE_SHAPES))]
        max_dx = max(dx for dx, _ in shape)
        max_dy = max(dy for _, dy in shape)
        if max_dx >= width or max_dy >= height:
            continue

        anchor_x = int(rng.integers(0, width - max_dx))
        anchor_y = int(rng.integers(0, height - max_dy))

        for dx, dy in shape:
            blocked.add((anchor_x + dx, anchor_y + dy))  # overlap is fine

    return blocked - set(protected)
