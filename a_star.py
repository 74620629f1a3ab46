# A* Path Planner
# Scout Pathfinder

# Classic best-first search on a 4-connected occupancy grid.
# grid[x, y] is True for blocked cells.

from queue import PriorityQueue
from typing import Optional

from pathfinder import Coord, Pathfinder

STEP_COST = 1

# Rover moves: up, down, left, right
MOVES = ((0, -1), (0, 1), (-1, 0), (1, 0))


# Manhattan distance, admissible for unit 4-connected moves
def heuristic(a, b):
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def euclidean(a, b):
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return (dx * dx + dy * dy) ** 0.5


# Free in-bounds cells reachable in one move
def getNeighbors(grid, cell):
    width, height = grid.shape
    x, y = cell

    free = []
    for dx, dy in MOVES:
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height and not grid[nx, ny]:
            free.append((nx, ny))
    return free


# Walk the came_from links back from the goal
def buildPath(came_from, goal):
    route = [goal]
    cell = goal
    while cell in came_from:
        cell = came_from[cell]
        route.append(cell)
    route.reverse()
    return route


def compute_A_star(grid, start, goal):
    start, goal = tuple(start), tuple(goal)

    cost_so_far = {start: 0}
    came_from = {}

    # Entries are (f, cell); equal f falls back to coordinate order
    open_queue = PriorityQueue()
    open_queue.put((heuristic(start, goal), start))

    while not open_queue.empty():
        f, cell = open_queue.get()

        if cell == goal:
            return buildPath(came_from, goal)

        # Stale entry, a cheaper route was queued later
        if f > cost_so_far[cell] + heuristic(cell, goal):
            continue

        for nbr in getNeighbors(grid, cell):
            tentative = cost_so_far[cell] + STEP_COST
            if tentative < cost_so_far.get(nbr, float("inf")):
                cost_so_far[nbr] = tentative
                came_from[nbr] = cell
                open_queue.put((tentative + heuristic(nbr, goal), nbr))

    return None


class AStar(Pathfinder):
    """Best-first search, re-run from scratch on every call."""

    def compute_path(self, start: Coord, goal: Coord) -> Optional[list[Coord]]:
        if not self.is_free(start) or not self.is_free(goal):
            return None
        return compute_A_star(self.grid, start, goal)
