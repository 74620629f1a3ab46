# Rover: trajectory manager (traveled history + forward plan)
# Scout Pathfinder

from typing import Iterable, Optional

from loguru import logger

from a_star import euclidean
from config import (
    DEFAULT_ALGORITHM,
    FALLBACK_MAX_STEPS,
    GRID_HEIGHT,
    GRID_WIDTH,
)
from pathfinder import Coord, Pathfinder, build_grid, make_pathfinder

# Greedy stepper directions, in the order they are tried
DIRECTIONS = ((0, 1), (0, -1), (1, 0), (-1, 0))


def chebyshev(a: Coord, b: Coord) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def straight_line_path(start, goal, obstacles, width, height, max_steps=FALLBACK_MAX_STEPS):
    """
    Step straight toward the goal, moving diagonally while both axes differ.
    Returns [] if the line hits an obstacle or the step bound.
    """
    path = [start]
    current = start

    while current != goal:
        cx, cy = current
        gx, gy = goal
        step_x = (gx > cx) - (gx < cx)
        step_y = (gy > cy) - (gy < cy)
        current = (cx + step_x, cy + step_y)

        if current in obstacles or not (0 <= current[0] < width and 0 <= current[1] < height):
            return []

        path.append(current)
        if len(path) > max_steps:
            return []

    return path


def greedy_path(start, goal, obstacles, width, height, max_steps=FALLBACK_MAX_STEPS):
    """
    Walk 4-connected, always to the free neighbor nearest the goal.
    Returns [] unless the goal is reached within max_steps.
    """
    path = [start]
    current = start

    for _ in range(max_steps):
        if current == goal:
            break

        cx, cy = current
        best_next = current
        best_distance = float("inf")
        free = []

        for dx, dy in DIRECTIONS:
            nxt = (cx + dx, cy + dy)
            if not (0 <= nxt[0] < width and 0 <= nxt[1] < height):
                continue
            if nxt in obstacles:
                continue
            free.append(nxt)
            distance = euclidean(nxt, goal)
            if distance < best_distance:
                best_distance = distance
                best_next = nxt

        if best_next == current and free:
            best_next = free[0]

        if best_next == current:
            break

        current = best_next
        path.append(current)

    return path if current == goal else []


class RoverTrajectory:
    """
    Owns the rover's traveled history and its forward plan.

    traveled_path only grows, one adjacent cell per successful move.
    planned_path always starts at current_position when non-empty and is
    replaced wholesale on every replan.
    """

    def __init__(
            self,
            start: Coord,
            goal: Coord,
            width: int = GRID_WIDTH,
            height: int = GRID_HEIGHT,
            algorithm: str = DEFAULT_ALGORITHM,
    ):
        self.width = width
        self.height = height

        self.start_position = start
        self.current_position = start
        self.goal_position = goal
        self.traveled_path: list[Coord] = [start]
        self.planned_path: list[Coord] = []
        self.algorithm = algorithm
        self.is_journey_active = False

        # Planner reused between replans while only the obstacles change
        self.pathfinder: Optional[Pathfinder] = None
        self._planner_obstacles: set[Coord] = set()

        # Which method produced the current plan: "planner", "straight", "greedy"
        self.plan_source: Optional[str] = None

    def _sync_pathfinder(self, obstacles: set[Coord]) -> Pathfinder:
        """Build the planner, or feed the existing one the occupancy changes."""
        if self.pathfinder is None:
            grid = build_grid(self.width, self.height, obstacles)
            self.pathfinder = make_pathfinder(self.algorithm, grid)
        else:
            for coord in obstacles - self._planner_obstacles:
                self.pathfinder.update_obstacle(coord, True)
            for coord in self._planner_obstacles - obstacles:
                self.pathfinder.update_obstacle(coord, False)
        self._planner_obstacles = set(obstacles)
        return self.pathfinder

    def compute_path_from_som(self, obstacle_coords: Iterable[Coord]) -> bool:
        """
        Replace the planned path with a fresh plan from the current position.
        traveled_path is never touched.
        """
        obstacles = set(obstacle_coords)
        self.planned_path = []
        self.plan_source = None

        logger.debug(
            f"Rover: planning {self.current_position} -> {self.goal_position} "
            f"with {self.algorithm}, {len(obstacles)} obstacles, "
            f"{len(self.traveled_path)} cells traveled"
        )

        if self.goal_position in obstacles:
            logger.warning(f"Rover: goal {self.goal_position} is blocked")
            return False

        path = self._sync_pathfinder(obstacles).compute_path(
            self.current_position, self.goal_position
        )
        if path and path[0] != self.current_position:
            logger.warning(
                f"Rover: planner path starts at {path[0]}, expected {self.current_position}"
            )
            path = None

        if path:
            self.planned_path = list(path)
            self.plan_source = "planner"
            logger.debug(f"Rover: new plan with {len(self.planned_path)} cells")
            return True

        fallbacks = (("straight", straight_line_path), ("greedy", greedy_path))
        for name, stepper in fallbacks:
            path = stepper(
                self.current_position, self.goal_position, obstacles, self.width, self.height
            )
            if path:
                self.planned_path = path
                self.plan_source = name
                logger.info(f"Rover: {self.algorithm} found no path, using {name} fallback")
                return True

        logger.warning("Rover: all pathfinding methods failed")
        return False

    def execute_movement_step(self) -> bool:
        """Advance one cell along the plan. Returns False if no move happened."""
        if len(self.planned_path) < 2:
            logger.warning(f"Rover: cannot move, plan has {len(self.planned_path)} cells")
            return False

        if self.planned_path[0] != self.current_position:
            logger.warning(
                f"Rover: path desync, plan starts at {self.planned_path[0]} "
                f"but rover is at {self.current_position}"
            )
            self.planned_path[0] = self.current_position

        next_position = self.planned_path[1]
        if chebyshev(self.current_position, next_position) > 1:
            logger.warning(
                f"Rover: invalid step {self.current_position} -> {next_position}"
            )
            return False

        self.current_position = next_position
        self.traveled_path.append(next_position)
        self.planned_path.pop(0)
        return True

    def has_reached_goal(self) -> bool:
        return self.current_position == self.goal_position

    def set_algorithm(self, algorithm: str):
        self.algorithm = algorithm
        self._invalidate_plan()

    def set_goal(self, goal: Coord):
        self.goal_position = goal
        self._invalidate_plan()

    def reset_to_start(self, start: Coord):
        self.start_position = start
        self.current_position = start
        self.traveled_path = [start]
        self.is_journey_active = False
        self._invalidate_plan()

    def clear_plan(self):
        """Drop the plan but keep the planner for incremental reuse."""
        self.planned_path = []
        self.plan_source = None

    def _invalidate_plan(self):
        self.clear_plan()
        self.pathfinder = None
        self._planner_obstacles = set()

    def snapshot(self) -> dict:
        return {
            "position": self.current_position,
            "start": self.start_position,
            "goal": self.goal_position,
            "planned_path": list(self.planned_path),
            "traveled_path": list(self.traveled_path),
            "algorithm": self.algorithm,
        }
