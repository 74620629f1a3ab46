# Simulation Cycle: detection / replanning / movement state machine
# Scout Pathfinder

import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

import numpy as np
from loguru import logger

from a_star import euclidean
from config import (
    ALGORITHMS,
    DEFAULT_ALGORITHM,
    DEFAULT_SPEED,
    DETECTION_RADIUS,
    GOAL,
    GRID_HEIGHT,
    GRID_WIDTH,
    MAX_JOURNEY_STEPS,
    MAX_SPEED,
    MIN_SPEED,
    SCATTER_COUNT,
    START,
    TICK_BASE_MS,
    TICK_STEP_MS,
)
from dynamic_obstacles import DynamicObstacleTracker
from obstacles import ObstacleMap, scatter_obstacles
from pathfinder import Coord
from rover import RoverTrajectory


class SimulationState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    TRAPPED = "trapped"
    COMPLETE = "complete"


@dataclass
class JourneyStats:
    ticks: int = 0
    nodes_visited: int = 0
    total_distance: float = 0.0
    reroute_count: int = 0
    obstacles_detected: int = 0
    start_time: Optional[float] = None  # seconds, from the simulation clock
    end_time: Optional[float] = None
    planned_distance: float = 0.0  # length of the plan the journey started with

    def duration(self, now: float) -> float:
        """Seconds since the journey started, frozen once it ended."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else now
        return max(0.0, end - self.start_time)

    def nodes_per_second(self, now: float) -> float:
        elapsed = self.duration(now)
        return self.nodes_visited / elapsed if elapsed > 0 else 0.0

    def path_efficiency(self) -> float:
        """Initial plan length over distance actually driven, in percent."""
        if self.total_distance <= 0:
            return 100.0
        return min(100.0, 100.0 * self.planned_distance / self.total_distance)


def path_length(path) -> float:
    return sum(euclidean(a, b) for a, b in zip(path, path[1:]))


class Simulation:
    """
    Tick-level orchestrator for one rover journey.

    Each tick while ACTIVE does exactly one of: finish at the goal, react to
    newly detected obstacles by replanning (no movement), or advance one cell.
    TRAPPED and COMPLETE are terminal until restart() or reset().

    The obstacle map, tracker and rover are owned here; the viewer edits them
    only through the setup methods below.
    """

    def __init__(
            self,
            width: int = GRID_WIDTH,
            height: int = GRID_HEIGHT,
            start: Coord = START,
            goal: Coord = GOAL,
            algorithm: str = DEFAULT_ALGORITHM,
            static_obstacles: Iterable[Coord] = (),
            detection_radius: int = DETECTION_RADIUS,
            max_journey_steps: int = MAX_JOURNEY_STEPS,
            speed: int = DEFAULT_SPEED,
            clock: Callable[[], float] = time.perf_counter,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        for name, coord in (("start", start), ("goal", goal)):
            if not self.in_bounds(coord):
                raise ValueError(f"{name} {coord} outside {width}x{height} grid")
        if algorithm not in ALGORITHMS:
            raise ValueError(f"unknown algorithm {algorithm!r}")

        # Defaults restored by reset()
        self._initial_start = start
        self._initial_goal = goal
        self._initial_algorithm = algorithm
        self._initial_static = set(static_obstacles) - {start, goal}

        self.detection_radius = detection_radius
        self.max_journey_steps = max_journey_steps
        self.clock = clock
        self.speed = DEFAULT_SPEED
        self.set_speed(speed)

        self._build()

    def _build(self):
        self.obstacle_map = ObstacleMap(self._initial_static)
        self.tracker = DynamicObstacleTracker(self.detection_radius)
        self.rover = RoverTrajectory(
            self._initial_start,
            self._initial_goal,
            self.width,
            self.height,
            self._initial_algorithm,
        )
        self.state = SimulationState.IDLE
        self.stats = JourneyStats()
        self._resumable = False

    # =========================================================================
    # QUERIES
    # =========================================================================

    def in_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    @property
    def trapped(self) -> bool:
        return self.state is SimulationState.TRAPPED

    @property
    def is_active(self) -> bool:
        return self.state is SimulationState.ACTIVE

    @property
    def tick_interval_ms(self) -> int:
        """Delay between ticks; higher speed means shorter interval."""
        return TICK_BASE_MS - TICK_STEP_MS * self.speed

    def _is_protected(self, coord: Coord) -> bool:
        rover = self.rover
        return coord in (rover.start_position, rover.goal_position, rover.current_position)

    def stats_summary(self) -> dict:
        """Raw journey stats plus the derived timing and efficiency figures."""
        now = self.clock()
        summary = asdict(self.stats)
        summary["duration"] = self.stats.duration(now)
        summary["nodes_per_second"] = self.stats.nodes_per_second(now)
        summary["path_efficiency"] = self.stats.path_efficiency()
        return summary

    def snapshot(self) -> dict:
        snap = self.rover.snapshot()
        snap.update(
            {
                "static_obstacles": set(self.obstacle_map.static),
                "converted_obstacles": set(self.obstacle_map.converted),
                "undiscovered_obstacles": self.tracker.undiscovered,
                "state": self.state.value,
                "trapped": self.trapped,
                "speed": self.speed,
                "stats": self.stats_summary(),
            }
        )
        return snap

    # =========================================================================
    # SETUP EDITS
    # =========================================================================

    def toggle_static_obstacle(self, coord: Coord) -> bool:
        """Flip a static obstacle. Only allowed while no journey is running."""
        if self.is_active or not self.in_bounds(coord):
            return False
        if self._is_protected(coord) or coord in self.tracker:
            return False

        self.obstacle_map.toggle_static(coord)
        self.rover.clear_plan()
        return True

    def toggle_dynamic_obstacle(self, coord: Coord) -> bool:
        """Place or remove an undiscovered obstacle, mid-journey included."""
        if self.state in (SimulationState.TRAPPED, SimulationState.COMPLETE):
            return False
        if not self.in_bounds(coord) or self._is_protected(coord):
            return False
        return self.tracker.toggle(coord, self.obstacle_map)

    def scatter_static_obstacles(
            self, count: int = SCATTER_COUNT, rng: Optional[np.random.Generator] = None
    ) -> bool:
        """Replace the static obstacles with a random layout."""
        if self.is_active:
            return False

        protected = {
            self.rover.start_position,
            self.rover.goal_position,
            self.rover.current_position,
        }
        protected |= set(self.tracker.undiscovered) | self.tracker.converted
        self.obstacle_map.set_static(
            scatter_obstacles(self.width, self.height, count, rng=rng, protected=protected)
        )
        self.rover.clear_plan()
        return True

    def _can_place_endpoint(self, coord: Coord) -> bool:
        return (
            not self.is_active
            and self.in_bounds(coord)
            and not self.obstacle_map.is_occupied(coord)
            and coord not in self.tracker
        )

    def set_start(self, coord: Coord) -> bool:
        if not self._can_place_endpoint(coord) or coord == self.rover.goal_position:
            return False
        self.rover.reset_to_start(coord)
        self._resumable = False
        return True

    def set_goal(self, coord: Coord) -> bool:
        if not self._can_place_endpoint(coord):
            return False
        self.rover.set_goal(coord)
        return True

    def set_algorithm(self, algorithm: str) -> bool:
        if self.is_active or algorithm not in ALGORITHMS:
            return False
        self.rover.set_algorithm(algorithm)
        logger.info(f"Algorithm changed to {algorithm}")
        return True

    def set_speed(self, speed: int):
        self.speed = max(MIN_SPEED, min(MAX_SPEED, int(speed)))

    # =========================================================================
    # JOURNEY CONTROL
    # =========================================================================

    def compute_path(self) -> bool:
        """Plan from the rover's position using the known obstacles."""
        if self.state is not SimulationState.IDLE:
            return False
        return self.rover.compute_path_from_som(self.obstacle_map.obstacle_union())

    def start_journey(self) -> bool:
        if self.state is not SimulationState.IDLE:
            return False

        rover = self.rover
        if not rover.planned_path:
            logger.warning("Cannot start - no planned path computed")
            return False

        if rover.planned_path[0] != rover.current_position:
            logger.warning(
                f"Fixing planned path start: {rover.planned_path[0]} -> {rover.current_position}"
            )
            rover.planned_path[0] = rover.current_position

        if not self._resumable:
            self.stats = JourneyStats(
                nodes_visited=1,
                start_time=self.clock(),
                planned_distance=path_length(rover.planned_path),
            )

        rover.is_journey_active = True
        self.state = SimulationState.ACTIVE
        logger.info(
            f"Journey started at {rover.current_position} with {len(rover.planned_path)} planned cells"
        )
        return True

    def pause(self) -> bool:
        if not self.is_active:
            return False
        self.state = SimulationState.IDLE
        self.rover.is_journey_active = False
        self._resumable = True
        logger.info(f"Journey paused at {self.rover.current_position}")
        return True

    def restart(self):
        """Send the rover back to its start; static obstacles are kept."""
        self.rover.reset_to_start(self.rover.start_position)
        self.tracker.clear_all()
        self.obstacle_map.clear_converted()
        self.state = SimulationState.IDLE
        self.stats = JourneyStats()
        self._resumable = False

    def reset(self):
        """Rebuild everything from the initial configuration."""
        self._build()

    def _finish(self, state: SimulationState):
        self.state = state
        self.rover.is_journey_active = False
        self._resumable = False
        self.stats.end_time = self.clock()

    # =========================================================================
    # TICK
    # =========================================================================

    def tick(self) -> SimulationState:
        """Run one simulation cycle."""
        if not self.is_active:
            return self.state

        rover = self.rover
        self.stats.ticks += 1

        if self.stats.nodes_visited > self.max_journey_steps:
            logger.warning("Safety stop - too many steps")
            self.pause()
            # Next start counts steps from zero again
            self._resumable = False
            return self.state

        # 1. Arrived?
        if rover.has_reached_goal():
            logger.info(
                f"Goal reached in {self.stats.ticks} ticks, {self.stats.reroute_count} reroutes"
            )
            self._finish(SimulationState.COMPLETE)
            return self.state

        # 2. Detection takes precedence over movement
        newly_converted = self.tracker.check_proximity_and_convert(rover.current_position)
        if newly_converted:
            for coord in newly_converted:
                self.obstacle_map.add_converted(coord)
            self.stats.obstacles_detected += len(newly_converted)

            logger.info(
                f"{len(newly_converted)} obstacles detected at {rover.current_position}, replanning"
            )
            replanned = rover.compute_path_from_som(self.obstacle_map.obstacle_union())
            if not replanned or len(rover.planned_path) < 2:
                logger.warning(f"No valid path - rover trapped at {rover.current_position}")
                self._finish(SimulationState.TRAPPED)
                return self.state

            self.stats.reroute_count += 1
            return self.state

        # 3. Movement
        if len(rover.planned_path) < 2:
            logger.warning(f"Path too short for movement: {len(rover.planned_path)}")
            self._finish(SimulationState.TRAPPED)
            return self.state

        old_position = rover.current_position
        moved = rover.execute_movement_step()
        if not moved or rover.current_position == old_position:
            logger.warning(f"Movement failed - rover trapped at {old_position}")
            self._finish(SimulationState.TRAPPED)
            return self.state

        self.stats.nodes_visited += 1
        self.stats.total_distance += euclidean(old_position, rover.current_position)
        logger.debug(
            f"Moved {old_position} -> {rover.current_position}, "
            f"{len(rover.planned_path)} planned cells left"
        )
        return self.state

    def run(self, max_ticks: int = 10000) -> SimulationState:
        """Tick until the journey stops or max_ticks elapse (headless driver)."""
        for _ in range(max_ticks):
            if not self.is_active:
                break
            self.tick()
        return self.state
