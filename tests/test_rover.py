import pytest

import rover as rover_module
from rover import RoverTrajectory, greedy_path, straight_line_path


class NoPathPlanner:
    def compute_path(self, start, goal):
        return None

    def update_obstacle(self, coord, is_blocked):
        pass


class WrongStartPlanner(NoPathPlanner):
    def compute_path(self, start, goal):
        return [(4, 4), goal]


@pytest.fixture
def rover():
    return RoverTrajectory((0, 0), (9, 9), width=10, height=10, algorithm="A*")


def test_compute_path_from_som(rover):
    assert rover.compute_path_from_som(set()) is True
    assert rover.planned_path[0] == (0, 0)
    assert rover.planned_path[-1] == (9, 9)
    assert len(rover.planned_path) == 19
    assert rover.plan_source == "planner"
    assert rover.traveled_path == [(0, 0)]


def test_blocked_goal_fails_without_fallback(rover, monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("fallback should not run")

    monkeypatch.setattr(rover_module, "straight_line_path", boom)
    monkeypatch.setattr(rover_module, "greedy_path", boom)

    rover.planned_path = [(0, 0), (0, 1)]
    assert rover.compute_path_from_som({(9, 9)}) is False
    assert rover.planned_path == []
    assert rover.pathfinder is None


def test_straight_line_fallback_when_planner_fails():
    # 4-connected search is boxed in, the diagonal is open
    rover = RoverTrajectory((0, 0), (2, 2), width=5, height=5)
    assert rover.compute_path_from_som({(1, 0), (0, 1)}) is True
    assert rover.plan_source == "straight"
    assert rover.planned_path == [(0, 0), (1, 1), (2, 2)]


def test_greedy_fallback_after_straight_line(monkeypatch):
    monkeypatch.setattr(rover_module, "make_pathfinder", lambda name, grid: NoPathPlanner())
    rover = RoverTrajectory((0, 0), (2, 2), width=5, height=5)

    assert rover.compute_path_from_som({(1, 1)}) is True
    assert rover.plan_source == "greedy"
    assert rover.planned_path == [(0, 0), (0, 1), (0, 2), (1, 2), (2, 2)]


def test_path_not_starting_at_rover_is_rejected(monkeypatch):
    monkeypatch.setattr(rover_module, "make_pathfinder", lambda name, grid: WrongStartPlanner())
    rover = RoverTrajectory((0, 0), (2, 2), width=5, height=5)

    assert rover.compute_path_from_som(set()) is True
    assert rover.plan_source == "straight"
    assert rover.planned_path[0] == (0, 0)


def test_all_methods_fail():
    rover = RoverTrajectory((0, 0), (4, 4), width=5, height=5)
    wall = {(2, y) for y in range(5)}
    assert rover.compute_path_from_som(wall) is False
    assert rover.planned_path == []


def test_fallback_steppers_are_bounded():
    assert straight_line_path((0, 0), (50, 0), set(), 100, 1, max_steps=10) == []
    assert greedy_path((0, 0), (50, 0), set(), 100, 1, max_steps=10) == []
    assert greedy_path((0, 0), (3, 0), set(), 4, 1) == [(0, 0), (1, 0), (2, 0), (3, 0)]


def test_planner_is_reused_while_only_obstacles_change():
    rover = RoverTrajectory((0, 0), (9, 0), width=10, height=3, algorithm="D*-Lite")
    assert rover.compute_path_from_som(set())
    planner = rover.pathfinder

    assert rover.compute_path_from_som({(5, 0)})
    assert rover.pathfinder is planner
    assert (5, 0) not in rover.planned_path

    assert rover.compute_path_from_som(set())
    assert rover.planned_path == [(x, 0) for x in range(10)]

    rover.set_algorithm("Field D*")
    assert rover.pathfinder is None


def test_execute_movement_step(rover):
    rover.planned_path = [(0, 0), (0, 1), (0, 2)]
    assert rover.execute_movement_step() is True
    assert rover.current_position == (0, 1)
    assert rover.traveled_path == [(0, 0), (0, 1)]
    assert rover.planned_path == [(0, 1), (0, 2)]


def test_movement_requires_two_cells(rover):
    rover.planned_path = [(0, 0)]
    assert rover.execute_movement_step() is False
    assert rover.traveled_path == [(0, 0)]


def test_movement_repairs_desync(rover):
    rover.planned_path = [(3, 3), (1, 0), (2, 0)]
    assert rover.execute_movement_step() is True
    assert rover.current_position == (1, 0)
    assert rover.planned_path == [(1, 0), (2, 0)]


def test_movement_rejects_non_adjacent_step(rover):
    rover.planned_path = [(0, 0), (2, 0)]
    assert rover.execute_movement_step() is False
    assert rover.current_position == (0, 0)
    assert rover.traveled_path == [(0, 0)]


def test_mutators_clear_plan(rover):
    rover.compute_path_from_som(set())
    rover.set_algorithm("D*-Lite")
    assert rover.planned_path == []

    rover.compute_path_from_som(set())
    rover.set_goal((5, 5))
    assert rover.planned_path == []

    rover.compute_path_from_som(set())
    rover.execute_movement_step()
    rover.reset_to_start((1, 1))
    assert rover.planned_path == []
    assert rover.traveled_path == [(1, 1)]
    assert rover.current_position == (1, 1)
    assert rover.start_position == (1, 1)


def test_has_reached_goal_and_snapshot():
    rover = RoverTrajectory((0, 0), (1, 0), width=3, height=3)
    rover.compute_path_from_som(set())
    rover.execute_movement_step()
    assert rover.has_reached_goal()

    snap = rover.snapshot()
    assert snap["position"] == (1, 0)
    assert snap["traveled_path"] == [(0, 0), (1, 0)]
    assert snap["planned_path"] == [(1, 0)]
    assert snap["algorithm"] == "A*"
