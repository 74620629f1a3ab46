import numpy as np

from a_star import AStar
from d_star_lite import DStarLite
from pathfinder import build_grid

# 7x5 serpentine corridor: the only route from (0, 0) to (6, 4) snakes
# right along y=0, left along y=2 and right along y=4
SERPENTINE_WALLS = [(x, 1) for x in range(6)] + [(x, 3) for x in range(1, 7)]
SERPENTINE_START = (0, 0)
SERPENTINE_GOAL = (6, 4)


def fresh_path(walls, start, goal, width=7, height=5):
    return DStarLite(build_grid(width, height, walls)).compute_path(start, goal)


def test_first_call_matches_a_star_length():
    grid = build_grid(12, 12, [(6, y) for y in range(11)])
    path = DStarLite(grid).compute_path((0, 0), (11, 0))
    assert path[0] == (0, 0) and path[-1] == (11, 0)
    assert len(path) == len(AStar(grid).compute_path((0, 0), (11, 0)))


def test_incremental_updates_match_full_rebuild():
    planner = DStarLite(build_grid(7, 5, []))
    assert planner.compute_path(SERPENTINE_START, SERPENTINE_GOAL) is not None

    for wall in SERPENTINE_WALLS:
        planner.update_obstacle(wall, True)

    incremental = planner.compute_path(SERPENTINE_START, SERPENTINE_GOAL)
    assert incremental == fresh_path(SERPENTINE_WALLS, SERPENTINE_START, SERPENTINE_GOAL)
    assert len(incremental) == 23


def test_moving_start_matches_full_rebuild():
    planner = DStarLite(build_grid(7, 5, SERPENTINE_WALLS))
    path = planner.compute_path(SERPENTINE_START, SERPENTINE_GOAL)

    for step in range(1, 8):
        start = path[step]
        replanned = planner.compute_path(start, SERPENTINE_GOAL)
        assert replanned == fresh_path(SERPENTINE_WALLS, start, SERPENTINE_GOAL)
        assert replanned == path[step:]


def test_km_accumulates_when_start_moves():
    planner = DStarLite(build_grid(5, 5, []))
    planner.compute_path((0, 0), (4, 4))
    assert planner.km == 0.0

    planner.compute_path((0, 1), (4, 4))
    planner.compute_path((1, 1), (4, 4))
    assert planner.km == 2.0


def test_unblocking_restores_path():
    blocked_gap = SERPENTINE_WALLS + [(6, 1)]
    planner = DStarLite(build_grid(7, 5, blocked_gap))
    assert planner.compute_path(SERPENTINE_START, SERPENTINE_GOAL) is None

    planner.update_obstacle((6, 1), False)
    assert planner.compute_path(SERPENTINE_START, SERPENTINE_GOAL) == fresh_path(
        SERPENTINE_WALLS, SERPENTINE_START, SERPENTINE_GOAL
    )


def test_update_before_first_call():
    planner = DStarLite(build_grid(7, 5, []))
    for wall in SERPENTINE_WALLS:
        planner.update_obstacle(wall, True)
    assert planner.compute_path(SERPENTINE_START, SERPENTINE_GOAL) == fresh_path(
        SERPENTINE_WALLS, SERPENTINE_START, SERPENTINE_GOAL
    )


def test_goal_change_reinitializes():
    planner = DStarLite(build_grid(6, 6, []))
    planner.compute_path((0, 0), (5, 5))
    planner.compute_path((0, 1), (5, 5))
    path = planner.compute_path((0, 1), (0, 5))
    assert planner.km == 0.0
    assert path == [(0, y) for y in range(1, 6)]


def test_random_updates_match_full_rebuild():
    rng = np.random.default_rng(7)
    width = height = 15
    start, goal = (0, 0), (14, 14)

    blocked = {
        (int(x), int(y))
        for x, y in rng.integers(0, 15, size=(50, 2))
    } - {start, goal}
    planner = DStarLite(build_grid(width, height, blocked))
    current = start

    for _ in range(15):
        cell = (int(rng.integers(0, 15)), int(rng.integers(0, 15)))
        if cell in (current, goal):
            continue
        if cell in blocked:
            blocked.discard(cell)
            planner.update_obstacle(cell, False)
        else:
            blocked.add(cell)
            planner.update_obstacle(cell, True)

        grid = build_grid(width, height, blocked)
        expected = AStar(grid).compute_path(current, goal)
        incremental = planner.compute_path(current, goal)
        rebuilt = DStarLite(grid).compute_path(current, goal)

        if expected is None:
            assert incremental is None
            assert rebuilt is None
            continue

        assert incremental == rebuilt
        assert len(incremental) == len(expected)
        assert incremental[0] == current and incremental[-1] == goal
        for a, b in zip(incremental, incremental[1:]):
            assert abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1
            assert b not in blocked

        # Advance one cell, the way the rover would
        if len(incremental) > 1:
            current = incremental[1]
