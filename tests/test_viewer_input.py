import pygame

from main import handle_click, handle_drag, handle_key
from simulation import Simulation, SimulationState


def make_sim():
    return Simulation(width=10, height=10, start=(0, 0), goal=(9, 9))


def test_click_on_markers_starts_a_drag():
    sim = make_sim()
    assert handle_click(sim, (0, 0)) == "start"
    assert handle_click(sim, (9, 9)) == "goal"
    assert sim.obstacle_map.static == set()


def test_click_elsewhere_toggles_obstacles():
    sim = make_sim()
    assert handle_click(sim, (4, 4)) is None
    assert sim.obstacle_map.static == {(4, 4)}

    sim.compute_path()
    sim.start_journey()
    assert handle_click(sim, (6, 6)) is None
    assert (6, 6) in sim.tracker
    assert (6, 6) not in sim.obstacle_map.static


def test_dragging_moves_start_and_goal():
    sim = make_sim()
    sim.toggle_static_obstacle((3, 3))

    handle_drag(sim, "start", (1, 2))
    assert sim.rover.start_position == (1, 2)
    assert sim.rover.current_position == (1, 2)

    handle_drag(sim, "goal", (3, 3))
    assert sim.rover.goal_position == (9, 9)
    handle_drag(sim, "goal", (7, 8))
    assert sim.rover.goal_position == (7, 8)

    assert sim.compute_path()
    assert sim.rover.planned_path[0] == (1, 2)
    assert sim.rover.planned_path[-1] == (7, 8)


def test_markers_cannot_be_grabbed_mid_journey():
    sim = make_sim()
    handle_key(sim, pygame.K_SPACE, None)
    handle_key(sim, pygame.K_s, None)
    assert sim.state is SimulationState.ACTIVE

    assert handle_click(sim, (9, 9)) is None
    handle_drag(sim, "goal", (5, 5))
    assert sim.rover.goal_position == (9, 9)


def test_keys_drive_the_simulation():
    sim = make_sim()
    handle_key(sim, pygame.K_3, None)
    assert sim.rover.algorithm == "Field D*"

    handle_key(sim, pygame.K_UP, None)
    assert sim.speed == 6

    handle_key(sim, pygame.K_SPACE, None)
    handle_key(sim, pygame.K_s, None)
    handle_key(sim, pygame.K_p, None)
    assert sim.state is SimulationState.IDLE
    assert sim.rover.planned_path
