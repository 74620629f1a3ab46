# Scout Pathfinder: interactive viewer
# Rover path planning with A*, D*-Lite and Field D* and dynamic obstacles
#
# Controls:
#   Left click   toggle static obstacle (idle) / dynamic obstacle (journey)
#   Left drag    move the start or goal marker (idle)
#   SPACE        compute path          S  start / resume journey
#   P            pause                 R  restart from start
#   N            reset everything      O  scatter random static obstacles
#   1 / 2 / 3    A* / D*-Lite / Field D*
#   UP / DOWN    speed

import sys

import numpy as np
import pygame
from loguru import logger

from config import ALGORITHMS, CELL_SIZE, FPS, GRID_HEIGHT, GRID_WIDTH, SCATTER_COUNT
from render import World
from simulation import Simulation

ALGORITHM_KEYS = {
    pygame.K_1: ALGORITHMS[0],
    pygame.K_2: ALGORITHMS[1],
    pygame.K_3: ALGORITHMS[2],
}


def handle_key(sim, key, rng):
    if key == pygame.K_SPACE:
        if sim.compute_path():
            print(f"Path has {len(sim.rover.planned_path)} cells")
        else:
            print("No path found!")
    elif key == pygame.K_s:
        sim.start_journey()
    elif key == pygame.K_p:
        sim.pause()
    elif key == pygame.K_r:
        sim.restart()
    elif key == pygame.K_n:
        sim.reset()
    elif key == pygame.K_o:
        sim.scatter_static_obstacles(SCATTER_COUNT, rng=rng)
    elif key in ALGORITHM_KEYS:
        sim.set_algorithm(ALGORITHM_KEYS[key])
    elif key == pygame.K_UP:
        sim.set_speed(sim.speed + 1)
    elif key == pygame.K_DOWN:
        sim.set_speed(sim.speed - 1)


def handle_click(sim, cell):
    """
    Left button pressed on a cell. Returns the drag mode for the following
    mouse motion: "start" or "goal" when grabbing a marker, else None.
    """
    if not sim.is_active:
        if cell == sim.rover.start_position:
            return "start"
        if cell == sim.rover.goal_position:
            return "goal"

    if sim.is_active:
        sim.toggle_dynamic_obstacle(cell)
    else:
        sim.toggle_static_obstacle(cell)
    return None


def handle_drag(sim, mode, cell):
    """Move the grabbed marker; refused cells leave it where it was."""
    if mode == "start":
        if cell != sim.rover.start_position:
            sim.set_start(cell)
    elif mode == "goal":
        if cell != sim.rover.goal_position:
            sim.set_goal(cell)


def main():
    logger.remove()
    logger.add(sys.stderr, level="INFO")

    rng = np.random.default_rng()
    pygame.init()
    pygame.display.set_caption("Scout Pathfinder")
    world = World(GRID_WIDTH, GRID_HEIGHT, CELL_SIZE)
    sim = Simulation(GRID_WIDTH, GRID_HEIGHT)

    print("\n=== Current Parameters ===")
    print(f"Grid: {GRID_WIDTH}x{GRID_HEIGHT}")
    print(f"Start: {sim.rover.start_position}  Goal: {sim.rover.goal_position}")
    print(f"Algorithm: {sim.rover.algorithm}  Speed: {sim.speed}")
    print(f"Detection radius: {sim.detection_radius}")
    print("==========================\n")

    # Milliseconds accumulated toward the next tick
    tick_timer = 0

    # Marker being dragged with the left button held: "start", "goal" or None
    drag_mode = None

    running = True
    while running:
        dt_ms = world.clock.tick(FPS)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    running = False
                else:
                    handle_key(sim, e.key, rng)
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                cell = world.screen_to_cell(*e.pos)
                if cell is not None:
                    drag_mode = handle_click(sim, cell)
            elif e.type == pygame.MOUSEMOTION and drag_mode is not None:
                cell = world.screen_to_cell(*e.pos)
                if cell is not None:
                    handle_drag(sim, drag_mode, cell)
            elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
                drag_mode = None

        # One simulation cycle per tick interval, never more than one per frame
        if sim.is_active:
            tick_timer += dt_ms
            if tick_timer >= sim.tick_interval_ms:
                tick_timer = 0
                sim.tick()
        else:
            tick_timer = 0

        snap = sim.snapshot()
        world.clear()
        world.render_grid()
        world.render_snapshot(snap)
        world.render_hud(snap)
        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    main()
