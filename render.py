# Rendering: grid, obstacles, paths and HUD
# Scout Pathfinder

import pygame

CELL_BG_COLOR = (255, 255, 255)
CELL_GRID_COLOR = (200, 200, 200)
LEGEND_LABEL_TEXT_COLOR = (100, 100, 100)
HUD_BG_COLOR = (30, 30, 30)
HUD_TEXT_COLOR = (255, 255, 255)
STATIC_OBSTACLE_COLOR = (90, 90, 90)
CONVERTED_OBSTACLE_COLOR = (60, 110, 220)
UNDISCOVERED_OBSTACLE_COLOR = (245, 190, 40)
TRAVELED_PATH_COLOR = (150, 150, 150)
PLANNED_PATH_COLOR = (102, 178, 255)
START_COLOR = (102, 0, 204)
GOAL_COLOR = (0, 200, 0)
ROVER_COLOR = (255, 128, 0)
TRAPPED_COLOR = (220, 0, 0)
INSET = 2


class World:
    def __init__(self, width, height, cell_size):
        self.cols, self.rows = width, height
        self.field_width, self.field_height = width * cell_size, height * cell_size
        self.cell_size = cell_size
        self.hud_height = 2 * cell_size
        self.margin = cell_size

        self.window_width = self.field_width + 2 * self.margin
        self.window_height = self.field_height + 2 * self.margin + self.hud_height

        self.field_rect = pygame.Rect(
            self.margin, self.margin, self.field_width, self.field_height
        )

        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        self.clock = pygame.time.Clock()

        self.font = pygame.font.SysFont(None, self.cell_size - 4)
        self.hud_font = pygame.font.SysFont(None, max(12, self.cell_size - 2))
        self.hud_rect = pygame.Rect(
            0, self.field_rect.bottom + self.margin, self.window_width, self.hud_height
        )

    def clear(self):
        self.screen.fill(CELL_BG_COLOR)

    def screen_to_cell(self, px, py):
        """Pixel position to (x, y) cell, or None outside the field."""
        if not self.field_rect.collidepoint(px, py):
            return None
        x = (px - self.field_rect.left) // self.cell_size
        y = (py - self.field_rect.top) // self.cell_size
        return int(x), int(y)

    def cell_rect(self, cell, inset=0):
        x, y = cell
        return pygame.Rect(
            self.field_rect.left + x * self.cell_size + inset,
            self.field_rect.top + y * self.cell_size + inset,
            self.cell_size - 2 * inset,
            self.cell_size - 2 * inset,
        )

    def cell_center(self, cell):
        return self.cell_rect(cell).center

    def render_grid(self):
        field = self.field_rect
        size = self.cell_size

        for col in range(self.cols + 1):
            px = field.left + col * size
            pygame.draw.line(self.screen, CELL_GRID_COLOR, (px, field.top), (px, field.bottom))
        for row in range(self.rows + 1):
            py = field.top + row * size
            pygame.draw.line(self.screen, CELL_GRID_COLOR, (field.left, py), (field.right, py))

        # Axis labels every 5 cells, in the margins
        for col in range(0, self.cols, 5):
            slot = pygame.Rect(field.left + col * size, 0, size, self.margin)
            self._blit_label(str(col), slot)
        for row in range(0, self.rows, 5):
            slot = pygame.Rect(0, field.top + row * size, self.margin, size)
            self._blit_label(str(row), slot)

    def _blit_label(self, text, slot):
        label = self.font.render(text, True, LEGEND_LABEL_TEXT_COLOR)
        self.screen.blit(label, label.get_rect(center=slot.center))

    def render_cells(self, cells, color, inset=0):
        for cell in cells:
            pygame.draw.rect(self.screen, color, self.cell_rect(cell, inset))

    def render_path(self, path, color, width=3):
        if len(path) < 2:
            return
        points = [self.cell_center(cell) for cell in path]
        pygame.draw.lines(self.screen, color, False, points, width)

    def render_snapshot(self, snap):
        """Draw everything a Simulation.snapshot() describes."""
        self.render_cells(snap["static_obstacles"], STATIC_OBSTACLE_COLOR)
        self.render_cells(snap["converted_obstacles"], CONVERTED_OBSTACLE_COLOR)
        self.render_cells(snap["undiscovered_obstacles"], UNDISCOVERED_OBSTACLE_COLOR, INSET)

        self.render_path(snap["traveled_path"], TRAVELED_PATH_COLOR, width=5)
        self.render_path(snap["planned_path"], PLANNED_PATH_COLOR)

        pygame.draw.rect(self.screen, START_COLOR, self.cell_rect(snap["start"], INSET), 2)
        pygame.draw.rect(self.screen, GOAL_COLOR, self.cell_rect(snap["goal"], INSET))

        rover_color = TRAPPED_COLOR if snap["trapped"] else ROVER_COLOR
        pygame.draw.circle(
            self.screen,
            rover_color,
            self.cell_center(snap["position"]),
            self.cell_size // 2 - INSET,
        )

    def render_hud(self, snap):
        pygame.draw.rect(self.screen, HUD_BG_COLOR, self.hud_rect)

        stats = snap["stats"]
        items = [
            f"State: {snap['state']}",
            f"Algorithm: {snap['algorithm']}",
            f"Speed: {snap['speed']}",
            f"Distance: {stats['total_distance']:.1f}",
            f"Nodes: {stats['nodes_visited']}",
            f"Reroutes: {stats['reroute_count']}",
            f"Detected: {stats['obstacles_detected']}",
        ]
        if stats["start_time"] is not None:
            items.append(f"Time: {stats['duration']:.1f}s")
        if stats["end_time"] is not None:
            items.append(f"{stats['nodes_per_second']:.1f} n/s")
            items.append(f"Efficiency: {stats['path_efficiency']:.0f}%")
        if snap["trapped"]:
            items.append("Rover is blocked! Goal cannot be reached.")

        x = 10
        y = self.hud_rect.top + (self.hud_rect.height - self.hud_font.get_height()) // 2
        for s in items:
            color = TRAPPED_COLOR if s.startswith("Rover is blocked") else HUD_TEXT_COLOR
            surf = self.hud_font.render(s, True, color)
            self.screen.blit(surf, (x, y))
            x += surf.get_width() + 20
