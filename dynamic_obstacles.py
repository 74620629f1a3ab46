# Dynamic Obstacle Tracker: tracks undiscovered obstacles
# Scout Pathfinder

import numpy as np
from loguru import logger

from config import DETECTION_RADIUS
from obstacles import ObstacleMap
from pathfinder import Coord


class DynamicObstacleTracker:
    """
    Tracks obstacles the rover has not discovered yet.
    Separates "ground truth" from "rover's knowledge": undiscovered obstacles
    are invisible to the planners until the rover comes within range.
    """

    def __init__(self, detection_radius: int = DETECTION_RADIUS):
        self.detection_radius = detection_radius

        # Placement order is kept so conversions are reported deterministically
        self._undiscovered: list[Coord] = []

        # Obstacles already pushed into the obstacle map
        self._converted: set[Coord] = set()

    @property
    def undiscovered(self) -> list[Coord]:
        return list(self._undiscovered)

    @property
    def converted(self) -> set[Coord]:
        return set(self._converted)

    def __contains__(self, coord: Coord) -> bool:
        return coord in self._undiscovered or coord in self._converted

    def __len__(self) -> int:
        return len(self._undiscovered)

    def check_proximity_and_convert(self, rover_position: Coord) -> list[Coord]:
        """
        Convert every undiscovered obstacle within detection range.
        Returns the newly converted coordinates.
        """
        if not self._undiscovered:
            return []

        cells = np.array(self._undiscovered)
        chebyshev = np.abs(cells - np.array(rover_position)).max(axis=1)
        in_range = chebyshev <= self.detection_radius

        newly_converted = []
        remaining = []
        for coord, detected in zip(self._undiscovered, in_range):
            if detected:
                self._converted.add(coord)
                newly_converted.append(coord)
                logger.info(f"Tracker: detected obstacle at {coord}")
            else:
                remaining.append(coord)

        self._undiscovered = remaining
        return newly_converted

    def toggle(self, coord: Coord, obstacle_map: ObstacleMap) -> bool:
        """
        Add or remove an undiscovered obstacle.
        Returns False (no-op) if the cell is already blocked on the map.
        """
        if obstacle_map.is_occupied(coord) or coord in self._converted:
            return False

        if coord in self._undiscovered:
            self._undiscovered.remove(coord)
            logger.debug(f"Tracker: removed undiscovered obstacle {coord}")
        else:
            self._undiscovered.append(coord)
            logger.debug(f"Tracker: added undiscovered obstacle {coord}")
        return True

    def add(self, coord: Coord, obstacle_map: ObstacleMap) -> bool:
        if obstacle_map.is_occupied(coord) or coord in self:
            return False
        self._undiscovered.append(coord)
        return True

    def clear_all(self):
        self._undiscovered.clear()
        self._converted.clear()
