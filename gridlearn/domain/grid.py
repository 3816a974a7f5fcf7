"""Grid geometry for the Q-Learning world."""

import math
from dataclasses import dataclass
from typing import Iterator

from .types import Position, ConfigurationError


def manhattan_distance(start: Position, target: Position) -> int:
    """Manhattan (L1) distance between two cells."""
    return abs(start.x - target.x) + abs(start.y - target.y)


def euclidean_distance(start: Position, target: Position, squared: bool = False) -> float:
    """
    Euclidean (L2) distance between two cells.
    With squared=True the square root is skipped, which keeps ordering.
    """
    dx = start.x - target.x
    dy = start.y - target.y
    d2 = dx * dx + dy * dy
    return float(d2) if squared else math.sqrt(d2)


@dataclass(frozen=True)
class Grid:
    """Bounded world with a fixed goal cell."""
    width: int
    height: int
    goal: Position

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        if not self.contains(self.goal):
            raise ConfigurationError(f"Goal {self.goal} lies outside a {self.width}x{self.height} grid")

    def contains(self, position: Position) -> bool:
        """Check if a position is within grid bounds."""
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def is_goal(self, position: Position) -> bool:
        return position == self.goal

    def distance_manhattan(self, position: Position) -> int:
        """Manhattan distance from position to the goal."""
        return manhattan_distance(position, self.goal)

    def distance_euclidean(self, position: Position, squared: bool = False) -> float:
        """Euclidean distance from position to the goal."""
        return euclidean_distance(position, self.goal, squared)

    def positions(self) -> Iterator[Position]:
        """Iterate over all cells row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)
