"""Spawn point generators called once per episode."""

from typing import Callable

from .grid import Grid
from .types import Position
from ..utils.rng import SeededRNG

SpawnGenerator = Callable[[], Position]


def static_spawn(position: Position) -> SpawnGenerator:
    """Always spawn on the same cell."""
    def generate() -> Position:
        return position
    return generate


def random_spawn(grid: Grid, rng: SeededRNG) -> SpawnGenerator:
    """Spawn on a uniformly random cell of the grid."""
    def generate() -> Position:
        return Position(rng.randrange(grid.width), rng.randrange(grid.height))
    return generate
