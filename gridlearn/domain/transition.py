"""Movement and reward rules of the grid world."""

from .grid import Grid
from .types import Action, ACTION_DELTAS, Position


class TransitionModel:
    """Applies actions to positions and scores the resulting cell."""

    def __init__(self, grid: Grid, reward_goal: float = 100.0,
                 distance_penalty_scale: float = 10.0):
        self.grid = grid
        self.reward_goal = reward_goal
        self.distance_penalty_scale = distance_penalty_scale

    def apply(self, position: Position, action: Action) -> Position:
        """
        Move one cell in the action's direction, clamped to the grid.

        Moving into a boundary leaves that axis unchanged.
        """
        dx, dy = ACTION_DELTAS[action]
        x = min(max(position.x + dx, 0), self.grid.width - 1)
        y = min(max(position.y + dy, 0), self.grid.height - 1)
        return Position(x, y)

    def reward(self, position: Position) -> float:
        """
        Reward for arriving at position.

        The goal pays reward_goal; any other cell costs its Manhattan
        distance to the goal divided by distance_penalty_scale.
        """
        if self.grid.is_goal(position):
            return self.reward_goal
        return -self.grid.distance_manhattan(position) / self.distance_penalty_scale
