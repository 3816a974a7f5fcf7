"""Epsilon-greedy action selection over a value table."""

from typing import Sequence

from .types import Action, ACTIONS, StateKey
from .value_table import ValueTable
from ..utils.rng import SeededRNG


class EpsilonGreedyPolicy:
    """
    Explores uniformly with probability exploration_rate, otherwise exploits.

    exploration_rate is not range-checked here; RLConfig.validate() rejects
    out-of-range values before a training run starts.
    """

    def __init__(self, table: ValueTable, rng: SeededRNG,
                 actions: Sequence[Action] = ACTIONS):
        self.table = table
        self.rng = rng
        self.actions = tuple(actions)

    def choose(self, state: StateKey, exploration_rate: float) -> Action:
        """Select an action for the given state."""
        if self.rng.random() < exploration_rate:
            return self.rng.choice(self.actions)
        return self.table.best_action(state, self.actions)
