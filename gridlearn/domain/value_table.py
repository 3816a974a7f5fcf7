"""Sparse Q-value table keyed by (state, action)."""

from typing import Dict, Iterable

import numpy as np

from .types import Action, ACTIONS, StateKey


class ValueTable:
    """
    Maps (state key, action) to a Q-value estimate.

    Each seen state owns one numpy row with a slot per action, in
    enumeration order. Unseen states read as 0.0 and are only materialized
    on write, so an absent entry and a zero entry are indistinguishable.
    """

    def __init__(self):
        self._rows: Dict[StateKey, np.ndarray] = {}

    def get(self, state: StateKey, action: Action) -> float:
        """Get Q-value for state-action pair."""
        row = self._rows.get(state)
        if row is None:
            return 0.0
        return float(row[action.index])

    def set(self, state: StateKey, action: Action, value: float) -> None:
        """Set Q-value for state-action pair."""
        row = self._rows.get(state)
        if row is None:
            row = np.zeros(len(ACTIONS))
            self._rows[state] = row
        row[action.index] = value

    def values(self, state: StateKey) -> np.ndarray:
        """Return a copy of the Q-values for a state in action order."""
        row = self._rows.get(state)
        if row is None:
            return np.zeros(len(ACTIONS))
        return row.copy()

    def max_value(self, state: StateKey) -> float:
        """Get the maximum Q-value over all actions."""
        row = self._rows.get(state)
        if row is None:
            return 0.0
        return float(row.max())

    def best_action(self, state: StateKey, actions: Iterable[Action] = ACTIONS) -> Action:
        """Get the highest valued action; ties go to the earliest action."""
        candidates = list(actions)
        scores = [self.get(state, action) for action in candidates]
        # np.argmax returns the first index among equal maxima
        return candidates[int(np.argmax(scores))]

    def clear(self) -> None:
        """Forget every learned estimate."""
        self._rows.clear()

    def best_values(self) -> Dict[StateKey, float]:
        """
        Highest Q-value of every written state, as a detached dict.

        Safe to call from the GUI thread while a worker is training: the
        rows are copied in one pass so later writes do not show up here.
        """
        return {state: float(row.max()) for state, row in list(self._rows.items())}

    def snapshot(self) -> Dict[StateKey, Dict[str, float]]:
        """Plain dict copy of the table."""
        return {
            state: {action.name: float(row[action.index]) for action in ACTIONS}
            for state, row in self._rows.items()
        }

    def __contains__(self, state: StateKey) -> bool:
        return state in self._rows

    def __len__(self) -> int:
        return len(self._rows)
