"""Finite State Machine for training run execution states."""

from enum import Enum, auto
from typing import Dict, Callable, Optional


class TrainingState(Enum):
    """States of the training controller."""
    IDLE = auto()
    TRAINING = auto()
    STOPPING = auto()
    ERROR = auto()


class TrainingStateMachine:
    """State machine guarding against overlapping training runs."""

    def __init__(self):
        self.current_state = TrainingState.IDLE
        self._enter_callbacks: Dict[TrainingState, Callable[[Optional[Dict]], None]] = {}

        self._valid_transitions = {
            TrainingState.IDLE: {TrainingState.TRAINING},
            TrainingState.TRAINING: {TrainingState.STOPPING, TrainingState.IDLE, TrainingState.ERROR},
            TrainingState.STOPPING: {TrainingState.IDLE, TrainingState.ERROR},
            TrainingState.ERROR: {TrainingState.IDLE},
        }

    def on_state_enter(self, state: TrainingState, callback: Callable[[Optional[Dict]], None]):
        """Register callback for state entry."""
        self._enter_callbacks[state] = callback

    def can_transition(self, to_state: TrainingState) -> bool:
        """Check if transition to target state is valid."""
        return to_state in self._valid_transitions.get(self.current_state, set())

    def transition(self, to_state: TrainingState, context: Optional[Dict] = None) -> bool:
        """Attempt to transition to target state."""
        if not self.can_transition(to_state):
            return False

        self.current_state = to_state

        if to_state in self._enter_callbacks:
            self._enter_callbacks[to_state](context)

        return True

    # Convenience methods for common transitions

    def start_training(self, context: Optional[Dict] = None) -> bool:
        return self.transition(TrainingState.TRAINING, context)

    def request_stop(self, context: Optional[Dict] = None) -> bool:
        return self.transition(TrainingState.STOPPING, context)

    def reset_to_idle(self, context: Optional[Dict] = None) -> bool:
        return self.transition(TrainingState.IDLE, context)

    def fail_error(self, context: Optional[Dict] = None) -> bool:
        return self.transition(TrainingState.ERROR, context)

    # State checking methods

    def is_idle(self) -> bool:
        return self.current_state == TrainingState.IDLE

    def is_training(self) -> bool:
        return self.current_state == TrainingState.TRAINING

    def is_active(self) -> bool:
        """Check if a run is in flight (including one winding down)."""
        return self.current_state in {TrainingState.TRAINING, TrainingState.STOPPING}

    def can_start(self) -> bool:
        return self.current_state == TrainingState.IDLE

    def get_state_description(self) -> str:
        """Get human-readable state description."""
        descriptions = {
            TrainingState.IDLE: "Ready - Click Start to begin training",
            TrainingState.TRAINING: "Training agent with Q-Learning",
            TrainingState.STOPPING: "Stopping after the current decision",
            TrainingState.ERROR: "Error occurred during training",
        }
        return descriptions.get(self.current_state, "Unknown state")
