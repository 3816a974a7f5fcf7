"""Main application controller connecting UI and learning domain logic."""

import threading
from typing import Optional, List, Tuple

from PySide6.QtCore import QObject, Signal, QThread

from ..domain.grid import Grid
from ..domain.learner import Learner
from ..domain.spawn import SpawnGenerator, static_spawn, random_spawn
from ..domain.trainer import Trainer
from ..domain.types import (
    ConfigurationError, Decision, Episode, Position, RLConfig, TrainingResult, TrainingStats
)
from ..domain.value_table import ValueTable
from ..utils.rng import SeededRNG
from .fsm import TrainingStateMachine, TrainingState

DEFAULT_SPAWN = Position(0, 0)


class TrainingWorker(QObject):
    """Worker object running the training loop off the UI thread."""

    decision_made = Signal(object)  # Decision
    episode_completed = Signal(object)  # Episode
    training_finished = Signal(object)  # TrainingResult
    error_occurred = Signal(str)
    finished = Signal()

    def __init__(self, trainer: Trainer, config: RLConfig, spawn_generator: SpawnGenerator):
        super().__init__()
        self.trainer = trainer
        self.config = config
        self.spawn_generator = spawn_generator
        self.cancel_event = threading.Event()

    def stop(self):
        """Request cancellation at the next suspension point."""
        self.cancel_event.set()

    def run(self):
        """Run the training loop and report the result."""
        # Per-decision updates are only useful when the run is paced
        on_decision = self.decision_made.emit if self.config.decision_interval > 0 else None
        try:
            result = self.trainer.train(
                self.config,
                self.spawn_generator,
                on_episode=self.episode_completed.emit,
                on_decision=on_decision,
                cancel=self.cancel_event,
            )
            self.training_finished.emit(result)
        except ConfigurationError as e:
            self.error_occurred.emit(str(e))
        except Exception as e:
            self.error_occurred.emit(f"Training error: {e}")
        finally:
            self.finished.emit()


class RLController(QObject):
    """
    Controller that manages training runs and connects the UI to the domain.

    Signals:
        state_changed: Emitted when the controller state changes
        decision_made: Emitted after each paced decision
        episode_completed: Emitted with each sealed episode
        training_completed: Emitted with the result of a finished run
        training_cancelled: Emitted with the result of a cancelled run
        grid_updated: Emitted when the view needs to be redrawn
        error_occurred: Emitted when an error occurs
    """

    state_changed = Signal(object)  # TrainingState
    decision_made = Signal(object)  # Decision
    episode_completed = Signal(object)  # Episode
    training_completed = Signal(object)  # TrainingResult
    training_cancelled = Signal(object)  # TrainingResult
    grid_updated = Signal()
    error_occurred = Signal(str)

    def __init__(self, grid: Optional[Grid] = None, seed: Optional[int] = None):
        super().__init__()

        self._grid = grid or Grid(width=11, height=11, goal=Position(5, 5))
        self._config = RLConfig(seed=seed)
        self._rng = SeededRNG(seed)
        self._table = ValueTable()
        self._learner = Learner.from_config(self._grid, self._table, self._config, self._rng)
        self._learner.reset(DEFAULT_SPAWN)
        self._trainer = Trainer(self._learner)
        self._state_machine = TrainingStateMachine()
        self._spawn_mode = "fixed"

        self._training_thread: Optional[QThread] = None
        self._training_worker: Optional[TrainingWorker] = None

        self._setup_state_callbacks()

    def _setup_state_callbacks(self):
        for state in TrainingState:
            self._state_machine.on_state_enter(
                state, lambda context, s=state: self.state_changed.emit(s))

    # Properties

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def table(self) -> ValueTable:
        return self._table

    @property
    def learner(self) -> Learner:
        return self._learner

    @property
    def trainer(self) -> Trainer:
        return self._trainer

    @property
    def config(self) -> RLConfig:
        return self._config

    @property
    def spawn_mode(self) -> str:
        return self._spawn_mode

    @property
    def current_state(self) -> TrainingState:
        return self._state_machine.current_state

    def state_description(self) -> str:
        return self._state_machine.get_state_description()

    # Spawn selection

    def set_spawn_mode(self, mode: str) -> bool:
        """Select "fixed" (top-left corner) or "random" spawn points."""
        if mode not in ("fixed", "random") or self._state_machine.is_active():
            return False
        self._spawn_mode = mode
        return True

    def _spawn_generator(self) -> SpawnGenerator:
        if self._spawn_mode == "random":
            return random_spawn(self._grid, self._rng)
        return static_spawn(DEFAULT_SPAWN)

    # Training control

    def can_start_training(self) -> bool:
        return self._state_machine.can_start()

    def start_training_from_inputs(self, **raw_inputs: str) -> bool:
        """Parse raw parameter fields and start a run."""
        try:
            config = RLConfig.from_inputs(seed=self._config.seed, **raw_inputs)
        except ConfigurationError as e:
            self.error_occurred.emit(str(e))
            return False
        return self.start_training(config)

    def start_training(self, config: Optional[RLConfig] = None) -> bool:
        """Start a training run in a worker thread."""
        if not self.can_start_training():
            return False

        config = config or self._config
        try:
            config.validate()
        except ConfigurationError as e:
            self.error_occurred.emit(str(e))
            return False
        self._config = config

        self._cleanup_training_thread()

        self._training_thread = QThread()
        self._training_thread.setObjectName("GridLearn-TrainingThread")
        self._training_worker = TrainingWorker(self._trainer, config, self._spawn_generator())
        self._training_worker.moveToThread(self._training_thread)

        self._training_worker.decision_made.connect(self._on_decision_made)
        self._training_worker.episode_completed.connect(self._on_episode_completed)
        self._training_worker.training_finished.connect(self._on_training_finished)
        self._training_worker.error_occurred.connect(self._on_training_error)
        self._training_worker.finished.connect(self._training_thread.quit)
        self._training_thread.started.connect(self._training_worker.run)

        self._state_machine.start_training()
        self._training_thread.start()
        return True

    def stop_training(self) -> bool:
        """Cancel the running training at the next decision boundary."""
        if not self._state_machine.is_training() or not self._training_worker:
            return False
        self._training_worker.stop()
        return self._state_machine.request_stop()

    def reset_training(self) -> bool:
        """Clear learned values and history and restore default parameters."""
        if self._state_machine.is_active():
            return False
        self._trainer.reset()
        self._learner.reset(DEFAULT_SPAWN)
        self._config = RLConfig(seed=self._config.seed)
        self._state_machine.reset_to_idle()
        self.grid_updated.emit()
        return True

    # Queries

    def get_statistics(self) -> TrainingStats:
        """
        Summary of the episode history.

        Called from the GUI thread while the worker may still be appending;
        the history is copied before it is summarized.
        """
        return TrainingStats.from_history(list(self._trainer.history))

    def agent_markers(self) -> List[Tuple[Position, Position]]:
        """(position, spawn) of each agent for the renderer."""
        return [(self._learner.position, self._learner.spawn)]

    # Worker callbacks

    def _on_decision_made(self, decision: Decision):
        self.decision_made.emit(decision)
        self.grid_updated.emit()

    def _on_episode_completed(self, episode: Episode):
        self.episode_completed.emit(episode)
        self.grid_updated.emit()

    def _on_training_finished(self, result: TrainingResult):
        self._state_machine.reset_to_idle()
        if result.cancelled:
            self.training_cancelled.emit(result)
        else:
            self.training_completed.emit(result)
        self.grid_updated.emit()

    def _on_training_error(self, error_message: str):
        self._state_machine.fail_error()
        self.error_occurred.emit(error_message)
        self._state_machine.reset_to_idle()

    def _cleanup_training_thread(self, timeout_ms: int = 1000):
        """Stop the worker and release the thread."""
        if self._training_worker:
            try:
                self._training_worker.stop()
                self._training_worker.blockSignals(True)
            except RuntimeError:
                pass  # Worker already deleted

        if self._training_thread:
            try:
                if self._training_thread.isRunning():
                    self._training_thread.quit()
                    if not self._training_thread.wait(timeout_ms):
                        print("Warning: Training thread did not stop in time")
                self._training_thread.deleteLater()
            except RuntimeError:
                pass  # Thread already deleted
            self._training_thread = None

        if self._training_worker:
            try:
                self._training_worker.deleteLater()
            except RuntimeError:
                pass
            self._training_worker = None

    def cleanup(self):
        """Clean up all resources before application shutdown."""
        self._cleanup_training_thread(timeout_ms=200)
        try:
            self.blockSignals(True)
        except RuntimeError:
            pass  # Qt object already deleted
