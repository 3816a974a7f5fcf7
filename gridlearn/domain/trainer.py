"""Episode and training loop for the grid learner."""

import logging
import threading
import time
from typing import Callable, List, Optional

from .learner import Learner
from .spawn import SpawnGenerator
from .types import (
    ConfigurationError, Decision, Episode, RLConfig, TrainingResult, TrainingStatus
)

logger = logging.getLogger(__name__)

EpisodeObserver = Callable[[Episode], None]
DecisionObserver = Callable[[Decision], None]


class Trainer:
    """
    Drives a learner through repeated episodes from a spawn point to the goal.

    Each decision is preceded by a suspension point where the run sleeps for
    the configured pacing delay and polls the cancel event. Cancellation
    therefore only lands between decisions, never inside a value update.
    The episode history survives across runs until reset().
    """

    def __init__(self, learner: Learner):
        self.learner = learner
        self.history: List[Episode] = []

    @property
    def grid(self):
        return self.learner.grid

    @property
    def table(self):
        return self.learner.table

    def reset(self) -> None:
        """Forget all learned values and the episode history."""
        self.learner.table.clear()
        self.history.clear()

    def train(self, config: RLConfig, spawn_generator: SpawnGenerator,
              on_episode: Optional[EpisodeObserver] = None,
              on_decision: Optional[DecisionObserver] = None,
              cancel: Optional[threading.Event] = None) -> TrainingResult:
        """
        Run config.episodes episodes.

        Raises ConfigurationError before any state is touched if the config
        is invalid. Returns a CANCELLED result (without elapsed time) when
        the cancel event is set during the run.
        """
        config.validate()
        self.learner.configure(config)

        delay = config.decision_interval / 1000.0
        start_time = time.time()
        completed: List[Episode] = []

        logger.info("Starting training: %d episodes, rule=%s, epsilon=%.3f, alpha=%.3f, gamma=%.3f",
                    config.episodes, config.learning_rule, config.exploration_rate,
                    config.learning_rate, config.discount_factor)

        for _ in range(config.episodes):
            spawn = spawn_generator()
            if not self.grid.contains(spawn):
                raise ConfigurationError(f"Spawn point {spawn} lies outside the grid")
            self.learner.reset(spawn)

            episode = self.run_episode(delay, on_decision, cancel)
            if episode is None:
                logger.info("Training cancelled after %d episodes", len(completed))
                return TrainingResult(status=TrainingStatus.CANCELLED, episodes=completed)

            self.history.append(episode)
            completed.append(episode)
            if on_episode is not None:
                on_episode(episode)

        elapsed = time.time() - start_time
        logger.info("Training completed in %.0fms", elapsed * 1000)
        return TrainingResult(status=TrainingStatus.COMPLETED, episodes=completed,
                              elapsed_time=elapsed)

    def run_episode(self, delay: float = 0.0,
                    on_decision: Optional[DecisionObserver] = None,
                    cancel: Optional[threading.Event] = None) -> Optional[Episode]:
        """
        Step the learner from its current position until it reaches the goal.

        Returns the sealed episode, or None if cancelled.
        """
        episode = Episode(number=len(self.history) + 1, start_time=time.time())

        while not self.grid.is_goal(self.learner.position):
            if self._suspend(delay, cancel):
                return None

            decision = self.learner.step()
            episode.record(decision)
            logger.debug("[Episode %d] Decision : %s (%s)",
                         episode.number, decision.action.name, decision.reward)
            if on_decision is not None:
                on_decision(decision)

        episode.seal(time.time())
        return episode

    @staticmethod
    def _suspend(delay: float, cancel: Optional[threading.Event]) -> bool:
        """Pause between decisions. Returns True if the run was cancelled."""
        if delay > 0:
            if cancel is not None:
                return cancel.wait(delay)
            time.sleep(delay)
        return cancel is not None and cancel.is_set()
