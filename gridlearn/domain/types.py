"""Core type definitions for the grid Q-Learning agent."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Dict, List, Literal

# Structured state key used by the value table
StateKey = Tuple[int, int]

# Learning rule identifiers
LearningRuleId = Literal["q_learning", "sarsa"]
LEARNING_RULE_IDS: Tuple[str, ...] = ("q_learning", "sarsa")


class ConfigurationError(ValueError):
    """Raised when a training parameter is outside its valid domain."""


@dataclass(frozen=True)
class Position:
    """A grid cell. Immutable, so agent, goal and spawn never alias."""
    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class Action(Enum):
    """Actions the agent can take. Declaration order is the tie-break order."""
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def index(self) -> int:
        return self.value


# Fixed action set in enumeration order
ACTIONS: Tuple[Action, ...] = tuple(Action)

ACTION_DELTAS: Dict[Action, Tuple[int, int]] = {
    Action.UP: (0, -1),
    Action.DOWN: (0, 1),
    Action.LEFT: (-1, 0),
    Action.RIGHT: (1, 0),
}


def state_key(position: Position) -> StateKey:
    """Collision-free value table key for a position."""
    return (position.x, position.y)


@dataclass(frozen=True)
class Decision:
    """One step of an episode."""
    action: Action
    reward: float
    distance_to_goal: int
    position: Position


@dataclass
class Episode:
    """A single trial from a spawn point to the goal."""
    number: int
    start_time: float
    end_time: Optional[float] = None
    decisions: List[Decision] = field(default_factory=list)

    @property
    def sealed(self) -> bool:
        return self.end_time is not None

    @property
    def steps(self) -> int:
        return len(self.decisions)

    @property
    def elapsed_time(self) -> Optional[float]:
        """Seconds from start to goal arrival, None while running."""
        if self.end_time is None:
            return None
        return self.end_time - self.start_time

    def record(self, decision: Decision) -> None:
        """Append a decision to a running episode."""
        if self.sealed:
            raise RuntimeError(f"Episode {self.number} is sealed")
        self.decisions.append(decision)

    def seal(self, end_time: float) -> None:
        """Stamp the end time and freeze the decision sequence."""
        if self.sealed:
            raise RuntimeError(f"Episode {self.number} is already sealed")
        self.end_time = max(end_time, self.start_time)
        self.decisions = tuple(self.decisions)


class TrainingStatus(Enum):
    """Terminal status of a training run."""
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class TrainingResult:
    """Result of a training run."""
    status: TrainingStatus
    episodes: List[Episode]
    elapsed_time: Optional[float] = None  # seconds, only set for completed runs

    @property
    def completed(self) -> bool:
        return self.status is TrainingStatus.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.status is TrainingStatus.CANCELLED

    @property
    def elapsed_ms(self) -> Optional[int]:
        if self.elapsed_time is None:
            return None
        return int(round(self.elapsed_time * 1000))

    @property
    def total_decisions(self) -> int:
        return sum(ep.steps for ep in self.episodes)


@dataclass(frozen=True)
class TrainingStats:
    """Summary of the episode history shown to the user."""
    episodes: int = 0
    total_decisions: int = 0
    average_decisions: Optional[float] = None
    last_decisions: Optional[int] = None

    @classmethod
    def from_history(cls, episodes: List[Episode]) -> "TrainingStats":
        if not episodes:
            return cls()
        total = sum(ep.steps for ep in episodes)
        return cls(
            episodes=len(episodes),
            total_decisions=total,
            average_decisions=total / len(episodes),
            last_decisions=episodes[-1].steps,
        )

    def format_average(self) -> str:
        return "N/A" if self.average_decisions is None else f"{self.average_decisions:.2f}"

    def format_last(self) -> str:
        return "N/A" if self.last_decisions is None else str(self.last_decisions)


def _parse_count(text) -> int:
    """Parse a whole-number field, dropping any fractional part ("50.5" -> 50)."""
    return int(float(str(text).strip()))


@dataclass
class RLConfig:
    """Configuration for a training run."""
    episodes: int = 10
    decision_interval: int = 50  # milliseconds between decisions (pacing only)
    exploration_rate: float = 0.2
    learning_rate: float = 0.1
    discount_factor: float = 0.9
    learning_rule: LearningRuleId = "q_learning"

    # Reward shaping
    reward_goal: float = 100.0
    distance_penalty_scale: float = 10.0

    seed: Optional[int] = None

    def validate(self) -> None:
        """Raise ConfigurationError if any parameter is out of range."""
        if self.episodes <= 0:
            raise ConfigurationError(f"episodes must be positive, got {self.episodes}")
        if self.decision_interval < 0:
            raise ConfigurationError(
                f"decision_interval must be non-negative, got {self.decision_interval}")
        if not 0.0 <= self.exploration_rate <= 1.0:
            raise ConfigurationError(
                f"exploration_rate must be in [0, 1], got {self.exploration_rate}")
        if not 0.0 < self.learning_rate <= 1.0:
            raise ConfigurationError(
                f"learning_rate must be in (0, 1], got {self.learning_rate}")
        if not 0.0 <= self.discount_factor <= 1.0:
            raise ConfigurationError(
                f"discount_factor must be in [0, 1], got {self.discount_factor}")
        if self.learning_rule not in LEARNING_RULE_IDS:
            raise ConfigurationError(f"Unknown learning rule: {self.learning_rule}")
        if self.distance_penalty_scale <= 0:
            raise ConfigurationError(
                f"distance_penalty_scale must be positive, got {self.distance_penalty_scale}")

    @classmethod
    def from_inputs(cls, episodes: str, decision_interval: str, exploration_rate: str,
                    learning_rate: str, discount_factor: str, **overrides) -> "RLConfig":
        """Build a validated config from raw text fields."""
        try:
            config = cls(
                episodes=_parse_count(episodes),
                decision_interval=_parse_count(decision_interval),
                exploration_rate=float(exploration_rate),
                learning_rate=float(learning_rate),
                discount_factor=float(discount_factor),
                **overrides,
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise ConfigurationError("Please enter valid training parameters") from e

        if any(math.isnan(v) for v in (config.exploration_rate, config.learning_rate,
                                        config.discount_factor)):
            raise ConfigurationError("Please enter valid training parameters")

        config.validate()
        return config
