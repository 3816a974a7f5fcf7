"""One-step temporal-difference learners for the grid world."""

from typing import Callable, Dict, Optional, Tuple

from .grid import Grid
from .policy import EpsilonGreedyPolicy
from .transition import TransitionModel
from .types import (
    Action, Decision, LearningRuleId, Position, RLConfig, StateKey,
    ConfigurationError, state_key
)
from .value_table import ValueTable
from ..utils.rng import SeededRNG


class QLearningRule:
    """Off-policy target: the best value reachable from the next state."""
    rule_id: LearningRuleId = "q_learning"

    def next_value(self, table: ValueTable, next_state: StateKey,
                   policy: EpsilonGreedyPolicy,
                   exploration_rate: float) -> Tuple[float, Optional[Action]]:
        return table.max_value(next_state), None


class SarsaRule:
    """On-policy target: the value of the action the policy takes next."""
    rule_id: LearningRuleId = "sarsa"

    def next_value(self, table: ValueTable, next_state: StateKey,
                   policy: EpsilonGreedyPolicy,
                   exploration_rate: float) -> Tuple[float, Optional[Action]]:
        next_action = policy.choose(next_state, exploration_rate)
        return table.get(next_state, next_action), next_action


# Mapping from rule IDs to rule factories, keyed by each rule's own id
LEARNING_RULES: Dict[str, Callable[[], object]] = {
    rule.rule_id: rule for rule in (QLearningRule, SarsaRule)
}


def get_learning_rule(rule_id: str):
    """Get a learning rule instance by ID."""
    try:
        return LEARNING_RULES[rule_id]()
    except KeyError:
        raise ConfigurationError(f"Unknown learning rule: {rule_id}") from None


class Learner:
    """
    Agent that learns from one transition per step().

    The learner owns the mutable agent state (position and spawn). It picks
    actions through its policy, moves through its transition model and writes
    updates into the shared value table according to its learning rule.
    """

    def __init__(self, grid: Grid, table: ValueTable, policy: EpsilonGreedyPolicy,
                 transition: TransitionModel, rule=None,
                 exploration_rate: float = 0.2, learning_rate: float = 0.1,
                 discount_factor: float = 0.9, spawn: Optional[Position] = None):
        self.grid = grid
        self.table = table
        self.policy = policy
        self.transition = transition
        self.rule = rule if rule is not None else QLearningRule()
        self.exploration_rate = exploration_rate
        self.learning_rate = learning_rate
        self.discount_factor = discount_factor

        self.spawn = spawn if spawn is not None else Position(0, 0)
        self.position = self.spawn
        self._pending_action: Optional[Action] = None

    @classmethod
    def from_config(cls, grid: Grid, table: ValueTable, config: RLConfig,
                    rng: Optional[SeededRNG] = None) -> "Learner":
        """Build a learner with the policy, transition and rule a config names."""
        rng = rng if rng is not None else SeededRNG(config.seed)
        return cls(
            grid=grid,
            table=table,
            policy=EpsilonGreedyPolicy(table, rng),
            transition=TransitionModel(grid, config.reward_goal, config.distance_penalty_scale),
            rule=get_learning_rule(config.learning_rule),
            exploration_rate=config.exploration_rate,
            learning_rate=config.learning_rate,
            discount_factor=config.discount_factor,
        )

    def configure(self, config: RLConfig) -> None:
        """Adopt the hyperparameters of a config for the next run."""
        self.exploration_rate = config.exploration_rate
        self.learning_rate = config.learning_rate
        self.discount_factor = config.discount_factor
        self.transition.reward_goal = config.reward_goal
        self.transition.distance_penalty_scale = config.distance_penalty_scale
        if config.learning_rule != self.rule.rule_id:
            self.rule = get_learning_rule(config.learning_rule)
        self._pending_action = None

    def reset(self, spawn: Position) -> None:
        """Place the agent on a new spawn point. The value table is kept."""
        self.spawn = spawn
        self.position = spawn
        self._pending_action = None

    def choose(self, state: StateKey) -> Action:
        return self.policy.choose(state, self.exploration_rate)

    def apply(self, position: Position, action: Action) -> Position:
        return self.transition.apply(position, action)

    def step(self) -> Decision:
        """Take one action from the current position and learn from it."""
        state = state_key(self.position)
        action = self._pending_action if self._pending_action is not None else self.choose(state)
        self._pending_action = None

        next_position = self.apply(self.position, action)
        self.position = next_position
        reward = self.transition.reward(next_position)

        next_state = state_key(next_position)
        next_q, next_action = self.rule.next_value(
            self.table, next_state, self.policy, self.exploration_rate)
        current_q = self.table.get(state, action)

        # Temporal-difference update
        new_q = current_q + self.learning_rate * (reward + self.discount_factor * next_q - current_q)
        self.table.set(state, action, new_q)

        if not self.grid.is_goal(next_position):
            self._pending_action = next_action

        return Decision(
            action=action,
            reward=reward,
            distance_to_goal=self.grid.distance_manhattan(next_position),
            position=next_position,
        )
