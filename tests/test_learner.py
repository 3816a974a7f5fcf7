import pytest

from gridlearn.domain.grid import Grid
from gridlearn.domain.learner import (
    LEARNING_RULES, Learner, QLearningRule, SarsaRule, get_learning_rule
)
from gridlearn.domain.types import Action, ConfigurationError, LEARNING_RULE_IDS, Position, RLConfig
from gridlearn.domain.value_table import ValueTable
from gridlearn.utils.rng import SeededRNG


@pytest.fixture
def grid():
    return Grid(width=11, height=11, goal=Position(5, 5))


def make_learner(grid, rule="q_learning", exploration_rate=0.0):
    config = RLConfig(exploration_rate=exploration_rate, learning_rate=0.1,
                      discount_factor=0.9, learning_rule=rule)
    learner = Learner.from_config(grid, ValueTable(), config, SeededRNG(0))
    learner.reset(Position(0, 0))
    return learner


def test_first_greedy_step_bumps_into_wall(grid):
    learner = make_learner(grid)
    decision = learner.step()

    assert decision.action is Action.UP
    assert decision.position == Position(0, 0)
    assert decision.reward == pytest.approx(-1.0)
    assert decision.distance_to_goal == 10
    assert learner.table.get((0, 0), Action.UP) == pytest.approx(-0.1)


def test_second_greedy_step_moves_down(grid):
    learner = make_learner(grid)
    learner.step()
    decision = learner.step()

    assert decision.action is Action.DOWN
    assert decision.position == Position(0, 1)
    assert decision.reward == pytest.approx(-0.9)
    assert learner.position == Position(0, 1)
    assert learner.table.get((0, 0), Action.DOWN) == pytest.approx(-0.09)


def test_update_into_goal(grid):
    learner = make_learner(grid)
    learner.reset(Position(4, 5))
    learner.table.set((4, 5), Action.RIGHT, 1.0)

    decision = learner.step()

    assert decision.action is Action.RIGHT
    assert decision.reward == 100.0
    assert decision.distance_to_goal == 0
    assert learner.position == grid.goal
    # Q(goal, .) is never written, so the bootstrap term is zero
    assert learner.table.get((4, 5), Action.RIGHT) == pytest.approx(10.9)
    assert (5, 5) not in learner.table


def test_sarsa_commits_to_next_action(grid):
    learner = make_learner(grid, rule="sarsa")
    assert isinstance(learner.rule, SarsaRule)

    first = learner.step()
    assert first.action is Action.UP
    assert learner.table.get((0, 0), Action.UP) == pytest.approx(-0.1)

    # The action picked while bootstrapping the first update is executed next,
    # even though UP no longer looks best
    second = learner.step()
    assert second.action is Action.UP
    assert learner.table.get((0, 0), Action.UP) == pytest.approx(-0.19)

    third = learner.step()
    assert third.action is Action.DOWN


def test_reset_drops_pending_action(grid):
    learner = make_learner(grid, rule="sarsa")
    learner.step()
    learner.reset(Position(3, 3))
    assert learner.position == Position(3, 3)
    assert learner.spawn == Position(3, 3)

    decision = learner.step()
    assert decision.action is Action.UP
    assert decision.position == Position(3, 2)


def test_reset_keeps_table(grid):
    learner = make_learner(grid)
    learner.step()
    learner.reset(Position(0, 0))
    assert learner.table.get((0, 0), Action.UP) == pytest.approx(-0.1)


def test_configure_switches_rule(grid):
    learner = make_learner(grid)
    assert isinstance(learner.rule, QLearningRule)
    learner.configure(RLConfig(learning_rule="sarsa", exploration_rate=0.5,
                               learning_rate=0.3, discount_factor=0.5))
    assert isinstance(learner.rule, SarsaRule)
    assert learner.exploration_rate == 0.5
    assert learner.learning_rate == 0.3
    assert learner.discount_factor == 0.5


def test_unknown_rule_rejected():
    with pytest.raises(ConfigurationError):
        get_learning_rule("td_lambda")


def test_default_spawn_is_origin(grid):
    learner = Learner.from_config(grid, ValueTable(), RLConfig(), SeededRNG(1))
    assert learner.spawn == Position(0, 0)
    assert learner.position == Position(0, 0)


def test_rule_registry_matches_config_ids():
    assert tuple(LEARNING_RULES) == LEARNING_RULE_IDS
    for rule_id in LEARNING_RULE_IDS:
        assert get_learning_rule(rule_id).rule_id == rule_id
