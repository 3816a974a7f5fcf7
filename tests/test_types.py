import dataclasses

import pytest

from gridlearn.domain.types import (
    Action, ACTIONS, ConfigurationError, Decision, Episode, LEARNING_RULE_IDS, Position, RLConfig,
    TrainingStats, state_key
)


def test_action_order():
    assert ACTIONS == (Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT)
    assert [a.index for a in ACTIONS] == [0, 1, 2, 3]


def test_position_is_immutable():
    pos = Position(1, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        pos.x = 3
    assert str(pos) == "(1, 2)"


def test_state_key_distinguishes_cells():
    assert state_key(Position(1, 2)) == state_key(Position(1, 2))
    assert state_key(Position(1, 23)) != state_key(Position(12, 3))


def test_defaults_are_valid():
    config = RLConfig()
    config.validate()
    assert config.episodes == 10
    assert config.decision_interval == 50
    assert config.exploration_rate == 0.2
    assert config.learning_rate == 0.1
    assert config.discount_factor == 0.9
    assert config.learning_rule == "q_learning"


@pytest.mark.parametrize("overrides", [
    {"episodes": 0},
    {"episodes": -3},
    {"decision_interval": -1},
    {"exploration_rate": -0.1},
    {"exploration_rate": 1.01},
    {"learning_rate": 0.0},
    {"learning_rate": 1.5},
    {"discount_factor": 1.1},
    {"learning_rule": "monte_carlo"},
    {"distance_penalty_scale": 0.0},
])
def test_out_of_range_rejected(overrides):
    with pytest.raises(ConfigurationError):
        RLConfig(**overrides).validate()


def test_boundary_values_accepted():
    RLConfig(exploration_rate=0.0, learning_rate=1.0, discount_factor=0.0,
             decision_interval=0).validate()
    RLConfig(exploration_rate=1.0, discount_factor=1.0).validate()


def test_from_inputs_parses_text_fields():
    config = RLConfig.from_inputs(
        episodes=" 25 ", decision_interval="0", exploration_rate="0.05",
        learning_rate="0.5", discount_factor="0.95", learning_rule="sarsa")
    assert config.episodes == 25
    assert config.decision_interval == 0
    assert config.exploration_rate == 0.05
    assert config.learning_rule == "sarsa"


@pytest.mark.parametrize("field,value", [
    ("episodes", "ten"),
    ("episodes", "inf"),
    ("episodes", ""),
    ("decision_interval", "fast"),
    ("exploration_rate", "abc"),
    ("learning_rate", "nan"),
])
def test_from_inputs_rejects_unparseable(field, value):
    raw = dict(episodes="10", decision_interval="50", exploration_rate="0.2",
               learning_rate="0.1", discount_factor="0.9")
    raw[field] = value
    with pytest.raises(ConfigurationError, match="Please enter valid training parameters"):
        RLConfig.from_inputs(**raw)


def test_from_inputs_validates_ranges():
    with pytest.raises(ConfigurationError):
        RLConfig.from_inputs(episodes="10", decision_interval="50", exploration_rate="2",
                             learning_rate="0.1", discount_factor="0.9")


def test_episode_lifecycle():
    episode = Episode(number=1, start_time=10.0)
    assert not episode.sealed
    assert episode.elapsed_time is None

    decision = Decision(action=Action.RIGHT, reward=-0.5, distance_to_goal=5,
                        position=Position(1, 0))
    episode.record(decision)
    episode.seal(12.5)

    assert episode.sealed
    assert episode.steps == 1
    assert episode.elapsed_time == pytest.approx(2.5)
    with pytest.raises(RuntimeError):
        episode.record(decision)


def test_seal_never_ends_before_start():
    episode = Episode(number=1, start_time=10.0)
    episode.seal(9.0)
    assert episode.end_time == 10.0


def test_stats_without_history():
    stats = TrainingStats.from_history([])
    assert stats.episodes == 0
    assert stats.total_decisions == 0
    assert stats.format_average() == "N/A"
    assert stats.format_last() == "N/A"


def test_stats_from_history():
    decision = Decision(action=Action.UP, reward=-1.0, distance_to_goal=10,
                        position=Position(0, 0))
    episodes = []
    for number, steps in enumerate([3, 5, 4], start=1):
        episode = Episode(number=number, start_time=0.0)
        for _ in range(steps):
            episode.record(decision)
        episode.seal(1.0)
        episodes.append(episode)

    stats = TrainingStats.from_history(episodes)
    assert stats.episodes == 3
    assert stats.total_decisions == 12
    assert stats.format_average() == "4.00"
    assert stats.format_last() == "4"


def test_from_inputs_truncates_decimal_counts():
    config = RLConfig.from_inputs(
        episodes="12.9", decision_interval="50.5", exploration_rate="0.2",
        learning_rate="0.1", discount_factor="0.9")
    assert config.episodes == 12
    assert config.decision_interval == 50


def test_fractional_episode_count_below_one_rejected():
    with pytest.raises(ConfigurationError):
        RLConfig.from_inputs(episodes="0.5", decision_interval="50", exploration_rate="0.2",
                             learning_rate="0.1", discount_factor="0.9")


@pytest.mark.parametrize("rule", LEARNING_RULE_IDS)
def test_every_rule_id_validates(rule):
    RLConfig(learning_rule=rule).validate()
