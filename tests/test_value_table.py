import pytest

from gridlearn.domain.types import Action, ACTIONS
from gridlearn.domain.value_table import ValueTable


def test_fresh_table_reads_zero_for_every_action():
    table = ValueTable()
    for state in [(0, 0), (3, 7), (10, 10)]:
        for action in ACTIONS:
            assert table.get(state, action) == 0.0
    # Reads do not materialize entries
    assert len(table) == 0


def test_set_inserts_and_overwrites():
    table = ValueTable()
    table.set((1, 2), Action.LEFT, 0.5)
    assert table.get((1, 2), Action.LEFT) == 0.5
    assert table.get((1, 2), Action.RIGHT) == 0.0
    table.set((1, 2), Action.LEFT, -3.25)
    assert table.get((1, 2), Action.LEFT) == -3.25
    assert len(table) == 1
    assert (1, 2) in table


def test_best_action_breaks_ties_by_enumeration_order():
    table = ValueTable()
    assert table.best_action((0, 0), ACTIONS) is Action.UP

    table.set((0, 0), Action.UP, -1.0)
    # DOWN, LEFT and RIGHT tie at 0.0
    assert table.best_action((0, 0), ACTIONS) is Action.DOWN


def test_best_action_picks_highest_value():
    table = ValueTable()
    table.set((2, 2), Action.RIGHT, 4.0)
    table.set((2, 2), Action.LEFT, 4.0)
    table.set((2, 2), Action.DOWN, 1.0)
    assert table.best_action((2, 2)) is Action.LEFT


def test_best_action_respects_given_action_order():
    table = ValueTable()
    order = [Action.RIGHT, Action.UP]
    assert table.best_action((0, 0), order) is Action.RIGHT


def test_max_value_and_values_copy():
    table = ValueTable()
    assert table.max_value((4, 4)) == 0.0
    table.set((4, 4), Action.UP, -2.0)
    table.set((4, 4), Action.DOWN, -1.0)
    assert table.max_value((4, 4)) == 0.0  # LEFT/RIGHT still zero

    values = table.values((4, 4))
    assert list(values) == [-2.0, -1.0, 0.0, 0.0]
    values[0] = 99.0
    assert table.get((4, 4), Action.UP) == -2.0


def test_clear_restores_lazy_zero():
    table = ValueTable()
    table.set((1, 1), Action.DOWN, 7.5)
    table.set((2, 1), Action.UP, -0.3)
    table.clear()
    assert len(table) == 0
    assert table.get((1, 1), Action.DOWN) == 0.0
    assert table.get((2, 1), Action.UP) == 0.0


def test_snapshot_is_plain_copy():
    table = ValueTable()
    table.set((0, 1), Action.RIGHT, 1.5)
    snap = table.snapshot()
    assert snap == {(0, 1): {"UP": 0.0, "DOWN": 0.0, "LEFT": 0.0, "RIGHT": 1.5}}
    table.set((0, 1), Action.RIGHT, 2.0)
    assert snap[(0, 1)]["RIGHT"] == pytest.approx(1.5)


def test_best_values_is_detached():
    table = ValueTable()
    table.set((0, 0), Action.UP, -2.0)
    table.set((0, 0), Action.RIGHT, 1.5)
    table.set((3, 1), Action.DOWN, -0.4)

    best = table.best_values()
    assert best == {(0, 0): 1.5, (3, 1): 0.0}

    table.set((0, 0), Action.RIGHT, 9.0)
    table.set((7, 7), Action.LEFT, 2.0)
    assert best[(0, 0)] == 1.5
    assert (7, 7) not in best
