"""
Tests for combatant edge visits and escalation.
"""

import pytest

from sumoball.sumo_core.combatant import CombatantState
from sumoball.sumo_core.errors import ConfigurationError
from sumoball.sumo_core.escalation import EscalationRule, EscalationTable
from sumoball.sumo_core.moves import Side
from sumoball.sumo_core.rng import Distribution, MoveSampler


def make_combatant(side, columns=5, index=None):
    sampler = MoveSampler([
        Distribution("Calm"),
        Distribution("Nervous"),
        Distribution("Panic"),
    ], seed=1)
    escalation = EscalationTable([
        EscalationRule("Nervous", 1),
        EscalationRule("Panic", 3),
    ])
    combatant = CombatantState(side, sampler, escalation)
    combatant.place(columns, columns // 2 if index is None else index)
    return combatant


@pytest.fixture
def left():
    return make_combatant(Side.LEFT)


@pytest.fixture
def right():
    return make_combatant(Side.RIGHT)


class TestEscalationTable:
    """Test threshold lookup."""

    def test_no_rule_below_first_threshold(self):
        """No rule applies until the lowest threshold is reached."""
        table = EscalationTable([EscalationRule("a", 2)])
        assert table.select(0) is None
        assert table.select(1) is None
        assert table.select(2) == "a"

    def test_greatest_threshold_not_exceeding_count(self):
        """The highest threshold not above the count wins, whatever the declared order."""
        table = EscalationTable([
            EscalationRule("high", 5),
            EscalationRule("low", 1),
            EscalationRule("mid", 3),
        ])
        assert table.select(1) == "low"
        assert table.select(4) == "mid"
        assert table.select(5) == "high"
        assert table.select(100) == "high"

    def test_ties_prefer_first_declared(self):
        """Equal thresholds resolve to the rule declared first."""
        table = EscalationTable([
            EscalationRule("first", 2),
            EscalationRule("second", 2),
        ])
        assert table.select(2) == "first"

    def test_visits_required_must_be_positive(self):
        """A threshold below one is rejected."""
        with pytest.raises(ConfigurationError):
            EscalationRule("bad", 0)


class TestEdgeVisits:
    """Test edge-visit counting on column transitions."""

    def test_near_wall_indices(self, left, right):
        """Each side's near-wall column is next to its own wall."""
        assert left.near_wall_index == 1
        assert right.near_wall_index == 3

    def test_arrival_at_near_wall_counts(self, left):
        """Moving 2 -> 1 is one edge visit for Left."""
        changed = left.apply_column_transition(1)

        assert changed
        assert left.edge_visits == 1
        assert left.column_index == 1

    def test_other_columns_do_not_count(self, left):
        """Moves that do not reach the near-wall column are not visits."""
        assert not left.apply_column_transition(3)
        assert not left.apply_column_transition(2)
        assert left.edge_visits == 0

    def test_same_column_does_not_count(self, left):
        """Re-asserting the near-wall column is not a new visit."""
        left.apply_column_transition(1)
        changed = left.apply_column_transition(1)

        assert not changed
        assert left.edge_visits == 1

    def test_opponent_near_wall_does_not_count(self, right):
        """Right only counts its own near-wall column."""
        right.apply_column_transition(1)
        assert right.edge_visits == 0

        right.apply_column_transition(3)
        assert right.edge_visits == 1

    def test_counter_is_monotonic_until_reset(self, left):
        """Edge visits only ever grow while no reset happens."""
        history = []
        for index in [1, 2, 1, 0, 1, 2, 3, 2, 1]:
            left.apply_column_transition(index)
            history.append(left.edge_visits)

        assert history == sorted(history)
        assert left.edge_visits == 4

    def test_reset_edge_visits(self, left):
        """Resetting clears the visit count."""
        left.apply_column_transition(1)
        left.apply_column_transition(2)
        left.apply_column_transition(1)

        left.reset_edge_visits()

        assert left.edge_visits == 0

    def test_out_of_range_transition(self, left):
        """Transitions off the board raise."""
        with pytest.raises(ConfigurationError):
            left.apply_column_transition(5)
        with pytest.raises(ConfigurationError):
            left.apply_column_transition(-1)

    def test_transition_before_place(self):
        """A combatant must be placed before it can move."""
        combatant = CombatantState(Side.LEFT)
        with pytest.raises(ConfigurationError):
            combatant.apply_column_transition(1)

    def test_is_at_wall(self, left):
        """A combatant knows when it stands on its own wall."""
        assert not left.is_at_wall(5)
        left.apply_column_transition(0)
        assert left.is_at_wall(5)
        assert left.is_at_wall()


class TestEscalation:
    """Test distribution switching driven by edge visits."""

    def test_starts_on_base_distribution(self, left):
        """A fresh combatant plays its base distribution."""
        assert left.active_distribution_name == "Calm"
        assert left.base_distribution == "Calm"

    def test_escalates_with_visits(self, left):
        """Crossing each threshold switches the active distribution."""
        left.apply_column_transition(1)
        assert left.active_distribution_name == "Nervous"

        left.apply_column_transition(2)
        left.apply_column_transition(1)
        assert left.active_distribution_name == "Nervous"

        left.apply_column_transition(2)
        left.apply_column_transition(1)
        assert left.edge_visits == 3
        assert left.active_distribution_name == "Panic"

    def test_reset_returns_to_base(self, left):
        """Resetting visits falls back to the base distribution."""
        left.apply_column_transition(1)
        left.reset_edge_visits()

        assert left.active_distribution_name == "Calm"

    def test_unknown_escalation_distribution(self):
        """Escalation rules must name a known distribution."""
        sampler = MoveSampler([Distribution("Calm")])
        with pytest.raises(ConfigurationError):
            CombatantState(Side.LEFT, sampler, EscalationTable([EscalationRule("Ghost", 1)]))


class TestThreeColumnBoard:
    """Both near-wall columns are the shared centre column."""

    def test_sides_track_visits_independently(self):
        """On three columns each side counts only its own arrivals from its wall."""
        left = make_combatant(Side.LEFT, columns=3)
        right = make_combatant(Side.RIGHT, columns=3)
        assert left.near_wall_index == right.near_wall_index == 1

        # Left is pushed to its wall and back
        left.apply_column_transition(0)
        left.apply_column_transition(1)

        assert left.edge_visits == 1
        assert right.edge_visits == 0

        # Right is pushed to its wall and back
        right.apply_column_transition(2)
        right.apply_column_transition(1)

        assert left.edge_visits == 1
        assert right.edge_visits == 1

    def test_placement_at_center_is_not_a_visit(self):
        """Initial placement never counts, even on the near-wall column."""
        left = make_combatant(Side.LEFT, columns=3)

        assert left.column_index == 1
        assert left.edge_visits == 0
