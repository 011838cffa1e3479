"""
Combatant State
===============

Per-combatant column position and edge-visit bookkeeping.

An edge visit is counted when a combatant arrives at the column one step in
from its own wall from a different column. The visit count drives which move
distribution the combatant's sampler uses.
"""

from __future__ import annotations

import random
from typing import Optional

from sumoball.sumo_core.config_loader import CombatantConfig, MIN_COLUMNS
from sumoball.sumo_core.errors import ConfigurationError
from sumoball.sumo_core.escalation import EscalationTable
from sumoball.sumo_core.moves import MoveSymbol, Side
from sumoball.sumo_core.rng import MoveSampler


class CombatantState:
    """
    One side's position, edge visits and move sampler.

    Mutated by the match engine through ``place``, ``apply_column_transition``
    and ``reset_edge_visits``.
    """

    def __init__(
        self,
        side: Side,
        sampler: Optional[MoveSampler] = None,
        escalation: Optional[EscalationTable] = None,
        name: Optional[str] = None,
        base_distribution: Optional[str] = None
    ):
        """
        Initialize combatant.

        Args:
            side: Which wall this combatant defends.
            sampler: Move sampler. A single default distribution if None.
            escalation: Edge-visit escalation rules. Empty if None.
            name: Display name. Defaults to the side name.
            base_distribution: Distribution used while no escalation rule
                applies. The sampler's active distribution if None.

        Raises:
            ConfigurationError: If an escalation rule or the base distribution
                names a distribution the sampler does not have.
        """
        self._side = side
        self._name = name if name is not None else side.value.capitalize()
        self._sampler = sampler if sampler is not None else MoveSampler()
        self._escalation = escalation if escalation is not None else EscalationTable()

        for dist_name in self._escalation.distribution_names:
            if not self._sampler.has_distribution(dist_name):
                raise ConfigurationError(
                    f"Escalation for '{self._name}' references unknown distribution '{dist_name}'"
                )

        self._base_distribution = (
            base_distribution if base_distribution is not None
            else self._sampler.active_distribution_name
        )
        self._sampler.set_distribution(self._base_distribution)

        self._columns: Optional[int] = None
        self._column_index: int = 0
        self._edge_visits: int = 0

    @classmethod
    def from_config(
        cls,
        config: CombatantConfig,
        rng: Optional[random.Random] = None
    ) -> "CombatantState":
        """Build a combatant, its sampler and escalation table from config."""
        return cls(
            side=config.side,
            sampler=MoveSampler.from_config(config, rng=rng),
            escalation=EscalationTable.from_config(config.escalation),
            name=config.name,
            base_distribution=config.base_distribution
        )

    @property
    def side(self) -> Side:
        return self._side

    @property
    def name(self) -> str:
        return self._name

    @property
    def sampler(self) -> MoveSampler:
        return self._sampler

    @property
    def escalation(self) -> EscalationTable:
        return self._escalation

    @property
    def column_index(self) -> int:
        return self._column_index

    @property
    def edge_visits(self) -> int:
        """Times this combatant has been pushed to its near-wall column."""
        return self._edge_visits

    @property
    def base_distribution(self) -> str:
        return self._base_distribution

    @property
    def active_distribution_name(self) -> str:
        return self._sampler.active_distribution_name

    @property
    def columns(self) -> int:
        """Board column count this combatant was placed on."""
        if self._columns is None:
            raise ConfigurationError(f"Combatant '{self._name}' has not been placed on a board")
        return self._columns

    @property
    def near_wall_index(self) -> int:
        """Column one step in from this combatant's own wall."""
        return 1 if self._side is Side.LEFT else self.columns - 2

    @property
    def wall_index(self) -> int:
        return 0 if self._side is Side.LEFT else self.columns - 1

    def place(self, columns: int, index: int) -> None:
        """
        Put the combatant on a board without counting an edge visit.

        Used for the initial placement at the start of a series.
        """
        if columns < MIN_COLUMNS:
            raise ConfigurationError(f"Board needs at least {MIN_COLUMNS} columns, got {columns}")
        self._columns = columns
        self._check_index(index)
        self._column_index = index

    def apply_column_transition(self, new_index: int) -> bool:
        """
        Move to ``new_index`` and update edge visits.

        Args:
            new_index: Destination column.

        Returns:
            True if the edge-visit count changed.
        """
        self._check_index(new_index)
        prev_index = self._column_index
        self._column_index = new_index

        if new_index == self.near_wall_index and prev_index != new_index:
            self._edge_visits += 1
            self._apply_escalation()
            return True
        return False

    def reset_edge_visits(self) -> None:
        """Clear edge visits after losing a match."""
        self._edge_visits = 0
        self._apply_escalation()

    def is_at_wall(self, columns: Optional[int] = None) -> bool:
        """True if standing on either wall column."""
        if columns is None:
            columns = self.columns
        return self._column_index == 0 or self._column_index == columns - 1

    def pick_move(self) -> MoveSymbol:
        """Sample a move from the active distribution."""
        return self._sampler.pick_move()

    def _apply_escalation(self) -> None:
        """Activate the distribution matching the current edge-visit count."""
        name = self._escalation.select(self._edge_visits)
        self._sampler.set_distribution(name if name is not None else self._base_distribution)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.columns:
            raise ConfigurationError(
                f"Column {index} out of range [0, {self.columns}) for '{self._name}'"
            )

    def __repr__(self) -> str:
        return (
            f"CombatantState({self._name}, side={self._side.value}, "
            f"column={self._column_index}, edge_visits={self._edge_visits})"
        )
