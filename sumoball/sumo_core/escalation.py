"""
Escalation
==========

Maps a combatant's edge-visit count to the distribution it should use.

Rules are kept as a small table sorted by threshold. The active rule is the
one with the greatest ``visits_required`` that does not exceed the current
count; among equal thresholds the first declared wins.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from sumoball.sumo_core.config_loader import EscalationConfig
from sumoball.sumo_core.errors import ConfigurationError


@dataclass(frozen=True)
class EscalationRule:
    """Activate ``distribution_name`` from ``visits_required`` edge visits on."""
    distribution_name: str
    visits_required: int = 1

    def __post_init__(self):
        if self.visits_required < 1:
            raise ConfigurationError(
                f"visits_required must be >= 1, got {self.visits_required}",
                context={"distribution": self.distribution_name}
            )

    @classmethod
    def from_config(cls, config: EscalationConfig) -> "EscalationRule":
        return cls(config.distribution_name, config.visits_required)


class EscalationTable:
    """Sorted lookup of escalation rules."""

    def __init__(self, rules: Sequence[EscalationRule] = ()):
        # sorted() is stable, so declaration order survives among equal thresholds
        self._rules: Tuple[EscalationRule, ...] = tuple(
            sorted(rules, key=lambda r: r.visits_required)
        )
        self._thresholds: List[int] = [r.visits_required for r in self._rules]

    @classmethod
    def from_config(cls, entries: Sequence[EscalationConfig]) -> "EscalationTable":
        return cls([EscalationRule.from_config(e) for e in entries])

    def select(self, visits: int) -> Optional[str]:
        """
        Pick the distribution for a given edge-visit count.

        Args:
            visits: Current edge-visit count.

        Returns:
            Distribution name, or None if no rule's threshold is reached.
        """
        idx = bisect_right(self._thresholds, visits)
        if idx == 0:
            return None
        first = bisect_left(self._thresholds, self._thresholds[idx - 1])
        return self._rules[first].distribution_name

    @property
    def distribution_names(self) -> Tuple[str, ...]:
        return tuple(r.distribution_name for r in self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[EscalationRule]:
        return iter(self._rules)
