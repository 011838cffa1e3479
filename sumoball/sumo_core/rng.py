"""
RNG - Weighted Move Sampler
===========================

Named weighted distributions over the four move symbols, and a sampler that
draws from them with an explicitly owned random generator.

Each sampler owns its generator, so parallel simulations never share random
state. Pass ``seed`` (or a ready ``random.Random``) for reproducible play.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from sumoball.sumo_core.config_loader import CombatantConfig, DistributionConfig
from sumoball.sumo_core.errors import ConfigurationError
from sumoball.sumo_core.moves import MoveSymbol


@dataclass
class Distribution:
    """
    Four move weights under a name.

    Weights are relative until ``normalize()`` is called; after that they sum
    to 1 (or fall back to an even Rock/Paper/Scissors split with no Super).
    """
    name: str = "Default"
    rock: float = 0.33
    paper: float = 0.33
    scissors: float = 0.33
    super_: float = 0.01  # very rare

    @classmethod
    def from_config(cls, config: DistributionConfig) -> "Distribution":
        rock, paper, scissors, super_ = config.weights
        return cls(config.name, rock, paper, scissors, super_)

    @property
    def weights(self) -> Tuple[float, float, float, float]:
        """Weights in band order: rock, paper, scissors, super."""
        return (self.rock, self.paper, self.scissors, self.super_)

    def weight(self, symbol: MoveSymbol) -> float:
        return self.weights[int(symbol)]

    def normalize(self) -> "Distribution":
        """
        Scale weights to sum to 1 in place. Idempotent.

        Raises:
            ConfigurationError: If any weight is negative.
        """
        if any(w < 0 for w in self.weights):
            raise ConfigurationError(
                f"Distribution '{self.name}' has a negative weight: {self.weights}"
            )
        total = self.rock + self.paper + self.scissors + self.super_
        if total <= 0:
            self.rock = self.paper = self.scissors = 1.0 / 3.0
            self.super_ = 0.0
            return self
        self.rock /= total
        self.paper /= total
        self.scissors /= total
        self.super_ /= total
        return self

    def sample(self, rng: random.Random) -> MoveSymbol:
        """
        Draw one move.

        One uniform value in [0, 1) is partitioned into bands in the order
        Rock, Paper, Scissors, Super. Anything past the last band is Super.
        """
        r = rng.random()
        if r < self.rock:
            return MoveSymbol.ROCK
        if r < self.rock + self.paper:
            return MoveSymbol.PAPER
        if r < self.rock + self.paper + self.scissors:
            return MoveSymbol.SCISSORS
        return MoveSymbol.SUPER


class MoveSampler:
    """
    Holds a combatant's named distributions and samples moves from them.

    One distribution is *active* at a time; escalation switches it by name.
    """

    def __init__(
        self,
        distributions: Optional[Sequence[Distribution]] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        active: Optional[str] = None
    ):
        """
        Initialize sampler.

        Args:
            distributions: Named distributions. A single default one if empty.
            seed: Random seed for reproducibility. Ignored if ``rng`` is given.
            rng: Generator to draw from. A new ``random.Random(seed)`` if None.
            active: Name of the initially active distribution. First if None.

        Raises:
            ConfigurationError: On duplicate names, negative weights or an
                unknown ``active`` name.
        """
        if not distributions:
            distributions = [Distribution()]

        self._distributions: List[Distribution] = []
        self._index_by_name: Dict[str, int] = {}
        for dist in distributions:
            if dist.name in self._index_by_name:
                raise ConfigurationError(f"Duplicate distribution name '{dist.name}'")
            # Copy so normalizing never mutates the caller's objects
            copy = Distribution(dist.name, *dist.weights).normalize()
            self._index_by_name[copy.name] = len(self._distributions)
            self._distributions.append(copy)

        self._rng = rng if rng is not None else random.Random(seed)
        self._current_index = 0
        if active is not None:
            self.set_distribution(active)

    @classmethod
    def from_config(
        cls,
        config: CombatantConfig,
        rng: Optional[random.Random] = None
    ) -> "MoveSampler":
        """Build a sampler from a combatant config, seeded by ``config.seed``."""
        return cls(
            [Distribution.from_config(d) for d in config.distributions],
            seed=config.seed,
            rng=rng,
            active=config.base_distribution
        )

    @property
    def distribution_names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self._distributions)

    @property
    def active_distribution_name(self) -> str:
        return self._distributions[self._current_index].name

    @property
    def active_distribution(self) -> Distribution:
        return self._distributions[self._current_index]

    def has_distribution(self, name: str) -> bool:
        return name in self._index_by_name

    def get_distribution(self, name: str) -> Distribution:
        """
        Look up a distribution by name (case-sensitive).

        Raises:
            ConfigurationError: If no distribution has that name.
        """
        index = self._index_by_name.get(name)
        if index is None:
            raise ConfigurationError(
                f"Unknown distribution '{name}'",
                context={"available": ", ".join(self.distribution_names)}
            )
        return self._distributions[index]

    def sample(self, name: Optional[str] = None) -> MoveSymbol:
        """
        Draw a move from the named distribution, or the active one if None.

        Raises:
            ConfigurationError: If ``name`` is not a known distribution.
        """
        dist = self.active_distribution if name is None else self.get_distribution(name)
        return dist.sample(self._rng)

    def pick_move(self) -> MoveSymbol:
        """Draw a move from the active distribution."""
        return self.sample()

    def set_distribution(self, name: str) -> None:
        """Make the named distribution active."""
        self.get_distribution(name)
        self._current_index = self._index_by_name[name]

    def set_distribution_index(self, index: int) -> None:
        if not 0 <= index < len(self._distributions):
            raise ConfigurationError(
                f"Distribution index {index} out of range [0, {len(self._distributions)})"
            )
        self._current_index = index

    def next_distribution(self) -> str:
        """Cycle forward to the next distribution and return its name."""
        self._current_index = (self._current_index + 1) % len(self._distributions)
        return self.active_distribution_name

    def previous_distribution(self) -> str:
        """Cycle backward to the previous distribution and return its name."""
        self._current_index = (self._current_index - 1) % len(self._distributions)
        return self.active_distribution_name

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reseed the generator.

        Args:
            seed: New random seed. Keeps the current generator if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)

    def __len__(self) -> int:
        return len(self._distributions)
