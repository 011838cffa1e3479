"""
Board Layout
============

Discrete coordinate model of the sumo ring: an odd number of evenly spaced
columns laid out along the line between two anchor points.

Column 0 and column ``columns - 1`` are the walls. The centre column is
``columns // 2`` and the layout is symmetric around it.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from sumoball.sumo_core.config_loader import (
    BoardConfig,
    coerce_columns,
    coerce_span_multiplier,
)
from sumoball.sumo_core.errors import ConfigurationError
from sumoball.sumo_core.moves import Side

# Anchors closer than this are treated as coincident
ANCHOR_EPSILON = 1e-6


class BoardLayout:
    """
    Computes board positions from two anchors.

    The layout is immutable between ``setup`` calls; ``positions`` is a
    read-only array of shape (columns, dims).
    """

    def __init__(self, columns: int = 5, span_multiplier: float = 1.0):
        self._columns = coerce_columns(columns)
        self._span_multiplier = coerce_span_multiplier(span_multiplier)
        self._positions: Optional[np.ndarray] = None

    @classmethod
    def from_config(cls, config: BoardConfig) -> "BoardLayout":
        return cls(config.columns, config.span_multiplier)

    @property
    def columns(self) -> int:
        """Number of columns, always odd and >= 3."""
        return self._columns

    @columns.setter
    def columns(self, value: int) -> None:
        columns = coerce_columns(value)
        if columns != self._columns:
            # Stale positions would disagree with the new count
            self._positions = None
        self._columns = columns

    @property
    def span_multiplier(self) -> float:
        return self._span_multiplier

    @span_multiplier.setter
    def span_multiplier(self, value: float) -> None:
        span_multiplier = coerce_span_multiplier(value)
        if span_multiplier != self._span_multiplier:
            self._positions = None
        self._span_multiplier = span_multiplier

    @property
    def is_setup(self) -> bool:
        """True once positions have been computed."""
        return self._positions is not None

    @property
    def positions(self) -> np.ndarray:
        """Column coordinates, ordered from the left wall to the right wall."""
        if self._positions is None:
            raise ConfigurationError("Board positions requested before setup()")
        return self._positions

    @property
    def center_index(self) -> int:
        return self._columns // 2

    @property
    def last_index(self) -> int:
        """Index of the right wall."""
        return self._columns - 1

    def setup(
        self,
        anchor_a: Sequence[float],
        anchor_b: Sequence[float],
        columns: Optional[int] = None,
        span_multiplier: Optional[float] = None
    ) -> Tuple[np.ndarray, int]:
        """
        Lay out the columns between two anchors.

        Args:
            anchor_a: Left anchor, usually the left combatant's start position.
            anchor_b: Right anchor.
            columns: Optional new column count (coerced odd, >= 3).
            span_multiplier: Optional new span multiplier (coerced >= 0).

        Returns:
            (positions, center_index) tuple.

        Raises:
            ConfigurationError: If an anchor is missing or the anchors have
                mismatched or empty shapes.
        """
        if anchor_a is None or anchor_b is None:
            raise ConfigurationError("Board setup needs two anchor points")
        a = np.asarray(anchor_a, dtype=np.float64).reshape(-1)
        b = np.asarray(anchor_b, dtype=np.float64).reshape(-1)
        if a.size == 0 or a.shape != b.shape:
            raise ConfigurationError(
                "Anchors must be non-empty points of the same dimension",
                context={"anchor_a": a.shape, "anchor_b": b.shape}
            )

        # Nothing is assigned until every input has been validated
        new_columns = self._columns if columns is None else coerce_columns(columns)
        new_span = (
            self._span_multiplier if span_multiplier is None
            else coerce_span_multiplier(span_multiplier)
        )
        center = new_columns // 2

        mid = (a + b) * 0.5
        delta = b - a
        distance = float(np.linalg.norm(delta))
        if distance < ANCHOR_EPSILON:
            # Coincident anchors: fall back to the first axis
            direction = np.zeros_like(a)
            direction[0] = 1.0
        else:
            direction = delta / distance

        span = distance * new_span
        step = span / (new_columns - 1)
        offsets = (np.arange(new_columns, dtype=np.float64) - center) * step

        positions = mid[np.newaxis, :] + offsets[:, np.newaxis] * direction[np.newaxis, :]
        positions.setflags(write=False)
        self._columns = new_columns
        self._span_multiplier = new_span
        self._positions = positions
        return positions, center

    def position_at(self, index: int) -> np.ndarray:
        """Coordinate of a single column."""
        if not 0 <= index < self._columns:
            raise ConfigurationError(
                f"Column {index} out of range [0, {self._columns})"
            )
        return self.positions[index]

    def is_wall(self, index: int) -> bool:
        return index == 0 or index == self.last_index

    def wall_index(self, side: Side) -> int:
        """Wall column belonging to ``side``."""
        return 0 if side is Side.LEFT else self.last_index

    def near_wall_index(self, side: Side) -> int:
        """Column one step inward from ``side``'s own wall."""
        return 1 if side is Side.LEFT else self._columns - 2

    def clamp_index(self, index: int) -> int:
        return max(0, min(self.last_index, index))

    def __repr__(self) -> str:
        return f"BoardLayout(columns={self._columns}, span_multiplier={self._span_multiplier})"
