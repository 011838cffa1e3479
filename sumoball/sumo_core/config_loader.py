"""
Configuration Loader
====================

Loads and validates match_config.yaml, providing typed access to all parameters.

Every component receives its configuration explicitly. There is no cached
process-wide instance: two engines built from two configs never share state.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from sumoball.sumo_core.errors import ConfigurationError
from sumoball.sumo_core.moves import Side

MIN_COLUMNS = 3
DEFAULT_WEIGHTS = (0.33, 0.33, 0.33, 0.01)


def _to_int(value: Any, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{field} must be an integer, got {value!r}") from None


def _to_float(value: Any, field: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{field} must be a number, got {value!r}") from None


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Fetch a nested mapping; an absent key gives an empty one."""
    if key not in data:
        return {}
    value = data[key]
    if not isinstance(value, dict):
        raise ConfigurationError(
            f"Section '{key}' must be a mapping, got {type(value).__name__}"
        )
    return value


def coerce_columns(columns: int) -> int:
    """Clamp to at least 3 and bump even counts to the next odd number."""
    columns = max(MIN_COLUMNS, _to_int(columns, "columns"))
    if columns % 2 == 0:
        columns += 1
    return columns


def coerce_span_multiplier(span_multiplier: float) -> float:
    return max(0.0, _to_float(span_multiplier, "span_multiplier"))


def coerce_best_of(best_of: int) -> int:
    """Clamp to at least 1 and bump even counts to the next odd number."""
    best_of = max(1, _to_int(best_of, "best_of"))
    if best_of % 2 == 0:
        best_of += 1
    return best_of


@dataclass(frozen=True)
class BoardConfig:
    """Board column count and span."""
    columns: int            # Always odd and >= 3 after parsing
    span_multiplier: float  # Scales anchor distance into the board span


@dataclass(frozen=True)
class SeriesConfig:
    """Best-of-N series length."""
    best_of: int  # Always odd and >= 1 after parsing

    @property
    def wins_needed(self) -> int:
        """Match wins required to take the series."""
        return self.best_of // 2 + 1


@dataclass(frozen=True)
class TimingConfig:
    """
    Advisory timing and motion values for the presentation layer.

    The engine passes these through untouched and never uses them for logic.
    """
    countdown_start: int
    round_delay: float
    push_speed: float
    lateral_separation: float


@dataclass(frozen=True)
class DistributionConfig:
    """Raw (unnormalized) move weights under a name."""
    name: str
    weights: Tuple[float, float, float, float]  # rock, paper, scissors, super


@dataclass(frozen=True)
class EscalationConfig:
    """Switch to a distribution once this many edge visits have happened."""
    distribution_name: str
    visits_required: int


@dataclass(frozen=True)
class CombatantConfig:
    """Everything needed to build one combatant."""
    name: str
    side: Side
    distributions: Tuple[DistributionConfig, ...]
    escalation: Tuple[EscalationConfig, ...]
    default_distribution: Optional[str] = None  # First declared if None
    seed: Optional[int] = None

    @property
    def distribution_names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self.distributions)

    @property
    def base_distribution(self) -> str:
        """Distribution in use while no escalation rule applies."""
        if self.default_distribution is not None:
            return self.default_distribution
        return self.distributions[0].name


@dataclass(frozen=True)
class MatchConfig:
    """
    Complete series configuration loaded from YAML.

    All values are immutable to prevent accidental modification during a series.
    """
    board: BoardConfig
    series: SeriesConfig
    timing: TimingConfig
    left: CombatantConfig
    right: CombatantConfig

    def combatant(self, side: Side) -> CombatantConfig:
        """Get combatant config by side."""
        return self.left if side is Side.LEFT else self.right


def _parse_side(value: Any) -> Side:
    try:
        return Side(str(value).lower())
    except ValueError:
        raise ConfigurationError(
            f"Side must be 'left' or 'right', got {value!r}"
        ) from None


def _parse_distribution(data: Dict[str, Any]) -> DistributionConfig:
    """Parse one named distribution; missing weights take DEFAULT_WEIGHTS."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Distribution entry must be a mapping, got {data!r}")
    if "name" not in data:
        raise ConfigurationError(f"Distribution is missing a name: {data}")
    weights = (
        _to_float(data.get("rock", DEFAULT_WEIGHTS[0]), "rock"),
        _to_float(data.get("paper", DEFAULT_WEIGHTS[1]), "paper"),
        _to_float(data.get("scissors", DEFAULT_WEIGHTS[2]), "scissors"),
        _to_float(data.get("super", DEFAULT_WEIGHTS[3]), "super"),
    )
    return DistributionConfig(name=str(data["name"]), weights=weights)


def _parse_escalation(data: Dict[str, Any]) -> EscalationConfig:
    if not isinstance(data, dict):
        raise ConfigurationError(f"Escalation entry must be a mapping, got {data!r}")
    if "distribution" not in data:
        raise ConfigurationError(f"Escalation entry is missing 'distribution': {data}")
    return EscalationConfig(
        distribution_name=str(data["distribution"]),
        visits_required=_to_int(data.get("visits_required", 1), "visits_required")
    )


def _parse_combatant(data: Dict[str, Any], default_side: Side) -> CombatantConfig:
    """Parse a single combatant section."""
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Combatant '{default_side.value}' section must be a mapping, got {type(data).__name__}"
        )
    side = _parse_side(data.get("side", default_side.value))
    distributions = tuple(
        _parse_distribution(d) for d in data.get("distributions") or []
    )
    escalation = tuple(
        _parse_escalation(e) for e in data.get("escalation") or []
    )
    default = data.get("default_distribution")
    seed = data.get("seed")
    return CombatantConfig(
        name=str(data.get("name", side.value.capitalize())),
        side=side,
        distributions=distributions,
        escalation=escalation,
        default_distribution=str(default) if default is not None else None,
        seed=_to_int(seed, "seed") if seed is not None else None
    )


def validate_combatant(combatant: CombatantConfig) -> None:
    """Check a combatant's distributions and escalation table agree."""
    if not combatant.distributions:
        raise ConfigurationError(
            f"Combatant '{combatant.name}' has no distributions"
        )

    names: List[str] = []
    for dist in combatant.distributions:
        if dist.name in names:
            raise ConfigurationError(
                f"Duplicate distribution name '{dist.name}' for combatant '{combatant.name}'"
            )
        names.append(dist.name)
        if len(dist.weights) != 4:
            raise ConfigurationError(
                f"Distribution '{dist.name}' must have 4 weights, got {len(dist.weights)}"
            )
        if any(w < 0 for w in dist.weights):
            raise ConfigurationError(
                f"Distribution '{dist.name}' has a negative weight: {dist.weights}"
            )

    if combatant.default_distribution is not None and combatant.default_distribution not in names:
        raise ConfigurationError(
            f"Unknown default distribution '{combatant.default_distribution}' "
            f"for combatant '{combatant.name}'"
        )

    for entry in combatant.escalation:
        if entry.visits_required < 1:
            raise ConfigurationError(
                f"visits_required must be >= 1, got {entry.visits_required} "
                f"for '{entry.distribution_name}'"
            )
        if entry.distribution_name not in names:
            raise ConfigurationError(
                f"Escalation references unknown distribution '{entry.distribution_name}' "
                f"for combatant '{combatant.name}'"
            )


def _validate_config(config: MatchConfig) -> None:
    """Validate configuration consistency."""
    if config.left.side is config.right.side:
        raise ConfigurationError(
            f"Both combatants are on the {config.left.side.value} side"
        )
    if config.left.side is not Side.LEFT:
        raise ConfigurationError("The 'left' combatant section must use side 'left'")

    validate_combatant(config.left)
    validate_combatant(config.right)


def parse_config(raw: Dict[str, Any]) -> MatchConfig:
    """
    Build a validated MatchConfig from an already-loaded mapping.

    Args:
        raw: Mapping with the same layout as match_config.yaml.

    Returns:
        Validated MatchConfig instance.

    Raises:
        ConfigurationError: If a section is missing or inconsistent.
    """
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config root must be a mapping, got {type(raw).__name__}")

    board_data = _section(raw, "board")
    board = BoardConfig(
        columns=coerce_columns(board_data.get("columns", 5)),
        span_multiplier=coerce_span_multiplier(board_data.get("span_multiplier", 1.0))
    )

    series_data = _section(raw, "series")
    series = SeriesConfig(
        best_of=coerce_best_of(series_data.get("best_of", 3))
    )

    timing_data = _section(raw, "timing")
    timing = TimingConfig(
        countdown_start=_to_int(timing_data.get("countdown_start", 3), "countdown_start"),
        round_delay=_to_float(timing_data.get("round_delay", 1.0), "round_delay"),
        push_speed=_to_float(timing_data.get("push_speed", 4.0), "push_speed"),
        lateral_separation=_to_float(timing_data.get("lateral_separation", 0.6), "lateral_separation")
    )

    combatants = _section(raw, "combatants")
    if "left" not in combatants or "right" not in combatants:
        raise ConfigurationError("Config needs combatants.left and combatants.right sections")

    config = MatchConfig(
        board=board,
        series=series,
        timing=timing,
        left=_parse_combatant(combatants["left"], Side.LEFT),
        right=_parse_combatant(combatants["right"], Side.RIGHT)
    )

    _validate_config(config)
    return config


def load_config(config_path: Optional[str] = None) -> MatchConfig:
    """
    Load and validate match configuration from YAML.

    Args:
        config_path: Path to match_config.yaml. If None, uses default location.

    Returns:
        Validated MatchConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "match_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    return parse_config(raw)
