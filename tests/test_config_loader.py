"""
Tests for configuration loading and validation.
"""

import copy

import pytest
import yaml

from sumoball.sumo_core.config_loader import load_config, parse_config
from sumoball.sumo_core.errors import ConfigurationError
from sumoball.sumo_core.moves import Side


def base_raw():
    return {
        "board": {"columns": 5, "span_multiplier": 1.0},
        "series": {"best_of": 3},
        "timing": {"countdown_start": 3, "round_delay": 1.0},
        "combatants": {
            "left": {
                "name": "Red",
                "distributions": [
                    {"name": "Calm", "rock": 1, "paper": 1, "scissors": 1, "super": 0},
                    {"name": "Panic", "rock": 1, "paper": 1, "scissors": 1, "super": 1},
                ],
                "escalation": [{"distribution": "Panic", "visits_required": 2}],
            },
            "right": {
                "name": "Blue",
                "distributions": [{"name": "Calm"}],
            },
        },
    }


@pytest.fixture
def raw():
    return base_raw()


class TestDefaultConfig:
    """Test the packaged match_config.yaml."""

    def test_loads(self):
        """The packaged config loads with its documented defaults."""
        config = load_config()

        assert config.board.columns == 5
        assert config.series.best_of == 3
        assert config.series.wins_needed == 2
        assert config.left.side is Side.LEFT
        assert config.right.side is Side.RIGHT
        assert "Balanced" in config.left.distribution_names

    def test_missing_file(self, tmp_path):
        """A missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_load_from_path(self, tmp_path, raw):
        """A YAML file at an explicit path is parsed."""
        path = tmp_path / "match.yaml"
        path.write_text(yaml.safe_dump(raw))

        config = load_config(str(path))

        assert config.left.name == "Red"
        assert config.left.escalation[0].visits_required == 2


class TestParse:
    """Test parsing and coercion."""

    def test_parses_combatants(self, raw):
        """Combatant sections become typed configs with defaults filled in."""
        config = parse_config(raw)

        assert config.left.distribution_names == ("Calm", "Panic")
        assert config.left.base_distribution == "Calm"
        assert config.right.distributions[0].weights == (0.33, 0.33, 0.33, 0.01)
        assert config.combatant(Side.RIGHT).name == "Blue"

    @pytest.mark.parametrize("columns,expected", [(1, 3), (3, 3), (4, 5), (10, 11)])
    def test_columns_coerced(self, raw, columns, expected):
        """Column counts are coerced odd and at least three."""
        raw["board"]["columns"] = columns
        assert parse_config(raw).board.columns == expected

    def test_negative_span_coerced(self, raw):
        """Negative span multipliers are clamped to zero."""
        raw["board"]["span_multiplier"] = -3
        assert parse_config(raw).board.span_multiplier == 0.0

    def test_even_best_of_coerced(self, raw):
        """Even best-of counts are bumped to odd."""
        raw["series"]["best_of"] = 4
        config = parse_config(raw)
        assert config.series.best_of == 5
        assert config.series.wins_needed == 3

    def test_defaults_when_sections_missing(self, raw):
        """Absent sections take their defaults."""
        del raw["board"]
        del raw["timing"]
        config = parse_config(raw)

        assert config.board.columns == 5
        assert config.timing.push_speed == 4.0


class TestValidation:
    """Test configuration errors."""

    def test_missing_combatants(self, raw):
        """Both combatant sections are required."""
        del raw["combatants"]["right"]
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_no_distributions(self, raw):
        """A combatant needs at least one distribution."""
        raw["combatants"]["right"]["distributions"] = []
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_unknown_escalation_target(self, raw):
        """Escalation entries must name a known distribution."""
        raw["combatants"]["left"]["escalation"] = [{"distribution": "Ghost"}]
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_zero_visits_required(self, raw):
        """Escalation thresholds start at one."""
        raw["combatants"]["left"]["escalation"][0]["visits_required"] = 0
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_negative_weight(self, raw):
        """Negative weights are rejected."""
        raw["combatants"]["left"]["distributions"][0]["rock"] = -1
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_duplicate_distribution_names(self, raw):
        """Distribution names are unique per combatant."""
        dists = raw["combatants"]["left"]["distributions"]
        dists.append(copy.deepcopy(dists[0]))
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_unknown_default_distribution(self, raw):
        """The default distribution must exist."""
        raw["combatants"]["left"]["default_distribution"] = "Nope"
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_same_side_twice(self, raw):
        """The two combatants must take different sides."""
        raw["combatants"]["right"]["side"] = "left"
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_bad_side(self, raw):
        """Sides are limited to left and right."""
        raw["combatants"]["right"]["side"] = "up"
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_error_is_value_error(self, raw):
        """Configuration errors can be caught as ValueError."""
        raw["combatants"]["right"]["distributions"] = []
        with pytest.raises(ValueError):
            parse_config(raw)


class TestMalformedInput:
    """Test that malformed YAML shapes surface as ConfigurationError."""

    @pytest.mark.parametrize("section", ["board", "series", "timing", "combatants"])
    def test_null_section(self, raw, section):
        """An empty section key (null in YAML) is rejected."""
        raw[section] = None
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    @pytest.mark.parametrize("side", ["left", "right"])
    def test_null_combatant(self, raw, side):
        """A null combatant section is rejected."""
        raw["combatants"][side] = None
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    @pytest.mark.parametrize("section,key,value", [
        ("board", "columns", "five"),
        ("board", "span_multiplier", "wide"),
        ("series", "best_of", None),
        ("timing", "countdown_start", "soon"),
        ("timing", "round_delay", [1.0]),
    ])
    def test_non_numeric_value(self, raw, section, key, value):
        """Values that cannot be converted to numbers are rejected."""
        raw[section][key] = value
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_non_numeric_weight(self, raw):
        """A distribution weight must be numeric."""
        raw["combatants"]["left"]["distributions"][0]["rock"] = "lots"
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_non_numeric_visits_required(self, raw):
        """An escalation threshold must be an integer."""
        raw["combatants"]["left"]["escalation"][0]["visits_required"] = "two"
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_distribution_entry_not_mapping(self, raw):
        """Each distribution entry must be a mapping."""
        raw["combatants"]["right"]["distributions"] = ["Calm"]
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_root_not_mapping(self):
        """A YAML document that is not a mapping is rejected."""
        with pytest.raises(ConfigurationError):
            parse_config(["board"])
