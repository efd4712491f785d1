"""
Tests for the unit threshold table and the shared comfort classification.
"""

import pytest

from ride_analytics.core.exceptions import InvalidInputError
from ride_analytics.models import ComfortScore, UnitSystem
from ride_analytics.services.comfort_levels import (
    ComfortLevel,
    classify_comfort,
    is_challenging_hour,
    is_optimal_hour,
)
from ride_analytics.services.units import (
    celsius_to_fahrenheit,
    fahrenheit_to_celsius,
    ideal_band,
    kph_to_mph,
    mph_to_kph,
    parse_unit_system,
    thresholds_for,
)


class TestComfortLevels:
    @pytest.mark.parametrize("score,expected", [
        (1.0, ComfortLevel.EXCELLENT),
        (0.81, ComfortLevel.EXCELLENT),
        (0.8, ComfortLevel.GOOD),
        (0.61, ComfortLevel.GOOD),
        (0.6, ComfortLevel.FAIR),
        (0.41, ComfortLevel.FAIR),
        (0.4, ComfortLevel.POOR),
        (0.0, ComfortLevel.POOR),
    ])
    def test_boundaries_exclusive(self, score, expected):
        assert classify_comfort(score) == expected

    def test_label_and_color(self):
        assert ComfortLevel.EXCELLENT.label == "Excellent"
        assert ComfortLevel.EXCELLENT.color == "green"
        assert ComfortLevel.POOR.color == "red"

    def test_hour_filters_are_strict(self):
        assert not is_optimal_hour(0.7)
        assert is_optimal_hour(0.71)
        assert not is_challenging_hour(0.4)
        assert is_challenging_hour(0.39)

    def test_score_level_uses_shared_classification(self):
        score = ComfortScore(score=0.65, temperature=1.0, wind=0.4, precipitation=0.4)
        assert score.level == ComfortLevel.GOOD
        assert score.percent == 65


class TestUnits:
    def test_conversions(self):
        assert fahrenheit_to_celsius(212) == pytest.approx(100)
        assert celsius_to_fahrenheit(-40) == pytest.approx(-40)
        assert mph_to_kph(10) == pytest.approx(16.09344)
        assert kph_to_mph(mph_to_kph(25)) == pytest.approx(25)

    def test_imperial_band(self):
        assert ideal_band(UnitSystem.IMPERIAL) == (60.0, 75.0)

    def test_metric_band(self):
        lower, upper = ideal_band(UnitSystem.METRIC)
        assert lower == pytest.approx(12.22, abs=0.01)
        assert upper == pytest.approx(27.22, abs=0.01)

    def test_custom_band_keeps_half_width(self):
        assert ideal_band(UnitSystem.METRIC, 18.0) == (10.5, 25.5)

    def test_wind_thresholds(self):
        imperial = thresholds_for(UnitSystem.IMPERIAL)
        metric = thresholds_for(UnitSystem.METRIC)
        assert (imperial.wind_comfortable, imperial.wind_moderate, imperial.wind_challenging) == (10, 15, 20)
        assert (metric.wind_comfortable, metric.wind_moderate, metric.wind_challenging) == (16, 24, 32)

    def test_symbols(self):
        assert UnitSystem.IMPERIAL.temperature_symbol == "°F"
        assert UnitSystem.METRIC.speed_symbol == "kph"
        assert UnitSystem.METRIC.description == "Metric (°C, kph)"

    @pytest.mark.parametrize("value,expected", [
        ("imperial", UnitSystem.IMPERIAL),
        ("Metric", UnitSystem.METRIC),
        (" metric ", UnitSystem.METRIC),
        (UnitSystem.IMPERIAL, UnitSystem.IMPERIAL),
    ])
    def test_parse_unit_system(self, value, expected):
        assert parse_unit_system(value) == expected

    def test_parse_unknown_unit_system(self):
        with pytest.raises(InvalidInputError) as exc:
            parse_unit_system("kelvin")
        assert exc.value.error_code == "INVALID_INPUT_UNIT_SYSTEM"
