"""
Unit-system threshold table.

Every literal that differs between imperial and metric lives here, keyed by
UnitSystem, so the °F/mph and °C/kph values can't drift apart.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union

from ride_analytics.core.exceptions import InvalidInputError
from ride_analytics.models import UnitSystem


# 60-75°F band
DEFAULT_IDEAL_TEMP_F = 67.5
IDEAL_BAND_HALF_WIDTH = 7.5


def fahrenheit_to_celsius(temp_f: float) -> float:
    return (temp_f - 32) * 5 / 9


def celsius_to_fahrenheit(temp_c: float) -> float:
    return temp_c * 9 / 5 + 32


def mph_to_kph(speed_mph: float) -> float:
    return speed_mph * 1.609344


def kph_to_mph(speed_kph: float) -> float:
    return speed_kph / 1.609344


@dataclass(frozen=True)
class UnitThresholds:
    """Comfort and alert thresholds for one unit system."""
    default_ideal_temp: float
    cold_penalty_span: float  # degrees below band for a full 1.0 penalty
    heat_penalty_span: float  # degrees above band for a full 1.0 penalty
    wind_comfortable: float
    wind_moderate: float
    wind_challenging: float
    wind_alert: float  # "Wind Alert" above this
    cold_alert: float  # "Temperature Alert" below this
    heat_alert: float  # "Temperature Alert" above this


UNIT_THRESHOLDS: Dict[UnitSystem, UnitThresholds] = {
    UnitSystem.IMPERIAL: UnitThresholds(
        default_ideal_temp=DEFAULT_IDEAL_TEMP_F,
        cold_penalty_span=20.0,
        heat_penalty_span=25.0,
        wind_comfortable=10.0,
        wind_moderate=15.0,
        wind_challenging=20.0,
        wind_alert=15.0,
        cold_alert=50.0,
        heat_alert=85.0,
    ),
    UnitSystem.METRIC: UnitThresholds(
        default_ideal_temp=fahrenheit_to_celsius(DEFAULT_IDEAL_TEMP_F),  # ~19.7°C
        cold_penalty_span=20.0 * 5 / 9,  # ~11.1
        heat_penalty_span=25.0 * 5 / 9,  # ~13.9
        wind_comfortable=16.0,
        wind_moderate=24.0,
        wind_challenging=32.0,
        wind_alert=24.0,
        cold_alert=10.0,
        heat_alert=29.4,
    ),
}


def parse_unit_system(value: Union[str, UnitSystem]) -> UnitSystem:
    """Parse a preference-store value ("imperial"/"metric") into a UnitSystem."""
    if isinstance(value, UnitSystem):
        return value
    try:
        return UnitSystem(str(value).strip().lower())
    except ValueError:
        raise InvalidInputError(f"Unknown unit system: {value!r}", field="unit_system")


def thresholds_for(units: UnitSystem) -> UnitThresholds:
    return UNIT_THRESHOLDS[units]


def ideal_band(units: UnitSystem, ideal_temp: Optional[float] = None) -> tuple:
    """(lower, upper) bounds of the optimal temperature band in the active unit."""
    centre = thresholds_for(units).default_ideal_temp if ideal_temp is None else ideal_temp
    return (centre - IDEAL_BAND_HALF_WIDTH, centre + IDEAL_BAND_HALF_WIDTH)
