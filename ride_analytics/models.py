"""
Data model for the ride analytics engine.

Immutable snapshots handed in by the fetch/storage collaborators
(hourly forecast samples, daily training load entries, completed rides)
and the per-hour comfort score derived from them.
"""

from dataclasses import dataclass
from datetime import datetime, date
from enum import Enum
from typing import Optional

from ride_analytics.services.comfort_levels import ComfortLevel, classify_comfort


class UnitSystem(str, Enum):
    """Display unit system. Governs which literal thresholds apply."""
    IMPERIAL = "imperial"  # °F, mph
    METRIC = "metric"      # °C, kph

    @property
    def description(self) -> str:
        if self is UnitSystem.IMPERIAL:
            return "Imperial (°F, mph)"
        return "Metric (°C, kph)"

    @property
    def temperature_symbol(self) -> str:
        return "°F" if self is UnitSystem.IMPERIAL else "°C"

    @property
    def speed_symbol(self) -> str:
        return "mph" if self is UnitSystem.IMPERIAL else "kph"


@dataclass(frozen=True)
class HourlySample:
    """
    One forecast point.

    Temperatures and wind speed are expressed in the active unit system;
    the unit system itself is configuration, not stored per sample.
    """
    timestamp: datetime
    temperature: float
    feels_like: float
    wind_speed: float
    wind_deg: int  # 0-359, direction the wind blows FROM
    pop: float  # probability of precipitation, 0.0-1.0
    uv_index: Optional[float] = None
    aqi: Optional[int] = None  # US EPA scale


@dataclass(frozen=True)
class ComfortScore:
    """Composite cycling comfort for one sample plus the sub-scores behind it."""
    score: float  # 0-1
    temperature: float
    wind: float
    precipitation: float
    uv: float = 1.0
    air_quality: float = 1.0

    @property
    def percent(self) -> int:
        return int(round(self.score * 100))

    @property
    def level(self) -> ComfortLevel:
        return classify_comfort(self.score)


@dataclass(frozen=True)
class DailyTrainingLoad:
    """One calendar day of training load."""
    date: date
    tss: float = 0.0
    ride_count: int = 0
    total_duration_s: float = 0.0
    total_distance_m: float = 0.0
    ctl: Optional[float] = None  # Chronic Training Load (fitness)
    atl: Optional[float] = None  # Acute Training Load (fatigue)

    @property
    def tsb(self) -> Optional[float]:
        """Training Stress Balance (form). None until CTL/ATL are computed."""
        if self.ctl is None or self.atl is None:
            return None
        return self.ctl - self.atl


@dataclass(frozen=True)
class RideRecord:
    """A completed ride contributing to one day's load."""
    start_time: datetime
    tss: float
    duration_s: float = 0.0
    distance_m: float = 0.0
