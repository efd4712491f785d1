"""
Cycling Comfort Scorer

Converts one hourly forecast sample into a normalized 0-1 comfort score:
- Temperature vs. the rider's ideal band (dominant factor)
- Wind speed (step function)
- Precipitation probability
- UV index and air quality, when the forecast carries them

Design Philosophy:
- Pure and total: missing UV/AQI is neutral (1.0), never an error
- Unit-aware: thresholds come from the unit table, not inline literals
- Transparent: every sub-score is returned alongside the composite
"""

from dataclasses import dataclass
from typing import Optional
import logging

from ride_analytics.core.config import settings
from ride_analytics.core.exceptions import ConfigurationError
from ride_analytics.models import ComfortScore, HourlySample, UnitSystem
from ride_analytics.services.units import (
    celsius_to_fahrenheit,
    fahrenheit_to_celsius,
    ideal_band,
    parse_unit_system,
    thresholds_for,
)

logger = logging.getLogger(__name__)


# Sub-score floors
TEMPERATURE_FLOOR = 0.2
PRECIPITATION_FLOOR = 0.1
PRECIPITATION_STEEPNESS = 1.2

# UV: no penalty up to 6, linear down to 0.3 at 11
UV_PENALTY_START = 6.0
UV_FLOOR_AT = 11.0
UV_FLOOR = 0.3

# AQI (US EPA): no penalty up to 100, linear down to 0.2 at 300
AQI_PENALTY_START = 100.0
AQI_FLOOR_AT = 300.0
AQI_FLOOR = 0.2

WEIGHT_TOLERANCE = 1e-6


@dataclass(frozen=True)
class ComfortWeights:
    """Blend weights for the comfort sub-scores."""
    temperature: float
    wind: float
    precipitation: float
    uv: float = 0.0
    air_quality: float = 0.0

    @property
    def total(self) -> float:
        return self.temperature + self.wind + self.precipitation + self.uv + self.air_quality

    def validate(self) -> "ComfortWeights":
        """Raise ConfigurationError unless weights are non-negative, sum to 1, temperature largest."""
        values = {
            "temperature": self.temperature,
            "wind": self.wind,
            "precipitation": self.precipitation,
            "uv": self.uv,
            "air_quality": self.air_quality,
        }
        for name, value in values.items():
            if value < 0:
                raise ConfigurationError(f"Weight for {name} must be non-negative, got {value}", field=name)
        if abs(self.total - 1.0) > WEIGHT_TOLERANCE:
            raise ConfigurationError(f"Comfort weights must sum to 1.0, got {self.total:.4f}", field="weights")
        others = [v for k, v in values.items() if k != "temperature"]
        if any(v >= self.temperature for v in others):
            raise ConfigurationError("Temperature must carry the largest comfort weight", field="temperature")
        return self


# 3-factor blend (no UV/AQI in the forecast)
BASE_WEIGHTS = ComfortWeights(temperature=0.5, wind=0.3, precipitation=0.2)

# 5-factor blend (UV and AQI both present)
FULL_WEIGHTS = ComfortWeights(
    temperature=0.40,
    wind=0.25,
    precipitation=0.15,
    uv=0.10,
    air_quality=0.10,
)


def configured_ideal_temperature(units: UnitSystem) -> Optional[float]:
    """
    The configured IDEAL_TEMPERATURE expressed in `units`.

    The setting is stored in the configured UNIT_SYSTEM, so scoring in the
    other system converts it. None when no preference is set.
    """
    ideal_temp = settings.IDEAL_TEMPERATURE
    if ideal_temp is None:
        return None
    if parse_unit_system(settings.UNIT_SYSTEM) == units:
        return ideal_temp
    if units is UnitSystem.METRIC:
        return fahrenheit_to_celsius(ideal_temp)
    return celsius_to_fahrenheit(ideal_temp)


def temperature_score(
    temperature: float,
    units: UnitSystem = UnitSystem.IMPERIAL,
    ideal_temp: Optional[float] = None,
) -> float:
    """
    1.0 inside the ideal band, linear penalty outside it, floored at 0.2.

    Cold penalty spans 20°F (≈11.1°C), heat penalty 25°F (≈13.9°C).
    """
    lower, upper = ideal_band(units, ideal_temp)
    table = thresholds_for(units)

    if lower <= temperature <= upper:
        return 1.0
    if temperature < lower:
        return max(TEMPERATURE_FLOOR, 1.0 - (lower - temperature) / table.cold_penalty_span)
    return max(TEMPERATURE_FLOOR, 1.0 - (temperature - upper) / table.heat_penalty_span)


def wind_score(wind_speed: float, units: UnitSystem = UnitSystem.IMPERIAL) -> float:
    """Step function: 1.0 / 0.7 / 0.4 / 0.2 across the comfortable/moderate/challenging thresholds."""
    table = thresholds_for(units)
    if wind_speed <= table.wind_comfortable:
        return 1.0
    elif wind_speed <= table.wind_moderate:
        return 0.7
    elif wind_speed <= table.wind_challenging:
        return 0.4
    return 0.2


def precipitation_score(pop: float) -> float:
    return max(PRECIPITATION_FLOOR, 1.0 - pop * PRECIPITATION_STEEPNESS)


def uv_score(uv_index: Optional[float]) -> float:
    if uv_index is None or uv_index <= UV_PENALTY_START:
        return 1.0
    if uv_index >= UV_FLOOR_AT:
        return UV_FLOOR
    fraction = (uv_index - UV_PENALTY_START) / (UV_FLOOR_AT - UV_PENALTY_START)
    return 1.0 - fraction * (1.0 - UV_FLOOR)


def air_quality_score(aqi: Optional[float]) -> float:
    if aqi is None or aqi <= AQI_PENALTY_START:
        return 1.0
    if aqi >= AQI_FLOOR_AT:
        return AQI_FLOOR
    fraction = (aqi - AQI_PENALTY_START) / (AQI_FLOOR_AT - AQI_PENALTY_START)
    return 1.0 - fraction * (1.0 - AQI_FLOOR)


class ComfortScorer:
    """
    Scores hourly samples for cycling comfort.

    Weight selection:
    1. Neither UV nor AQI present -> base weights (0.5 / 0.3 / 0.2)
    2. Both present -> full five-factor weights
    3. Exactly one present -> that factor takes its full-table weight,
       the base weights are scaled down to make room
    """

    def __init__(
        self,
        base_weights: Optional[ComfortWeights] = None,
        full_weights: Optional[ComfortWeights] = None,
    ):
        self.base_weights = (base_weights or BASE_WEIGHTS).validate()
        self.full_weights = (full_weights or FULL_WEIGHTS).validate()
        if self.base_weights.uv or self.base_weights.air_quality:
            raise ConfigurationError("Base weights cannot weight UV or air quality", field="base_weights")
        # Single-factor blends are derived from both tables; they must hold the same rules
        self.weights_for(True, False).validate()
        self.weights_for(False, True).validate()
        if base_weights or full_weights:
            logger.info(
                f"Comfort scorer using custom weights: base={self.base_weights}, full={self.full_weights}"
            )

    def weights_for(self, has_uv: bool, has_aqi: bool) -> ComfortWeights:
        if has_uv and has_aqi:
            return self.full_weights
        if not has_uv and not has_aqi:
            return self.base_weights

        extra = self.full_weights.uv if has_uv else self.full_weights.air_quality
        scale = 1.0 - extra
        return ComfortWeights(
            temperature=self.base_weights.temperature * scale,
            wind=self.base_weights.wind * scale,
            precipitation=self.base_weights.precipitation * scale,
            uv=extra if has_uv else 0.0,
            air_quality=extra if has_aqi else 0.0,
        )

    def score(
        self,
        sample: HourlySample,
        units: Optional[UnitSystem] = None,
        ideal_temp: Optional[float] = None,
    ) -> ComfortScore:
        """
        Score a single sample.

        units and ideal_temp fall back to configured preferences when omitted.
        """
        if units is None:
            units = parse_unit_system(settings.UNIT_SYSTEM)
        if ideal_temp is None:
            ideal_temp = configured_ideal_temperature(units)

        temp_component = temperature_score(sample.temperature, units, ideal_temp)
        wind_component = wind_score(sample.wind_speed, units)
        rain_component = precipitation_score(sample.pop)
        uv_component = uv_score(sample.uv_index)
        aqi_component = air_quality_score(sample.aqi)

        weights = self.weights_for(sample.uv_index is not None, sample.aqi is not None)
        weighted = (
            temp_component * weights.temperature +
            wind_component * weights.wind +
            rain_component * weights.precipitation +
            uv_component * weights.uv +
            aqi_component * weights.air_quality
        )

        return ComfortScore(
            score=max(0.0, min(1.0, weighted)),
            temperature=temp_component,
            wind=wind_component,
            precipitation=rain_component,
            uv=uv_component,
            air_quality=aqi_component,
        )


_default_scorer = ComfortScorer()


def score(
    sample: HourlySample,
    units: Optional[UnitSystem] = None,
    ideal_temp: Optional[float] = None,
) -> ComfortScore:
    """Score a sample with the default weight tables."""
    return _default_scorer.score(sample, units, ideal_temp)
