"""
Forecast Aggregator

Summarizes an hourly forecast window for cycling:
- Average comfort, best hour, optimal and challenging hours
- Temperature / wind ranges and peak precipitation chance
- Comfort level distribution (shared four-tier classification)
- Ordered recommendations: Optimal Window, Wind, Temperature, Rain

An empty forecast yields a zero-valued summary with no recommendations.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import logging

from ride_analytics.core.config import settings
from ride_analytics.core.exceptions import ConfigurationError
from ride_analytics.models import ComfortScore, HourlySample, UnitSystem
from ride_analytics.services.comfort_levels import (
    ComfortLevel,
    is_challenging_hour,
    is_optimal_hour,
)
from ride_analytics.services.comfort_scorer import ComfortScorer, configured_ideal_temperature
from ride_analytics.services.units import parse_unit_system, thresholds_for

logger = logging.getLogger(__name__)


RAIN_ALERT_ABOVE = 0.5
MAX_WINDOW_HOURS = 48


class RecommendationKind(str, Enum):
    OPTIMAL_WINDOW = "optimal_window"
    WIND_ALERT = "wind_alert"
    TEMPERATURE_ALERT = "temperature_alert"
    RAIN_ALERT = "rain_alert"


class RecommendationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Recommendation:
    kind: RecommendationKind
    title: str
    description: str
    priority: RecommendationPriority
    icon: str
    color: str  # For UI display


@dataclass(frozen=True)
class ScoredHour:
    sample: HourlySample
    comfort: ComfortScore


@dataclass(frozen=True)
class ComfortDistribution:
    excellent: int = 0
    good: int = 0
    fair: int = 0
    poor: int = 0

    @property
    def total(self) -> int:
        return self.excellent + self.good + self.fair + self.poor


@dataclass(frozen=True)
class ForecastSummary:
    """Aggregate statistics and recommendations for one forecast window."""
    units: UnitSystem
    average_comfort: float = 0.0  # 0-1
    best_hour: Optional[ScoredHour] = None
    hours: List[ScoredHour] = field(default_factory=list)
    optimal_hours: List[ScoredHour] = field(default_factory=list)
    challenging_hours: List[ScoredHour] = field(default_factory=list)
    temperature_range: Tuple[float, float] = (0.0, 0.0)
    wind_range: Tuple[float, float] = (0.0, 0.0)
    max_precipitation: float = 0.0
    distribution: ComfortDistribution = field(default_factory=ComfortDistribution)
    recommendations: List[Recommendation] = field(default_factory=list)

    @property
    def average_comfort_percent(self) -> int:
        return int(round(self.average_comfort * 100))

    @property
    def optimal_hours_count(self) -> int:
        return len(self.optimal_hours)

    @property
    def challenging_hours_count(self) -> int:
        return len(self.challenging_hours)


class ForecastAggregator:
    """
    Builds forecast summaries from hourly samples.

    Scores every sample with the ComfortScorer, then derives statistics
    and recommendations from the scored hours.
    """

    def __init__(self, scorer: Optional[ComfortScorer] = None):
        self.scorer = scorer or ComfortScorer()

    def summarize(
        self,
        samples: Sequence[HourlySample],
        units: Optional[UnitSystem] = None,
        ideal_temp: Optional[float] = None,
        window_hours: Optional[int] = None,
    ) -> ForecastSummary:
        """
        Summarize the first window_hours samples (default: configured window).
        """
        if units is None:
            units = parse_unit_system(settings.UNIT_SYSTEM)
        if ideal_temp is None:
            ideal_temp = configured_ideal_temperature(units)
        if window_hours is None:
            window_hours = settings.FORECAST_WINDOW_HOURS
        if not 1 <= window_hours <= MAX_WINDOW_HOURS:
            raise ConfigurationError(
                f"Forecast window must be 1-{MAX_WINDOW_HOURS} hours, got {window_hours}",
                field="window_hours",
            )

        window = list(samples)[:window_hours]
        if not window:
            logger.debug("Forecast summary requested for empty window")
            return ForecastSummary(units=units)

        hours = [
            ScoredHour(sample=sample, comfort=self.scorer.score(sample, units, ideal_temp))
            for sample in window
        ]

        temps = [h.sample.temperature for h in hours]
        winds = [h.sample.wind_speed for h in hours]

        summary = ForecastSummary(
            units=units,
            average_comfort=sum(h.comfort.score for h in hours) / len(hours),
            best_hour=self._best_hour(hours),
            hours=hours,
            optimal_hours=[h for h in hours if is_optimal_hour(h.comfort.score)],
            challenging_hours=[h for h in hours if is_challenging_hour(h.comfort.score)],
            temperature_range=(min(temps), max(temps)),
            wind_range=(min(winds), max(winds)),
            max_precipitation=max(h.sample.pop for h in hours),
            distribution=self._distribution(hours),
        )
        recommendations = self.recommendations(summary)

        logger.debug(
            f"Summarized {len(hours)} forecast hours: avg comfort {summary.average_comfort:.2f}, "
            f"{len(recommendations)} recommendations"
        )
        return replace(summary, recommendations=recommendations)

    @staticmethod
    def _best_hour(hours: List[ScoredHour]) -> ScoredHour:
        """Highest comfort; ties go to the earliest timestamp."""
        best = hours[0]
        for hour in hours[1:]:
            if hour.comfort.score > best.comfort.score:
                best = hour
            elif (hour.comfort.score == best.comfort.score and
                  hour.sample.timestamp < best.sample.timestamp):
                best = hour
        return best

    @staticmethod
    def _distribution(hours: List[ScoredHour]) -> ComfortDistribution:
        counts = {level: 0 for level in ComfortLevel}
        for hour in hours:
            counts[hour.comfort.level] += 1
        return ComfortDistribution(
            excellent=counts[ComfortLevel.EXCELLENT],
            good=counts[ComfortLevel.GOOD],
            fair=counts[ComfortLevel.FAIR],
            poor=counts[ComfortLevel.POOR],
        )

    def recommendations(self, summary: ForecastSummary) -> List[Recommendation]:
        """
        Conditionally append, in fixed order:
        1. Optimal Window (whenever there is a best hour)
        2. Wind Alert (max wind above the alert threshold)
        3. Temperature Alert (min below cold alert or max above heat alert)
        4. Rain Alert (max precipitation chance above 50%)
        """
        recs: List[Recommendation] = []
        units = summary.units
        table = thresholds_for(units)
        temp_unit = units.temperature_symbol
        speed_unit = units.speed_symbol

        best = summary.best_hour
        if best is not None:
            recs.append(Recommendation(
                kind=RecommendationKind.OPTIMAL_WINDOW,
                title="Optimal Window",
                description=(
                    f"Best cycling from {best.sample.timestamp:%H:%M} with {best.comfort.percent}% "
                    f"comfort score. Temperature will be {round(best.sample.temperature)}{temp_unit} "
                    f"with {round(best.sample.wind_speed)}{speed_unit} winds."
                ),
                priority=RecommendationPriority.HIGH,
                icon="star.fill",
                color="green",
            ))

        _, max_wind = summary.wind_range
        if max_wind > table.wind_alert:
            recs.append(Recommendation(
                kind=RecommendationKind.WIND_ALERT,
                title="Wind Alert",
                description=(
                    f"High winds expected (up to {round(max_wind)}{speed_unit}). "
                    f"Choose sheltered routes or plan shorter rides."
                ),
                priority=RecommendationPriority.MEDIUM,
                icon="wind",
                color="orange",
            ))

        min_temp, max_temp = summary.temperature_range
        if min_temp < table.cold_alert or max_temp > table.heat_alert:
            recs.append(Recommendation(
                kind=RecommendationKind.TEMPERATURE_ALERT,
                title="Temperature Alert",
                description=(
                    f"Temperature extremes expected ({round(min_temp)}°-{round(max_temp)}{temp_unit}). "
                    f"Layer appropriately and bring extra fluids."
                ),
                priority=RecommendationPriority.MEDIUM,
                icon="thermometer",
                color="blue",
            ))

        if summary.max_precipitation > RAIN_ALERT_ABOVE:
            recs.append(Recommendation(
                kind=RecommendationKind.RAIN_ALERT,
                title="Rain Alert",
                description=(
                    f"High chance of precipitation ({round(summary.max_precipitation * 100)}%). "
                    f"Consider indoor alternatives or waterproof gear."
                ),
                priority=RecommendationPriority.HIGH,
                icon="cloud.rain.fill",
                color="blue",
            ))

        return recs


def summarize(
    samples: Sequence[HourlySample],
    units: Optional[UnitSystem] = None,
    ideal_temp: Optional[float] = None,
    window_hours: Optional[int] = None,
) -> ForecastSummary:
    """Summarize a forecast with the default scorer."""
    return ForecastAggregator().summarize(samples, units, ideal_temp, window_hours)
