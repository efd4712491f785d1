"""
Training Load Analyzer

Calculates training stress metrics from a daily TSS series:
- ATL (Acute Training Load) - fatigue (7-day time constant)
- CTL (Chronic Training Load) - fitness (42-day time constant)
- TSB (Training Stress Balance) - form (CTL - ATL)

On top of the daily series it derives:
- Form status (Overreached / Building / Neutral / Fresh / Very Fresh)
- Ramp rate (CTL change vs. exactly 7 calendar days earlier)
- CTL/ATL trend direction and trailing 7-day TSS against a weekly target
- Recommendations and prioritized insights

Design Philosophy:
- The daily series is owned by the caller; every operation returns new objects
- Degenerate input falls back to documented values (no entry 7 days ago -> ramp 0)
- Cold start: the first day seeds CTL and ATL with its own TSS
"""

from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, replace
from enum import Enum
import csv
import io
import math
import logging

from ride_analytics.core.config import settings
from ride_analytics.core.exceptions import ConfigurationError, InvalidInputError
from ride_analytics.models import DailyTrainingLoad, RideRecord
from ride_analytics.services.readiness import PhysiologicalReadiness

logger = logging.getLogger(__name__)


METERS_PER_MILE = 1609.344

# Safe ramp band, TSS/week
SAFE_RAMP_RATE = 8.0
TREND_THRESHOLD = 1.0


class FormStatus(str, Enum):
    """Form classification from TSB."""
    OVERREACHED = "overreached"
    BUILDING = "building"
    NEUTRAL = "neutral"
    FRESH = "fresh"
    VERY_FRESH = "very_fresh"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FormStatusInfo:
    """Information about a form status."""
    status: FormStatus
    label: str
    description: str
    color: str  # For UI display


_FORM_INFO: Dict[FormStatus, FormStatusInfo] = {
    FormStatus.OVERREACHED: FormStatusInfo(
        status=FormStatus.OVERREACHED,
        label="Overreached",
        description="Fatigue well above fitness - recovery needed",
        color="red",
    ),
    FormStatus.BUILDING: FormStatusInfo(
        status=FormStatus.BUILDING,
        label="Building",
        description="Productive overload - fatigue accumulating",
        color="orange",
    ),
    FormStatus.NEUTRAL: FormStatusInfo(
        status=FormStatus.NEUTRAL,
        label="Neutral",
        description="Fitness and fatigue roughly balanced",
        color="gray",
    ),
    FormStatus.FRESH: FormStatusInfo(
        status=FormStatus.FRESH,
        label="Fresh",
        description="Recovered and ready for hard efforts",
        color="green",
    ),
    FormStatus.VERY_FRESH: FormStatusInfo(
        status=FormStatus.VERY_FRESH,
        label="Very Fresh",
        description="Well rested - race window, or detraining if prolonged",
        color="mint",
    ),
    FormStatus.UNKNOWN: FormStatusInfo(
        status=FormStatus.UNKNOWN,
        label="Unknown",
        description="No training load computed yet",
        color="gray",
    ),
}


def classify_form(tsb: Optional[float]) -> FormStatus:
    """
    Bins: < -20 Overreached, [-20, -5) Building, [-5, 10] Neutral,
    (10, 25] Fresh, > 25 Very Fresh.
    """
    if tsb is None:
        return FormStatus.UNKNOWN
    if tsb < -20:
        return FormStatus.OVERREACHED
    elif tsb < -5:
        return FormStatus.BUILDING
    elif tsb <= 10:
        return FormStatus.NEUTRAL
    elif tsb <= 25:
        return FormStatus.FRESH
    return FormStatus.VERY_FRESH


def get_form_info(tsb: Optional[float]) -> FormStatusInfo:
    return _FORM_INFO[classify_form(tsb)]


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


def trend_direction(delta: float) -> TrendDirection:
    if delta > TREND_THRESHOLD:
        return TrendDirection.UP
    elif delta < -TREND_THRESHOLD:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


class RampRateStatus(str, Enum):
    DETRAINING = "Detraining"
    TAPERING = "Tapering"
    MAINTAINING = "Maintaining"
    BUILDING_SAFELY = "Building Safely"
    BUILDING_TOO_FAST = "Building Too Fast"

    @property
    def color(self) -> str:
        return {
            RampRateStatus.DETRAINING: "red",
            RampRateStatus.TAPERING: "blue",
            RampRateStatus.MAINTAINING: "green",
            RampRateStatus.BUILDING_SAFELY: "green",
            RampRateStatus.BUILDING_TOO_FAST: "orange",
        }[self]


def classify_ramp_rate(ramp_rate: float) -> RampRateStatus:
    if ramp_rate < -8:
        return RampRateStatus.DETRAINING
    elif ramp_rate < -3:
        return RampRateStatus.TAPERING
    elif ramp_rate <= 3:
        return RampRateStatus.MAINTAINING
    elif ramp_rate <= 8:
        return RampRateStatus.BUILDING_SAFELY
    return RampRateStatus.BUILDING_TOO_FAST


@dataclass(frozen=True)
class TrainingLoadSummary:
    """Point-in-time training load snapshot. Derived, never persisted."""
    as_of: date
    current_ctl: float
    current_atl: float
    current_tsb: float
    weekly_tss: float  # trailing 7 calendar days
    ramp_rate: float  # CTL change per week
    form_status: FormStatus
    ctl_trend: TrendDirection
    atl_trend: TrendDirection
    recommendation: str

    @property
    def is_safe_ramp_rate(self) -> bool:
        return abs(self.ramp_rate) <= SAFE_RAMP_RATE

    @property
    def ramp_rate_status(self) -> RampRateStatus:
        return classify_ramp_rate(self.ramp_rate)

    @property
    def form_info(self) -> FormStatusInfo:
        return _FORM_INFO[self.form_status]


class InsightPriority(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


_PRIORITY_ORDER = {
    InsightPriority.CRITICAL: 0,
    InsightPriority.WARNING: 1,
    InsightPriority.INFO: 2,
    InsightPriority.SUCCESS: 3,
}


@dataclass(frozen=True)
class TrainingLoadInsight:
    priority: InsightPriority
    title: str
    message: str
    recommendation: str
    icon: str


@dataclass(frozen=True)
class WeeklyProgress:
    weekly_tss: float
    weekly_target: int
    ctl_trend: TrendDirection
    atl_trend: TrendDirection

    @property
    def completion(self) -> float:
        """Fraction of the weekly target done, capped at 1.0."""
        return min(1.0, self.weekly_tss / self.weekly_target)


@dataclass(frozen=True)
class WeeklyStats:
    ride_days: int
    total_hours: float
    total_distance_km: float
    total_distance_miles: float
    fitness_change: float  # CTL change over the week


@dataclass(frozen=True)
class TrainingLoadPeriod:
    days: int
    name: str


PERIOD_WEEK = TrainingLoadPeriod(days=7, name="Week")
PERIOD_TWO_WEEKS = TrainingLoadPeriod(days=14, name="2 Weeks")
PERIOD_MONTH = TrainingLoadPeriod(days=30, name="Month")
PERIOD_THREE_MONTHS = TrainingLoadPeriod(days=90, name="3 Months")
PERIOD_SIX_MONTHS = TrainingLoadPeriod(days=180, name="6 Months")
PERIOD_YEAR = TrainingLoadPeriod(days=365, name="Year")

ALL_PERIODS = [
    PERIOD_WEEK, PERIOD_TWO_WEEKS, PERIOD_MONTH,
    PERIOD_THREE_MONTHS, PERIOD_SIX_MONTHS, PERIOD_YEAR,
]


@dataclass(frozen=True)
class ProjectedDay:
    date: date
    day_offset: int
    projected_tss: float
    ctl: float
    atl: float
    tsb: float
    form_status: FormStatus


class TrainingLoadAnalyzer:
    """
    Analyzes a daily training load series.

    The series is expected to hold at most one entry per calendar day.
    CTL/ATL are recomputed from TSS on every call; stored CTL/ATL values
    on the input are ignored.
    """

    # Constants for exponential decay
    ATL_DECAY_DAYS = 7  # Acute (fatigue) - short term
    CTL_DECAY_DAYS = 42  # Chronic (fitness) - long term

    def __init__(self, weekly_target: Optional[int] = None):
        self.weekly_target = weekly_target if weekly_target is not None else settings.WEEKLY_TSS_TARGET
        if self.weekly_target <= 0:
            raise ConfigurationError(
                f"Weekly TSS target must be positive, got {self.weekly_target}",
                field="weekly_target",
            )

    # =========================================================================
    # ATL / CTL / TSB CALCULATION
    # =========================================================================

    @staticmethod
    def ema_step(previous: float, tss: float, decay_days: int) -> float:
        """One day of exponential decay: prev + (tss - prev) * (1 - e^(-1/days))."""
        return previous + (tss - previous) * (1 - math.exp(-1 / decay_days))

    def recalculate(self, loads: Sequence[DailyTrainingLoad]) -> List[DailyTrainingLoad]:
        """
        Return the series sorted by date with CTL/ATL filled in.

        The first entry seeds both averages with its own TSS.
        """
        ordered = sorted(loads, key=lambda load: load.date)
        result: List[DailyTrainingLoad] = []

        current_ctl = 0.0
        current_atl = 0.0
        for index, load in enumerate(ordered):
            if index == 0:
                current_ctl = load.tss
                current_atl = load.tss
            else:
                current_ctl = self.ema_step(current_ctl, load.tss, self.CTL_DECAY_DAYS)
                current_atl = self.ema_step(current_atl, load.tss, self.ATL_DECAY_DAYS)
            result.append(replace(load, ctl=current_ctl, atl=current_atl))

        logger.debug(f"Recalculated training load for {len(result)} days")
        return result

    def fill_missing_days(
        self,
        loads: Sequence[DailyTrainingLoad],
        through: Optional[date] = None,
    ) -> List[DailyTrainingLoad]:
        """
        Insert zero-TSS days from the first entry through `through`
        (default: last entry) so CTL/ATL decay over rest days.
        """
        if not loads:
            return []

        by_date = {load.date: load for load in loads}
        first_date = min(by_date)
        last_date = max(by_date)
        if through is not None and through > last_date:
            last_date = through

        filled: List[DailyTrainingLoad] = []
        current = first_date
        while current <= last_date:
            filled.append(by_date.get(current) or DailyTrainingLoad(date=current, tss=0.0))
            current += timedelta(days=1)

        if len(filled) > len(by_date):
            logger.info(
                f"Training load: filled {len(filled) - len(by_date)} rest days "
                f"({first_date.isoformat()} to {last_date.isoformat()})"
            )
        return self.recalculate(filled)

    # =========================================================================
    # SAME-DAY ACCUMULATION
    # =========================================================================

    def add_ride(
        self,
        loads: Sequence[DailyTrainingLoad],
        ride: RideRecord,
    ) -> List[DailyTrainingLoad]:
        """Accumulate a ride into its calendar day (creating the day if needed)."""
        if ride.tss < 0:
            raise InvalidInputError(f"Ride TSS must be non-negative, got {ride.tss}", field="tss")

        ride_date = ride.start_time.date()
        updated: List[DailyTrainingLoad] = []
        found = False
        for load in loads:
            if load.date == ride_date:
                found = True
                load = replace(
                    load,
                    tss=load.tss + ride.tss,
                    ride_count=load.ride_count + 1,
                    total_duration_s=load.total_duration_s + ride.duration_s,
                    total_distance_m=load.total_distance_m + ride.distance_m,
                )
            updated.append(load)

        if not found:
            updated.append(DailyTrainingLoad(
                date=ride_date,
                tss=ride.tss,
                ride_count=1,
                total_duration_s=ride.duration_s,
                total_distance_m=ride.distance_m,
            ))

        logger.info(f"Training load: added ride with {round(ride.tss)} TSS on {ride_date.isoformat()}")
        return self.recalculate(updated)

    def remove_ride(
        self,
        loads: Sequence[DailyTrainingLoad],
        ride: RideRecord,
    ) -> List[DailyTrainingLoad]:
        """Subtract a ride from its day; the day is dropped once no rides remain."""
        ride_date = ride.start_time.date()
        updated: List[DailyTrainingLoad] = []
        for load in loads:
            if load.date == ride_date:
                load = replace(
                    load,
                    tss=max(0.0, load.tss - ride.tss),
                    ride_count=max(0, load.ride_count - 1),
                    total_duration_s=max(0.0, load.total_duration_s - ride.duration_s),
                    total_distance_m=max(0.0, load.total_distance_m - ride.distance_m),
                )
                if load.ride_count == 0:
                    logger.info(f"Training load: removed last ride on {ride_date.isoformat()}")
                    continue
            updated.append(load)
        return self.recalculate(updated)

    # =========================================================================
    # SUMMARY
    # =========================================================================

    def analyze(
        self,
        loads: Sequence[DailyTrainingLoad],
        as_of: Optional[date] = None,
    ) -> Optional[TrainingLoadSummary]:
        """
        Summarize the series at its latest day (or the latest day on/before as_of).

        Returns None when there is no entry to summarize.
        """
        series = self.recalculate(loads)
        if as_of is not None:
            series = [load for load in series if load.date <= as_of]
        if not series:
            return None

        latest = series[-1]
        current_ctl = latest.ctl
        current_atl = latest.atl
        current_tsb = current_ctl - current_atl

        ramp_rate = current_ctl - self._value_days_before(series, latest.date, "ctl", current_ctl)
        atl_change = current_atl - self._value_days_before(series, latest.date, "atl", current_atl)
        weekly_tss = self._weekly_tss(series, latest.date)

        return TrainingLoadSummary(
            as_of=latest.date,
            current_ctl=current_ctl,
            current_atl=current_atl,
            current_tsb=current_tsb,
            weekly_tss=weekly_tss,
            ramp_rate=ramp_rate,
            form_status=classify_form(current_tsb),
            ctl_trend=trend_direction(ramp_rate),
            atl_trend=trend_direction(atl_change),
            recommendation=self._generate_recommendation(current_tsb, ramp_rate),
        )

    @staticmethod
    def _value_days_before(
        series: Sequence[DailyTrainingLoad],
        day: date,
        attribute: str,
        fallback: float,
        days: int = 7,
    ) -> float:
        """CTL/ATL from exactly `days` calendar days before `day`, else fallback."""
        target = day - timedelta(days=days)
        for load in series:
            if load.date == target:
                value = getattr(load, attribute)
                return fallback if value is None else value
        return fallback

    @staticmethod
    def _weekly_tss(series: Sequence[DailyTrainingLoad], as_of: date) -> float:
        """Sum of TSS over the 7 calendar days ending on as_of (inclusive)."""
        window_start = as_of - timedelta(days=6)
        return sum(load.tss for load in series if window_start <= load.date <= as_of)

    def _generate_recommendation(self, tsb: float, ramp_rate: float) -> str:
        """Generate context-aware training recommendation"""
        status = classify_form(tsb)

        if status == FormStatus.OVERREACHED:
            return "Take 2-3 rest days. Your fatigue is very high and needs immediate recovery."

        if status == FormStatus.BUILDING:
            return "Schedule an easy day or rest day soon. You're building significant fatigue."

        if status in (FormStatus.FRESH, FormStatus.VERY_FRESH):
            if ramp_rate < -5:
                return "You're fresh but detraining. Consider increasing training volume gradually."
            if status == FormStatus.VERY_FRESH:
                return "Perfect time for a hard workout or race. You're well-recovered and ready."
            return "Good recovery status. You can handle high-intensity training today."

        if ramp_rate > SAFE_RAMP_RATE:
            return "Slow down your build. Increase training load by no more than 5-8 TSS/week."

        if 3 < ramp_rate <= SAFE_RAMP_RATE:
            return "Excellent! You're building fitness at a sustainable rate."

        if abs(ramp_rate) <= 3:
            return "Maintaining current fitness level. Increase volume gradually if you want to improve."

        return "Continue with balanced training. Mix hard and easy days appropriately."

    # =========================================================================
    # WEEKLY VIEWS
    # =========================================================================

    def weekly_progress(
        self,
        loads: Sequence[DailyTrainingLoad],
        as_of: Optional[date] = None,
    ) -> Optional[WeeklyProgress]:
        summary = self.analyze(loads, as_of)
        if summary is None:
            return None
        return WeeklyProgress(
            weekly_tss=summary.weekly_tss,
            weekly_target=self.weekly_target,
            ctl_trend=summary.ctl_trend,
            atl_trend=summary.atl_trend,
        )

    def weekly_stats(
        self,
        loads: Sequence[DailyTrainingLoad],
        as_of: Optional[date] = None,
    ) -> WeeklyStats:
        """Ride days, hours, distance and CTL change over the trailing 7 calendar days."""
        series = self.recalculate(loads)
        if as_of is not None:
            series = [load for load in series if load.date <= as_of]
        if not series:
            return WeeklyStats(
                ride_days=0,
                total_hours=0.0,
                total_distance_km=0.0,
                total_distance_miles=0.0,
                fitness_change=0.0,
            )

        latest = series[-1]
        window_start = latest.date - timedelta(days=6)
        last_week = [load for load in series if window_start <= load.date <= latest.date]

        total_meters = sum(load.total_distance_m for load in last_week)
        fitness_change = latest.ctl - self._value_days_before(series, latest.date, "ctl", latest.ctl)

        return WeeklyStats(
            ride_days=sum(1 for load in last_week if load.ride_count > 0),
            total_hours=sum(load.total_duration_s for load in last_week) / 3600,
            total_distance_km=total_meters / 1000,
            total_distance_miles=total_meters / METERS_PER_MILE,
            fitness_change=fitness_change,
        )

    @staticmethod
    def loads_for_period(
        loads: Sequence[DailyTrainingLoad],
        period: TrainingLoadPeriod,
        as_of: date,
    ) -> List[DailyTrainingLoad]:
        """Entries within the period ending on as_of, newest first."""
        cutoff = as_of - timedelta(days=period.days)
        selected = [load for load in loads if cutoff <= load.date <= as_of]
        return sorted(selected, key=lambda load: load.date, reverse=True)

    # =========================================================================
    # INSIGHTS
    # =========================================================================

    def insights(
        self,
        summary: Optional[TrainingLoadSummary],
        readiness: Optional[PhysiologicalReadiness] = None,
    ) -> List[TrainingLoadInsight]:
        """
        Prioritized insights (critical, warning, info, success) from the
        load summary and, when available, physiological readiness.
        """
        if summary is None:
            return [TrainingLoadInsight(
                priority=InsightPriority.INFO,
                title="No Training Data",
                message="Import rides to start tracking your training load.",
                recommendation="Your fitness (CTL), fatigue (ATL), and form (TSB) will appear here.",
                icon="figure.outdoor.cycle",
            )]

        insights: List[TrainingLoadInsight] = []
        tsb = summary.current_tsb

        if readiness is not None:
            insights.extend(self._readiness_insights(summary, readiness))

        # Form status (skipped when readiness already flagged something critical)
        if not any(i.priority == InsightPriority.CRITICAL for i in insights):
            if summary.form_status == FormStatus.OVERREACHED:
                insights.append(TrainingLoadInsight(
                    priority=InsightPriority.CRITICAL,
                    title="High Fatigue Level",
                    message=f"TSB: {round(tsb)}. Your body needs recovery.",
                    recommendation="Take 2-3 easy days or rest completely. Fatigue this high increases injury risk.",
                    icon="exclamationmark.triangle.fill",
                ))
            elif summary.form_status == FormStatus.BUILDING:
                insights.append(TrainingLoadInsight(
                    priority=InsightPriority.WARNING,
                    title="Building Fatigue",
                    message=f"TSB: {round(tsb)}. You're carrying significant fatigue.",
                    recommendation="Schedule an easy day or rest day in the next 48 hours.",
                    icon="battery.25",
                ))
            elif summary.form_status in (FormStatus.FRESH, FormStatus.VERY_FRESH):
                if not any(i.priority == InsightPriority.SUCCESS for i in insights):
                    insights.append(TrainingLoadInsight(
                        priority=InsightPriority.SUCCESS,
                        title="Well Recovered",
                        message=f"TSB: {round(tsb)}. You're fresh and ready for hard efforts.",
                        recommendation="Good time for high-intensity training or racing.",
                        icon="bolt.fill",
                    ))

        # Ramp rate
        if not summary.is_safe_ramp_rate:
            if summary.ramp_rate > SAFE_RAMP_RATE:
                insights.append(TrainingLoadInsight(
                    priority=InsightPriority.WARNING,
                    title="Building Too Fast",
                    message=f"CTL increasing by {summary.ramp_rate:.1f} TSS/week.",
                    recommendation="Safe rate is 5-8 TSS/week. Slow down to avoid overtraining or injury.",
                    icon="speedometer",
                ))
            else:
                insights.append(TrainingLoadInsight(
                    priority=InsightPriority.INFO,
                    title="Fitness Declining",
                    message=f"CTL decreasing by {abs(summary.ramp_rate):.1f} TSS/week.",
                    recommendation="If intentional taper, perfect. Otherwise, increase training volume gradually.",
                    icon="arrow.down.circle",
                ))
        elif summary.ramp_rate > 5:
            insights.append(TrainingLoadInsight(
                priority=InsightPriority.SUCCESS,
                title="Building Fitness Safely",
                message=f"CTL increasing by {summary.ramp_rate:.1f} TSS/week.",
                recommendation="You're in the optimal building range. Keep this up for sustained improvement.",
                icon="arrow.up.circle.fill",
            ))

        # Fitness vs fatigue
        if summary.current_ctl / max(summary.current_atl, 1) < 0.9:
            insights.append(TrainingLoadInsight(
                priority=InsightPriority.WARNING,
                title="Fatigue Exceeds Fitness",
                message="Short-term load is higher than long-term fitness.",
                recommendation="You're accumulating fatigue faster than building fitness. Consider a recovery week.",
                icon="chart.line.downtrend.xyaxis",
            ))

        # Weekly volume, only once there is some fitness to maintain
        target_weekly_tss = summary.current_ctl * 0.7
        if summary.weekly_tss < target_weekly_tss * 0.5 and summary.current_ctl > 10:
            insights.append(TrainingLoadInsight(
                priority=InsightPriority.INFO,
                title="Low Training Volume",
                message=f"Weekly TSS: {round(summary.weekly_tss)}, Target: ~{round(target_weekly_tss)}",
                recommendation="Increase weekly volume gradually to maintain fitness.",
                icon="arrow.up",
            ))

        return sorted(insights, key=lambda insight: _PRIORITY_ORDER[insight.priority])

    @staticmethod
    def _readiness_insights(
        summary: TrainingLoadSummary,
        readiness: PhysiologicalReadiness,
    ) -> List[TrainingLoadInsight]:
        insights: List[TrainingLoadInsight] = []
        tsb = summary.current_tsb
        sleep_s = readiness.sleep_duration_s

        # Positive form but body shows stress
        if tsb > 5 and (readiness.is_hrv_low or readiness.is_rhr_high):
            reasons = []
            if readiness.is_hrv_low and readiness.latest_hrv is not None and readiness.average_hrv is not None:
                reasons.append(
                    f"HRV is {round(readiness.latest_hrv)}ms "
                    f"(well below your avg of {round(readiness.average_hrv)}ms)."
                )
            if readiness.is_rhr_high and readiness.latest_rhr is not None and readiness.average_rhr is not None:
                reasons.append(
                    f"Resting HR is {round(readiness.latest_rhr)}bpm "
                    f"(above your avg of {round(readiness.average_rhr)}bpm)."
                )
            insights.append(TrainingLoadInsight(
                priority=InsightPriority.CRITICAL,
                title="Readiness Mismatch",
                message=(
                    f"Your Form (TSB {round(tsb)}) is positive, but your body shows high stress. "
                    + " ".join(reasons)
                ).strip(),
                recommendation=(
                    "Your body is not recovered (illness, poor sleep, life stress). "
                    "A high TSB is misleading. Strongly consider an easy recovery day."
                ),
                icon="exclamationmark.triangle.fill",
            ))

        hrv_is_high = (readiness.latest_hrv or 0) > (readiness.average_hrv or 1)
        rhr_is_normal = (
            (readiness.latest_rhr if readiness.latest_rhr is not None else 100) <
            (readiness.average_rhr if readiness.average_rhr is not None else 101)
        )
        good_sleep = (sleep_s or 0) > 7 * 3600
        if -15 < tsb < 15 and (hrv_is_high or rhr_is_normal) and good_sleep:
            insights.append(TrainingLoadInsight(
                priority=InsightPriority.SUCCESS,
                title="Primed for Performance",
                message="TSB is optimal and recovery metrics (HRV/RHR/Sleep) are strong.",
                recommendation=(
                    "This is a perfect day to execute a key high-intensity workout. "
                    "Your body is fit, fresh, and ready to adapt."
                ),
                icon="checkmark.seal.fill",
            ))

        building_fatigue = summary.current_atl > summary.current_ctl * 0.9
        short_sleep = (sleep_s if sleep_s is not None else 8 * 3600) < 6 * 3600
        if building_fatigue and short_sleep:
            insights.append(TrainingLoadInsight(
                priority=InsightPriority.WARNING,
                title="Inadequate Recovery",
                message=(
                    f"Your Fatigue (ATL) is high, but you only slept "
                    f"{int((sleep_s or 0) // 3600)} hours."
                ),
                recommendation=(
                    "You are not recovering from your training. Prioritize 7-9 hours of sleep "
                    "tonight or schedule a rest day to avoid overtraining."
                ),
                icon="battery.25",
            ))

        return insights

    # =========================================================================
    # PROJECTION AND EXPORT
    # =========================================================================

    def project(
        self,
        loads: Sequence[DailyTrainingLoad],
        days_ahead: int = 14,
        planned_tss_per_day: Optional[List[float]] = None,
    ) -> List[ProjectedDay]:
        """
        Project future CTL/ATL/TSB from the latest day.

        Days without a planned TSS are assumed to be rest (TSS=0).
        """
        series = self.recalculate(loads)
        if not series:
            return []

        latest = series[-1]
        current_ctl = latest.ctl
        current_atl = latest.atl

        projections: List[ProjectedDay] = []
        for day_offset in range(1, days_ahead + 1):
            if planned_tss_per_day and day_offset <= len(planned_tss_per_day):
                day_tss = planned_tss_per_day[day_offset - 1]
            else:
                day_tss = 0.0

            current_ctl = self.ema_step(current_ctl, day_tss, self.CTL_DECAY_DAYS)
            current_atl = self.ema_step(current_atl, day_tss, self.ATL_DECAY_DAYS)
            current_tsb = current_ctl - current_atl

            projections.append(ProjectedDay(
                date=latest.date + timedelta(days=day_offset),
                day_offset=day_offset,
                projected_tss=day_tss,
                ctl=current_ctl,
                atl=current_atl,
                tsb=current_tsb,
                form_status=classify_form(current_tsb),
            ))

        return projections

    def export_csv(self, loads: Sequence[DailyTrainingLoad]) -> str:
        """One row per day: Date,TSS,ATL,CTL,TSB,Rides,Distance(km),Duration(min)."""
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(["Date", "TSS", "ATL", "CTL", "TSB", "Rides", "Distance(km)", "Duration(min)"])

        for load in self.recalculate(loads):
            writer.writerow([
                load.date.isoformat(),
                int(load.tss),
                f"{load.atl:.1f}",
                f"{load.ctl:.1f}",
                f"{load.tsb:.1f}",
                load.ride_count,
                f"{load.total_distance_m / 1000:.1f}",
                f"{load.total_duration_s / 60:.0f}",
            ])

        return output.getvalue()
