from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from typing import Optional, List, Tuple

from ride_analytics.core.config import settings
from ride_analytics.services.forecast_aggregator import ForecastSummary
from ride_analytics.services.readiness import PhysiologicalReadiness
from ride_analytics.services.training_load import TrainingLoadSummary


class ComfortScoreResponse(BaseModel):
    """Per-hour comfort for charting"""
    timestamp: datetime
    score: float  # 0-1
    percent: int
    level: str  # excellent, good, fair, poor
    temperature: float
    wind: float
    precipitation: float
    uv: float
    air_quality: float


class RecommendationResponse(BaseModel):
    kind: str
    title: str
    description: str
    priority: str  # high, medium, low
    icon: str
    color: str


class ComfortDistributionResponse(BaseModel):
    excellent: int = 0
    good: int = 0
    fair: int = 0
    poor: int = 0

    model_config = ConfigDict(from_attributes=True)


class ForecastSummaryResponse(BaseModel):
    units: str
    average_comfort: int  # percent
    best_hour: Optional[datetime] = None
    best_hour_comfort: Optional[int] = None
    temperature_range: Tuple[float, float]
    wind_range: Tuple[float, float]
    max_precipitation: float
    optimal_hours_count: int
    challenging_hours_count: int
    distribution: ComfortDistributionResponse
    hours: List[ComfortScoreResponse] = []
    recommendations: List[RecommendationResponse] = []


class TrainingLoadSummaryResponse(BaseModel):
    as_of: date
    current_ctl: float
    current_atl: float
    current_tsb: float
    weekly_tss: float
    ramp_rate: float
    ramp_rate_status: str
    form_status: str
    form_label: str
    form_color: str
    ctl_trend: str  # up, down, stable
    atl_trend: str
    recommendation: str


class WidgetPayload(BaseModel):
    """Flat complication payload: numbers and strings only."""
    tsb: int
    ctl: int
    atl: int
    readiness_percent: Optional[int] = None
    status: str
    weekly_tss: int
    weekly_target: int


def forecast_summary_response(summary: ForecastSummary) -> ForecastSummaryResponse:
    best = summary.best_hour
    return ForecastSummaryResponse(
        units=summary.units.value,
        average_comfort=summary.average_comfort_percent,
        best_hour=best.sample.timestamp if best else None,
        best_hour_comfort=best.comfort.percent if best else None,
        temperature_range=summary.temperature_range,
        wind_range=summary.wind_range,
        max_precipitation=summary.max_precipitation,
        optimal_hours_count=summary.optimal_hours_count,
        challenging_hours_count=summary.challenging_hours_count,
        distribution=ComfortDistributionResponse.model_validate(summary.distribution),
        hours=[
            ComfortScoreResponse(
                timestamp=hour.sample.timestamp,
                score=hour.comfort.score,
                percent=hour.comfort.percent,
                level=hour.comfort.level.value,
                temperature=hour.comfort.temperature,
                wind=hour.comfort.wind,
                precipitation=hour.comfort.precipitation,
                uv=hour.comfort.uv,
                air_quality=hour.comfort.air_quality,
            )
            for hour in summary.hours
        ],
        recommendations=[
            RecommendationResponse(
                kind=rec.kind.value,
                title=rec.title,
                description=rec.description,
                priority=rec.priority.value,
                icon=rec.icon,
                color=rec.color,
            )
            for rec in summary.recommendations
        ],
    )


def training_load_summary_response(summary: TrainingLoadSummary) -> TrainingLoadSummaryResponse:
    return TrainingLoadSummaryResponse(
        as_of=summary.as_of,
        current_ctl=round(summary.current_ctl, 1),
        current_atl=round(summary.current_atl, 1),
        current_tsb=round(summary.current_tsb, 1),
        weekly_tss=round(summary.weekly_tss, 1),
        ramp_rate=round(summary.ramp_rate, 1),
        ramp_rate_status=summary.ramp_rate_status.value,
        form_status=summary.form_status.value,
        form_label=summary.form_info.label,
        form_color=summary.form_info.color,
        ctl_trend=summary.ctl_trend.value,
        atl_trend=summary.atl_trend.value,
        recommendation=summary.recommendation,
    )


def build_widget_payload(
    summary: TrainingLoadSummary,
    readiness: Optional[PhysiologicalReadiness] = None,
    weekly_target: Optional[int] = None,
) -> WidgetPayload:
    if weekly_target is None:
        weekly_target = settings.WEEKLY_TSS_TARGET
    return WidgetPayload(
        tsb=round(summary.current_tsb),
        ctl=round(summary.current_ctl),
        atl=round(summary.current_atl),
        readiness_percent=readiness.readiness_score() if readiness is not None else None,
        status=summary.form_info.label,
        weekly_tss=round(summary.weekly_tss),
        weekly_target=weekly_target,
    )
