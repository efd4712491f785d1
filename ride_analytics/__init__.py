# Ride Analytics
#
# Cycling comfort and training load analytics over forecast and
# training-stress snapshots.
#
# Architecture:
# - ComfortScorer: hourly sample -> normalized comfort score
# - ForecastAggregator: scored hours -> summary + ordered recommendations
# - TrainingLoadAnalyzer: daily TSS series -> CTL/ATL/TSB, form, ramp rate
#
# Every entry point is a pure, synchronous computation over caller-owned
# input and returns fresh immutable results.

from .models import (
    UnitSystem,
    HourlySample,
    ComfortScore,
    DailyTrainingLoad,
    RideRecord,
)
from .services.comfort_levels import ComfortLevel, classify_comfort
from .services.comfort_scorer import ComfortScorer, ComfortWeights, score
from .services.forecast_aggregator import (
    ForecastAggregator,
    ForecastSummary,
    Recommendation,
    RecommendationKind,
    RecommendationPriority,
    summarize,
)
from .services.training_load import (
    TrainingLoadAnalyzer,
    TrainingLoadSummary,
    FormStatus,
    TrendDirection,
    RampRateStatus,
    classify_form,
)
from .services.readiness import PhysiologicalReadiness

__all__ = [
    # Data model
    'UnitSystem',
    'HourlySample',
    'ComfortScore',
    'DailyTrainingLoad',
    'RideRecord',

    # Comfort
    'ComfortLevel',
    'classify_comfort',
    'ComfortScorer',
    'ComfortWeights',
    'score',

    # Forecast
    'ForecastAggregator',
    'ForecastSummary',
    'Recommendation',
    'RecommendationKind',
    'RecommendationPriority',
    'summarize',

    # Training load
    'TrainingLoadAnalyzer',
    'TrainingLoadSummary',
    'FormStatus',
    'TrendDirection',
    'RampRateStatus',
    'classify_form',
    'PhysiologicalReadiness',
]
