"""
Comfort level classification.

The single four-tier bucketing used by the scorer, the aggregator's
distribution counts and every display consumer.
"""

from enum import Enum


EXCELLENT_ABOVE = 0.8
GOOD_ABOVE = 0.6
FAIR_ABOVE = 0.4

# Aggregator hour filters (strict on both sides)
OPTIMAL_HOUR_ABOVE = 0.7
CHALLENGING_HOUR_BELOW = 0.4


class ComfortLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return _COLORS[self]


_COLORS = {
    ComfortLevel.EXCELLENT: "green",
    ComfortLevel.GOOD: "yellow",
    ComfortLevel.FAIR: "orange",
    ComfortLevel.POOR: "red",
}


def classify_comfort(score: float) -> ComfortLevel:
    """>0.8 excellent, >0.6 good, >0.4 fair, otherwise poor."""
    if score > EXCELLENT_ABOVE:
        return ComfortLevel.EXCELLENT
    elif score > GOOD_ABOVE:
        return ComfortLevel.GOOD
    elif score > FAIR_ABOVE:
        return ComfortLevel.FAIR
    return ComfortLevel.POOR


def is_optimal_hour(score: float) -> bool:
    return score > OPTIMAL_HOUR_ABOVE


def is_challenging_hour(score: float) -> bool:
    return score < CHALLENGING_HOUR_BELOW
