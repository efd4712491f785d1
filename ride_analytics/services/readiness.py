"""
Physiological Readiness

Snapshot of recovery metrics supplied by the health-data collaborator
(HRV, resting heart rate, sleep) and a simple 0-100 readiness score
comparing the latest values to their own recent averages.

Weights:
    - HRV drop below average: 0.4 per % below
    - RHR rise above average: 0.4 per % above
    - Sleep short of goal (7-day average, else 7h): -10 / -20 points
"""

from dataclasses import dataclass
from typing import Optional


SEVEN_HOURS_S = 7 * 3600.0
HRV_WEIGHT = 0.4
RHR_WEIGHT = 0.4


@dataclass(frozen=True)
class PhysiologicalReadiness:
    latest_hrv: Optional[float] = None  # ms
    average_hrv: Optional[float] = None
    latest_rhr: Optional[float] = None  # bpm
    average_rhr: Optional[float] = None
    sleep_duration_s: Optional[float] = None
    average_sleep_duration_s: Optional[float] = None

    def readiness_score(self) -> int:
        score = 100.0

        if self.latest_hrv is not None and self.average_hrv:
            hrv_penalty = max(0.0, (self.average_hrv - self.latest_hrv) / self.average_hrv * 100.0)
            score -= hrv_penalty * HRV_WEIGHT

        if self.latest_rhr is not None and self.average_rhr:
            rhr_penalty = max(0.0, (self.latest_rhr - self.average_rhr) / self.average_rhr * 100.0)
            score -= rhr_penalty * RHR_WEIGHT

        if self.sleep_duration_s is not None:
            sleep_goal = self.average_sleep_duration_s or SEVEN_HOURS_S
            if self.sleep_duration_s < sleep_goal * 0.8:
                score -= 20
            elif self.sleep_duration_s < sleep_goal * 0.9:
                score -= 10

        return int(max(0.0, min(100.0, score)))

    @property
    def is_hrv_low(self) -> bool:
        """HRV more than 15% under its average (missing values read as 50ms)."""
        latest = self.latest_hrv if self.latest_hrv is not None else 50.0
        average = self.average_hrv if self.average_hrv is not None else 50.0
        return latest < average * 0.85

    @property
    def is_rhr_high(self) -> bool:
        """Resting HR 4+ bpm over its average (missing values read as 60bpm)."""
        latest = self.latest_rhr if self.latest_rhr is not None else 60.0
        average = self.average_rhr if self.average_rhr is not None else 60.0
        return latest > average + 4


def readiness_status(score: int) -> str:
    if score >= 85:
        return "Prime Condition"
    elif score >= 70:
        return "Ready to Train"
    elif score >= 55:
        return "Moderate Fatigue"
    elif score >= 40:
        return "High Fatigue"
    return "Recovery Needed"


def readiness_color(score: int) -> str:
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    elif score >= 40:
        return "orange"
    return "red"
