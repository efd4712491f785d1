"""
Pytest configuration and fixtures

Builders for forecast samples and daily training load series.
Everything under test is pure, so no isolation beyond fresh objects is needed.
"""
import pytest
import sys
import os
from datetime import date, datetime, timedelta

# Add the repository root to the path so we can import ride_analytics
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ride_analytics.models import DailyTrainingLoad, HourlySample


BASE_TIME = datetime(2025, 8, 16, 6, 0)


@pytest.fixture
def make_sample():
    """Factory for HourlySample with comfortable defaults (imperial)."""
    def _make(
        hour: int = 0,
        temperature: float = 67.5,
        wind_speed: float = 0.0,
        pop: float = 0.0,
        uv_index=None,
        aqi=None,
        wind_deg: int = 0,
        feels_like=None,
    ) -> HourlySample:
        return HourlySample(
            timestamp=BASE_TIME + timedelta(hours=hour),
            temperature=temperature,
            feels_like=temperature if feels_like is None else feels_like,
            wind_speed=wind_speed,
            wind_deg=wind_deg,
            pop=pop,
            uv_index=uv_index,
            aqi=aqi,
        )
    return _make


@pytest.fixture
def make_series():
    """Factory for a consecutive daily series from a list of TSS values."""
    def _make(tss_values, start: date = date(2025, 1, 1), ride_count: int = 1):
        return [
            DailyTrainingLoad(
                date=start + timedelta(days=offset),
                tss=tss,
                ride_count=ride_count if tss > 0 else 0,
                total_duration_s=3600.0 if tss > 0 else 0.0,
                total_distance_m=30000.0 if tss > 0 else 0.0,
            )
            for offset, tss in enumerate(tss_values)
        ]
    return _make
