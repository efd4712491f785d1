"""
Display helpers for forecast values.

Compass rose, precipitation/UV/AQI labels and unit-suffixed
temperature and wind strings. Numbers are rounded to integers.
"""

from typing import Optional

from ride_analytics.models import UnitSystem


COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def compass_direction(wind_deg: float) -> str:
    """16-point compass label; each point covers 22.5° centred on its heading."""
    index = int((wind_deg % 360 + 11.25) // 22.5) % 16
    return COMPASS_POINTS[index]


def format_precipitation(pop: float) -> str:
    return f"{round(pop * 100)}%"


def uv_level(uv_index: float) -> str:
    if uv_index < 3:
        return "Low"
    elif uv_index < 6:
        return "Moderate"
    elif uv_index < 8:
        return "High"
    elif uv_index < 11:
        return "Very High"
    return "Extreme"


def format_uv(uv_index: Optional[float]) -> str:
    if uv_index is None:
        return "UV --"
    return f"UV {round(uv_index)} ({uv_level(uv_index)})"


def aqi_category(aqi: float) -> str:
    """US EPA AQI category."""
    if aqi <= 50:
        return "Good"
    elif aqi <= 100:
        return "Moderate"
    elif aqi <= 150:
        return "Unhealthy for Sensitive Groups"
    elif aqi <= 200:
        return "Unhealthy"
    elif aqi <= 300:
        return "Very Unhealthy"
    return "Hazardous"


def format_aqi(aqi: Optional[float]) -> str:
    if aqi is None:
        return "AQI --"
    return f"AQI {round(aqi)} ({aqi_category(aqi)})"


def format_temperature(temperature: float, units: UnitSystem) -> str:
    return f"{round(temperature)}{units.temperature_symbol}"


def format_wind(wind_speed: float, units: UnitSystem, wind_deg: Optional[float] = None) -> str:
    text = f"{round(wind_speed)} {units.speed_symbol}"
    if wind_deg is not None:
        text += f" {compass_direction(wind_deg)}"
    return text
