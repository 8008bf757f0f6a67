# models and tiny stats helpers to keep data shapes explicit and reusable across the app

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Sequence

METRIC = "metric"
IMPERIAL = "imperial"
VALID_UNITS = (METRIC, IMPERIAL)

TEMPERATURE_UNITS = {
    METRIC: "Celsius",
    IMPERIAL: "Fahrenheit",
}
# the provider answers in Kelvin ("standard") when no units are requested
DEFAULT_TEMPERATURE_UNIT = "Kelvin"


@dataclass(frozen=True)
class Conditions:
    # temperature, humidity, pressure; None only for a forecast day without samples
    temperature: Optional[float]
    humidity: Optional[float]
    pressure: Optional[float]

    @classmethod
    def from_main(cls, main: Dict[str, Any]) -> "Conditions":
        # openweathermap "main" block
        return cls(
            temperature=main["temp"],
            humidity=main["humidity"],
            pressure=main["pressure"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "pressure": self.pressure,
        }


@dataclass(frozen=True)
class ForecastSample:
    # one 3-hour forecast step, timestamp in unix seconds
    timestamp: int
    conditions: Conditions


@dataclass(frozen=True)
class DayAverage:
    date: date
    weather: Conditions

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "weather": self.weather.to_dict()}


@dataclass(frozen=True)
class ReportDetails:
    city: str
    coordinates: str
    temperature_unit: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "coordinates": self.coordinates,
            "temperatureUnit": self.temperature_unit,
        }


@dataclass(frozen=True)
class Report:
    # output value object, serialised by the writer
    details: ReportDetails
    current: Conditions
    forecast: List[DayAverage]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weatherReportDetails": self.details.to_dict(),
            "currentWeatherReport": self.current.to_dict(),
            "forecastReport": [day.to_dict() for day in self.forecast],
        }


def mean(values: Sequence[float]) -> Optional[float]:
    # simple average that returns None on empty input to avoid zero division
    return sum(values) / len(values) if values else None


def round_half_away(value: float, ndigits: int = 0) -> float | int:
    # half away from zero on the shortest repr, so a mean printing as 1.645 becomes 1.65
    # ndigits=0 returns an int
    exp = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(repr(value)).quantize(exp, rounding=ROUND_HALF_UP)
    if ndigits <= 0:
        return int(rounded)
    return float(rounded)
