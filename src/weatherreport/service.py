# orchestration and business rules.
# use ThreadPoolExecutor to fan the per-city network calls out and join them again
# provides pure functions (details, current, forecast averages) and a run_report coordinator


from __future__ import annotations
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .client import WeatherAPIClient
from .config import DEFAULT_MAX_WORKERS
from .errors import InvalidUnits, MissingCityNames, ReportError
from .models import (
    Conditions,
    DayAverage,
    ForecastSample,
    Report,
    ReportDetails,
    DEFAULT_TEMPERATURE_UNIT,
    TEMPERATURE_UNITS,
    VALID_UNITS,
    mean,
    round_half_away,
)
from .writer import report_path, write_report_file

logger = logging.getLogger(__name__)

FORECAST_DAYS = 3


def is_valid_units(units: Any) -> bool:
    return units in VALID_UNITS


def _validate_request(city_names: Optional[Sequence[str]], units: Any) -> None:
    if not city_names:
        raise MissingCityNames()
    if not is_valid_units(units):
        raise InvalidUnits()


def _fetch_all(
    fetch: Callable[[str, str], Dict[str, Any]],
    city_names: Sequence[str],
    units: str,
    max_workers: int,
) -> List[Dict[str, Any]]:
    # all-or-nothing: map() re-raises the first failure when results are consumed
    workers = max(1, min(max_workers, len(city_names)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(lambda name: fetch(name, units), city_names))


def fetch_current_weather(
    city_names: Optional[Sequence[str]],
    units: Any,
    client: Optional[WeatherAPIClient] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[Dict[str, Any]]:
    # current weather payloads for every city, in input order
    _validate_request(city_names, units)
    client = client or WeatherAPIClient()
    logger.info("fetching current weather for %d cities (%s)", len(city_names), units)
    return _fetch_all(client.get_current_weather, city_names, units, max_workers)


def fetch_weather_forecast(
    city_names: Optional[Sequence[str]],
    units: Any,
    client: Optional[WeatherAPIClient] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[Dict[str, Any]]:
    # 5 day / 3 hour forecast payloads for every city, in input order
    _validate_request(city_names, units)
    client = client or WeatherAPIClient()
    logger.info("fetching forecasts for %d cities (%s)", len(city_names), units)
    return _fetch_all(client.get_forecast, city_names, units, max_workers)


def convert_coordinate(coord: Dict[str, Any]) -> str:
    # "59.44,24.75", no space after the comma
    return f"{coord['lat']},{coord['lon']}"


def build_details(weather: Dict[str, Any], units: Any) -> ReportDetails:
    return ReportDetails(
        city=weather["name"],
        coordinates=convert_coordinate(weather["coord"]),
        temperature_unit=TEMPERATURE_UNITS.get(units, DEFAULT_TEMPERATURE_UNIT),
    )


def build_current(weather: Dict[str, Any]) -> Conditions:
    return Conditions.from_main(weather["main"])


def parse_samples(forecast: Dict[str, Any]) -> List[ForecastSample]:
    # openweathermap shape: forecast["list"][i] = {"dt": ..., "main": {...}}
    return [
        ForecastSample(timestamp=item["dt"], conditions=Conditions.from_main(item["main"]))
        for item in forecast["list"]
    ]


def one_day_average(samples: Sequence[ForecastSample], day: date) -> DayAverage:
    # average the samples that fall on day in local time
    # temperature to two decimals, humidity and pressure to whole numbers, None for a day without samples
    matching = [s.conditions for s in samples if datetime.fromtimestamp(s.timestamp).date() == day]
    if not matching:
        logger.warning("no forecast samples for %s", day.isoformat())
        return DayAverage(date=day, weather=Conditions(None, None, None))

    temperature = mean([c.temperature for c in matching])
    humidity = mean([c.humidity for c in matching])
    pressure = mean([c.pressure for c in matching])

    return DayAverage(
        date=day,
        weather=Conditions(
            temperature=round_half_away(temperature, 2),
            humidity=round_half_away(humidity),
            pressure=round_half_away(pressure),
        ),
    )


def build_forecast(forecast: Dict[str, Any], today: Optional[date] = None) -> List[DayAverage]:
    # tomorrow, the day after and two days after, in that order
    today = today or date.today()
    samples = parse_samples(forecast)
    return [one_day_average(samples, today + timedelta(days=offset)) for offset in range(1, FORECAST_DAYS + 1)]


def build_report(
    weather: Dict[str, Any],
    forecast: Dict[str, Any],
    units: Any,
    today: Optional[date] = None,
) -> Report:
    return Report(
        details=build_details(weather, units),
        current=build_current(weather),
        forecast=build_forecast(forecast, today=today),
    )


def _by_name(payloads: Sequence[Dict[str, Any]], name_of: Callable[[Dict[str, Any]], str]) -> Dict[str, Dict[str, Any]]:
    return {name_of(p).casefold(): p for p in payloads}


def _match(
    city: str,
    index: int,
    by_name: Dict[str, Dict[str, Any]],
    payloads: Sequence[Dict[str, Any]],
    expected: int,
) -> Optional[Dict[str, Any]]:
    # the provider may normalise names ("Sao Paulo" -> "São Paulo"), the fetchers keep input order
    payload = by_name.get(city.casefold())
    if payload is None and len(payloads) == expected:
        payload = payloads[index]
    return payload


def build_reports(
    city_names: Sequence[str],
    weather_payloads: Sequence[Dict[str, Any]],
    forecast_payloads: Sequence[Dict[str, Any]],
    units: Any,
    today: Optional[date] = None,
) -> Dict[str, Report]:
    # correlate payloads to the requested names by the name the provider returns
    weather_by_name = _by_name(weather_payloads, lambda p: p["name"])
    forecast_by_name = _by_name(forecast_payloads, lambda p: p["city"]["name"])
    # one date for the whole batch, even if the run crosses midnight
    today = today or date.today()

    reports: Dict[str, Report] = {}
    for i, city in enumerate(city_names):
        weather = _match(city, i, weather_by_name, weather_payloads, len(city_names))
        if weather is None:
            raise ReportError(f"No current weather returned for {city!r}")
        forecast = _match(city, i, forecast_by_name, forecast_payloads, len(city_names))
        if forecast is None:
            raise ReportError(f"No forecast returned for {city!r}")
        reports[city] = build_report(weather, forecast, units, today=today)
    return reports


def run_report(
    city_names: Sequence[str],
    output_dir: Union[str, os.PathLike],
    units: str,
    client: Optional[WeatherAPIClient] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    today: Optional[date] = None,
) -> List[Path]:
    # fetch, build and write one report per city, returns the written paths
    _validate_request(city_names, units)
    client = client or WeatherAPIClient()
    weather = fetch_current_weather(city_names, units, client=client, max_workers=max_workers)
    forecasts = fetch_weather_forecast(city_names, units, client=client, max_workers=max_workers)
    reports = build_reports(city_names, weather, forecasts, units, today=today or date.today())

    # writes are sequential and only start once every fetch succeeded
    return [write_report_file(report_path(output_dir, city), report) for city, report in reports.items()]
