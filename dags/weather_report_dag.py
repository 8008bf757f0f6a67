# dags/weather_report_dag.py
from __future__ import annotations
import os
from datetime import datetime, timedelta
from typing import Dict, List
from airflow.decorators import dag, task
from airflow.exceptions import AirflowFailException
from weatherreport.cities import read_cities_file
from weatherreport.client import WeatherAPIClient
from weatherreport.config import DEFAULT_OUTPUT_DIR, load_settings
from weatherreport.errors import WeatherReportError
from weatherreport.service import build_reports, fetch_current_weather, fetch_weather_forecast
from weatherreport.writer import report_path, write_report_file


@dag(
    dag_id="weather_report",
    start_date=datetime(2025, 1, 1),
    schedule="0 6 * * *",
    catchup=False,
    default_args={"owner": "weather-eng", "retries": 1, "retry_delay": timedelta(minutes=2)},
    tags=["weather", "report"],
)
def weather_report():
    @task
    def load_cities() -> List[str]:
        path = os.getenv("WEATHER_REPORT_CITIES_FILE")
        try:
            return read_cities_file(path)
        except WeatherReportError as e:
            raise AirflowFailException(f"load_cities({path!r}): {e}")

    @task(pool="openweathermap", execution_timeout=timedelta(seconds=60))
    def fetch(cities: List[str]) -> Dict[str, list]:
        settings = load_settings()
        try:
            client = WeatherAPIClient(settings=settings)
            weather = fetch_current_weather(cities, settings.units, client=client, max_workers=settings.max_workers)
            forecast = fetch_weather_forecast(cities, settings.units, client=client, max_workers=settings.max_workers)
        except WeatherReportError as e:
            # message carries the remote status text from our client
            raise AirflowFailException(f"fetch({cities}) error: {e}")
        return {"weather": weather, "forecast": forecast}

    @task
    def publish(cities: List[str], payloads: Dict[str, list]) -> List[str]:
        settings = load_settings()
        output_dir = os.getenv("WEATHER_REPORT_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)
        reports = build_reports(cities, payloads["weather"], payloads["forecast"], settings.units)
        written = [str(write_report_file(report_path(output_dir, city), r)) for city, r in reports.items()]
        for path in written:
            print(f"wrote {path}")
        return written

    cities = load_cities()
    publish(cities, fetch(cities))


dag = weather_report()
