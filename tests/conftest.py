# shared fixtures: provider payloads from tests/data and a fake http session so no test touches the network

import copy
import json
from datetime import date, datetime, time, timedelta
from pathlib import Path

import pytest

from weatherreport.client import WeatherAPIClient
from weatherreport.config import Settings

DATA_DIR = Path(__file__).parent / "data"


def load_json(name):
    return json.loads((DATA_DIR / name).read_text())


def restamp_forecast(forecast, start=None):
    # move the 3-hour samples so the first one sits at local midnight of ``start`` (today by default)
    forecast = copy.deepcopy(forecast)
    midnight = datetime.combine(start or date.today(), time())
    for i, item in enumerate(forecast["list"]):
        item["dt"] = int((midnight + timedelta(hours=3 * i)).timestamp())
    return forecast


class FakeResponse:
    REASONS = {200: "OK", 401: "Unauthorized", 404: "Not Found", 500: "Internal Server Error"}

    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.ok = status_code < 400
        self.reason = self.REASONS.get(status_code, "")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    # routes /weather and /forecast by the "q" parameter, unknown cities get a 404
    def __init__(self, weather, forecast):
        self.data = {"weather": weather, "forecast": forecast}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        endpoint = url.rsplit("/", 1)[-1]
        city = (params or {}).get("q", "").lower()
        if city in self.data.get(endpoint, {}):
            return FakeResponse(self.data[endpoint][city])
        return FakeResponse({"cod": "404", "message": "city not found"}, 404)


@pytest.fixture
def weather_tallinn():
    return load_json("weather_tallinn.json")


@pytest.fixture
def forecast_tallinn():
    return restamp_forecast(load_json("forecast_tallinn.json"))


@pytest.fixture
def helsinki_payloads(weather_tallinn, forecast_tallinn):
    weather = copy.deepcopy(weather_tallinn)
    weather.update(name="Helsinki", coord={"lat": 60.17, "lon": 24.94})
    forecast = copy.deepcopy(forecast_tallinn)
    forecast["city"]["name"] = "Helsinki"
    return weather, forecast


@pytest.fixture
def fake_session(weather_tallinn, forecast_tallinn, helsinki_payloads):
    helsinki_weather, helsinki_forecast = helsinki_payloads
    return FakeSession(
        weather={"tallinn": weather_tallinn, "helsinki": helsinki_weather},
        forecast={"tallinn": forecast_tallinn, "helsinki": helsinki_forecast},
    )


@pytest.fixture
def patched_session(monkeypatch, fake_session):
    # every client built during the test shares the fake session
    monkeypatch.setattr(WeatherAPIClient, "_build_session", lambda self: fake_session)
    return fake_session


@pytest.fixture
def client(patched_session):
    return WeatherAPIClient(api_key="test-key", settings=Settings(base_url="https://owm.test/data/2.5"))
