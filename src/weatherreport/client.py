# OOP boundary for external i/o
# all http/keys live here, so the rest of the code is pure and testable
# use a thread-local session per ThreadPoolExecutor worker

from __future__ import annotations
import logging
import threading
from typing import Any, Dict, Optional
import requests
from requests.adapters import HTTPAdapter

from .config import Settings, load_settings
from .errors import ConfigError, WeatherAPIError

logger = logging.getLogger(__name__)


class WeatherAPIClient:
    # this class encapsulates provider details like base URL, params and auth
    WEATHER_PATH = "weather"
    FORECAST_PATH = "forecast"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str = "weather-report/0.1",
        settings: Optional[Settings] = None,
    ):
        settings = settings or load_settings()
        self.api_key = api_key or settings.api_key
        if not self.api_key:
            # fail when key is missing to avoid confusing 401s downstream
            raise ConfigError("OPENWEATHERMAP_API_KEY not set")

        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.timeout
        self.user_agent = user_agent

        # each worker thread lazily obtains its own session through _session()
        self._local = threading.local()

    def _build_session(self) -> requests.Session:
        # central place to configure http behavior like headers and adapters
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent})
        adapter = HTTPAdapter(max_retries=0)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def _session(self) -> requests.Session:
        # thread-local session creation
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
        return sess

    def _get(self, path: str, city: str, units: str) -> Dict[str, Any]:
        url = f"{self.base_url}/{path}"
        params = {"q": city, "units": units, "appid": self.api_key}
        logger.debug("GET %s q=%s units=%s", url, city, units)

        try:
            resp = self._session().get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise WeatherAPIError(f"Request error for {city!r}: {exc}") from exc

        if not resp.ok:
            # surface the remote status text, e.g. "Not Found"
            logger.warning("%s for %r returned HTTP %d", path, city, resp.status_code)
            raise WeatherAPIError(resp.reason or f"HTTP {resp.status_code}", status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise WeatherAPIError(f"Invalid JSON for {city!r}: {exc}") from exc

    def get_current_weather(self, city: str, units: str) -> Dict[str, Any]:
        return self._get(self.WEATHER_PATH, city, units)

    def get_forecast(self, city: str, units: str) -> Dict[str, Any]:
        # 5 day / 3 hour forecast, 40 samples in "list"
        return self._get(self.FORECAST_PATH, city, units)
