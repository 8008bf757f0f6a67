# runtime settings read from the environment
# a local .env is honoured for development, in production the variables are injected by the scheduler

from __future__ import annotations
import os
from typing import Mapping, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError
from .models import METRIC

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_OUTPUT_DIR = "./output"
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_WORKERS = 8

# environment variable -> Settings field
ENV_FIELDS = {
    "OPENWEATHERMAP_API_KEY": "api_key",
    "OPENWEATHERMAP_BASE_URL": "base_url",
    "WEATHER_REPORT_UNITS": "units",
    "WEATHER_REPORT_TIMEOUT": "timeout",
    "WEATHER_REPORT_MAX_WORKERS": "max_workers",
}


class Settings(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    units: str = METRIC
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0.0)
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, ge=1)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    # tests pass an explicit mapping, everything else reads os.environ after .env
    if env is None:
        load_dotenv()
        env = os.environ

    # unset and empty variables both fall back to the defaults
    raw = {field: env[name] for name, field in ENV_FIELDS.items() if env.get(name)}
    if "base_url" in raw:
        raw["base_url"] = raw["base_url"].rstrip("/")

    try:
        return Settings(**raw)
    except ValidationError as exc:
        names = {field: name for name, field in ENV_FIELDS.items()}
        bad = ", ".join(names.get(str(err["loc"][0]), str(err["loc"][0])) for err in exc.errors())
        raise ConfigError(f"invalid settings ({bad}): {exc}") from exc
