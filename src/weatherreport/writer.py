# persists one pretty-printed json report per city

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Union

from .models import Report

logger = logging.getLogger(__name__)


def report_path(output_dir: Union[str, os.PathLike], city: str) -> Path:
    return Path(output_dir) / f"{city}.json"


def write_report_file(filename: Union[str, os.PathLike], report: Union[Report, Mapping[str, Any]]) -> Path:
    # creates missing parent directories and overwrites any existing file
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = report.to_dict() if isinstance(report, Report) else dict(report)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("wrote report %s", path)
    return path
