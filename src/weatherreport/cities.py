# reads and validates the json list of city names

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import List, Union

from .errors import EmptyFile, FileNotSpecified, InvalidJSON, NotAnArray, NotArrayOfStrings

logger = logging.getLogger(__name__)


def read_cities_file(filename: Union[str, os.PathLike, None]) -> List[str]:
    # CityListError subclasses for bad content, OSError from opening the file propagates
    if not filename or not isinstance(filename, (str, os.PathLike)):
        raise FileNotSpecified()

    raw = Path(filename).read_bytes()
    if not raw:
        raise EmptyFile()

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise InvalidJSON() from exc

    if not isinstance(data, list):
        raise NotAnArray()

    if any(not isinstance(item, str) for item in data):
        raise NotArrayOfStrings()

    logger.info("read %d cities from %s", len(data), filename)
    return data
