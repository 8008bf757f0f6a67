# connects input (cities file -> output dir) to the service and writes one report per city

from __future__ import annotations
import argparse
import logging
from typing import List, Optional

from .cities import read_cities_file
from .client import WeatherAPIClient
from .config import DEFAULT_OUTPUT_DIR, load_settings
from .errors import WeatherReportError
from .models import VALID_UNITS
from .service import run_report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather-report",
        description="Write current weather and a 3 day forecast for each city in a JSON list",
    )
    parser.add_argument("cities_file", nargs="?", help="JSON file with an array of city names")
    parser.add_argument("output_dir", nargs="?", default=DEFAULT_OUTPUT_DIR,
                        help=f"directory for <city>.json reports (default: {DEFAULT_OUTPUT_DIR})")
    parser.add_argument("--units", choices=VALID_UNITS, default=None,
                        help="measurement units (default: WEATHER_REPORT_UNITS or metric)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # no cities file is not an error, just show how to call us
    if not args.cities_file:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
        units = args.units or settings.units
        cities = read_cities_file(args.cities_file)
        client = WeatherAPIClient(settings=settings)
        written = run_report(cities, args.output_dir, units, client=client, max_workers=settings.max_workers)
    except WeatherReportError as exc:
        logger.error("%s", exc)
        return 1

    for path in written:
        print(path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
