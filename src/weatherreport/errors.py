# exception hierarchy shared by every layer
# one base class lets the cli tell expected failures from programming errors

from __future__ import annotations


class WeatherReportError(RuntimeError):
    pass


class ConfigError(WeatherReportError):
    pass


class CityListError(WeatherReportError):
    # base for everything wrong with the cities file
    pass


class FileNotSpecified(CityListError):
    def __init__(self, message: str = "File not specified"):
        super().__init__(message)


class EmptyFile(CityListError):
    def __init__(self, message: str = "Empty file"):
        super().__init__(message)


class InvalidJSON(CityListError):
    def __init__(self, message: str = "Invalid JSON"):
        super().__init__(message)


class NotAnArray(CityListError):
    def __init__(self, message: str = "Not an array"):
        super().__init__(message)


class NotArrayOfStrings(CityListError):
    def __init__(self, message: str = "Not an array of strings"):
        super().__init__(message)


class MissingCityNames(WeatherReportError):
    def __init__(self, message: str = "Missing city names"):
        super().__init__(message)


class InvalidUnits(WeatherReportError, ValueError):
    def __init__(self, message: str = "Invalid or missing units"):
        super().__init__(message)


class WeatherAPIError(WeatherReportError):
    # message is the remote status text, the code is kept for callers that care
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ReportError(WeatherReportError):
    pass
