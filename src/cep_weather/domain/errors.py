from __future__ import annotations

from typing import Literal

Stage = Literal["location", "weather"]


class WeatherLookupError(RuntimeError):
    """Base class for every outcome that ends a weather lookup with an error response."""

    status_code: int = 500
    public_message: str = "Internal server error"
    json_body: bool = False

    def __init__(self, public_message: str | None = None) -> None:
        if public_message is not None:
            self.public_message = public_message
        super().__init__(self.public_message)


class ClientInputError(WeatherLookupError):
    """Raised for bad requests; no upstream call is made."""

    status_code = 400


class MethodNotAllowedError(ClientInputError):
    status_code = 405
    public_message = "Method not allowed"


class MissingPostalCodeError(ClientInputError):
    status_code = 400
    public_message = "CEP parameter is required"


class InvalidPostalCodeError(ClientInputError):
    status_code = 422
    public_message = "invalid zipcode"
    json_body = True

    def __init__(self, value: str) -> None:
        super().__init__()
        self.value = value


class LocationNotFoundError(WeatherLookupError):
    """The postal code could not be resolved by one of the upstream services."""

    status_code = 404
    public_message = "can not find zipcode"
    json_body = True

    def __init__(self, stage: Stage, *, reason: str = "") -> None:
        super().__init__()
        self.stage = stage
        self.reason = reason


class UpstreamUnavailableError(WeatherLookupError):
    """Transport failure, non-200 status or malformed body from an upstream service."""

    status_code = 500

    def __init__(
        self,
        stage: Stage,
        public_message: str,
        *,
        status: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(public_message)
        self.stage = stage
        self.status = status
        self.body = body


class ConfigurationError(WeatherLookupError):
    status_code = 500

    def __init__(self, setting: str, public_message: str) -> None:
        super().__init__(public_message)
        self.setting = setting
