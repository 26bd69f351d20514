from __future__ import annotations

import json
import logging
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...domain.errors import ConfigurationError, LocationNotFoundError, UpstreamUnavailableError
from ...domain.models import WeatherResult
from ...domain.temperature import is_convertible
from ..http import UpstreamTransportError, fetch

LOGGER = logging.getLogger(__name__)

WEATHERAPI_CURRENT_URL = "https://api.weatherapi.com/v1/current.json"
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_USER_AGENT = "cep-weather/0.1"

# WeatherAPI error code for "No matching location found."
LOCATION_NOT_FOUND_CODE = 1006


class WeatherApiCurrent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    temp_c: float = Field(strict=True, allow_inf_nan=False)


class WeatherApiPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current: WeatherApiCurrent


class WeatherApiErrorDetail(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: int = Field(strict=True)
    message: str = ""


class WeatherApiErrorPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    error: WeatherApiErrorDetail


class WeatherApiAdapter:
    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = WEATHERAPI_CURRENT_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        if not api_key:
            LOGGER.error("WEATHER_API_KEY is not set")
            raise ConfigurationError("weather_api_key", "Weather API key not configured")
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent

    def current_url(self, city_name: str) -> str:
        return f"{self._base_url}?{urlencode({'key': self._api_key, 'q': city_name})}"

    def get_current_temperature(self, city_name: str) -> WeatherResult:
        LOGGER.info("Querying WeatherAPI for %s", city_name)
        try:
            response = fetch(
                self.current_url(city_name),
                timeout=self._timeout_seconds,
                user_agent=self._user_agent,
            )
        except UpstreamTransportError as exc:
            LOGGER.error("WeatherAPI request failed for %s: %s", city_name, exc)
            raise UpstreamUnavailableError("weather", "Failed to get weather information") from exc

        if not response.ok:
            LOGGER.warning(
                "WeatherAPI returned status %d for %s. Body: %s",
                response.status,
                city_name,
                response.log_excerpt(),
            )
            if self._error_code(response.body) == LOCATION_NOT_FOUND_CODE:
                raise LocationNotFoundError("weather", reason=f"WeatherAPI has no match for {city_name}")
            raise UpstreamUnavailableError(
                "weather",
                "Failed to get weather information from WeatherAPI",
                status=response.status,
                body=response.log_excerpt(),
            )

        try:
            payload = WeatherApiPayload.model_validate_json(response.body)
        except ValidationError as exc:
            LOGGER.error("Could not decode WeatherAPI response for %s: %s", city_name, exc)
            raise UpstreamUnavailableError(
                "weather",
                "Failed to parse weather information",
                status=response.status,
                body=response.log_excerpt(),
            ) from exc

        if not is_convertible(payload.current.temp_c):
            LOGGER.error(
                "WeatherAPI temperature for %s is out of range: %r",
                city_name,
                payload.current.temp_c,
            )
            raise UpstreamUnavailableError(
                "weather",
                "Failed to parse weather information",
                status=response.status,
                body=response.log_excerpt(),
            )

        LOGGER.info("Temperature in %s: %.2f°C", city_name, payload.current.temp_c)
        return WeatherResult(temperature_celsius=payload.current.temp_c)

    @staticmethod
    def _error_code(body: bytes) -> int | None:
        try:
            return WeatherApiErrorPayload.model_validate(json.loads(body)).error.code
        except (ValueError, ValidationError):
            return None
