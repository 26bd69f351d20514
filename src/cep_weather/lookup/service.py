from __future__ import annotations

import logging

from ..adapters.geocoding import GeocodingAdapter, ViaCepGeocodingAdapter
from ..adapters.weather import WeatherAdapter, WeatherApiAdapter
from ..domain.models import TemperatureReport
from ..settings import AppSettings

LOGGER = logging.getLogger(__name__)


def build_geocoding_adapter(settings: AppSettings) -> ViaCepGeocodingAdapter:
    upstreams = settings.upstreams
    return ViaCepGeocodingAdapter(
        base_url=upstreams.geocoding.base_url,
        timeout_seconds=upstreams.timeout_seconds,
        user_agent=upstreams.user_agent,
    )


def build_weather_adapter(settings: AppSettings) -> WeatherApiAdapter:
    """Raises ConfigurationError when the weather API key is not set."""
    upstreams = settings.upstreams
    return WeatherApiAdapter(
        api_key=settings.weather_api_key,
        base_url=upstreams.weather.base_url,
        timeout_seconds=upstreams.timeout_seconds,
        user_agent=upstreams.user_agent,
    )


def lookup_temperature(
    postal_code: str,
    *,
    geocoder: GeocodingAdapter,
    weather: WeatherAdapter,
) -> TemperatureReport:
    """Resolve a validated postal code to its city's current temperature.

    The weather lookup only runs once the city is known; any error raised by
    either adapter propagates unchanged and ends the lookup.
    """
    location = geocoder.resolve(postal_code)
    current = weather.get_current_temperature(location.city_name)
    report = TemperatureReport.from_weather(current)
    LOGGER.info(
        "CEP %s (%s): %s°C / %s°F / %sK",
        postal_code,
        location.city_name,
        report.celsius,
        report.fahrenheit,
        report.kelvin,
    )
    return report


def get_temperature_report(postal_code: str, settings: AppSettings) -> TemperatureReport:
    # Both adapters are built first so a missing API key fails before any upstream call.
    weather = build_weather_adapter(settings)
    geocoder = build_geocoding_adapter(settings)
    return lookup_temperature(postal_code, geocoder=geocoder, weather=weather)
