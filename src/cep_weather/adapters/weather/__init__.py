from .base import WeatherAdapter
from .weatherapi import WeatherApiAdapter

__all__ = ["WeatherAdapter", "WeatherApiAdapter"]
