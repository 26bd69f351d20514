from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .temperature import celsius_to_fahrenheit, celsius_to_kelvin


class LocationResult(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    city_name: str

    @field_validator("city_name")
    @classmethod
    def validate_city_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("city_name must not be empty")
        return value


class WeatherResult(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    temperature_celsius: float = Field(allow_inf_nan=False)


class TemperatureReport(BaseModel):
    """Current temperature in the three scales returned to clients.

    Only celsius is stored; fahrenheit and kelvin are always derived from it.
    """

    model_config = ConfigDict(frozen=True)

    celsius: float = Field(serialization_alias="temp_C", allow_inf_nan=False)

    @computed_field(alias="temp_F")
    @property
    def fahrenheit(self) -> float:
        return celsius_to_fahrenheit(self.celsius)

    @computed_field(alias="temp_K")
    @property
    def kelvin(self) -> float:
        return celsius_to_kelvin(self.celsius)

    @classmethod
    def from_weather(cls, weather: WeatherResult) -> TemperatureReport:
        return cls(celsius=weather.temperature_celsius)

    def to_payload(self) -> dict[str, float]:
        return self.model_dump(by_alias=True)


class ErrorReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str
