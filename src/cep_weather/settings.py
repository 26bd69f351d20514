from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_GEOCODING_URL = "https://viacep.com.br/ws"
DEFAULT_WEATHER_URL = "https://api.weatherapi.com/v1/current.json"


def _validate_http_url(value: str, *, field_name: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError(f"{field_name} must not be empty")

    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"{field_name} must be an absolute http(s) URL")
    return text.rstrip("/")


class GeocodingUpstreamSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    base_url: str = DEFAULT_GEOCODING_URL

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        return _validate_http_url(value, field_name="upstreams.geocoding.base_url")


class WeatherUpstreamSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    base_url: str = DEFAULT_WEATHER_URL

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        return _validate_http_url(value, field_name="upstreams.weather.base_url")


class UpstreamSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    geocoding: GeocodingUpstreamSettings = Field(default_factory=GeocodingUpstreamSettings)
    weather: WeatherUpstreamSettings = Field(default_factory=WeatherUpstreamSettings)
    timeout_seconds: float = Field(default=10, gt=0, le=60)
    user_agent: str = "cep-weather/0.1"

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("upstreams.user_agent must not be empty")
        return text


class ServiceYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    upstreams: UpstreamSettings = Field(default_factory=UpstreamSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    weather_api_key: str = ""
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    cep_weather_env: Literal["dev", "test", "prod"] = "dev"
    cep_weather_log_level: str = "INFO"
    cep_weather_config_path: Path | None = None

    @field_validator("weather_api_key")
    @classmethod
    def strip_api_key(cls, value: str) -> str:
        return value.strip()

    @field_validator("cep_weather_log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Unknown log level: {value}")
        return level


class AppSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    env: EnvSettings
    yaml: ServiceYamlSettings = Field(default_factory=ServiceYamlSettings)
    config_path: Path | None = None

    @property
    def weather_api_key(self) -> str:
        return self.env.weather_api_key

    @property
    def upstreams(self) -> UpstreamSettings:
        return self.yaml.upstreams


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _load_yaml_settings(path: Path) -> ServiceYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"Service config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Service config must be a YAML mapping/object at the top level")
    return ServiceYamlSettings.model_validate(raw_config)


def build_settings(env: EnvSettings) -> AppSettings:
    if env.cep_weather_config_path is None:
        return AppSettings(env=env)

    config_path = _resolve_project_path(env.cep_weather_config_path)
    return AppSettings(env=env, yaml=_load_yaml_settings(config_path), config_path=config_path)


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    return build_settings(EnvSettings())
