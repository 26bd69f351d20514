from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .api.errors import register_error_handlers
from .api.responses import TemperatureJSONResponse, temperature_response
from .domain.postal_code import validate_postal_code
from .logging_config import configure_logging
from .lookup.service import get_temperature_report
from .settings import AppSettings, load_settings

LOGGER = logging.getLogger(__name__)

SERVICE_NAME = "cep-weather"


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _first_query_value(request: Request, name: str) -> str | None:
    values = request.query_params.getlist(name)
    return values[0] if values else None


@asynccontextmanager
async def lifespan(application: FastAPI):
    if getattr(application.state, "settings", None) is None:
        application.state.settings = load_settings()
    settings: AppSettings = application.state.settings
    LOGGER.info(
        "Starting %s (env=%s, weather key configured=%s)",
        SERVICE_NAME,
        settings.env.cep_weather_env,
        bool(settings.weather_api_key),
    )
    yield


def create_app(settings: AppSettings | None = None) -> FastAPI:
    application = FastAPI(title="CEP Weather", version=__version__, lifespan=lifespan)
    application.state.settings = settings
    register_error_handlers(application)

    @application.get("/weather", response_class=TemperatureJSONResponse)
    def get_weather(request: Request) -> TemperatureJSONResponse:
        settings = _get_settings(request)
        if settings is None:
            settings = load_settings()
            request.app.state.settings = settings
        postal_code = validate_postal_code(_first_query_value(request, "cep"))
        report = get_temperature_report(postal_code, settings)
        return temperature_response(report)

    @application.get("/health", response_class=JSONResponse)
    async def health(request: Request) -> JSONResponse:
        settings = _get_settings(request)
        return JSONResponse(
            {
                "status": "ok",
                "service": SERVICE_NAME,
                "environment": settings.env.cep_weather_env if settings else None,
                "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            }
        )

    return application


app = create_app()


def run() -> None:
    settings = load_settings()
    configure_logging(settings.env.cep_weather_log_level)
    app.state.settings = settings
    LOGGER.info("Server listening on %s:%d", settings.env.host, settings.env.port)
    uvicorn.run(app, host=settings.env.host, port=settings.env.port, log_config=None)


if __name__ == "__main__":
    run()
