from __future__ import annotations

import json
from typing import Any

from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..domain.errors import WeatherLookupError
from ..domain.models import ErrorReport, TemperatureReport

# Beyond this magnitude floats are written in exponent form anyway.
_PLAIN_INTEGER_LIMIT = 1e21


def _compact_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer() and abs(value) < _PLAIN_INTEGER_LIMIT:
        return int(value)
    return value


class TemperatureJSONResponse(JSONResponse):
    """JSON response that writes integral floats without a fractional part (25, not 25.0)."""

    def render(self, content: Any) -> bytes:
        if isinstance(content, dict):
            content = {key: _compact_number(value) for key, value in content.items()}
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


def temperature_response(report: TemperatureReport) -> TemperatureJSONResponse:
    return TemperatureJSONResponse(report.to_payload(), status_code=200)


def error_response(exc: WeatherLookupError) -> Response:
    if exc.json_body:
        return JSONResponse(
            ErrorReport(message=exc.public_message).model_dump(),
            status_code=exc.status_code,
        )
    return PlainTextResponse(exc.public_message, status_code=exc.status_code)
