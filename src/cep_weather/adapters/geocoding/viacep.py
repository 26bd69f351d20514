from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ...domain.errors import LocationNotFoundError, UpstreamUnavailableError
from ...domain.models import LocationResult
from ..http import UpstreamTransportError, fetch

LOGGER = logging.getLogger(__name__)

VIACEP_BASE_URL = "https://viacep.com.br/ws"
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_USER_AGENT = "cep-weather/0.1"

TRUTHY_ERROR_FLAGS = ("true", "1")


def _is_error_flag_set(value: Any) -> bool:
    # ViaCEP has sent the flag both as a JSON boolean and as a string.
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value in TRUTHY_ERROR_FLAGS
    raise ValueError("erro must be a boolean or a string")


class ViaCepPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    localidade: str = ""
    erro: bool = False

    @field_validator("localidade", mode="before")
    @classmethod
    def validate_localidade(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("erro", mode="before")
    @classmethod
    def validate_erro(cls, value: Any) -> bool:
        return _is_error_flag_set(value)


class ViaCepGeocodingAdapter:
    def __init__(
        self,
        *,
        base_url: str = VIACEP_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent

    def lookup_url(self, postal_code: str) -> str:
        return f"{self._base_url}/{postal_code}/json/"

    def resolve(self, postal_code: str) -> LocationResult:
        url = self.lookup_url(postal_code)
        LOGGER.info("Querying ViaCEP: %s", url)
        try:
            response = fetch(url, timeout=self._timeout_seconds, user_agent=self._user_agent)
        except UpstreamTransportError as exc:
            LOGGER.error("ViaCEP request failed for CEP %s: %s", postal_code, exc)
            raise UpstreamUnavailableError("location", "Failed to get city information") from exc

        if not response.ok:
            LOGGER.error(
                "ViaCEP returned status %d for CEP %s. Body: %s",
                response.status,
                postal_code,
                response.log_excerpt(),
            )
            raise UpstreamUnavailableError(
                "location",
                "Failed to get city information from ViaCEP (non-200 status)",
                status=response.status,
                body=response.log_excerpt(),
            )

        payload = self._parse(postal_code, response.body)
        if payload.erro or not payload.localidade.strip():
            LOGGER.info(
                "CEP %s not found. ViaCEP erro=%s, localidade=%r",
                postal_code,
                payload.erro,
                payload.localidade,
            )
            raise LocationNotFoundError("location", reason="ViaCEP flagged the CEP as unknown")

        LOGGER.info("CEP %s resolved to city %s", postal_code, payload.localidade)
        return LocationResult(city_name=payload.localidade)

    @staticmethod
    def _parse(postal_code: str, body: bytes) -> ViaCepPayload:
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            LOGGER.error("Could not read ViaCEP response for CEP %s: %s", postal_code, exc)
            raise UpstreamUnavailableError(
                "location", "Failed to read city information response"
            ) from exc

        try:
            raw_payload = json.loads(text)
            if not isinstance(raw_payload, dict):
                raise ValueError("Unexpected ViaCEP response shape")
            return ViaCepPayload.model_validate(raw_payload)
        except (ValueError, ValidationError) as exc:
            LOGGER.error(
                "Could not decode ViaCEP response for CEP %s: %s. Body: %s",
                postal_code,
                exc,
                text[:512],
            )
            raise UpstreamUnavailableError(
                "location", "Failed to parse city information", body=text[:512]
            ) from exc
