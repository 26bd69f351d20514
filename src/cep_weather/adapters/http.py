from __future__ import annotations

from dataclasses import dataclass
from http.client import HTTPException
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

BODY_LOG_LIMIT = 512


class UpstreamTransportError(RuntimeError):
    """Raised when an upstream request fails before a status code is received."""


@dataclass(slots=True)
class UpstreamResponse:
    status: int
    body: bytes

    @property
    def ok(self) -> bool:
        return self.status == 200

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def log_excerpt(self) -> str:
        text = self.text()
        if len(text) <= BODY_LOG_LIMIT:
            return text
        return f"{text[:BODY_LOG_LIMIT]}..."


def fetch(url: str, *, timeout: float, user_agent: str) -> UpstreamResponse:
    """GET ``url`` and return its status and raw body.

    Error statuses are returned rather than raised so callers can inspect the
    body. Connection failures, timeouts and truncated responses raise
    UpstreamTransportError.
    """
    request = Request(url, headers={"User-Agent": user_agent, "Accept": "application/json"})
    try:
        with urlopen(request, timeout=timeout) as response:
            return UpstreamResponse(status=response.status, body=response.read())
    except HTTPError as exc:
        try:
            body = exc.read()
        except (OSError, HTTPException):
            body = b""
        finally:
            exc.close()
        return UpstreamResponse(status=exc.code, body=body or b"")
    except (URLError, TimeoutError, OSError, HTTPException) as exc:
        raise UpstreamTransportError(str(exc)) from exc
