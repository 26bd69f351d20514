from __future__ import annotations

from typing import Protocol

from ...domain.models import LocationResult


class GeocodingAdapter(Protocol):
    def resolve(self, postal_code: str) -> LocationResult:
        """Resolve a validated postal code to the city it belongs to."""
