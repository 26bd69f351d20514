from .base import GeocodingAdapter
from .viacep import ViaCepGeocodingAdapter

__all__ = ["GeocodingAdapter", "ViaCepGeocodingAdapter"]
