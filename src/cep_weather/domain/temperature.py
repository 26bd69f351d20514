from __future__ import annotations

import math

KELVIN_OFFSET = 273.15


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 1.8 + 32


def celsius_to_kelvin(celsius: float) -> float:
    return celsius + KELVIN_OFFSET


def is_convertible(celsius: float) -> bool:
    """True when celsius and both derived scales are finite floats."""
    return all(
        math.isfinite(value)
        for value in (celsius, celsius_to_fahrenheit(celsius), celsius_to_kelvin(celsius))
    )
