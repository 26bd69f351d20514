from __future__ import annotations

import re

from .errors import InvalidPostalCodeError, MissingPostalCodeError

# ASCII digits only; \d would also accept other Unicode decimal digits.
POSTAL_CODE_PATTERN = re.compile(r"[0-9]{8}")


def validate_postal_code(raw_value: str | None) -> str:
    """Return the postal code unchanged when it is exactly eight ASCII digits.

    Raises MissingPostalCodeError for an absent or empty value and
    InvalidPostalCodeError for anything else that does not match. The value
    is never trimmed or otherwise normalized.
    """
    if raw_value is None or raw_value == "":
        raise MissingPostalCodeError()
    if POSTAL_CODE_PATTERN.fullmatch(raw_value) is None:
        raise InvalidPostalCodeError(raw_value)
    return raw_value
