from __future__ import annotations

import math
import re

from ..core.constants import PHONE_DIGITS
from ..core.enums import DutyType
from ..core.exceptions import ValidationError

INVALID_CREDITS_MESSAGE = "Invalid credit amount. Enter a whole number or decimal (no fractions)."

_DECIMAL_RE = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_duty_type(value: object) -> DutyType:
    duty_type = DutyType.parse(value)
    if duty_type is None:
        raise ValidationError(f"Unknown duty type: {value!r}")
    return duty_type


def normalize_phone(value: str) -> str:
    """Strip punctuation and return the 10-digit national number."""
    digits = re.sub(r"\D", "", value or "")
    if len(digits) == PHONE_DIGITS + 1 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != PHONE_DIGITS:
        raise ValidationError("Phone number must have 10 digits")
    return digits


def parse_credits(value: object) -> float:
    """Accept ints, floats and decimal strings; reject fractions, NaN and inf."""
    if isinstance(value, bool):
        raise ValidationError(INVALID_CREDITS_MESSAGE)

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise ValidationError(INVALID_CREDITS_MESSAGE)
    elif isinstance(value, str):
        # plain decimals only: float() would also take "1_0", "1e3" or "nan"
        text = value.strip()
        if not _DECIMAL_RE.match(text):
            raise ValidationError(INVALID_CREDITS_MESSAGE)
        number = float(text)
    else:
        raise ValidationError(INVALID_CREDITS_MESSAGE)

    if not math.isfinite(number):
        raise ValidationError(INVALID_CREDITS_MESSAGE)
    return number


def normalize_credits(value: float) -> int | float:
    # 1.0 -> 1 so the UI shows "1 Credit(s)" rather than "1.0 Credit(s)".
    return int(value) if float(value).is_integer() else value
