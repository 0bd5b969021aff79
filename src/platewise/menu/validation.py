"""Boundary parsing for numeric fields supplied by users."""

from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass(slots=True)
class InvalidNumericField(ValueError):
    """A price or quantity that failed to parse or is out of range."""

    field: str
    value: object
    reason: str

    def __str__(self) -> str:
        return f"Invalid {self.field} value {self.value!r}: {self.reason}"


def _parse_number(field: str, raw: object) -> float:
    if isinstance(raw, bool):
        raise InvalidNumericField(field, raw, "not a number")
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", "")
        if text.startswith("$"):
            text = text[1:]
        try:
            value = float(text)
        except ValueError:
            raise InvalidNumericField(field, raw, "not a number") from None
    if not math.isfinite(value):
        raise InvalidNumericField(field, raw, "must be finite")
    return value


def parse_price_cents(raw: object) -> int | None:
    """Parse a price in currency units into integer cents.

    ``None`` and blank strings mean "no price". Negative values are rejected.
    """

    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    value = _parse_number("price", raw)
    if value < 0:
        raise InvalidNumericField("price", raw, "must be >= 0")
    return int(round(value * 100))


def parse_quantity(raw: object) -> float:
    """Parse a required, strictly positive ingredient quantity."""

    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidNumericField("quantity", raw, "is required")
    value = _parse_number("quantity", raw)
    if value <= 0:
        raise InvalidNumericField("quantity", raw, "must be > 0")
    return value
