"""Menu catalog services and boundary validation."""

from .service import MenuService
from .validation import InvalidNumericField, parse_price_cents, parse_quantity

__all__ = ["InvalidNumericField", "MenuService", "parse_price_cents", "parse_quantity"]
