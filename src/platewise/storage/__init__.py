"""Menu and ingredient storage."""

from .repository import (
    Ingredient,
    IngredientLinkRow,
    KitchenRepository,
    Menu,
    MenuItem,
    NotFoundError,
)

__all__ = ["Ingredient", "IngredientLinkRow", "KitchenRepository", "Menu", "MenuItem", "NotFoundError"]
