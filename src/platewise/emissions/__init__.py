"""Dish emissions aggregation."""

from .aggregator import LinkContribution, Unit, aggregate_emissions, parse_unit, quantity_in_kg
from .service import DishEmissions, DishLockRegistry, EmissionsService, LinkMutationResult

__all__ = [
    "DishEmissions",
    "DishLockRegistry",
    "EmissionsService",
    "LinkContribution",
    "LinkMutationResult",
    "Unit",
    "aggregate_emissions",
    "parse_unit",
    "quantity_in_kg",
]
