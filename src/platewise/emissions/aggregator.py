"""Dish emissions formula: unit-normalized quantity times per-kilogram factor."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class Unit(str, Enum):
    GRAM = "g"
    KILOGRAM = "kg"


GRAMS_PER_KILOGRAM = 1000.0


@dataclass(frozen=True, slots=True)
class LinkContribution:
    """Inputs of one ingredient link as seen by the formula."""

    quantity: float
    unit: str | None
    kg_co2e_per_kg: float | None


def parse_unit(raw: str | None) -> Unit | None:
    """Map user input to a stored unit; blank means unspecified."""

    if raw is None:
        return None
    cleaned = raw.strip().lower()
    if not cleaned:
        return None
    if cleaned in {"g", "gram", "grams"}:
        return Unit.GRAM
    if cleaned in {"kg", "kilogram", "kilograms"}:
        return Unit.KILOGRAM
    raise ValueError(f"Unsupported unit: {raw!r} (use g or kg)")


def quantity_in_kg(quantity: float, unit: str | None) -> float:
    """Convert a stored quantity to kilograms.

    Grams are divided by 1000. Kilograms, an unspecified unit, and any other
    stored unit string are taken as kilograms already; the last case is a
    lenient fallback for legacy rows, not an error.
    """

    if unit == Unit.GRAM.value:
        return quantity / GRAMS_PER_KILOGRAM
    return quantity


def link_emissions(link: LinkContribution) -> float:
    factor = link.kg_co2e_per_kg if link.kg_co2e_per_kg is not None else 0.0
    return quantity_in_kg(link.quantity, link.unit) * factor


def aggregate_emissions(links: Iterable[LinkContribution]) -> float:
    """Sum emissions over every current link of one dish.

    Always a full re-sum; an ingredient without a factor contributes zero.
    """

    return sum((link_emissions(link) for link in links), 0.0)
