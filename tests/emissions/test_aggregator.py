from __future__ import annotations

import math

import pytest

from platewise.emissions.aggregator import (
    LinkContribution,
    Unit,
    aggregate_emissions,
    link_emissions,
    parse_unit,
    quantity_in_kg,
)


def test_grams_are_converted_and_kilograms_kept() -> None:
    links = [
        LinkContribution(quantity=200, unit="g", kg_co2e_per_kg=5.0),
        LinkContribution(quantity=0.5, unit="kg", kg_co2e_per_kg=3.0),
    ]

    assert math.isclose(aggregate_emissions(links), 2.5)


def test_missing_factor_contributes_zero() -> None:
    links = [
        LinkContribution(quantity=300, unit="g", kg_co2e_per_kg=None),
        LinkContribution(quantity=1, unit="kg", kg_co2e_per_kg=2.0),
    ]

    assert math.isclose(aggregate_emissions(links), 2.0)


@pytest.mark.parametrize("unit", [None, "kg", "lb", "oz", ""])
def test_non_gram_units_are_taken_as_kilograms(unit: str | None) -> None:
    assert quantity_in_kg(2.0, unit) == 2.0


def test_gram_conversion() -> None:
    assert quantity_in_kg(250, Unit.GRAM.value) == 0.25


def test_empty_link_set_is_zero() -> None:
    assert aggregate_emissions([]) == 0.0


def test_total_is_a_full_resum() -> None:
    beef = LinkContribution(quantity=500, unit="g", kg_co2e_per_kg=27.0)
    tomato = LinkContribution(quantity=1, unit="kg", kg_co2e_per_kg=1.5)

    assert math.isclose(link_emissions(beef), 13.5)
    assert math.isclose(aggregate_emissions([beef, tomato]), 15.0)
    assert math.isclose(aggregate_emissions([tomato]), 1.5)


def test_total_is_never_negative_for_valid_links() -> None:
    links = [LinkContribution(quantity=q, unit=u, kg_co2e_per_kg=f) for q, u, f in [
        (1, "g", 0.0),
        (10, None, None),
        (0.001, "kg", 100.0),
    ]]

    assert aggregate_emissions(links) >= 0.0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("g", Unit.GRAM),
        (" Grams ", Unit.GRAM),
        ("KG", Unit.KILOGRAM),
        ("kilogram", Unit.KILOGRAM),
        (None, None),
        ("   ", None),
    ],
)
def test_parse_unit(raw: str | None, expected: Unit | None) -> None:
    assert parse_unit(raw) is expected


def test_parse_unit_rejects_unknown_input() -> None:
    with pytest.raises(ValueError, match="Unsupported unit"):
        parse_unit("lb")
