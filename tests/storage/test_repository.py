from __future__ import annotations

from pathlib import Path
import sqlite3

import pytest

from platewise.storage.repository import MAIN_MENU_NAME, KitchenRepository, NotFoundError
from platewise.storage.schema import ensure_schema


def test_schema_is_idempotent_and_migrated(tmp_path: Path) -> None:
    db_path = tmp_path / "kitchen.db"
    with KitchenRepository(db_path) as repository:
        ensure_schema(repository.connection)
        columns = {row["name"] for row in repository.connection.execute("PRAGMA table_info(menu_items)")}
        journal_mode = repository.connection.execute("PRAGMA journal_mode").fetchone()[0]
        foreign_keys = repository.connection.execute("PRAGMA foreign_keys").fetchone()[0]

    assert "updated_at" in columns
    assert journal_mode.lower() == "wal"
    assert foreign_keys == 1


def test_main_menu_is_created_once_per_owner(tmp_path: Path) -> None:
    with KitchenRepository(tmp_path / "kitchen.db") as repository:
        first = repository.get_or_create_main_menu(5)
        second = repository.get_or_create_main_menu(5)
        other = repository.get_or_create_main_menu(6)

    assert first.id == second.id
    assert first.name == MAIN_MENU_NAME
    assert other.id != first.id


def test_menu_items_soft_delete(tmp_path: Path) -> None:
    with KitchenRepository(tmp_path / "kitchen.db") as repository:
        menu = repository.get_or_create_main_menu(1)
        soup = repository.add_menu_item(menu.id, name="Soup", price_cents=500)
        bread = repository.add_menu_item(menu.id, name="Bread")

        repository.deactivate_menu_item(soup.id)

        assert [item.id for item in repository.list_menu_items(menu.id)] == [bread.id]
        assert repository.get_menu_item(soup.id).is_active is False


def test_negative_price_violates_check(tmp_path: Path) -> None:
    with KitchenRepository(tmp_path / "kitchen.db") as repository:
        menu = repository.get_or_create_main_menu(1)
        with pytest.raises(sqlite3.IntegrityError):
            repository.add_menu_item(menu.id, name="Refund", price_cents=-100)


def test_ingredient_upsert_by_name(tmp_path: Path) -> None:
    with KitchenRepository(tmp_path / "kitchen.db") as repository:
        first = repository.upsert_ingredient(name="Beef", emissions_kg_co2e_per_kg=27.0, unit="kg")
        second = repository.upsert_ingredient(name="Beef", emissions_kg_co2e_per_kg=60.0)
        repository.upsert_ingredient(name="Apple", emissions_kg_co2e_per_kg=None)

        assert second.id == first.id
        assert second.emissions_kg_co2e_per_kg == 60.0
        assert second.unit is None
        assert [ingredient.name for ingredient in repository.list_ingredients()] == ["Apple", "Beef"]

        with pytest.raises(ValueError):
            repository.upsert_ingredient(name="Bad", emissions_kg_co2e_per_kg=-1.0)
        with pytest.raises(NotFoundError):
            repository.get_ingredient(999)


def test_links_are_unique_per_dish_and_ingredient(tmp_path: Path) -> None:
    with KitchenRepository(tmp_path / "kitchen.db") as repository:
        menu = repository.get_or_create_main_menu(1)
        dish = repository.add_menu_item(menu.id, name="Stew")
        onion = repository.upsert_ingredient(name="Onion", emissions_kg_co2e_per_kg=0.5)
        carrot = repository.upsert_ingredient(name="Carrot", emissions_kg_co2e_per_kg=0.4)

        repository.upsert_ingredient_link(dish.id, onion.id, quantity=100, unit="g")
        repository.upsert_ingredient_link(dish.id, onion.id, quantity=150, unit="g")
        repository.upsert_ingredient_link(dish.id, carrot.id, quantity=0.2, unit="kg")

        links = repository.list_ingredient_links(dish.id)

        assert [(link.ingredient_name, link.quantity, link.unit) for link in links] == [
            ("Carrot", 0.2, "kg"),
            ("Onion", 150.0, "g"),
        ]

        repository.delete_ingredient_link(dish.id, onion.id)
        with pytest.raises(NotFoundError):
            repository.delete_ingredient_link(dish.id, onion.id)


def test_links_cascade_with_dish(tmp_path: Path) -> None:
    with KitchenRepository(tmp_path / "kitchen.db") as repository:
        menu = repository.get_or_create_main_menu(1)
        dish = repository.add_menu_item(menu.id, name="Stew")
        onion = repository.upsert_ingredient(name="Onion", emissions_kg_co2e_per_kg=0.5)
        repository.upsert_ingredient_link(dish.id, onion.id, quantity=100, unit="g")

        with repository.connection:
            repository.connection.execute("DELETE FROM menu_items WHERE id = ?", (dish.id,))

        count = repository.connection.execute("SELECT COUNT(*) FROM menu_item_ingredients").fetchone()[0]

    assert count == 0


def test_missing_menu_item_operations_raise(tmp_path: Path) -> None:
    with KitchenRepository(tmp_path / "kitchen.db") as repository:
        with pytest.raises(NotFoundError):
            repository.get_menu_item(1)
        with pytest.raises(NotFoundError):
            repository.set_menu_item_emissions(1, 2.0)
        with pytest.raises(NotFoundError):
            repository.deactivate_menu_item(1)
