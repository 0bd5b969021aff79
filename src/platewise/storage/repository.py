"""SQLite-backed repository for menus, dishes, ingredients, and ingredient links."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
import sqlite3
import threading

from platewise.storage.schema import apply_runtime_pragmas, ensure_schema


MAIN_MENU_NAME = "Main menu"


class NotFoundError(LookupError):
    """Raised when a referenced menu item, ingredient, or link does not exist."""


@dataclass(slots=True)
class Menu:
    id: int
    owner_id: int
    name: str
    description: str | None
    is_active: bool


@dataclass(slots=True)
class MenuItem:
    id: int
    menu_id: int
    name: str
    category: str | None
    price_cents: int | None
    estimated_emissions_kg_co2e: float
    is_active: bool

    @property
    def price(self) -> float | None:
        if self.price_cents is None:
            return None
        return self.price_cents / 100


@dataclass(slots=True)
class Ingredient:
    id: int
    name: str
    emissions_kg_co2e_per_kg: float | None
    unit: str | None


@dataclass(slots=True)
class IngredientLinkRow:
    """One dish/ingredient link joined with the ingredient's catalog entry."""

    id: int
    menu_item_id: int
    ingredient_id: int
    ingredient_name: str
    quantity: float
    unit: str | None
    emissions_kg_co2e_per_kg: float | None


def _row_to_menu(row: sqlite3.Row) -> Menu:
    return Menu(
        id=int(row["id"]),
        owner_id=int(row["owner_id"]),
        name=row["name"],
        description=row["description"],
        is_active=bool(row["is_active"]),
    )


def _row_to_menu_item(row: sqlite3.Row) -> MenuItem:
    return MenuItem(
        id=int(row["id"]),
        menu_id=int(row["menu_id"]),
        name=row["name"],
        category=row["category"],
        price_cents=None if row["price_cents"] is None else int(row["price_cents"]),
        estimated_emissions_kg_co2e=float(row["estimated_emissions_kg_co2e"] or 0.0),
        is_active=bool(row["is_active"]),
    )


def _row_to_ingredient(row: sqlite3.Row) -> Ingredient:
    factor = row["emissions_kg_co2e_per_kg"]
    return Ingredient(
        id=int(row["id"]),
        name=row["name"],
        emissions_kg_co2e_per_kg=None if factor is None else float(factor),
        unit=row["unit"],
    )


def _row_to_link(row: sqlite3.Row) -> IngredientLinkRow:
    factor = row["emissions_kg_co2e_per_kg"]
    return IngredientLinkRow(
        id=int(row["id"]),
        menu_item_id=int(row["menu_item_id"]),
        ingredient_id=int(row["ingredient_id"]),
        ingredient_name=row["ingredient_name"],
        quantity=float(row["quantity"]),
        unit=row["unit"],
        emissions_kg_co2e_per_kg=None if factor is None else float(factor),
    )


_MENU_ITEM_COLUMNS = "id, menu_id, name, category, price_cents, estimated_emissions_kg_co2e, is_active"

_LINK_SELECT = """
    SELECT
        mii.id,
        mii.menu_item_id,
        mii.ingredient_id,
        mii.quantity,
        mii.unit,
        i.name AS ingredient_name,
        i.emissions_kg_co2e_per_kg
    FROM menu_item_ingredients mii
    JOIN ingredients i ON i.id = mii.ingredient_id
"""


class KitchenRepository:
    """Storage facade owning one SQLite connection shared across threads.

    Every statement runs under an internal re-entrant lock, and
    ``transaction()`` blocks nest: only the outermost one commits or rolls
    back, so a service can group several repository calls into one unit.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._guard = threading.RLock()
        self._transaction_depth = 0
        self._connection = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        apply_runtime_pragmas(self._connection)
        ensure_schema(self._connection)

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def close(self) -> None:
        with self._guard:
            self._connection.close()

    def __enter__(self) -> "KitchenRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Hold the connection for a group of statements committed together."""
        with self._guard:
            if self._transaction_depth:
                self._transaction_depth += 1
                try:
                    yield self._connection
                finally:
                    self._transaction_depth -= 1
                return

            self._transaction_depth = 1
            try:
                with self._connection:
                    yield self._connection
            finally:
                self._transaction_depth = 0

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._guard:
            return self._connection.execute(sql, params).fetchall()

    def _query_one(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        with self._guard:
            return self._connection.execute(sql, params).fetchone()

    # -- menus -------------------------------------------------------------

    def get_or_create_main_menu(self, owner_id: int) -> Menu:
        with self.transaction() as connection:
            row = connection.execute(
                """
                SELECT id, owner_id, name, description, is_active
                FROM menus
                WHERE owner_id = ? AND is_active = 1
                ORDER BY id
                LIMIT 1
                """,
                (owner_id,),
            ).fetchone()
            if row is not None:
                return _row_to_menu(row)

            cursor = connection.execute(
                "INSERT INTO menus (owner_id, name, is_active) VALUES (?, ?, 1)",
                (owner_id, MAIN_MENU_NAME),
            )
        return Menu(
            id=int(cursor.lastrowid),
            owner_id=owner_id,
            name=MAIN_MENU_NAME,
            description=None,
            is_active=True,
        )

    # -- menu items --------------------------------------------------------

    def add_menu_item(
        self,
        menu_id: int,
        *,
        name: str,
        category: str | None = None,
        price_cents: int | None = None,
    ) -> MenuItem:
        with self.transaction() as connection:
            cursor = connection.execute(
                """
                INSERT INTO menu_items (menu_id, name, category, price_cents, estimated_emissions_kg_co2e, is_active)
                VALUES (?, ?, ?, ?, 0, 1)
                """,
                (menu_id, name, category, price_cents),
            )
        return self.get_menu_item(int(cursor.lastrowid))

    def get_menu_item(self, item_id: int) -> MenuItem:
        row = self._query_one(
            f"SELECT {_MENU_ITEM_COLUMNS} FROM menu_items WHERE id = ?",
            (item_id,),
        )
        if row is None:
            raise NotFoundError(f"Menu item not found: {item_id}")
        return _row_to_menu_item(row)

    def list_menu_items(self, menu_id: int) -> list[MenuItem]:
        rows = self._query(
            f"""
            SELECT {_MENU_ITEM_COLUMNS}
            FROM menu_items
            WHERE menu_id = ? AND is_active = 1
            ORDER BY created_at ASC, id ASC
            """,
            (menu_id,),
        )
        return [_row_to_menu_item(row) for row in rows]

    def update_menu_item(
        self,
        item_id: int,
        *,
        name: str,
        category: str | None,
        price_cents: int | None,
    ) -> MenuItem:
        with self.transaction() as connection:
            cursor = connection.execute(
                """
                UPDATE menu_items
                SET name = ?, category = ?, price_cents = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (name, category, price_cents, item_id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Menu item not found: {item_id}")
        return self.get_menu_item(item_id)

    def deactivate_menu_item(self, item_id: int) -> None:
        with self.transaction() as connection:
            cursor = connection.execute(
                "UPDATE menu_items SET is_active = 0, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (item_id,),
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Menu item not found: {item_id}")

    def set_menu_item_emissions(self, item_id: int, total_kg_co2e: float) -> None:
        with self.transaction() as connection:
            cursor = connection.execute(
                "UPDATE menu_items SET estimated_emissions_kg_co2e = ? WHERE id = ?",
                (total_kg_co2e, item_id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Menu item not found: {item_id}")

    # -- ingredient catalog ------------------------------------------------

    def upsert_ingredient(
        self,
        *,
        name: str,
        emissions_kg_co2e_per_kg: float | None,
        unit: str | None = None,
    ) -> Ingredient:
        if emissions_kg_co2e_per_kg is not None and emissions_kg_co2e_per_kg < 0:
            raise ValueError("emissions_kg_co2e_per_kg cannot be negative")

        with self.transaction() as connection:
            connection.execute(
                """
                INSERT INTO ingredients (name, emissions_kg_co2e_per_kg, unit)
                VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    emissions_kg_co2e_per_kg = excluded.emissions_kg_co2e_per_kg,
                    unit = excluded.unit
                """,
                (name, emissions_kg_co2e_per_kg, unit),
            )
        row = self._query_one(
            "SELECT id, name, emissions_kg_co2e_per_kg, unit FROM ingredients WHERE name = ?",
            (name,),
        )
        return _row_to_ingredient(row)

    def get_ingredient(self, ingredient_id: int) -> Ingredient:
        row = self._query_one(
            "SELECT id, name, emissions_kg_co2e_per_kg, unit FROM ingredients WHERE id = ?",
            (ingredient_id,),
        )
        if row is None:
            raise NotFoundError(f"Ingredient not found: {ingredient_id}")
        return _row_to_ingredient(row)

    def list_ingredients(self) -> list[Ingredient]:
        rows = self._query(
            "SELECT id, name, emissions_kg_co2e_per_kg, unit FROM ingredients ORDER BY name ASC"
        )
        return [_row_to_ingredient(row) for row in rows]

    # -- ingredient links --------------------------------------------------

    def upsert_ingredient_link(
        self,
        menu_item_id: int,
        ingredient_id: int,
        *,
        quantity: float,
        unit: str | None,
    ) -> IngredientLinkRow:
        # Surface unknown ids as NotFoundError rather than an IntegrityError.
        self.get_menu_item(menu_item_id)
        self.get_ingredient(ingredient_id)

        with self.transaction() as connection:
            connection.execute(
                """
                INSERT INTO menu_item_ingredients (menu_item_id, ingredient_id, quantity, unit)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(menu_item_id, ingredient_id) DO UPDATE SET
                    quantity = excluded.quantity,
                    unit = excluded.unit
                """,
                (menu_item_id, ingredient_id, quantity, unit),
            )
        row = self._query_one(
            f"{_LINK_SELECT} WHERE mii.menu_item_id = ? AND mii.ingredient_id = ?",
            (menu_item_id, ingredient_id),
        )
        return _row_to_link(row)

    def delete_ingredient_link(self, menu_item_id: int, ingredient_id: int) -> None:
        with self.transaction() as connection:
            cursor = connection.execute(
                "DELETE FROM menu_item_ingredients WHERE menu_item_id = ? AND ingredient_id = ?",
                (menu_item_id, ingredient_id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Ingredient link not found: dish {menu_item_id}, ingredient {ingredient_id}")

    def list_ingredient_links(self, menu_item_id: int) -> list[IngredientLinkRow]:
        rows = self._query(
            f"{_LINK_SELECT} WHERE mii.menu_item_id = ? ORDER BY i.name",
            (menu_item_id,),
        )
        return [_row_to_link(row) for row in rows]
