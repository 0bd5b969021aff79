"""SQLite schema and pragmas for the menu and ingredient store."""

from __future__ import annotations

import sqlite3


PRAGMA_BUSY_TIMEOUT_MS = 5000


def apply_runtime_pragmas(connection: sqlite3.Connection) -> None:
    """Apply runtime pragmas for concurrent readers and enforced foreign keys."""

    connection.execute("PRAGMA journal_mode=WAL;")
    connection.execute(f"PRAGMA busy_timeout={PRAGMA_BUSY_TIMEOUT_MS};")
    connection.execute("PRAGMA synchronous=NORMAL;")
    connection.execute("PRAGMA foreign_keys=ON;")


def _add_column_if_missing(
    connection: sqlite3.Connection,
    table: str,
    column: str,
    column_def: str,
) -> None:
    """Add a column to a table if it does not yet exist (idempotent)."""
    try:
        connection.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_def}")
    except sqlite3.OperationalError as exc:
        if "duplicate column name" not in str(exc).lower():
            raise


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create menu, ingredient, and link tables if missing."""

    connection.executescript(
        """
        CREATE TABLE IF NOT EXISTS menus (
            id INTEGER PRIMARY KEY,
            owner_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            description TEXT,
            is_active INTEGER NOT NULL DEFAULT 1 CHECK(is_active IN (0,1)),
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS menu_items (
            id INTEGER PRIMARY KEY,
            menu_id INTEGER NOT NULL REFERENCES menus(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            category TEXT,
            price_cents INTEGER CHECK(price_cents IS NULL OR price_cents >= 0),
            estimated_emissions_kg_co2e REAL NOT NULL DEFAULT 0,
            is_active INTEGER NOT NULL DEFAULT 1 CHECK(is_active IN (0,1)),
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS ingredients (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL UNIQUE,
            emissions_kg_co2e_per_kg REAL CHECK(
                emissions_kg_co2e_per_kg IS NULL OR emissions_kg_co2e_per_kg >= 0
            ),
            unit TEXT
        );

        CREATE TABLE IF NOT EXISTS menu_item_ingredients (
            id INTEGER PRIMARY KEY,
            menu_item_id INTEGER NOT NULL REFERENCES menu_items(id) ON DELETE CASCADE,
            ingredient_id INTEGER NOT NULL REFERENCES ingredients(id) ON DELETE CASCADE,
            quantity REAL NOT NULL CHECK(quantity > 0),
            unit TEXT,
            UNIQUE(menu_item_id, ingredient_id)
        );

        CREATE INDEX IF NOT EXISTS idx_menus_owner_id ON menus(owner_id, is_active);
        CREATE INDEX IF NOT EXISTS idx_menu_items_menu_id ON menu_items(menu_id, is_active);
        CREATE INDEX IF NOT EXISTS idx_menu_item_ingredients_item ON menu_item_ingredients(menu_item_id);
        """
    )

    # Additive migrations: add columns to existing tables without breaking old DBs
    _add_column_if_missing(connection, "menu_items", "updated_at", "TEXT")
