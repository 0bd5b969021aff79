"""CLI for loading ingredient emissions factors into the catalog.

The input is a JSON list of objects::

    [{"name": "Beef", "emissions_kg_co2e_per_kg": 27.0, "unit": "kg"}, ...]

A missing or null factor is stored as NULL; dishes using that ingredient count
it as zero until a factor is supplied.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from platewise.storage.repository import KitchenRepository


def _parse_entry(entry: object) -> tuple[str, float | None, str | None]:
    if not isinstance(entry, dict):
        raise ValueError("catalog entry is not an object")
    name = str(entry.get("name") or "").strip()
    if not name:
        raise ValueError("catalog entry has no name")
    raw_factor = entry.get("emissions_kg_co2e_per_kg")
    factor = None if raw_factor is None else float(raw_factor)
    if factor is not None and factor < 0:
        raise ValueError(f"negative emissions factor for {name}")
    unit = entry.get("unit")
    return name, factor, None if unit is None else str(unit)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load ingredient emissions factors from JSON")
    parser.add_argument("--path", required=True, help="JSON file with a list of ingredient entries")
    parser.add_argument("--db-path", default=".platewise.db", help="Path to the SQLite database")
    args = parser.parse_args(argv)

    entries = json.loads(Path(args.path).read_text(encoding="utf-8"))
    if not isinstance(entries, list):
        print(json.dumps({"error": "catalog file must contain a JSON list"}, indent=2))
        return 1

    loaded: list[dict[str, object]] = []
    errors: list[dict[str, object]] = []

    with KitchenRepository(args.db_path) as repository:
        for position, entry in enumerate(entries):
            try:
                name, factor, unit = _parse_entry(entry)
            except (TypeError, ValueError) as exc:
                errors.append({"index": position, "error": str(exc)})
                continue
            ingredient = repository.upsert_ingredient(name=name, emissions_kg_co2e_per_kg=factor, unit=unit)
            loaded.append(
                {
                    "id": ingredient.id,
                    "name": ingredient.name,
                    "emissions_kg_co2e_per_kg": ingredient.emissions_kg_co2e_per_kg,
                }
            )

    print(json.dumps({"loaded": len(loaded), "ingredients": loaded, "errors": errors}, ensure_ascii=False, indent=2))
    return 0 if not errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
