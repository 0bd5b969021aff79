from __future__ import annotations

import json
from pathlib import Path

from platewise.cli.load_ingredients import main as load_ingredients_main
from platewise.storage.repository import KitchenRepository


def test_cli_loads_catalog_and_upserts_by_name(tmp_path: Path, capsys: object) -> None:
    catalog = tmp_path / "catalog.json"
    catalog.write_text(
        json.dumps(
            [
                {"name": "Beef", "emissions_kg_co2e_per_kg": 27.0, "unit": "kg"},
                {"name": "Rice", "emissions_kg_co2e_per_kg": None},
            ]
        ),
        encoding="utf-8",
    )
    db_path = tmp_path / "kitchen.db"

    assert load_ingredients_main(["--path", str(catalog), "--db-path", str(db_path)]) == 0
    first = json.loads(capsys.readouterr().out)

    catalog.write_text(json.dumps([{"name": "Beef", "emissions_kg_co2e_per_kg": 60}]), encoding="utf-8")
    assert load_ingredients_main(["--path", str(catalog), "--db-path", str(db_path)]) == 0
    capsys.readouterr()

    assert first["loaded"] == 2
    assert first["errors"] == []
    with KitchenRepository(db_path) as repository:
        ingredients = {ingredient.name: ingredient for ingredient in repository.list_ingredients()}

    assert set(ingredients) == {"Beef", "Rice"}
    assert ingredients["Beef"].emissions_kg_co2e_per_kg == 60.0
    assert ingredients["Rice"].emissions_kg_co2e_per_kg is None


def test_cli_reports_bad_entries(tmp_path: Path, capsys: object) -> None:
    catalog = tmp_path / "catalog.json"
    catalog.write_text(
        json.dumps(
            [
                {"name": "Tomato", "emissions_kg_co2e_per_kg": 1.5},
                {"name": "", "emissions_kg_co2e_per_kg": 1.0},
                {"name": "Ghost", "emissions_kg_co2e_per_kg": -2},
                {"name": "Salt", "emissions_kg_co2e_per_kg": "lots"},
                "not an object",
            ]
        ),
        encoding="utf-8",
    )

    exit_code = load_ingredients_main(["--path", str(catalog), "--db-path", str(tmp_path / "kitchen.db")])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["loaded"] == 1
    assert [error["index"] for error in payload["errors"]] == [1, 2, 3, 4]


def test_cli_rejects_non_list_catalog(tmp_path: Path, capsys: object) -> None:
    catalog = tmp_path / "catalog.json"
    catalog.write_text(json.dumps({"name": "Beef"}), encoding="utf-8")

    exit_code = load_ingredients_main(["--path", str(catalog), "--db-path", str(tmp_path / "kitchen.db")])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert "JSON list" in payload["error"]
