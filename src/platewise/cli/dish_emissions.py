"""CLI for linking ingredients to a dish and reporting its emissions total."""

from __future__ import annotations

import argparse
import json

from platewise.emissions.aggregator import parse_unit
from platewise.emissions.service import EmissionsService
from platewise.menu.validation import parse_quantity
from platewise.storage.repository import IngredientLinkRow, KitchenRepository, NotFoundError


def _link_payload(link: IngredientLinkRow) -> dict[str, object]:
    return {
        "ingredient_id": link.ingredient_id,
        "ingredient_name": link.ingredient_name,
        "quantity": link.quantity,
        "unit": link.unit,
        "emissions_kg_co2e_per_kg": link.emissions_kg_co2e_per_kg,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Manage dish ingredient links and emissions totals")
    parser.add_argument("--db-path", default=".platewise.db", help="Path to the SQLite database")
    subparsers = parser.add_subparsers(dest="command", required=True)

    link_parser = subparsers.add_parser("link", help="Create or update an ingredient link")
    link_parser.add_argument("--dish", type=int, required=True)
    link_parser.add_argument("--ingredient", type=int, required=True)
    link_parser.add_argument("--quantity", required=True)
    link_parser.add_argument("--unit", default="g", help="g or kg (default: g)")

    unlink_parser = subparsers.add_parser("unlink", help="Remove an ingredient link")
    unlink_parser.add_argument("--dish", type=int, required=True)
    unlink_parser.add_argument("--ingredient", type=int, required=True)

    show_parser = subparsers.add_parser("show", help="List links and recompute the total")
    show_parser.add_argument("--dish", type=int, required=True)

    args = parser.parse_args(argv)

    with KitchenRepository(args.db_path) as repository:
        service = EmissionsService(repository)
        try:
            if args.command == "link":
                result = service.link_ingredient(
                    args.dish,
                    args.ingredient,
                    quantity=parse_quantity(args.quantity),
                    unit=parse_unit(args.unit),
                )
                payload: dict[str, object] = {
                    "dish_id": args.dish,
                    "link": _link_payload(result.link),
                    "total_kg_co2e": result.total_kg_co2e,
                }
            elif args.command == "unlink":
                result = service.unlink_ingredient(args.dish, args.ingredient)
                payload = {"dish_id": args.dish, "total_kg_co2e": result.total_kg_co2e}
            else:
                emissions = service.describe_dish(args.dish)
                payload = {
                    "dish_id": args.dish,
                    "links": [_link_payload(link) for link in emissions.links],
                    "total_kg_co2e": emissions.total_kg_co2e,
                }
        except (NotFoundError, ValueError) as exc:
            print(json.dumps({"dish_id": args.dish, "error": str(exc)}, indent=2))
            return 1

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
