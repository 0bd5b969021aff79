"""Tests for command handlers (/menu, /add, /confirm, /link, /dish and friends)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from platewise.bot.handlers.commands import (
    add_command,
    confirm_command,
    dish_command,
    edit_command,
    help_command,
    ingredients_command,
    link_command,
    menu_command,
    remove_command,
    start_command,
    unlink_command,
)
from platewise.bot.handlers.common import PENDING_CANDIDATES_KEY
from platewise.emissions.service import EmissionsService
from platewise.ingestion.models import MenuCandidate
from platewise.menu.service import MenuService
from platewise.storage.repository import KitchenRepository


OWNER_ID = 123


class DummyMessage:
    def __init__(self, text: str | None = None) -> None:
        self.text = text
        self.replies: list[dict[str, Any]] = []

    async def reply_text(self, text: str, reply_markup: Any = None) -> None:
        self.replies.append({"text": text, "reply_markup": reply_markup})


@pytest.fixture
def repository(tmp_path: Path):
    repo = KitchenRepository(tmp_path / "kitchen.db")
    yield repo
    repo.close()


def _context(repository: KitchenRepository, *args: str, page_size: int = 5) -> SimpleNamespace:
    return SimpleNamespace(
        bot_data={
            "repository": repository,
            "menu_service": MenuService(repository),
            "emissions_service": EmissionsService(repository),
            "page_size": page_size,
        },
        user_data={},
        args=list(args),
    )


def _run(handler: Any, context: SimpleNamespace) -> DummyMessage:
    message = DummyMessage()
    update = SimpleNamespace(message=message, effective_user=SimpleNamespace(id=OWNER_ID))
    asyncio.run(handler(update, context))
    return message


def test_start_and_help_list_commands(repository: KitchenRepository) -> None:
    start = _run(start_command, _context(repository))
    help_reply = _run(help_command, _context(repository))

    assert "/menu" in start.replies[0]["text"]
    assert "menu PDF" in start.replies[0]["text"]
    for command in ("/confirm", "/add", "/edit", "/remove", "/link", "/unlink", "/dish", "/ingredients"):
        assert command in help_reply.replies[0]["text"]


def test_menu_command_on_empty_menu(repository: KitchenRepository) -> None:
    message = _run(menu_command, _context(repository))

    assert message.replies[0]["text"].startswith("Your menu is empty.")
    assert message.replies[0]["reply_markup"] is None


def test_menu_command_paginates(repository: KitchenRepository) -> None:
    service = MenuService(repository)
    for idx in range(3):
        service.add_item(OWNER_ID, name=f"Dish {idx}", price=idx + 1)

    message = _run(menu_command, _context(repository, page_size=2))

    text = message.replies[0]["text"]
    assert text.startswith("Menu items: 3")
    assert "Dish 0" in text and "Dish 1" in text
    assert "Dish 2" not in text
    markup = message.replies[0]["reply_markup"]
    assert [button.callback_data for button in markup.inline_keyboard[0]] == ["menu_page_1"]


def test_add_command_creates_item(repository: KitchenRepository) -> None:
    message = _run(add_command, _context(repository, "12.50", "Caesar", "Salad"))

    assert message.replies[0]["text"] == "Added #1 Caesar Salad — $12.50"
    assert [item.name for item in MenuService(repository).list_items(OWNER_ID)] == ["Caesar Salad"]


def test_add_command_rejects_bad_price_and_usage(repository: KitchenRepository) -> None:
    bad_price = _run(add_command, _context(repository, "abc", "Soup"))
    usage = _run(add_command, _context(repository, "5"))

    assert bad_price.replies[0]["text"] == "Invalid price: 'abc' (not a number)."
    assert usage.replies[0]["text"].startswith("Usage: /add <price> <name>")
    assert MenuService(repository).list_items(OWNER_ID) == []


def test_edit_and_remove_commands(repository: KitchenRepository) -> None:
    item = MenuService(repository).add_item(OWNER_ID, name="Soup", price=5)

    edited = _run(edit_command, _context(repository, str(item.id), "6", "Tomato", "Soup"))
    removed = _run(remove_command, _context(repository, str(item.id)))
    missing = _run(remove_command, _context(repository, "99"))
    usage = _run(remove_command, _context(repository, "zero"))

    assert edited.replies[0]["text"] == f"Updated #{item.id} Tomato Soup — $6.00"
    assert removed.replies[0]["text"] == f"Removed dish #{item.id}."
    assert missing.replies[0]["text"] == "Dish #99 not found."
    assert usage.replies[0]["text"] == "Usage: /remove <id>"


def test_confirm_command_imports_selected_candidates(repository: KitchenRepository) -> None:
    context = _context(repository, "2", "1", "2")
    context.user_data[PENDING_CANDIDATES_KEY] = [
        MenuCandidate(name="Bruschetta", price=9.0, source_text="Bruschetta 9"),
        MenuCandidate(name="Calamari", price=13.0, source_text="Calamari $13"),
        MenuCandidate(name="Tiramisu", price=8.0, source_text="Tiramisu 8"),
    ]

    message = _run(confirm_command, context)

    assert message.replies[0]["text"] == "Imported 2 dishes. See /menu."
    assert [item.name for item in MenuService(repository).list_items(OWNER_ID)] == ["Calamari", "Bruschetta"]
    assert PENDING_CANDIDATES_KEY not in context.user_data


def test_confirm_command_validation(repository: KitchenRepository) -> None:
    nothing = _run(confirm_command, _context(repository, "1"))

    context = _context(repository, "4")
    context.user_data[PENDING_CANDIDATES_KEY] = [MenuCandidate(name="Soup", price=5.0, source_text="Soup 5")]
    out_of_range = _run(confirm_command, context)

    assert nothing.replies[0]["text"] == "Nothing to confirm. Upload a menu PDF first."
    assert out_of_range.replies[0]["text"] == "Pick numbers between 1 and 1."
    assert context.user_data[PENDING_CANDIDATES_KEY]


def test_ingredients_command_lists_catalog(repository: KitchenRepository) -> None:
    empty = _run(ingredients_command, _context(repository))
    repository.upsert_ingredient(name="Tomato", emissions_kg_co2e_per_kg=1.5)
    repository.upsert_ingredient(name="Basil", emissions_kg_co2e_per_kg=None)

    listing = _run(ingredients_command, _context(repository))

    assert empty.replies[0]["text"] == "The ingredient catalog is empty."
    assert listing.replies[0]["text"].splitlines()[2:] == [
        "#2 Basil · no factor",
        "#1 Tomato · 1.5 kg CO2e/kg",
    ]


def test_link_unlink_and_dish_commands(repository: KitchenRepository) -> None:
    dish = MenuService(repository).add_item(OWNER_ID, name="Burger", price=14)
    beef = repository.upsert_ingredient(name="Beef", emissions_kg_co2e_per_kg=27.0)
    tomato = repository.upsert_ingredient(name="Tomato", emissions_kg_co2e_per_kg=1.5)

    linked = _run(link_command, _context(repository, str(dish.id), str(beef.id), "500"))
    _run(link_command, _context(repository, str(dish.id), str(tomato.id), "1", "kg"))
    shown = _run(dish_command, _context(repository, str(dish.id)))
    unlinked = _run(unlink_command, _context(repository, str(dish.id), str(beef.id)))
    unlinked_again = _run(unlink_command, _context(repository, str(dish.id), str(beef.id)))

    assert linked.replies[0]["text"] == (
        f"Linked Beef to dish #{dish.id}: 500 g\nEstimated emissions: 13.500 kg CO2e"
    )
    assert "Estimated emissions: 15.000 kg CO2e" in shown.replies[0]["text"]
    assert "• Beef (#1): 500 g · 27/kg" in shown.replies[0]["text"]
    assert unlinked.replies[0]["text"] == (
        f"Removed ingredient #{beef.id} from dish #{dish.id}.\nEstimated emissions: 1.500 kg CO2e"
    )
    assert unlinked_again.replies[0]["text"] == "Ingredient link not found."


def test_link_command_rejects_bad_input(repository: KitchenRepository) -> None:
    usage = _run(link_command, _context(repository, "1", "2"))
    bad_quantity = _run(link_command, _context(repository, "1", "2", "0"))
    bad_unit = _run(link_command, _context(repository, "1", "2", "5", "lb"))
    missing = _run(link_command, _context(repository, "1", "2", "5"))

    assert usage.replies[0]["text"].startswith("Usage: /link")
    assert bad_quantity.replies[0]["text"] == "Invalid quantity: '0' (must be > 0)."
    assert bad_unit.replies[0]["text"] == "Unsupported unit: 'lb' (use g or kg)"
    assert missing.replies[0]["text"] == "Menu item not found: 1"


def test_dish_command_unknown_id(repository: KitchenRepository) -> None:
    message = _run(dish_command, _context(repository, "7"))

    assert message.replies[0]["text"] == "Dish #7 not found."


def test_commands_reply_generic_error_without_services(repository: KitchenRepository) -> None:
    context = SimpleNamespace(bot_data={}, user_data={}, args=["5", "Soup"])

    message = _run(add_command, context)

    assert message.replies[0]["text"] == "This command is temporarily unavailable. Please try again later."
