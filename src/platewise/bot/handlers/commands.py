"""Command handlers for menu management and dish emissions."""

from __future__ import annotations

import logging

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes

from platewise.bot.handlers.common import (
    PENDING_CANDIDATES_KEY,
    ConfigError,
    _resolve_emissions_service,
    _resolve_menu_service,
    _resolve_owner_id,
    _resolve_page_size,
    _resolve_repository,
)
from platewise.bot.handlers.renderers import (
    build_pagination_keyboard,
    format_kg_co2e,
    format_price_cents,
    render_dish_emissions,
    render_menu_page,
)
from platewise.emissions.aggregator import Unit, parse_unit
from platewise.menu.validation import InvalidNumericField, parse_quantity
from platewise.storage.repository import NotFoundError

logger = logging.getLogger(__name__)

UNAVAILABLE_TEXT = "This command is temporarily unavailable. Please try again later."


def _parse_id(raw: str) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command with usage instructions."""
    del context
    if update.message is None:
        return

    text = (
        "Welcome! I keep your menu and estimate each dish's carbon footprint.\n\n"
        "Send me a menu PDF and I will suggest dishes and prices to import.\n\n"
        "• /menu — list your dishes\n"
        "• /add <price> <name> — add a dish by hand\n"
        "• /ingredients — ingredient catalog\n"
        "• /link <dish> <ingredient> <qty> [g|kg] — attach an ingredient\n"
        "• /dish <id> — dish ingredients and emissions\n"
        "• /help — all commands"
    )
    await update.message.reply_text(text)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command with detailed usage guidance."""
    del context
    if update.message is None:
        return

    text = (
        "Commands:\n\n"
        "Menu PDF upload — extracts candidate dishes for review\n"
        "/confirm <n> [n...] — import the chosen candidates\n"
        "  Example: /confirm 1 3 4\n\n"
        "/menu — list dishes with prices and emissions\n"
        "/add <price> <name> — add a dish\n"
        "  Example: /add 12.50 Caesar Salad\n"
        "/edit <id> <price> <name> — rename or reprice a dish\n"
        "/remove <id> — remove a dish from the menu\n\n"
        "/ingredients — ingredient catalog with emissions factors\n"
        "/link <dish> <ingredient> <qty> [g|kg] — set an ingredient quantity (grams by default)\n"
        "  Example: /link 4 2 180 g\n"
        "/unlink <dish> <ingredient> — remove an ingredient from a dish\n"
        "/dish <id> — show a dish's ingredients and estimated emissions"
    )
    await update.message.reply_text(text)


async def menu_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /menu with the first page of active dishes."""
    if update.message is None:
        return

    owner_id = _resolve_owner_id(update)
    if owner_id is None:
        await update.message.reply_text("Could not identify the user.")
        return

    try:
        menu_service = _resolve_menu_service(context)
        page_size = _resolve_page_size(context)
    except ConfigError as error:
        logger.error("/menu failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    items = menu_service.list_items(owner_id)
    text = render_menu_page(items=items, page_num=0, page_size=page_size)
    reply_markup = build_pagination_keyboard(prefix="menu_page", page_num=0, has_next=len(items) > page_size)
    await update.message.reply_text(text, reply_markup=reply_markup)


async def add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /add <price> <name>."""
    if update.message is None:
        return

    owner_id = _resolve_owner_id(update)
    if owner_id is None:
        await update.message.reply_text("Could not identify the user.")
        return

    args = list(context.args or [])
    if len(args) < 2:
        await update.message.reply_text("Usage: /add <price> <name>\n\nExample: /add 12.50 Caesar Salad")
        return

    try:
        menu_service = _resolve_menu_service(context)
    except ConfigError as error:
        logger.error("/add failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    try:
        item = menu_service.add_item(owner_id, name=" ".join(args[1:]), price=args[0])
    except InvalidNumericField as error:
        await update.message.reply_text(f"Invalid price: {error.value!r} ({error.reason}).")
        return

    await update.message.reply_text(f"Added #{item.id} {item.name} — {format_price_cents(item.price_cents)}")


async def edit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /edit <id> <price> <name>."""
    if update.message is None:
        return

    args = list(context.args or [])
    item_id = _parse_id(args[0]) if args else None
    if item_id is None or len(args) < 3:
        await update.message.reply_text("Usage: /edit <id> <price> <name>")
        return

    try:
        menu_service = _resolve_menu_service(context)
    except ConfigError as error:
        logger.error("/edit failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    try:
        item = menu_service.update_item(item_id, name=" ".join(args[2:]), price=args[1])
    except InvalidNumericField as error:
        await update.message.reply_text(f"Invalid price: {error.value!r} ({error.reason}).")
        return
    except NotFoundError:
        await update.message.reply_text(f"Dish #{item_id} not found.")
        return

    await update.message.reply_text(f"Updated #{item.id} {item.name} — {format_price_cents(item.price_cents)}")


async def remove_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /remove <id> (soft delete)."""
    if update.message is None:
        return

    args = list(context.args or [])
    item_id = _parse_id(args[0]) if len(args) == 1 else None
    if item_id is None:
        await update.message.reply_text("Usage: /remove <id>")
        return

    try:
        menu_service = _resolve_menu_service(context)
    except ConfigError as error:
        logger.error("/remove failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    try:
        menu_service.remove_item(item_id)
    except NotFoundError:
        await update.message.reply_text(f"Dish #{item_id} not found.")
        return

    await update.message.reply_text(f"Removed dish #{item_id}.")


async def confirm_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /confirm <n> [n...] against the candidates of the last upload."""
    if update.message is None:
        return

    owner_id = _resolve_owner_id(update)
    if owner_id is None:
        await update.message.reply_text("Could not identify the user.")
        return

    pending = context.user_data.get(PENDING_CANDIDATES_KEY)
    if not pending:
        await update.message.reply_text("Nothing to confirm. Upload a menu PDF first.")
        return

    args = list(context.args or [])
    positions: list[int] = []
    for raw in args:
        position = _parse_id(raw)
        if position is None or position > len(pending):
            await update.message.reply_text(f"Pick numbers between 1 and {len(pending)}.")
            return
        if position not in positions:
            positions.append(position)

    if not positions:
        await update.message.reply_text("Usage: /confirm <n> [n...]\n\nExample: /confirm 1 3 4")
        return

    try:
        menu_service = _resolve_menu_service(context)
    except ConfigError as error:
        logger.error("/confirm failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    created = menu_service.confirm_candidates(owner_id, [pending[pos - 1] for pos in positions])
    context.user_data.pop(PENDING_CANDIDATES_KEY, None)
    await update.message.reply_text(f"Imported {len(created)} dishes. See /menu.")


async def ingredients_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /ingredients with the catalog and its emissions factors."""
    if update.message is None:
        return

    try:
        repository = _resolve_repository(context)
    except ConfigError as error:
        logger.error("/ingredients failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    ingredients = repository.list_ingredients()
    if not ingredients:
        await update.message.reply_text("The ingredient catalog is empty.")
        return

    lines = ["Ingredients:", ""]
    for ingredient in ingredients:
        factor = (
            "no factor"
            if ingredient.emissions_kg_co2e_per_kg is None
            else f"{ingredient.emissions_kg_co2e_per_kg:g} kg CO2e/kg"
        )
        lines.append(f"#{ingredient.id} {ingredient.name} · {factor}")
    await update.message.reply_text("\n".join(lines))


async def link_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /link <dish> <ingredient> <qty> [g|kg]."""
    if update.message is None:
        return

    args = list(context.args or [])
    dish_id = _parse_id(args[0]) if len(args) >= 3 else None
    ingredient_id = _parse_id(args[1]) if len(args) >= 3 else None
    if dish_id is None or ingredient_id is None or len(args) > 4:
        await update.message.reply_text("Usage: /link <dish> <ingredient> <qty> [g|kg]\n\nExample: /link 4 2 180 g")
        return

    try:
        quantity = parse_quantity(args[2])
        unit = parse_unit(args[3]) if len(args) == 4 else Unit.GRAM
    except InvalidNumericField as error:
        await update.message.reply_text(f"Invalid quantity: {error.value!r} ({error.reason}).")
        return
    except ValueError as error:
        await update.message.reply_text(str(error))
        return

    try:
        emissions_service = _resolve_emissions_service(context)
    except ConfigError as error:
        logger.error("/link failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    try:
        result = emissions_service.link_ingredient(dish_id, ingredient_id, quantity=quantity, unit=unit)
    except NotFoundError as error:
        await update.message.reply_text(str(error))
        return

    link = result.link
    await update.message.reply_text(
        f"Linked {link.ingredient_name} to dish #{dish_id}: {link.quantity:g} {link.unit or 'kg'}\n"
        f"Estimated emissions: {format_kg_co2e(result.total_kg_co2e)}"
    )


async def unlink_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /unlink <dish> <ingredient>."""
    if update.message is None:
        return

    args = list(context.args or [])
    dish_id = _parse_id(args[0]) if len(args) == 2 else None
    ingredient_id = _parse_id(args[1]) if len(args) == 2 else None
    if dish_id is None or ingredient_id is None:
        await update.message.reply_text("Usage: /unlink <dish> <ingredient>")
        return

    try:
        emissions_service = _resolve_emissions_service(context)
    except ConfigError as error:
        logger.error("/unlink failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    try:
        result = emissions_service.unlink_ingredient(dish_id, ingredient_id)
    except NotFoundError:
        await update.message.reply_text("Ingredient link not found.")
        return

    await update.message.reply_text(
        f"Removed ingredient #{ingredient_id} from dish #{dish_id}.\n"
        f"Estimated emissions: {format_kg_co2e(result.total_kg_co2e)}"
    )


async def dish_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /dish <id> with linked ingredients and the recomputed total."""
    if update.message is None:
        return

    args = list(context.args or [])
    dish_id = _parse_id(args[0]) if len(args) == 1 else None
    if dish_id is None:
        await update.message.reply_text("Usage: /dish <id>")
        return

    try:
        repository = _resolve_repository(context)
        emissions_service = _resolve_emissions_service(context)
    except ConfigError as error:
        logger.error("/dish failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    try:
        emissions = emissions_service.describe_dish(dish_id)
        item = repository.get_menu_item(dish_id)
    except NotFoundError:
        await update.message.reply_text(f"Dish #{dish_id} not found.")
        return

    await update.message.reply_text(
        render_dish_emissions(item=item, links=emissions.links, total_kg_co2e=emissions.total_kg_co2e)
    )


def build_command_handlers() -> list[CommandHandler]:
    """Build all command handlers."""
    return [
        CommandHandler("start", start_command),
        CommandHandler("help", help_command),
        CommandHandler("menu", menu_command),
        CommandHandler("add", add_command),
        CommandHandler("edit", edit_command),
        CommandHandler("remove", remove_command),
        CommandHandler("confirm", confirm_command),
        CommandHandler("ingredients", ingredients_command),
        CommandHandler("link", link_command),
        CommandHandler("unlink", unlink_command),
        CommandHandler("dish", dish_command),
    ]
