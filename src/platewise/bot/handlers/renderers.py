"""Message rendering for menu, candidate, and emissions replies."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from telegram import InlineKeyboardButton, InlineKeyboardMarkup


class _CandidateLike(Protocol):
    name: str
    price: float


class _MenuItemLike(Protocol):
    id: int
    name: str
    category: str | None
    price_cents: int | None
    estimated_emissions_kg_co2e: float


class _LinkLike(Protocol):
    ingredient_id: int
    ingredient_name: str
    quantity: float
    unit: str | None
    emissions_kg_co2e_per_kg: float | None


def format_price_cents(price_cents: int | None) -> str:
    if price_cents is None:
        return "-"
    return f"${price_cents / 100:,.2f}"


def format_kg_co2e(value: float) -> str:
    return f"{value:.3f} kg CO2e"


def render_candidates(candidates: Sequence[_CandidateLike], *, limit: int = 60) -> str:
    """Numbered candidate list shown after a menu upload.

    Telegram caps messages at 4096 characters, so long menus are cut at *limit*
    entries; /confirm still accepts any index.
    """
    lines = [f"Found {len(candidates)} possible dishes:", ""]
    for idx, candidate in enumerate(candidates[:limit], 1):
        lines.append(f"{idx}. {candidate.name} — ${candidate.price:,.2f}")
    if len(candidates) > limit:
        lines.append(f"... and {len(candidates) - limit} more")
    lines.extend(["", "Import all, discard, or pick some with /confirm 1 3 5"])
    return "\n".join(lines)


def render_menu_page(*, items: Sequence[_MenuItemLike], page_num: int, page_size: int) -> str:
    total = len(items)
    if total == 0:
        return "Your menu is empty. Upload a menu PDF or use /add <price> <name>."

    offset = page_num * page_size
    text = f"Menu items: {total}\n\n"
    for item in items[offset : offset + page_size]:
        category = f" [{item.category}]" if item.category else ""
        text += (
            f"#{item.id} {item.name}{category} — {format_price_cents(item.price_cents)}"
            f" · {format_kg_co2e(item.estimated_emissions_kg_co2e)}\n"
        )
    return text


def render_dish_emissions(*, item: _MenuItemLike, links: Sequence[_LinkLike], total_kg_co2e: float) -> str:
    lines = [f"#{item.id} {item.name}", f"Estimated emissions: {format_kg_co2e(total_kg_co2e)}", ""]
    if not links:
        lines.append("No ingredients linked yet. Use /link <dish> <ingredient> <qty> [g|kg]")
        return "\n".join(lines)

    lines.append("Ingredients:")
    for link in links:
        unit = link.unit or "kg"
        factor = "no factor" if link.emissions_kg_co2e_per_kg is None else f"{link.emissions_kg_co2e_per_kg:g}/kg"
        lines.append(f"• {link.ingredient_name} (#{link.ingredient_id}): {link.quantity:g} {unit} · {factor}")
    return "\n".join(lines)


def build_candidates_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton("Import all", callback_data="candidates_import"),
                InlineKeyboardButton("Discard", callback_data="candidates_discard"),
            ]
        ]
    )


def build_pagination_keyboard(*, prefix: str, page_num: int, has_next: bool) -> InlineKeyboardMarkup | None:
    """Build previous/next pagination keyboard for callback pages."""
    buttons: list[InlineKeyboardButton] = []

    if page_num > 0:
        buttons.append(InlineKeyboardButton("← Previous", callback_data=f"{prefix}_{page_num - 1}"))

    if has_next:
        buttons.append(InlineKeyboardButton("Next →", callback_data=f"{prefix}_{page_num + 1}"))

    if not buttons:
        return None

    return InlineKeyboardMarkup([buttons])
