"""Callback handlers for menu pagination and candidate import buttons."""

from __future__ import annotations

import logging

from telegram import Update
from telegram.ext import CallbackQueryHandler, ContextTypes

from platewise.bot.handlers.common import (
    PENDING_CANDIDATES_KEY,
    _resolve_menu_service,
    _resolve_owner_id,
    _resolve_page_size,
)
from platewise.bot.handlers.renderers import build_pagination_keyboard, render_menu_page

logger = logging.getLogger(__name__)


async def menu_page_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle menu pagination callbacks (menu_page_N)."""
    query = update.callback_query
    if query is None or query.data is None:
        return

    # Always answer callback to clear loading state
    await query.answer()

    try:
        page_num = int(query.data.rpartition("_")[2])
    except ValueError:
        await query.edit_message_text("Navigation error.")
        return

    owner_id = _resolve_owner_id(update)
    if owner_id is None:
        await query.edit_message_text("Could not identify the user.")
        return

    menu_service = _resolve_menu_service(context)
    page_size = _resolve_page_size(context)
    items = menu_service.list_items(owner_id)
    offset = page_num * page_size

    if offset < 0 or (offset >= len(items) and items):
        await query.edit_message_text("This page does not exist.")
        return

    text = render_menu_page(items=items, page_num=page_num, page_size=page_size)
    reply_markup = build_pagination_keyboard(
        prefix="menu_page",
        page_num=page_num,
        has_next=offset + page_size < len(items),
    )
    await query.edit_message_text(text, reply_markup=reply_markup)


async def candidates_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle the Import all / Discard buttons under an extracted candidate list."""
    query = update.callback_query
    if query is None or query.data is None:
        return

    await query.answer()

    pending = context.user_data.pop(PENDING_CANDIDATES_KEY, None)
    if not pending:
        await query.edit_message_text("These candidates have expired. Upload the menu again.")
        return

    if query.data == "candidates_discard":
        await query.edit_message_text(f"Discarded {len(pending)} candidates.")
        return

    owner_id = _resolve_owner_id(update)
    if owner_id is None:
        context.user_data[PENDING_CANDIDATES_KEY] = pending
        await query.edit_message_text("Could not identify the user.")
        return

    created = _resolve_menu_service(context).confirm_candidates(owner_id, pending)
    await query.edit_message_text(f"Imported {len(created)} dishes. See /menu.")


def build_callback_handlers() -> list[CallbackQueryHandler]:
    """Build all callback query handlers."""
    return [
        CallbackQueryHandler(menu_page_callback, pattern=r"^menu_page_\d+$"),
        CallbackQueryHandler(candidates_callback, pattern=r"^candidates_(?:import|discard)$"),
    ]
