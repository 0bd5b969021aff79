"""Telegram document upload handler for menu PDF import."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from telegram import Update
from telegram.error import NetworkError, TimedOut
from telegram.ext import ContextTypes, MessageHandler, filters

from platewise.bot.handlers.common import PENDING_CANDIDATES_KEY, ConfigError, _resolve_importer
from platewise.bot.handlers.renderers import build_candidates_keyboard, render_candidates


logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".pdf"}


def _is_supported_extension(file_name: str) -> bool:
    return Path(file_name).suffix.lower() in SUPPORTED_EXTENSIONS


async def handle_menu_upload(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Validate, download, and extract candidate dishes from an uploaded menu."""
    message = update.message
    if message is None or message.document is None:
        return

    try:
        importer = _resolve_importer(context)
    except ConfigError as error:
        logger.error("Menu upload failed due to configuration error: %s", error)
        await message.reply_text("Menu import is temporarily unavailable. Please try again later.")
        return

    document = message.document
    max_mb = importer.max_upload_bytes // (1024 * 1024)

    if document.file_size is not None and document.file_size > importer.max_upload_bytes:
        await message.reply_text(f"File is too large. Maximum size: {max_mb} MB")
        return

    safe_name = Path(document.file_name or "").name
    if not _is_supported_extension(safe_name):
        await message.reply_text("Unsupported format. Please upload the menu as a PDF.")
        return

    status_msg = await message.reply_text("Reading your menu...")

    for attempt in range(2):
        try:
            if attempt == 1:
                logger.warning("Retrying menu download after transient network failure: %s", safe_name)

            telegram_file = await document.get_file()
            payload = bytes(await telegram_file.download_as_bytearray())
            outcome = await asyncio.to_thread(importer.import_pdf, payload, file_name=safe_name)
        except (NetworkError, TimedOut) as error:
            logger.warning("Network error during menu upload (attempt %s/2): %s", attempt + 1, error)
            if attempt == 0:
                await asyncio.sleep(2)
                continue
            await status_msg.edit_text("Network error while downloading the file. Please try again later.")
            return
        except Exception:
            logger.exception("Unexpected error while handling menu upload: %s", safe_name)
            await status_msg.edit_text("Could not process the file. Please try again later.")
            return

        if outcome.status != 200:
            await status_msg.edit_text(outcome.message or "Could not process the file.")
            return

        if outcome.is_empty:
            context.user_data.pop(PENDING_CANDIDATES_KEY, None)
            await status_msg.edit_text(outcome.message or "No menu-like lines were detected.")
            return

        context.user_data[PENDING_CANDIDATES_KEY] = list(outcome.candidates)
        await status_msg.edit_text(
            render_candidates(outcome.candidates),
            reply_markup=build_candidates_keyboard(),
        )
        return


def build_upload_handler() -> MessageHandler:
    """Build document upload message handler."""
    return MessageHandler(filters.Document.PDF, handle_menu_upload)
