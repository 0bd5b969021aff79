"""Production Telegram bot entrypoint with handler registration and polling."""

from __future__ import annotations

import asyncio
import logging
import sys

from dotenv import load_dotenv
from telegram.ext import Application

load_dotenv()

from platewise.bot.config import BotSettings
from platewise.bot.handlers.callbacks import build_callback_handlers
from platewise.bot.handlers.commands import build_command_handlers
from platewise.bot.handlers.upload import build_upload_handler
from platewise.emissions.service import EmissionsService
from platewise.ingestion.importer import MenuImporter
from platewise.menu.service import MenuService
from platewise.storage.repository import KitchenRepository


logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


def build_application(settings: BotSettings) -> Application:
    """Build PTB Application with all handlers registered."""
    repository = KitchenRepository(settings.db_path)

    application = Application.builder().token(settings.token).build()

    # Shared dependencies for handlers
    application.bot_data["repository"] = repository
    application.bot_data["menu_service"] = MenuService(repository)
    application.bot_data["emissions_service"] = EmissionsService(repository)
    application.bot_data["importer"] = MenuImporter(
        max_upload_bytes=settings.max_upload_bytes,
        ocr_enabled=settings.ocr_enabled,
    )
    application.bot_data["page_size"] = settings.page_size

    for handler in build_command_handlers():
        application.add_handler(handler)

    application.add_handler(build_upload_handler())

    for handler in build_callback_handlers():
        application.add_handler(handler)

    logger.info("Registered all handlers: commands, upload, callbacks")
    return application


async def run_bot(settings: BotSettings) -> None:
    """Run bot with polling and graceful shutdown."""
    application = build_application(settings)

    await application.initialize()
    logger.info("Bot initialized. Starting polling...")

    await application.start()
    updater = application.updater
    if updater is None:
        raise RuntimeError("Bot updater is not initialized")

    await updater.start_polling(allowed_updates=["message", "callback_query"])
    logger.info("Bot polling started. Press Ctrl+C to stop.")

    try:
        await asyncio.Event().wait()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Received stop signal. Shutting down...")

    await updater.stop()
    await application.stop()
    await application.shutdown()

    repository = application.bot_data.get("repository")
    if isinstance(repository, KitchenRepository):
        repository.close()

    logger.info("Bot stopped cleanly.")


def main() -> None:
    """Main entrypoint for Telegram bot."""
    try:
        settings = BotSettings.from_env()
        logger.info(
            "Loaded bot config: db=%s, max_upload=%s bytes, ocr=%s",
            settings.db_path,
            settings.max_upload_bytes,
            settings.ocr_enabled,
        )
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)

    try:
        asyncio.run(run_bot(settings))
    except KeyboardInterrupt:
        logger.info("Bot interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()
