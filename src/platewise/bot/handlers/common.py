"""Shared bot handler context resolvers."""

from __future__ import annotations

from telegram import Update
from telegram.ext import ContextTypes

from platewise.emissions.service import EmissionsService
from platewise.ingestion.importer import MenuImporter
from platewise.menu.service import MenuService
from platewise.storage.repository import KitchenRepository


PENDING_CANDIDATES_KEY = "pending_candidates"


class ConfigError(RuntimeError):
    """Raised when required handler configuration is missing or invalid."""


def _resolve_typed(context: ContextTypes.DEFAULT_TYPE, key: str, expected: type) -> object:
    value = context.bot_data.get(key)
    if value is None:
        raise ConfigError(f"{key} missing from context.bot_data['{key}']")
    if not isinstance(value, expected):
        raise ConfigError(f"context.bot_data['{key}'] must be a {expected.__name__}")
    return value


def _resolve_repository(context: ContextTypes.DEFAULT_TYPE) -> KitchenRepository:
    return _resolve_typed(context, "repository", KitchenRepository)


def _resolve_menu_service(context: ContextTypes.DEFAULT_TYPE) -> MenuService:
    return _resolve_typed(context, "menu_service", MenuService)


def _resolve_emissions_service(context: ContextTypes.DEFAULT_TYPE) -> EmissionsService:
    return _resolve_typed(context, "emissions_service", EmissionsService)


def _resolve_importer(context: ContextTypes.DEFAULT_TYPE) -> MenuImporter:
    return _resolve_typed(context, "importer", MenuImporter)


def _resolve_page_size(context: ContextTypes.DEFAULT_TYPE) -> int:
    value = context.bot_data.get("page_size")
    if value is None:
        raise ConfigError("page_size missing from context.bot_data['page_size']")
    return int(value)


def _resolve_owner_id(update: Update) -> int | None:
    user = getattr(update, "effective_user", None)
    if user is None:
        return None
    return int(user.id)
