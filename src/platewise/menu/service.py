"""Menu catalog operations on top of the storage repository."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from platewise.ingestion.models import MenuCandidate
from platewise.menu.validation import parse_price_cents
from platewise.storage.repository import KitchenRepository, MenuItem

logger = logging.getLogger(__name__)


class MenuService:
    """Owner-scoped menu operations; each owner works against one main menu."""

    def __init__(self, repository: KitchenRepository) -> None:
        self._repository = repository

    def list_items(self, owner_id: int) -> list[MenuItem]:
        menu = self._repository.get_or_create_main_menu(owner_id)
        return self._repository.list_menu_items(menu.id)

    def add_item(
        self,
        owner_id: int,
        *,
        name: str,
        category: str | None = None,
        price: object = None,
    ) -> MenuItem:
        cleaned_name = name.strip()
        if not cleaned_name:
            raise ValueError("name is required")
        price_cents = parse_price_cents(price)

        menu = self._repository.get_or_create_main_menu(owner_id)
        return self._repository.add_menu_item(
            menu.id,
            name=cleaned_name,
            category=(category or "").strip() or None,
            price_cents=price_cents,
        )

    def update_item(
        self,
        item_id: int,
        *,
        name: str,
        category: str | None = None,
        price: object = None,
    ) -> MenuItem:
        cleaned_name = name.strip()
        if not cleaned_name:
            raise ValueError("name is required")
        return self._repository.update_menu_item(
            item_id,
            name=cleaned_name,
            category=(category or "").strip() or None,
            price_cents=parse_price_cents(price),
        )

    def remove_item(self, item_id: int) -> None:
        self._repository.deactivate_menu_item(item_id)

    def confirm_candidates(
        self,
        owner_id: int,
        candidates: Iterable[MenuCandidate],
        *,
        category: str | None = None,
    ) -> list[MenuItem]:
        """Persist reviewed extraction candidates as menu items, in order."""

        created = [
            self.add_item(owner_id, name=candidate.name, category=category, price=candidate.price)
            for candidate in candidates
        ]
        logger.info("Imported %d confirmed candidates for owner %s", len(created), owner_id)
        return created
