"""Ingredient-link mutations that keep each dish's stored emissions total in sync."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
import logging
import threading
import weakref

from platewise.emissions.aggregator import LinkContribution, Unit, aggregate_emissions
from platewise.storage.repository import IngredientLinkRow, KitchenRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LinkMutationResult:
    link: IngredientLinkRow | None
    total_kg_co2e: float


@dataclass(frozen=True, slots=True)
class DishEmissions:
    menu_item_id: int
    links: tuple[IngredientLinkRow, ...]
    total_kg_co2e: float


class DishLockRegistry:
    """Lazily created lock per dish id so unrelated dishes never wait on each other.

    Locks are held weakly: once no caller references a dish lock it is dropped,
    so the registry only tracks dishes that are in use.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[int, threading.Lock] = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def lock_for(self, menu_item_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(menu_item_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[menu_item_id] = lock
            return lock

    @contextmanager
    def hold(self, menu_item_id: int) -> Iterator[None]:
        lock = self.lock_for(menu_item_id)
        with lock:
            yield


def _contributions(links: list[IngredientLinkRow]) -> list[LinkContribution]:
    return [
        LinkContribution(quantity=link.quantity, unit=link.unit, kg_co2e_per_kg=link.emissions_kg_co2e_per_kg)
        for link in links
    ]


class EmissionsService:
    """Link/unlink ingredients and re-derive the dish total after every change.

    Each mutation and the write of the refreshed total share one repository
    transaction, so a failed recompute leaves the links untouched.
    """

    def __init__(self, repository: KitchenRepository, *, locks: DishLockRegistry | None = None) -> None:
        self._repository = repository
        self._locks = locks or DishLockRegistry()

    def _recalculate_locked(self, menu_item_id: int) -> float:
        links = self._repository.list_ingredient_links(menu_item_id)
        total = aggregate_emissions(_contributions(links))
        self._repository.set_menu_item_emissions(menu_item_id, total)
        logger.info("Recalculated dish %s emissions: %.4f kg CO2e over %d links", menu_item_id, total, len(links))
        return total

    def recalculate(self, menu_item_id: int) -> float:
        with self._locks.hold(menu_item_id), self._repository.transaction():
            return self._recalculate_locked(menu_item_id)

    def link_ingredient(
        self,
        menu_item_id: int,
        ingredient_id: int,
        *,
        quantity: float,
        unit: Unit | None = Unit.GRAM,
    ) -> LinkMutationResult:
        """Create or replace the dish/ingredient link and return the refreshed total."""

        if not quantity > 0:
            raise ValueError("quantity must be > 0")

        with self._locks.hold(menu_item_id), self._repository.transaction():
            link = self._repository.upsert_ingredient_link(
                menu_item_id,
                ingredient_id,
                quantity=quantity,
                unit=None if unit is None else Unit(unit).value,
            )
            total = self._recalculate_locked(menu_item_id)
        return LinkMutationResult(link=link, total_kg_co2e=total)

    def unlink_ingredient(self, menu_item_id: int, ingredient_id: int) -> LinkMutationResult:
        with self._locks.hold(menu_item_id), self._repository.transaction():
            self._repository.delete_ingredient_link(menu_item_id, ingredient_id)
            total = self._recalculate_locked(menu_item_id)
        return LinkMutationResult(link=None, total_kg_co2e=total)

    def describe_dish(self, menu_item_id: int) -> DishEmissions:
        """Return current links plus a freshly recomputed (and stored) total."""

        with self._locks.hold(menu_item_id), self._repository.transaction():
            self._repository.get_menu_item(menu_item_id)
            links = self._repository.list_ingredient_links(menu_item_id)
            total = aggregate_emissions(_contributions(links))
            self._repository.set_menu_item_emissions(menu_item_id, total)
        return DishEmissions(menu_item_id=menu_item_id, links=tuple(links), total_kg_co2e=total)
