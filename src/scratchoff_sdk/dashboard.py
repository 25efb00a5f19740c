from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from .aggregation import aggregate
from .clients.catalog_client import CatalogClient
from .clients.inventory_client import InventoryClient
from .exceptions import ApiError, RefreshCancelledError
from .models import DashboardSnapshot, GameCatalogEntry, InventoryBook
from .reconciliation import count_price_tiers, reconcile, summarize_games

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_snapshot(
    store_id: int,
    catalog: Sequence[GameCatalogEntry],
    books: Sequence[InventoryBook],
    refreshed_at: datetime,
) -> DashboardSnapshot:
    cards = reconcile(catalog, books)
    games = summarize_games(catalog, books)
    return DashboardSnapshot(
        store_id=store_id,
        cards=tuple(cards),
        stats=aggregate(cards),
        refreshed_at=refreshed_at,
        fault_count=sum(1 for card in cards if card.integrity_fault),
        games=tuple(games),
        tiers=count_price_tiers(games),
    )


@dataclass
class DashboardService:
    """Fetches catalog and inventory side by side, then reconciles.

    Both fetches must succeed before reconciliation runs; the first failure
    is raised and the other result is discarded. Each refresh takes a
    generation number, and a refresh that is superseded (by :meth:`cancel` or
    a newer :meth:`refresh`) never replaces :attr:`last_snapshot`.
    """

    catalog_client: CatalogClient
    inventory_client: InventoryClient
    max_workers: int = 2
    clock: Callable[[], datetime] = _utcnow
    last_snapshot: DashboardSnapshot | None = None
    _generation: int = field(default=0, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def begin_refresh(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def cancel(self) -> None:
        """Invalidate any refresh still in flight."""
        with self._lock:
            self._generation += 1

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return self._generation == generation

    def refresh(self, store_id: int) -> DashboardSnapshot:
        generation = self.begin_refresh()
        logger.info("dashboard_refresh_start", extra={"store_id": store_id, "generation": generation})
        try:
            catalog, books = self._fetch_both(store_id)
        except ApiError as exc:
            logger.warning(
                "dashboard_refresh_failure",
                extra={"store_id": store_id, "generation": generation, "error_kind": exc.kind.value, "code": exc.code},
            )
            raise
        except Exception:
            logger.exception("dashboard_refresh_failure", extra={"store_id": store_id, "generation": generation})
            raise
        if not self.is_current(generation):
            logger.info("dashboard_refresh_superseded", extra={"store_id": store_id, "generation": generation})
            raise RefreshCancelledError(store_id, generation)

        snapshot = build_snapshot(store_id, catalog, books, self.clock())
        with self._lock:
            if self._generation != generation:
                logger.info("dashboard_refresh_superseded", extra={"store_id": store_id, "generation": generation})
                raise RefreshCancelledError(store_id, generation)
            self.last_snapshot = snapshot
        logger.info(
            "dashboard_refresh_success",
            extra={
                "store_id": store_id,
                "generation": generation,
                "cards": len(snapshot.cards),
                "fault_count": snapshot.fault_count,
            },
        )
        return snapshot

    def _fetch_both(self, store_id: int) -> tuple[list[GameCatalogEntry], list[InventoryBook]]:
        pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="dashboard-fetch")
        try:
            catalog_future: Future[list[GameCatalogEntry]] = pool.submit(self.catalog_client.fetch_catalog, store_id)
            inventory_future: Future[list[InventoryBook]] = pool.submit(
                self.inventory_client.fetch_inventory, store_id
            )
            for future in as_completed([catalog_future, inventory_future]):
                error = future.exception()
                if error is not None:
                    raise error
            return catalog_future.result(), inventory_future.result()
        finally:
            # A still-running fetch finishes on its own thread; its result is dropped.
            pool.shutdown(wait=False, cancel_futures=True)
