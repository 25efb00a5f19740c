from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models import InventoryBook
from ..normalizers import INVENTORY_FIELDS, extract_collection, parse_rows
from .base import BaseClient

logger = logging.getLogger(__name__)


@dataclass
class InventoryClient(BaseClient):
    def fetch_inventory(self, store_id: int) -> list[InventoryBook]:
        payload = self._get_with_retry(f"/lottery/store/{store_id}/inventory", operation="inventory.fetch")
        books = parse_rows(extract_collection(payload, INVENTORY_FIELDS), InventoryBook, source="inventory")
        logger.info("inventory_fetch_success", extra={"store_id": store_id, "count": len(books)})
        return books
