from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models import GameCatalogEntry
from ..normalizers import CATALOG_FIELDS, extract_collection, parse_rows
from .base import BaseClient

logger = logging.getLogger(__name__)


@dataclass
class CatalogClient(BaseClient):
    def fetch_catalog(self, store_id: int) -> list[GameCatalogEntry]:
        """Games offered in the store's jurisdiction, in server order."""
        payload = self._get_with_retry(f"/lottery/types/store/{store_id}", operation="catalog.fetch")
        entries = parse_rows(extract_collection(payload, CATALOG_FIELDS), GameCatalogEntry, source="catalog")
        logger.info("catalog_fetch_success", extra={"store_id": store_id, "count": len(entries)})
        return entries
