from .base import BaseClient
from .catalog_client import CatalogClient
from .inventory_client import InventoryClient
from .reports_client import ReportsClient

__all__ = [
    "BaseClient",
    "CatalogClient",
    "InventoryClient",
    "ReportsClient",
]
