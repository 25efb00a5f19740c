from __future__ import annotations

from dataclasses import dataclass, field

from .auth_store import FileSessionStore, SessionStore
from .clients.catalog_client import CatalogClient
from .clients.inventory_client import InventoryClient
from .clients.reports_client import ReportsClient
from .config import ClientConfig
from .dashboard import DashboardService
from .http_client import HttpClient
from .retry import RetryPolicy


@dataclass
class ApiSession:
    """Wires config, token store, HTTP client and retry policy into clients."""

    config: ClientConfig
    session_store: SessionStore = field(default_factory=FileSessionStore)
    retry: RetryPolicy | None = None
    http: HttpClient | None = None

    def __post_init__(self) -> None:
        self.retry = self.retry or RetryPolicy.from_config(self.config)
        self.http = self.http or HttpClient(config=self.config, session_store=self.session_store)

    @property
    def token(self) -> str | None:
        return self.session_store.get_token()

    def catalog_client(self) -> CatalogClient:
        return CatalogClient(http=self.http, retry=self.retry)

    def inventory_client(self) -> InventoryClient:
        return InventoryClient(http=self.http, retry=self.retry)

    def reports_client(self) -> ReportsClient:
        return ReportsClient(http=self.http, retry=self.retry)

    def dashboard_service(self) -> DashboardService:
        return DashboardService(
            catalog_client=self.catalog_client(),
            inventory_client=self.inventory_client(),
        )

    def establish(self, token: str) -> None:
        self.session_store.set_token(token)

    def clear(self) -> None:
        self.session_store.clear()
