from .aggregation import aggregate
from .auth_store import FileSessionStore, MemorySessionStore, SessionStore
from .clients import CatalogClient, InventoryClient, ReportsClient
from .config import ClientConfig, ConfigError, load_config
from .dashboard import DashboardService, build_snapshot
from .exceptions import (
    ApiError,
    AuthenticationError,
    ErrorKind,
    NetworkError,
    RefreshCancelledError,
    ServerError,
    ValidationError,
)
from .http_client import HttpClient
from .models import (
    DailyReport,
    DailyReportLine,
    DashboardSnapshot,
    DashboardStats,
    Direction,
    GameActivation,
    GameCatalogEntry,
    InventoryBook,
    LockState,
    PriceTierCounts,
    ReconciledCard,
)
from .reconciliation import count_price_tiers, derive_counts, reconcile, summarize_games
from .retry import RetryPolicy
from .session import ApiSession

__all__ = [
    "ApiError",
    "ApiSession",
    "AuthenticationError",
    "CatalogClient",
    "ClientConfig",
    "ConfigError",
    "DailyReport",
    "DailyReportLine",
    "DashboardService",
    "DashboardSnapshot",
    "DashboardStats",
    "Direction",
    "ErrorKind",
    "FileSessionStore",
    "GameActivation",
    "GameCatalogEntry",
    "HttpClient",
    "InventoryBook",
    "InventoryClient",
    "LockState",
    "MemorySessionStore",
    "NetworkError",
    "PriceTierCounts",
    "ReconciledCard",
    "RefreshCancelledError",
    "ReportsClient",
    "RetryPolicy",
    "ServerError",
    "SessionStore",
    "ValidationError",
    "aggregate",
    "build_snapshot",
    "count_price_tiers",
    "derive_counts",
    "load_config",
    "reconcile",
    "summarize_games",
]
