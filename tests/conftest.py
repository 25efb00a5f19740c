from __future__ import annotations

from decimal import Decimal

import pytest

from scratchoff_sdk.auth_store import MemorySessionStore
from scratchoff_sdk.config import ClientConfig
from scratchoff_sdk.http_client import HttpClient
from scratchoff_sdk.models import Direction, GameCatalogEntry, InventoryBook
from scratchoff_sdk.retry import RetryPolicy


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(env_name="test", api_base_url="https://api.example.com", retries=2, retry_backoff_seconds=0)


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore(token="token-123")


@pytest.fixture
def http(config: ClientConfig, session_store: MemorySessionStore) -> HttpClient:
    return HttpClient(config, session_store=session_store)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def retry(sleeps: list[float]) -> RetryPolicy:
    return RetryPolicy(max_retries=2, base_delay_seconds=0.5, sleep=sleeps.append)


@pytest.fixture
def make_entry():
    def _make(game_id: int, price: str | int, name: str = "", number: str | None = None) -> GameCatalogEntry:
        return GameCatalogEntry(
            game_id=game_id,
            game_number=number or f"{game_id:04d}",
            game_name=name or f"Game {game_id}",
            unit_price=Decimal(str(price)),
        )

    return _make


@pytest.fixture
def make_book():
    def _make(
        book_id: int,
        game_id: int,
        total: int,
        current: int,
        direction: Direction = Direction.ASCENDING,
        serial: str | None = None,
        status: str | None = None,
    ) -> InventoryBook:
        return InventoryBook(
            book_id=book_id,
            game_id=game_id,
            serial_number=serial or f"SN-{book_id}",
            total_count=total,
            current_count=current,
            direction=direction,
            status=status,
        )

    return _make
