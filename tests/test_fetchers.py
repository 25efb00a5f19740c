from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
import requests
import responses

from scratchoff_sdk.auth_store import MemorySessionStore
from scratchoff_sdk.clients.catalog_client import CatalogClient
from scratchoff_sdk.clients.inventory_client import InventoryClient
from scratchoff_sdk.clients.reports_client import ReportsClient
from scratchoff_sdk.exceptions import AuthenticationError, NetworkError, ServerError, ValidationError
from scratchoff_sdk.http_client import HttpClient
from scratchoff_sdk.models import Direction
from scratchoff_sdk.normalizers import CATALOG_FIELDS, extract_collection
from scratchoff_sdk.retry import RetryPolicy

BASE_URL = "https://api.example.com"

CATALOG_URL = f"{BASE_URL}/lottery/types/store/7"
INVENTORY_URL = f"{BASE_URL}/lottery/store/7/inventory"

CATALOG_ROWS = [
    {"lottery_id": 1, "lottery_number": "1501", "lottery_name": "Lucky 7s", "price": "1.00"},
    {"lottery_id": 2, "lottery_number": 1502, "lottery_name": "Cash Blast", "price": 5, "image_url": "https://img/2.png"},
]

INVENTORY_ROWS = [
    {
        "id": 10,
        "store_id": 7,
        "lottery_id": 1,
        "serial_number": "1501-000123",
        "total_count": 30,
        "current_count": 5,
        "direction": "asc",
        "status": "active",
        "created_at": "2024-03-01T10:00:00Z",
    },
    {
        "id": 11,
        "store_id": 7,
        "lottery_id": 2,
        "serial_number": "1502-000456",
        "total_count": 20,
        "current_count": 3,
        "direction": "desc",
        "status": "active",
        "created_at": "2024-03-02T10:00:00Z",
    },
]


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ([1, 2], [1, 2]),
        ({"lotteryTypes": [1]}, [1]),
        ({"lotteries": [2]}, [2]),
        ({"lotteryTypes": None, "lotteries": [3]}, [3]),
        ({"something_else": [4]}, []),
        ({"lotteryTypes": "nope"}, []),
        (None, []),
        ("text", []),
    ],
)
def test_extract_collection_shapes(payload: object, expected: list[object]) -> None:
    assert extract_collection(payload, CATALOG_FIELDS) == expected


@responses.activate
def test_fetch_catalog_accepts_bare_array(http: HttpClient, retry: RetryPolicy) -> None:
    responses.add(responses.GET, CATALOG_URL, json=CATALOG_ROWS, status=200)

    entries = CatalogClient(http=http, retry=retry).fetch_catalog(7)

    assert [entry.game_id for entry in entries] == [1, 2]
    assert entries[0].unit_price == Decimal("1.00")
    assert entries[1].game_number == "1502"
    assert entries[1].unit_price == Decimal("5")
    assert entries[1].image_url == "https://img/2.png"


@pytest.mark.parametrize("field", ["lotteryTypes", "lotteries"])
@responses.activate
def test_fetch_catalog_accepts_wrapped_object(http: HttpClient, retry: RetryPolicy, field: str) -> None:
    responses.add(responses.GET, CATALOG_URL, json={field: CATALOG_ROWS, "state": "GA"}, status=200)

    entries = CatalogClient(http=http, retry=retry).fetch_catalog(7)

    assert [entry.game_name for entry in entries] == ["Lucky 7s", "Cash Blast"]


@responses.activate
def test_fetch_catalog_missing_field_is_empty(http: HttpClient, retry: RetryPolicy) -> None:
    responses.add(responses.GET, CATALOG_URL, json={"message": "no games for state"}, status=200)

    assert CatalogClient(http=http, retry=retry).fetch_catalog(7) == []


@responses.activate
def test_fetch_catalog_unparseable_price_is_zero(http: HttpClient, retry: RetryPolicy) -> None:
    responses.add(
        responses.GET,
        CATALOG_URL,
        json=[{"lottery_id": 3, "lottery_number": "9", "lottery_name": "Free", "price": "n/a"}],
        status=200,
    )

    [entry] = CatalogClient(http=http, retry=retry).fetch_catalog(7)

    assert entry.unit_price == Decimal("0")


@pytest.mark.parametrize("wrap", [False, True])
@responses.activate
def test_fetch_inventory_shapes(http: HttpClient, retry: RetryPolicy, wrap: bool) -> None:
    body = {"inventory": INVENTORY_ROWS} if wrap else INVENTORY_ROWS
    responses.add(responses.GET, INVENTORY_URL, json=body, status=200)

    books = InventoryClient(http=http, retry=retry).fetch_inventory(7)

    assert [book.book_id for book in books] == [10, 11]
    assert books[0].direction is Direction.ASCENDING
    assert books[1].direction is Direction.DESCENDING
    assert books[1].serial_number == "1502-000456"
    assert books[0].created_at is not None


@responses.activate
def test_fetch_inventory_missing_field_is_empty(http: HttpClient, retry: RetryPolicy) -> None:
    responses.add(responses.GET, INVENTORY_URL, json={"count": 0}, status=200)

    assert InventoryClient(http=http, retry=retry).fetch_inventory(7) == []


@responses.activate
def test_fetch_inventory_malformed_row_is_validation_error(http: HttpClient, retry: RetryPolicy) -> None:
    responses.add(responses.GET, INVENTORY_URL, json=[{"id": 1, "lottery_id": 1, "direction": "sideways"}], status=200)

    with pytest.raises(ValidationError) as excinfo:
        InventoryClient(http=http, retry=retry).fetch_inventory(7)

    assert excinfo.value.code == "MALFORMED_PAYLOAD"
    assert excinfo.value.details["index"] == 0
    assert len(responses.calls) == 1


@responses.activate
def test_fetch_retries_network_errors_then_succeeds(http: HttpClient, retry: RetryPolicy, sleeps: list[float]) -> None:
    responses.add(responses.GET, CATALOG_URL, body=requests.ConnectionError("refused"))
    responses.add(responses.GET, CATALOG_URL, body=requests.ConnectionError("refused"))
    responses.add(responses.GET, CATALOG_URL, json=CATALOG_ROWS, status=200)

    entries = CatalogClient(http=http, retry=retry).fetch_catalog(7)

    assert len(entries) == 2
    assert len(responses.calls) == 3
    assert sleeps == [0.5, 1.0]


@responses.activate
def test_fetch_validation_error_makes_one_call(http: HttpClient, retry: RetryPolicy) -> None:
    responses.add(responses.GET, INVENTORY_URL, json={"error": "Invalid store"}, status=400)

    with pytest.raises(ValidationError) as excinfo:
        InventoryClient(http=http, retry=retry).fetch_inventory(7)

    assert excinfo.value.message == "Invalid store"
    assert len(responses.calls) == 1


@responses.activate
def test_fetch_server_errors_exhaust_retries(http: HttpClient, retry: RetryPolicy) -> None:
    for _ in range(3):
        responses.add(responses.GET, INVENTORY_URL, json={"message": "down"}, status=503)

    with pytest.raises(ServerError):
        InventoryClient(http=http, retry=retry).fetch_inventory(7)

    assert len(responses.calls) == 3


@responses.activate
def test_fetch_without_token_never_hits_network(config, retry: RetryPolicy) -> None:
    http = HttpClient(config, session_store=MemorySessionStore())

    with pytest.raises(AuthenticationError):
        CatalogClient(http=http, retry=retry).fetch_catalog(7)

    assert len(responses.calls) == 0


@responses.activate
def test_daily_report_parsing(http: HttpClient, retry: RetryPolicy) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/reports/store/7/daily",
        json={
            "date": "2024-03-05",
            "total_sales": 42,
            "total_revenue": "210.00",
            "breakdown": [
                {"lottery_name": "Cash Blast", "lottery_number": "1502", "price": 5, "tickets_sold": 42, "revenue": 210}
            ],
        },
        status=200,
    )

    report = ReportsClient(http=http, retry=retry).get_daily_report(7, "2024-03-05")

    assert responses.calls[0].request.params == {"date": "2024-03-05"}
    assert report.report_date == date(2024, 3, 5)
    assert report.total_sales == 42
    assert report.total_revenue == Decimal("210.00")
    assert report.breakdown[0].revenue == Decimal("210")


@responses.activate
def test_daily_report_defaults_missing_totals(http: HttpClient, retry: RetryPolicy) -> None:
    responses.add(responses.GET, f"{BASE_URL}/reports/store/7/daily", json={"total_sales": None}, status=200)

    report = ReportsClient(http=http, retry=retry).get_daily_report(7, date(2024, 3, 6))

    assert report.report_date == date(2024, 3, 6)
    assert report.total_sales == 0
    assert report.total_revenue == Decimal("0")
    assert report.breakdown == []


def test_daily_report_rejects_bad_date(http: HttpClient, retry: RetryPolicy) -> None:
    with pytest.raises(ValidationError) as excinfo:
        ReportsClient(http=http, retry=retry).get_daily_report(7, "03/05/2024")

    assert excinfo.value.code == "INVALID_REPORT_DATE"


def test_network_error_is_retryable_kind() -> None:
    assert NetworkError(code="X", message="y").retryable is True
