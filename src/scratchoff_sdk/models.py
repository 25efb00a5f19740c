from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOT_SCANNED = "Not scanned"


def to_money(value: Any) -> Decimal:
    """Coerce a wire price (string, int or float) into a Decimal, 0 when unparseable."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so floats keep their shortest repr instead of binary noise
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not parsed.is_finite():
        return Decimal("0")
    return parsed


class Direction(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class LockState(str, Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"


class GameCatalogEntry(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    game_id: int = Field(alias="lottery_id")
    game_number: str = Field(default="", alias="lottery_number")
    game_name: str = Field(default="", alias="lottery_name")
    unit_price: Decimal = Field(default=Decimal("0"), alias="price")
    image_url: str | None = None

    @field_validator("game_number", "game_name", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> Decimal:
        price = to_money(value)
        return price if price >= 0 else Decimal("0")


class InventoryBook(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    book_id: int = Field(alias="id")
    game_id: int = Field(alias="lottery_id")
    serial_number: str = ""
    total_count: int
    current_count: int
    direction: Direction
    status: str | None = None
    store_id: int | None = None
    created_at: datetime | None = None

    @field_validator("serial_number", mode="before")
    @classmethod
    def _stringify_serial(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value: Any) -> Any:
        if isinstance(value, str):
            clean = value.strip().lower()
            return {"ascending": "asc", "descending": "desc"}.get(clean, clean)
        return value


class ReconciledCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    game_id: int
    game_number: str
    game_name: str
    unit_price: Decimal
    image_url: str | None = None
    book_id: int | None = None
    serial_number: str = NOT_SCANNED
    total_count: int = 0
    direction: Direction | None = None
    sold_count: int = 0
    remaining_count: int = 0
    remaining_value: Decimal = Decimal("0")
    sold_value: Decimal = Decimal("0")
    lock_state: LockState = LockState.LOCKED
    integrity_fault: bool = False

    @property
    def is_locked(self) -> bool:
        return self.lock_state is LockState.LOCKED

    @property
    def sold_percentage(self) -> float:
        if self.total_count <= 0:
            return 0.0
        return self.sold_count / self.total_count * 100


class GameActivation(BaseModel):
    """One catalog game with whether the store has an active book for it."""

    model_config = ConfigDict(frozen=True)

    game_id: int
    game_number: str
    game_name: str
    unit_price: Decimal
    image_url: str | None = None
    is_assigned: bool = False
    inventory_count: int = 0


class PriceTierCounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_games: int = 0
    one_dollar_games: int = 0
    ten_plus_games: int = 0


class DashboardStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_remaining_value: Decimal = Decimal("0")
    total_sold_value: Decimal = Decimal("0")
    unique_game_count: int = 0
    total_book_count: int = 0
    total_remaining_tickets: int = 0
    total_sold_tickets: int = 0


class DashboardSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    store_id: int
    cards: tuple[ReconciledCard, ...] = ()
    stats: DashboardStats = Field(default_factory=DashboardStats)
    refreshed_at: datetime
    fault_count: int = 0
    games: tuple[GameActivation, ...] = ()
    tiers: PriceTierCounts = Field(default_factory=PriceTierCounts)


class DailyReportLine(BaseModel):
    model_config = ConfigDict(extra="allow")

    lottery_name: str = ""
    lottery_number: str = ""
    price: Decimal = Decimal("0")
    tickets_sold: int = 0
    revenue: Decimal = Decimal("0")

    @field_validator("lottery_name", "lottery_number", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("price", "revenue", mode="before")
    @classmethod
    def _parse_money(cls, value: Any) -> Decimal:
        return to_money(value)


class DailyReport(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    report_date: Optional[date] = Field(default=None, alias="date")
    total_sales: int = 0
    total_revenue: Decimal = Decimal("0")
    breakdown: List[DailyReportLine] = Field(default_factory=list)

    @field_validator("total_sales", mode="before")
    @classmethod
    def _default_sales(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("total_revenue", mode="before")
    @classmethod
    def _parse_revenue(cls, value: Any) -> Decimal:
        return to_money(value)

    @field_validator("breakdown", mode="before")
    @classmethod
    def _default_breakdown(cls, value: Any) -> Any:
        return [] if value is None else value


class SessionData(BaseModel):
    access_token: str
    saved_at: datetime | None = None
