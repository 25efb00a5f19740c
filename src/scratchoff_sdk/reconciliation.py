"""Join the game catalog with scanned inventory books into dashboard cards.

Everything here is pure: the same catalog and books always produce the same
cards in the same order. Bad counts are reported, never corrected.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from .models import (
    NOT_SCANNED,
    Direction,
    GameActivation,
    GameCatalogEntry,
    InventoryBook,
    LockState,
    PriceTierCounts,
    ReconciledCard,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookCounts:
    sold: int
    remaining: int

    @property
    def total(self) -> int:
        return self.sold + self.remaining


def derive_counts(book: InventoryBook) -> BookCounts:
    """Sold/remaining tickets for a book given its numbering direction.

    ``current_count`` is the index of the last ticket observed. Ascending books
    sell from index 0 upward, descending books from ``total_count - 1`` down.
    """
    if book.direction is Direction.ASCENDING:
        sold = book.current_count + 1
        remaining = book.total_count - sold
    else:
        sold = book.total_count - book.current_count - 1
        remaining = book.current_count + 1
    return BookCounts(sold=sold, remaining=remaining)


def find_integrity_issues(book: InventoryBook, counts: BookCounts) -> list[str]:
    issues: list[str] = []
    if book.total_count <= 0:
        issues.append("total_count must be positive")
    if not 0 <= book.current_count < max(book.total_count, 0):
        issues.append("current_count outside [0, total_count)")
    if counts.sold < 0 or counts.remaining < 0:
        issues.append("negative derived count")
    if counts.total != book.total_count:
        issues.append("sold + remaining != total_count")
    return issues


def group_books(books: Iterable[InventoryBook]) -> dict[int, list[InventoryBook]]:
    grouped: dict[int, list[InventoryBook]] = defaultdict(list)
    for book in books:
        grouped[book.game_id].append(book)
    return dict(grouped)


def unlocked_card(entry: GameCatalogEntry, book: InventoryBook) -> ReconciledCard:
    counts = derive_counts(book)
    issues = find_integrity_issues(book, counts)
    if issues:
        logger.warning(
            "book_integrity_fault",
            extra={
                "book_id": book.book_id,
                "game_id": book.game_id,
                "total_count": book.total_count,
                "current_count": book.current_count,
                "direction": book.direction.value,
                "issues": issues,
            },
        )
    return ReconciledCard(
        game_id=entry.game_id,
        game_number=entry.game_number,
        game_name=entry.game_name,
        unit_price=entry.unit_price,
        image_url=entry.image_url,
        book_id=book.book_id,
        serial_number=book.serial_number,
        total_count=book.total_count,
        direction=book.direction,
        sold_count=counts.sold,
        remaining_count=counts.remaining,
        remaining_value=counts.remaining * entry.unit_price,
        sold_value=counts.sold * entry.unit_price,
        lock_state=LockState.UNLOCKED,
        integrity_fault=bool(issues),
    )


def locked_card(entry: GameCatalogEntry) -> ReconciledCard:
    return ReconciledCard(
        game_id=entry.game_id,
        game_number=entry.game_number,
        game_name=entry.game_name,
        unit_price=entry.unit_price,
        image_url=entry.image_url,
        book_id=None,
        serial_number=NOT_SCANNED,
        total_count=0,
        direction=None,
        sold_count=0,
        remaining_count=0,
        remaining_value=Decimal("0"),
        sold_value=Decimal("0"),
        lock_state=LockState.LOCKED,
    )


def card_sort_key(card: ReconciledCard) -> tuple[int, Decimal]:
    return (0 if card.lock_state is LockState.UNLOCKED else 1, card.unit_price)


def sort_cards(cards: Iterable[ReconciledCard]) -> list[ReconciledCard]:
    # sorted() is stable: equal keys keep catalog/book insertion order
    return sorted(cards, key=card_sort_key)


def reconcile(catalog: Sequence[GameCatalogEntry], books: Sequence[InventoryBook]) -> list[ReconciledCard]:
    by_game = group_books(books)
    cards: list[ReconciledCard] = []
    for entry in catalog:
        group = by_game.get(entry.game_id, [])
        if group:
            cards.extend(unlocked_card(entry, book) for book in group)
        else:
            cards.append(locked_card(entry))

    known_games = {entry.game_id for entry in catalog}
    orphaned = [book.book_id for book in books if book.game_id not in known_games]
    if orphaned:
        logger.debug("inventory_books_without_catalog_entry", extra={"book_ids": orphaned})

    return sort_cards(cards)


ACTIVE_STATUS = "active"


def is_active(book: InventoryBook) -> bool:
    return (book.status or "").strip().lower() == ACTIVE_STATUS


def summarize_games(catalog: Sequence[GameCatalogEntry], books: Iterable[InventoryBook]) -> list[GameActivation]:
    """Per-game activation view of the catalog.

    A game is assigned when the store holds an active book for it; the first
    such book (inventory order) supplies ``inventory_count``. Assigned games
    sort first, then by ascending price, ties keeping catalog order.
    """
    first_active: dict[int, InventoryBook] = {}
    for book in books:
        if is_active(book):
            first_active.setdefault(book.game_id, book)

    games: list[GameActivation] = []
    for entry in catalog:
        book = first_active.get(entry.game_id)
        games.append(
            GameActivation(
                game_id=entry.game_id,
                game_number=entry.game_number,
                game_name=entry.game_name,
                unit_price=entry.unit_price,
                image_url=entry.image_url,
                is_assigned=book is not None,
                inventory_count=book.current_count if book is not None else 0,
            )
        )
    return sorted(games, key=lambda game: (0 if game.is_assigned else 1, game.unit_price))


def count_price_tiers(games: Sequence[GameActivation]) -> PriceTierCounts:
    return PriceTierCounts(
        total_games=len(games),
        one_dollar_games=sum(1 for game in games if game.unit_price == 1),
        ten_plus_games=sum(1 for game in games if game.unit_price >= 10),
    )
