from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from .models import DashboardStats, ReconciledCard


def aggregate(cards: Iterable[ReconciledCard]) -> DashboardStats:
    """Store-wide totals over a reconciled card set.

    Locked cards add zero value and tickets but still count as a book and a game.
    """
    remaining_value = Decimal("0")
    sold_value = Decimal("0")
    remaining_tickets = 0
    sold_tickets = 0
    book_count = 0
    game_ids: set[int] = set()

    for card in cards:
        book_count += 1
        game_ids.add(card.game_id)
        remaining_value += card.remaining_value
        sold_value += card.sold_count * card.unit_price
        remaining_tickets += card.remaining_count
        sold_tickets += card.sold_count

    return DashboardStats(
        total_remaining_value=remaining_value,
        total_sold_value=sold_value,
        unique_game_count=len(game_ids),
        total_book_count=book_count,
        total_remaining_tickets=remaining_tickets,
        total_sold_tickets=sold_tickets,
    )
