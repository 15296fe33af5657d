"""Display order of a column's cards."""

from __future__ import annotations

from typing import Iterable

from retroboard.ids import id_key
from retroboard.model.types import DEFAULT_COLUMN_TITLES, Card, Column, Topic


def insertion_order(cards: Iterable[Card]) -> list[Card]:
    """Cards sorted by creation order, whatever order they arrived in."""
    return sorted(cards, key=lambda card: id_key(card.id))


def partition(cards: Iterable[Card]) -> tuple[list[Card], list[Card]]:
    """Split cards into (active, resolved), each in insertion order."""
    active: list[Card] = []
    resolved: list[Card] = []
    for card in insertion_order(cards):
        (resolved if card.is_resolved else active).append(card)
    return active, resolved


def order_cards(cards: Iterable[Card], sort_by_votes: bool = False) -> list[Card]:
    """Return cards in display order: active first, then resolved.

    With sort_by_votes, active thoughts are ordered by descending hearts.
    sorted() is stable, so equal hearts keep insertion order. Resolved
    cards and action items always stay in insertion order.
    """
    active, resolved = partition(cards)
    if sort_by_votes:
        if all(card.topic is not Topic.ACTION for card in active):
            active.sort(key=lambda card: -card.hearts)
    return active + resolved


def build_column(
    topic: Topic,
    cards: Iterable[Card],
    title: str | None = None,
    sort_by_votes: bool = False,
) -> Column:
    """Build the column view for topic from any mix of cards.

    Cards filed under another topic are ignored.
    """
    sort_by_votes = sort_by_votes and topic is not Topic.ACTION
    mine = [card for card in cards if card.topic is topic]
    return Column(
        topic=topic,
        title=title or DEFAULT_COLUMN_TITLES[topic],
        cards=tuple(order_cards(mine, sort_by_votes)),
        sort_by_votes=sort_by_votes,
    )
