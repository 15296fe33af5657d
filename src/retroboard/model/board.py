"""Live board: the confirmed cards of one team, with change notification."""

from __future__ import annotations

from typing import Any, Callable

from retroboard.ids import id_key
from retroboard.model.ordering import build_column
from retroboard.model.types import (
    COLUMN_TOPICS,
    DEFAULT_COLUMN_TITLES,
    ActionItem,
    BoardState,
    Card,
    Column,
    Thought,
    Topic,
)

Callback = Callable[["Board", str, Any, Any], None]

ANY = "*"


class Board:
    """Mutable view over a team's live cards.

    Only confirmed state is stored here: callers put a card after the
    gateway has accepted the change. Watchers are keyed by topic value
    ("happy", "action", ...) or "titles"; watchers on "*" see every
    change. Columns are recomputed from the current cards on every call
    to column(), so they never go stale.
    """

    def __init__(self, state: BoardState) -> None:
        self._watchers: dict[str, list[Callback]] = {}
        self._thoughts: dict[str, Thought] = {}
        self._actions: dict[str, ActionItem] = {}
        self._sort_by_votes: dict[Topic, bool] = {}
        self.column_titles: dict[Topic, str] = dict(DEFAULT_COLUMN_TITLES)
        self._load(state)

    def _load(self, state: BoardState) -> None:
        self.team = state.team
        self.revision = state.revision
        self._thoughts = {t.id: t for t in state.thoughts}
        self._actions = {a.id: a for a in state.action_items if not a.archived}
        self.column_titles = {**DEFAULT_COLUMN_TITLES, **state.column_titles}

    @property
    def team_id(self) -> str:
        return self.team.id

    @property
    def thoughts(self) -> tuple[Thought, ...]:
        return tuple(sorted(self._thoughts.values(), key=lambda t: id_key(t.id)))

    @property
    def action_items(self) -> tuple[ActionItem, ...]:
        return tuple(sorted(self._actions.values(), key=lambda a: id_key(a.id)))

    def _store_for(self, card: Card) -> dict:
        return self._actions if card.topic is Topic.ACTION else self._thoughts

    def get(self, card: Card) -> Card | None:
        """Return the current version of card, or None if it's gone."""
        return self._store_for(card).get(card.id)

    def put(self, card: Card) -> None:
        """Add or replace a card. Archived action items are dropped instead."""
        if isinstance(card, ActionItem) and card.archived:
            self.remove(card)
            return
        store = self._store_for(card)
        old = store.get(card.id)
        store[card.id] = card
        if old != card:
            self._emit(card.topic.value, old, card)

    def remove(self, card: Card) -> None:
        old = self._store_for(card).pop(card.id, None)
        if old is not None:
            self._emit(old.topic.value, old, None)

    def set_column_title(self, topic: Topic, title: str) -> None:
        old = self.column_titles.get(topic)
        self.column_titles[topic] = title
        if old != title:
            self._emit("titles", old, title)

    def set_sort_by_votes(self, topic: Topic, enabled: bool) -> bool:
        """Toggle vote sorting for a thought column.

        Returns False for the action column, which has no votes.
        """
        if topic is Topic.ACTION:
            return False
        self._sort_by_votes[topic] = enabled
        return True

    def sort_by_votes(self, topic: Topic) -> bool:
        return self._sort_by_votes.get(topic, False)

    def column(self, topic: Topic) -> Column:
        cards = self.action_items if topic is Topic.ACTION else self.thoughts
        return build_column(topic, cards, self.column_titles.get(topic), self.sort_by_votes(topic))

    def columns(self) -> list[Column]:
        return [self.column(topic) for topic in COLUMN_TOPICS]

    def state(self) -> BoardState:
        """Snapshot of the board as it stands."""
        return BoardState(
            team=self.team,
            thoughts=self.thoughts,
            action_items=self.action_items,
            column_titles=dict(self.column_titles),
            revision=self.revision,
        )

    def refresh(self, state: BoardState) -> None:
        """Update in place to match state, preserving watchers.

        Cards missing from state (deleted elsewhere, archived) are dropped
        and their watchers told so.
        """
        incoming = {("thought", t.id): t for t in state.thoughts}
        incoming.update({("action", a.id): a for a in state.action_items if not a.archived})
        for card in (*self.thoughts, *self.action_items):
            if (card.kind, card.id) not in incoming:
                self.remove(card)
        for card in incoming.values():
            self.put(card)
        for topic, title in {**DEFAULT_COLUMN_TITLES, **state.column_titles}.items():
            self.set_column_title(topic, title)
        self.team = state.team
        self.revision = state.revision

    def watch(self, key: str, callback: Callback) -> Callable[[], None]:
        """Watch a topic (or "titles", or "*") for changes. Returns an unwatch callable."""
        self._watchers.setdefault(key, []).append(callback)
        return lambda: self._watchers.get(key, []) and self._watchers[key].remove(callback)

    def _emit(self, key: str, old: Any, new: Any) -> None:
        for cb in list(self._watchers.get(key, ())):
            cb(self, key, old, new)
        for cb in list(self._watchers.get(ANY, ())):
            cb(self, key, old, new)

    def __repr__(self) -> str:
        return f"<Board {self.team_id} thoughts={len(self._thoughts)} actions={len(self._actions)}>"
