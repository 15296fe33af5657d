"""Data model for retro boards.

Cards are frozen dataclasses. A change to a card produces a new value
(via dataclasses.replace), so anything captured in a snapshot or an
archive can't be mutated afterwards.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from retroboard.errors import ValidationError


class Topic(str, enum.Enum):
    """Column a card belongs to."""

    HAPPY = "happy"
    CONFUSED = "confused"
    UNHAPPY = "unhappy"
    ACTION = "action"

    @classmethod
    def parse(cls, value: str | Topic) -> Topic:
        """Look up a topic by value or name, case-insensitively."""
        if isinstance(value, Topic):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown topic '{value}'") from None


THOUGHT_TOPICS = (Topic.HAPPY, Topic.CONFUSED, Topic.UNHAPPY)
COLUMN_TOPICS = (*THOUGHT_TOPICS, Topic.ACTION)

DEFAULT_COLUMN_TITLES = {
    Topic.HAPPY: "Happy",
    Topic.CONFUSED: "Confused",
    Topic.UNHAPPY: "Unhappy",
    Topic.ACTION: "Action Items",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def coerce_datetime(value) -> datetime:
    """Accept a datetime or ISO string, returning an aware UTC datetime."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            raise ValidationError(f"Invalid timestamp '{value}'") from None
    if not isinstance(value, datetime):
        raise ValidationError(f"Invalid timestamp {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Card(Protocol):
    """What ordering and interaction need to know about any card."""

    id: str
    team_id: str

    @property
    def topic(self) -> Topic: ...

    @property
    def is_resolved(self) -> bool: ...

    @property
    def text(self) -> str: ...


@dataclass(frozen=True)
class Team:
    id: str
    name: str


@dataclass(frozen=True)
class Thought:
    """One retrospective observation."""

    id: str
    team_id: str
    message: str
    topic: Topic
    hearts: int = 0
    discussed: bool = False

    kind = "thought"

    def __post_init__(self):
        topic = Topic.parse(self.topic)
        if topic not in THOUGHT_TOPICS:
            raise ValidationError(f"A thought can't be filed under '{topic.value}'")
        object.__setattr__(self, "topic", topic)
        if isinstance(self.hearts, bool) or not isinstance(self.hearts, int) or self.hearts < 0:
            raise ValidationError(f"hearts must be a non-negative integer, got {self.hearts!r}")
        if not isinstance(self.discussed, bool):
            raise ValidationError(f"discussed must be a boolean, got {self.discussed!r}")

    @property
    def is_resolved(self) -> bool:
        return self.discussed

    @property
    def text(self) -> str:
        return self.message


@dataclass(frozen=True)
class ActionItem:
    """An assignable task that outlives the retro until completed."""

    id: str
    team_id: str
    task: str
    assignee: str = ""
    completed: bool = False
    date_created: datetime = field(default_factory=utcnow)
    archived: bool = False

    kind = "action"

    def __post_init__(self):
        object.__setattr__(self, "date_created", coerce_datetime(self.date_created))
        object.__setattr__(self, "assignee", self.assignee or "")
        for name in ("completed", "archived"):
            if not isinstance(getattr(self, name), bool):
                raise ValidationError(f"{name} must be a boolean, got {getattr(self, name)!r}")

    @property
    def topic(self) -> Topic:
        return Topic.ACTION

    @property
    def is_resolved(self) -> bool:
        return self.completed

    @property
    def text(self) -> str:
        return self.task


@dataclass(frozen=True)
class Column:
    """Derived, ordered view of the cards sharing a topic. Never persisted."""

    topic: Topic
    title: str
    cards: tuple = ()
    sort_by_votes: bool = False

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self):
        return iter(self.cards)


@dataclass(frozen=True)
class Archive:
    """Frozen snapshot of one retrospective."""

    id: str
    team_id: str
    created_at: datetime
    thoughts: tuple[Thought, ...] = ()
    action_items: tuple[ActionItem, ...] = ()


@dataclass(frozen=True)
class ArchivePurge:
    """Ids removed from the live board when an archive is committed."""

    thought_ids: frozenset[str] = frozenset()
    action_item_ids: frozenset[str] = frozenset()


@dataclass(frozen=True)
class BoardState:
    """One consistent read of a team's live board.

    revision identifies the stored version the state was read from
    (a commit hash for git storage), or None when storage has no notion
    of one.
    """

    team: Team
    thoughts: tuple[Thought, ...] = ()
    action_items: tuple[ActionItem, ...] = ()
    column_titles: dict = field(default_factory=lambda: dict(DEFAULT_COLUMN_TITLES))
    revision: str | None = None
