"""Retro board model: cards, columns, interaction and archiving."""

from retroboard.model.archive import ArchiveCoordinator, ArchiveOutcome, ArchiveStatus, plan_archive
from retroboard.model.board import Board
from retroboard.model.card import add_action_item, add_thought, parse_action_text, persist, refresh, rename_column
from retroboard.model.interaction import ItemInteractionController, Mode
from retroboard.model.ordering import build_column, order_cards
from retroboard.model.types import (
    COLUMN_TOPICS,
    THOUGHT_TOPICS,
    ActionItem,
    Archive,
    ArchivePurge,
    BoardState,
    Column,
    Team,
    Thought,
    Topic,
)

__all__ = [
    "COLUMN_TOPICS",
    "THOUGHT_TOPICS",
    "ActionItem",
    "Archive",
    "ArchiveCoordinator",
    "ArchiveOutcome",
    "ArchivePurge",
    "ArchiveStatus",
    "Board",
    "BoardState",
    "Column",
    "ItemInteractionController",
    "Mode",
    "Team",
    "Thought",
    "Topic",
    "add_action_item",
    "add_thought",
    "build_column",
    "order_cards",
    "parse_action_text",
    "persist",
    "plan_archive",
    "refresh",
    "rename_column",
]
