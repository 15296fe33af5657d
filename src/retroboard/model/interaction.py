"""Interaction state of a single card.

A card is either idle (DEFAULT), being edited (EDITING) or waiting for a
delete confirmation (DELETE_CONFIRMING). The two busy modes exclude each
other: entering one drops the other first. Which operations a card
offers also depends on its resolved flag (discussed / completed) and on
the read-only flag of the view it is shown in. That flag may change at
any time, so committing an edit or a delete checks it again.

Operations that are not allowed return False and change nothing.
Operations that reach storage make exactly one gateway call; if that
call fails the error propagates and the card keeps its last confirmed
value and mode.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable

from retroboard.model.board import Board
from retroboard.model.card import add_action_item, persist
from retroboard.model.types import ActionItem, Card, Thought

if TYPE_CHECKING:
    from retroboard.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    DEFAULT = "default"
    EDITING = "editing"
    DELETE_CONFIRMING = "delete-confirming"


class ItemInteractionController:
    """Owns the mode of one card and gates its mutations."""

    def __init__(
        self,
        board: Board,
        card: Card,
        gateway: PersistenceGateway,
        read_only: bool = False,
        timeout: float | None = None,
    ) -> None:
        self.board = board
        self.gateway = gateway
        self.read_only = read_only
        self.timeout = timeout
        self.mode = Mode.DEFAULT
        self.draft: str | None = None
        self._card = card
        self._in_flight = False

    def __repr__(self) -> str:
        return f"<ItemInteractionController {self._card.kind} {self._card.id} {self.mode.value}>"

    @property
    def card(self) -> Card:
        """The latest confirmed version of the card."""
        current = self.board.get(self._card)
        if current is not None:
            self._card = current
        return self._card

    @property
    def is_thought(self) -> bool:
        return isinstance(self._card, Thought)

    @property
    def resolved(self) -> bool:
        return self.card.is_resolved

    # --- Gates ---

    @property
    def can_edit(self) -> bool:
        return not self.read_only and not self.resolved

    @property
    def can_upvote(self) -> bool:
        return self.is_thought and self.can_edit and self.mode is Mode.DEFAULT

    @property
    def can_delete(self) -> bool:
        return not self.read_only

    @property
    def can_resolve(self) -> bool:
        return self.mode is Mode.DEFAULT

    @property
    def can_assign(self) -> bool:
        return not self.is_thought and self.can_edit and self.mode is Mode.DEFAULT

    @property
    def can_expand(self) -> bool:
        return self.is_thought and not self.resolved

    def _reject(self, operation: str) -> bool:
        logger.debug("%s rejected for %s %s in %s", operation, self._card.kind, self._card.id, self.mode.value)
        return False

    async def _call(self, func: Callable[..., Any], *args: Any) -> Any:
        """Make the single persisted call of a transition."""
        self._in_flight = True
        try:
            return await persist(func, self.board.team_id, *args, timeout=self.timeout)
        finally:
            self._in_flight = False

    # --- Editing ---

    def begin_edit(self) -> bool:
        """Start editing with the current text as the draft."""
        if self._in_flight or not self.can_edit:
            return self._reject("begin_edit")
        if self.mode is Mode.DELETE_CONFIRMING:
            self.cancel_delete()
        self.mode = Mode.EDITING
        self.draft = self.card.text
        return True

    async def commit_edit(self, text: str | None = None) -> bool:
        """Save text (or the current draft). Blank text keeps the card in EDITING."""
        if self._in_flight or self.mode is not Mode.EDITING or not self.can_edit:
            return self._reject("commit_edit")
        text = self.draft if text is None else text
        if not text or not text.strip():
            return self._reject("commit_edit")
        text = text.strip()
        card = self.card
        if isinstance(card, Thought):
            await self._call(self.gateway.update_thought_message, card.id, text)
            self.board.put(replace(card, message=text))
        else:
            await self._call(self.gateway.update_action_item_task, card.id, text)
            self.board.put(replace(card, task=text))
        self.mode = Mode.DEFAULT
        self.draft = None
        return True

    def cancel_edit(self) -> bool:
        if self._in_flight or self.mode is not Mode.EDITING:
            return self._reject("cancel_edit")
        self.mode = Mode.DEFAULT
        self.draft = None
        return True

    # --- Deleting ---

    def begin_delete(self) -> bool:
        if self._in_flight or not self.can_delete:
            return self._reject("begin_delete")
        if self.mode is Mode.EDITING:
            self.cancel_edit()
        self.mode = Mode.DELETE_CONFIRMING
        return True

    async def confirm_delete(self) -> bool:
        if self._in_flight or self.mode is not Mode.DELETE_CONFIRMING or not self.can_delete:
            return self._reject("confirm_delete")
        card = self.card
        if isinstance(card, Thought):
            await self._call(self.gateway.delete_thought, card.id)
        else:
            await self._call(self.gateway.delete_action_item, card.id)
        self.board.remove(card)
        self.mode = Mode.DEFAULT
        return True

    def cancel_delete(self) -> bool:
        if self._in_flight or self.mode is not Mode.DELETE_CONFIRMING:
            return self._reject("cancel_delete")
        self.mode = Mode.DEFAULT
        return True

    def cancel(self) -> bool:
        """Escape: leave EDITING or DELETE_CONFIRMING without committing."""
        if self.mode is Mode.EDITING:
            return self.cancel_edit()
        if self.mode is Mode.DELETE_CONFIRMING:
            return self.cancel_delete()
        return False

    # --- Voting, resolving, assigning ---

    async def toggle_upvote(self) -> bool:
        """Add one heart to a thought."""
        if self._in_flight or not self.can_upvote:
            return self._reject("toggle_upvote")
        card = self.card
        await self._call(self.gateway.upvote_thought, card.id)
        self.board.put(replace(card, hearts=card.hearts + 1))
        return True

    async def toggle_resolved(self) -> bool:
        """Flip discussed (thoughts) or completed (action items).

        Allowed in read-only views, so a board under review can still be
        worked through.
        """
        if self._in_flight or not self.can_resolve:
            return self._reject("toggle_resolved")
        card = self.card
        resolved = not card.is_resolved
        if isinstance(card, Thought):
            await self._call(self.gateway.set_thought_discussed, card.id, resolved)
            self.board.put(replace(card, discussed=resolved))
        else:
            await self._call(self.gateway.set_action_item_completed, card.id, resolved)
            self.board.put(replace(card, completed=resolved))
        return True

    async def commit_assignee(self, assignee: str) -> bool:
        """Reassign an action item. An empty name unassigns it."""
        if self._in_flight or not self.can_assign:
            return self._reject("commit_assignee")
        card = self.card
        assignee = (assignee or "").strip()
        await self._call(self.gateway.update_action_item_assignee, card.id, assignee)
        self.board.put(replace(card, assignee=assignee))
        return True

    # --- Expanded view ---

    def expand(self) -> bool:
        """Whether the expanded view of the card may open. Read-only views may."""
        if not self.can_expand:
            return self._reject("expand")
        return True

    async def add_action_item(self, text: str) -> ActionItem | None:
        """Create an action item from the expanded view of a thought."""
        if self._in_flight or self.read_only or not self.can_expand:
            self._reject("add_action_item")
            return None
        return await add_action_item(self.board, self.gateway, text, timeout=self.timeout)
