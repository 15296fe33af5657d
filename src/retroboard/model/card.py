"""Card creation and the persisted-call helper shared by the core."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable

from retroboard.errors import TransportError, ValidationError
from retroboard.model.board import Board
from retroboard.model.types import ActionItem, Thought, Topic
from retroboard.validation import validate_column_title, validate_text

if TYPE_CHECKING:
    from retroboard.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


async def persist(func: Callable[..., Any], *args: Any, timeout: float | None = None) -> Any:
    """Run one blocking gateway call in a worker thread and await it.

    A call that outlives timeout raises TransportError. The worker may
    still finish in the background; callers only ever show what a call
    confirmed, so a late success is picked up by the next refresh.
    """
    call = asyncio.to_thread(func, *args)
    try:
        if timeout is None:
            return await call
        return await asyncio.wait_for(call, timeout)
    except asyncio.TimeoutError:
        name = getattr(func, "__name__", "call")
        logger.warning("%s timed out after %ss", name, timeout)
        raise TransportError(f"{name} timed out after {timeout}s") from None


def parse_action_text(text: str) -> tuple[str, str]:
    """Split "task @assignee" into (task, assignee).

    Everything after the first "@" is the assignee. Without an "@" the
    whole text is the task and the assignee is empty.
    """
    task, sep, assignee = text.partition("@")
    task = task.strip()
    if not task:
        raise ValidationError("Task can't be empty")
    return task, assignee.strip() if sep else ""


async def add_thought(
    board: Board,
    gateway: PersistenceGateway,
    topic: Topic | str,
    message: str,
    timeout: float | None = None,
) -> Thought:
    """Create a thought on the board's team and show it once stored."""
    topic = Topic.parse(topic)
    if topic is Topic.ACTION:
        raise ValidationError("Thoughts go in the happy, confused or unhappy column")
    validate_text(message, "Message")
    thought = await persist(gateway.create_thought, board.team_id, message, topic, timeout=timeout)
    board.put(thought)
    return thought


async def add_action_item(
    board: Board,
    gateway: PersistenceGateway,
    text: str,
    assignee: str | None = None,
    timeout: float | None = None,
) -> ActionItem:
    """Create an action item from "task @assignee" text (or an explicit assignee)."""
    if assignee is None:
        task, assignee = parse_action_text(text)
    else:
        task = validate_text(text, "Task")
    action = await persist(gateway.create_action_item, board.team_id, task, assignee, timeout=timeout)
    board.put(action)
    return action


async def rename_column(
    board: Board,
    gateway: PersistenceGateway,
    topic: Topic | str,
    title: str,
    timeout: float | None = None,
) -> None:
    """Persist a new column title, then show it."""
    topic = Topic.parse(topic)
    title = validate_column_title(title)
    await persist(gateway.rename_column, board.team_id, topic, title, timeout=timeout)
    board.set_column_title(topic, title)


async def refresh(board: Board, gateway: PersistenceGateway, timeout: float | None = None) -> Board:
    """Reload the board from storage, dropping cards that no longer exist."""
    state = await persist(gateway.load_board, board.team_id, timeout=timeout)
    board.refresh(state)
    return board
