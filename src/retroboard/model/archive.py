"""Archiving a retrospective.

Archiving snapshots every live thought and action item of a team into an
immutable Archive, then clears the board for the next retro: all
thoughts go, completed action items go, open action items stay. Record
and purge are handed to the gateway as one write, so the board either
ends up fully archived or exactly as it was.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from retroboard.errors import ConcurrencyConflict
from retroboard.ids import next_id
from retroboard.model.board import Board
from retroboard.model.card import persist
from retroboard.model.ordering import partition
from retroboard.model.types import Archive, ArchivePurge, BoardState, utcnow

if TYPE_CHECKING:
    from retroboard.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class ArchiveStatus(enum.Enum):
    ARCHIVED = "archived"
    DECLINED = "declined"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class ArchiveOutcome:
    """Result of an archive request.

    archive and board are set when status is ARCHIVED: the stored record
    and the live board that remains. error is set for CONFLICT.
    """

    status: ArchiveStatus
    archive: Archive | None = None
    board: BoardState | None = None
    error: ConcurrencyConflict | None = None

    @property
    def ok(self) -> bool:
        return self.status is ArchiveStatus.ARCHIVED


def plan_archive(state: BoardState, archive_id: str) -> tuple[Archive, ArchivePurge, BoardState]:
    """Decide what an archive of state holds, purges and leaves behind.

    Returns (archive, purge, remaining_board).
    """
    actions = tuple(a for a in state.action_items if not a.archived)
    open_actions, done_actions = partition(actions)
    archive = Archive(
        id=archive_id,
        team_id=state.team.id,
        created_at=utcnow(),
        thoughts=tuple(state.thoughts),
        action_items=actions,
    )
    purge = ArchivePurge(
        thought_ids=frozenset(t.id for t in state.thoughts),
        action_item_ids=frozenset(a.id for a in done_actions),
    )
    remaining = BoardState(
        team=state.team,
        thoughts=(),
        action_items=tuple(open_actions),
        column_titles=dict(state.column_titles),
        revision=None,
    )
    return archive, purge, remaining


class ArchiveCoordinator:
    """Runs archive transactions, at most one per team at a time."""

    def __init__(self, gateway: PersistenceGateway, timeout: float | None = None) -> None:
        self.gateway = gateway
        self.timeout = timeout
        self._in_flight: set[str] = set()
        # Archive of the last failed attempt per team; it may have been
        # stored even though the call failed (e.g. timed out).
        self._unconfirmed: dict[str, Archive] = {}

    def is_archiving(self, team_id: str) -> bool:
        return team_id in self._in_flight

    async def archive(
        self,
        team_id: str,
        confirm: Callable[[], bool] | None = None,
        board: Board | None = None,
    ) -> ArchiveOutcome:
        """Archive the live board of team_id.

        confirm, when given, is asked first; a False answer leaves
        everything untouched. When board is given it is refreshed to the
        post-archive state. Storage failures raise TransportError with the
        board unchanged; calling again is safe.
        """
        if team_id in self._in_flight:
            conflict = ConcurrencyConflict(f"An archive for team '{team_id}' is already in progress")
            logger.warning("%s", conflict)
            return ArchiveOutcome(ArchiveStatus.CONFLICT, error=conflict)
        if confirm is not None and not confirm():
            logger.info("archive of %s declined", team_id)
            return ArchiveOutcome(ArchiveStatus.DECLINED)

        self._in_flight.add(team_id)
        try:
            archive = await self._recover(team_id)
            if archive is not None:
                state = await persist(self.gateway.load_board, team_id, timeout=self.timeout)
            else:
                archive, state = await self._commit(team_id)
        finally:
            self._in_flight.discard(team_id)

        if board is not None and board.team_id == team_id:
            board.refresh(state)
        return ArchiveOutcome(ArchiveStatus.ARCHIVED, archive=archive, board=state)

    async def _recover(self, team_id: str) -> Archive | None:
        """Return the archive of a failed earlier attempt if it was in fact stored."""
        pending = self._unconfirmed.get(team_id)
        if pending is None:
            return None
        stored = await persist(self.gateway.find_archive, team_id, pending.id, timeout=self.timeout)
        del self._unconfirmed[team_id]
        if stored is not None:
            logger.info("archive %s of %s was stored by an earlier attempt", stored.id, team_id)
        return stored

    async def _commit(self, team_id: str) -> tuple[Archive, BoardState]:
        snapshot = await persist(self.gateway.load_board, team_id, timeout=self.timeout)
        existing = await persist(self.gateway.archive_ids, team_id, timeout=self.timeout)
        archive, purge, remaining = plan_archive(snapshot, next_id(existing))
        try:
            stored = await persist(self.gateway.archive_board, team_id, archive, purge, timeout=self.timeout)
        except Exception:
            self._unconfirmed[team_id] = archive
            raise
        logger.info(
            "archived retro %s of %s: %d thoughts, %d action items, %d carried over",
            stored.id,
            team_id,
            len(stored.thoughts),
            len(stored.action_items),
            len(remaining.action_items),
        )
        return stored, remaining
