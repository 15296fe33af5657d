"""Persistence gateway: the storage contract the core calls through.

Every method is one synchronous request/response unit. Implementations
validate payloads before writing, raise NotFoundError for unknown
teams, cards and archives, and TransportError when storage fails. None
of them retry.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime

from retroboard.errors import NotFoundError
from retroboard.ids import allocate_id, id_key, normalize_id
from retroboard.model.types import (
    DEFAULT_COLUMN_TITLES,
    ActionItem,
    Archive,
    ArchivePurge,
    BoardState,
    Team,
    Thought,
    Topic,
    utcnow,
)
from retroboard.validation import validate_column_title, validate_team_id, validate_text

logger = logging.getLogger(__name__)


class PersistenceGateway(ABC):
    """Storage contract for teams, cards and archives."""

    @abstractmethod
    def create_team(self, team_id: str, name: str) -> Team:
        """Create an empty board for a team, or return the existing team."""

    @abstractmethod
    def load_board(self, team_id: str) -> BoardState:
        """Read every live thought and non-archived action item of a team."""

    @abstractmethod
    def create_thought(
        self,
        team_id: str,
        message: str,
        topic: Topic,
        hearts: int = 0,
        discussed: bool = False,
    ) -> Thought: ...

    @abstractmethod
    def update_thought_message(self, team_id: str, thought_id: str, message: str) -> None: ...

    @abstractmethod
    def upvote_thought(self, team_id: str, thought_id: str) -> None: ...

    @abstractmethod
    def set_thought_discussed(self, team_id: str, thought_id: str, discussed: bool) -> None: ...

    @abstractmethod
    def delete_thought(self, team_id: str, thought_id: str) -> None: ...

    @abstractmethod
    def create_action_item(
        self,
        team_id: str,
        task: str,
        assignee: str = "",
        date_created: datetime | None = None,
        completed: bool = False,
        archived: bool = False,
    ) -> ActionItem: ...

    @abstractmethod
    def update_action_item_task(self, team_id: str, action_id: str, task: str) -> None: ...

    @abstractmethod
    def update_action_item_assignee(self, team_id: str, action_id: str, assignee: str) -> None: ...

    @abstractmethod
    def set_action_item_completed(self, team_id: str, action_id: str, completed: bool) -> None: ...

    @abstractmethod
    def delete_action_item(self, team_id: str, action_id: str) -> None: ...

    @abstractmethod
    def rename_column(self, team_id: str, topic: Topic, title: str) -> None: ...

    @abstractmethod
    def archive_board(self, team_id: str, archive: Archive, purge: ArchivePurge) -> Archive:
        """Store archive and apply purge as a single all-or-nothing write.

        Idempotent per archive id: if an archive with the same id is
        already stored, it is returned and nothing else is written.
        """

    @abstractmethod
    def archive_ids(self, team_id: str) -> list[str]: ...

    @abstractmethod
    def get_archive(self, team_id: str, archive_id: str) -> Archive: ...

    def find_archive(self, team_id: str, archive_id: str) -> Archive | None:
        """Return the stored archive with archive_id, or None."""
        try:
            return self.get_archive(team_id, archive_id)
        except NotFoundError:
            return None

    def list_archives(self, team_id: str) -> list[Archive]:
        """All archives of a team, oldest first."""
        return [self.get_archive(team_id, archive_id) for archive_id in sorted(self.archive_ids(team_id), key=id_key)]

    def list_archived_action_items(self, team_id: str) -> list[ActionItem]:
        """Action items that are history: archived ones and completed ones captured by archives."""
        items = [a for a in self._stored_action_items(team_id) if a.archived]
        for archive in self.list_archives(team_id):
            items.extend(a for a in archive.action_items if a.completed)
        return items

    @abstractmethod
    def _stored_action_items(self, team_id: str) -> list[ActionItem]:
        """Every stored action item of a team, archived ones included."""


class _TeamData:
    def __init__(self, team: Team) -> None:
        self.team = team
        self.thoughts: dict[str, Thought] = {}
        self.actions: dict[str, ActionItem] = {}
        self.archives: dict[str, Archive] = {}
        self.titles: dict[Topic, str] = dict(DEFAULT_COLUMN_TITLES)
        self.next_ids = {"thought": 1, "action": 1}
        self.revision = 0

    def allocate(self, kind: str, existing) -> str:
        new_id = allocate_id(self.next_ids[kind], existing)
        self.next_ids[kind] = int(new_id) + 1
        return new_id


class MemoryGateway(PersistenceGateway):
    """Gateway keeping everything in process memory.

    Each call holds one lock, so every write (archive included) is atomic
    with respect to every other call.
    """

    def __init__(self) -> None:
        self._teams: dict[str, _TeamData] = {}
        self._lock = threading.Lock()

    def _team(self, team_id: str) -> _TeamData:
        data = self._teams.get(team_id)
        if data is None:
            raise NotFoundError(f"Team '{team_id}' not found")
        return data

    def _thought(self, team_id: str, thought_id: str) -> tuple[_TeamData, Thought]:
        data = self._team(team_id)
        thought = data.thoughts.get(normalize_id(thought_id))
        if thought is None:
            raise NotFoundError(f"Thought '{thought_id}' not found")
        return data, thought

    def _action(self, team_id: str, action_id: str) -> tuple[_TeamData, ActionItem]:
        data = self._team(team_id)
        action = data.actions.get(normalize_id(action_id))
        if action is None:
            raise NotFoundError(f"Action item '{action_id}' not found")
        return data, action

    def _touch(self, data: _TeamData) -> None:
        data.revision += 1

    def create_team(self, team_id: str, name: str) -> Team:
        validate_team_id(team_id)
        with self._lock:
            if team_id not in self._teams:
                self._teams[team_id] = _TeamData(Team(team_id, validate_text(name, "Team name")))
            return self._teams[team_id].team

    def load_board(self, team_id: str) -> BoardState:
        with self._lock:
            data = self._team(team_id)
            return BoardState(
                team=data.team,
                thoughts=tuple(sorted(data.thoughts.values(), key=lambda t: id_key(t.id))),
                action_items=tuple(
                    sorted((a for a in data.actions.values() if not a.archived), key=lambda a: id_key(a.id))
                ),
                column_titles=dict(data.titles),
                revision=str(data.revision),
            )

    def create_thought(self, team_id, message, topic, hearts=0, discussed=False):
        message = validate_text(message, "Message")
        with self._lock:
            data = self._team(team_id)
            thought = Thought(
                id=data.allocate("thought", data.thoughts),
                team_id=team_id,
                message=message,
                topic=topic,
                hearts=hearts,
                discussed=discussed,
            )
            data.thoughts[thought.id] = thought
            self._touch(data)
        logger.debug("created thought %s for %s", thought.id, team_id)
        return thought

    def update_thought_message(self, team_id, thought_id, message):
        message = validate_text(message, "Message")
        with self._lock:
            data, thought = self._thought(team_id, thought_id)
            data.thoughts[thought.id] = replace(thought, message=message)
            self._touch(data)

    def upvote_thought(self, team_id, thought_id):
        with self._lock:
            data, thought = self._thought(team_id, thought_id)
            data.thoughts[thought.id] = replace(thought, hearts=thought.hearts + 1)
            self._touch(data)

    def set_thought_discussed(self, team_id, thought_id, discussed):
        with self._lock:
            data, thought = self._thought(team_id, thought_id)
            data.thoughts[thought.id] = replace(thought, discussed=bool(discussed))
            self._touch(data)

    def delete_thought(self, team_id, thought_id):
        with self._lock:
            data, thought = self._thought(team_id, thought_id)
            del data.thoughts[thought.id]
            self._touch(data)

    def create_action_item(self, team_id, task, assignee="", date_created=None, completed=False, archived=False):
        task = validate_text(task, "Task")
        with self._lock:
            data = self._team(team_id)
            action = ActionItem(
                id=data.allocate("action", data.actions),
                team_id=team_id,
                task=task,
                assignee=(assignee or "").strip(),
                completed=completed,
                date_created=date_created or utcnow(),
                archived=archived,
            )
            data.actions[action.id] = action
            self._touch(data)
        logger.debug("created action item %s for %s", action.id, team_id)
        return action

    def update_action_item_task(self, team_id, action_id, task):
        task = validate_text(task, "Task")
        with self._lock:
            data, action = self._action(team_id, action_id)
            data.actions[action.id] = replace(action, task=task)
            self._touch(data)

    def update_action_item_assignee(self, team_id, action_id, assignee):
        with self._lock:
            data, action = self._action(team_id, action_id)
            data.actions[action.id] = replace(action, assignee=(assignee or "").strip())
            self._touch(data)

    def set_action_item_completed(self, team_id, action_id, completed):
        with self._lock:
            data, action = self._action(team_id, action_id)
            data.actions[action.id] = replace(action, completed=bool(completed))
            self._touch(data)

    def delete_action_item(self, team_id, action_id):
        with self._lock:
            data, action = self._action(team_id, action_id)
            del data.actions[action.id]
            self._touch(data)

    def rename_column(self, team_id, topic, title):
        title = validate_column_title(title)
        with self._lock:
            data = self._team(team_id)
            data.titles[Topic.parse(topic)] = title
            self._touch(data)

    def archive_board(self, team_id, archive, purge):
        with self._lock:
            data = self._team(team_id)
            existing = data.archives.get(archive.id)
            if existing is not None:
                logger.info("archive %s for %s already stored", archive.id, team_id)
                return existing
            for thought_id in purge.thought_ids:
                data.thoughts.pop(thought_id, None)
            for action_id in purge.action_item_ids:
                data.actions.pop(action_id, None)
            data.archives[archive.id] = archive
            self._touch(data)
        return archive

    def archive_ids(self, team_id):
        with self._lock:
            return list(self._team(team_id).archives.keys())

    def get_archive(self, team_id, archive_id):
        with self._lock:
            archive = self._team(team_id).archives.get(normalize_id(archive_id))
        if archive is None:
            raise NotFoundError(f"Archive '{archive_id}' not found")
        return archive

    def _stored_action_items(self, team_id):
        with self._lock:
            return sorted(self._team(team_id).actions.values(), key=lambda a: id_key(a.id))
