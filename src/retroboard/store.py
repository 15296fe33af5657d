"""Git-backed persistence gateway.

Each team's board lives on its own branch (retro/<team-id>) as a tree of
small documents. Every mutation is one commit on top of the commit it
was read from, so concurrent writers can't silently overwrite each other
and an archive lands in full or not at all.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Callable

from git import GitCommandError, InvalidGitRepositoryError, Repo
from git.objects import Blob

from retroboard.errors import NotFoundError, RetroError, TransportError
from retroboard.gateway import PersistenceGateway
from retroboard.ids import allocate_id, normalize_id
from retroboard.model import loader
from retroboard.model.types import DEFAULT_COLUMN_TITLES, ActionItem, Team, Thought, Topic, utcnow
from retroboard.model.writer import (
    ACTIONS_DIR,
    INDEX,
    THOUGHTS_DIR,
    action_document,
    action_path,
    archive_index_document,
    archive_prefix,
    commit_files,
    hash_object,
    index_document,
    thought_document,
    thought_path,
)
from retroboard.validation import validate_column_title, validate_team_id, validate_text

logger = logging.getLogger(__name__)

Edit = Callable[[dict[str, Blob], dict[str, str]], object]


class GitGateway(PersistenceGateway):
    """Gateway storing boards in a git repository."""

    def __init__(self, repo_path: str | Path) -> None:
        self.repo_path = Path(repo_path).resolve()
        self._lock = threading.Lock()

    def _repo(self) -> Repo:
        return Repo(self.repo_path)

    @contextmanager
    def _transport(self, what: str):
        """Turn git failures into TransportError."""
        try:
            yield
        except RetroError:
            raise
        except (GitCommandError, InvalidGitRepositoryError, subprocess.CalledProcessError, OSError) as e:
            stderr = getattr(e, "stderr", None)
            detail = stderr.decode("utf-8", "replace").strip() if isinstance(stderr, bytes) else e
            logger.warning("%s failed: %s", what, detail)
            raise TransportError(f"{what} failed: {detail}") from e

    def _write(self, files: dict[str, str], path: str, text: str) -> None:
        files[path] = hash_object(self.repo_path, text)

    def _allocate(self, blobs, files, team_id: str, kind: str, directory: str) -> str:
        """Take the next id of kind and store the bumped counter in index.md."""
        team, titles = loader.load_index(blobs, team_id)
        next_ids = loader.load_next_ids(blobs)
        new_id = allocate_id(next_ids.get(kind), loader.all_card_ids(blobs, directory))
        next_ids[kind] = int(new_id) + 1
        self._write(files, INDEX, index_document(team, titles, next_ids))
        return new_id

    def _mutate(self, team_id: str, message: str, edit: Edit):
        """Read the team branch, apply edit to its files and commit the result.

        edit receives the current blobs (for reading) and a mutable
        {path: blob_sha} mapping to change; its return value is passed on.
        """
        with self._lock, self._transport(message):
            tip, blobs = loader.read_branch(self._repo(), team_id)
            files = {path: blob.hexsha for path, blob in blobs.items()}
            result = edit(blobs, files)
            commit_files(self.repo_path, team_id, files, message, parent=tip)
            return result

    def _read(self, team_id: str, what: str, read):
        with self._transport(what):
            _, blobs = loader.read_branch(self._repo(), team_id)
            return read(blobs)

    # --- Teams and boards ---

    def create_team(self, team_id: str, name: str) -> Team:
        validate_team_id(team_id)
        team = Team(team_id, validate_text(name, "Team name"))
        with self._lock, self._transport(f"Create team {team_id}"):
            try:
                _, blobs = loader.read_branch(self._repo(), team_id)
                existing, _ = loader.load_index(blobs, team_id)
                return existing
            except NotFoundError:
                pass
            files: dict[str, str] = {}
            self._write(files, INDEX, index_document(team, DEFAULT_COLUMN_TITLES, {"thought": 1, "action": 1}))
            commit_files(self.repo_path, team_id, files, f"Create retro board for {team.name}", parent=None)
        logger.info("created board for team %s", team_id)
        return team

    def load_board(self, team_id):
        with self._transport(f"Load board {team_id}"):
            return loader.load_state(self._repo(), team_id)

    def rename_column(self, team_id, topic, title):
        topic = Topic.parse(topic)
        title = validate_column_title(title)

        def edit(blobs, files):
            team, titles = loader.load_index(blobs, team_id)
            titles[topic] = title
            self._write(files, INDEX, index_document(team, titles, loader.load_next_ids(blobs)))

        self._mutate(team_id, f"Rename column {topic.value} to {title}", edit)

    # --- Thoughts ---

    def _thought(self, blobs, team_id, thought_id) -> Thought:
        thought_id = normalize_id(thought_id)
        blob = blobs.get(thought_path(thought_id))
        if blob is None:
            raise NotFoundError(f"Thought '{thought_id}' not found")
        return loader.parse_thought(team_id, thought_id, loader.read_blob(blob))

    def _change_thought(self, team_id, thought_id, summary, **changes) -> None:
        def edit(blobs, files):
            thought = replace(self._thought(blobs, team_id, thought_id), **changes)
            self._write(files, thought_path(thought.id), thought_document(thought))

        self._mutate(team_id, summary, edit)

    def create_thought(self, team_id, message, topic, hearts=0, discussed=False):
        message = validate_text(message, "Message")

        def edit(blobs, files):
            thought = Thought(
                id=self._allocate(blobs, files, team_id, "thought", THOUGHTS_DIR),
                team_id=team_id,
                message=message,
                topic=topic,
                hearts=hearts,
                discussed=discussed,
            )
            self._write(files, thought_path(thought.id), thought_document(thought))
            return thought

        return self._mutate(team_id, f"Add {Topic.parse(topic).value} thought", edit)

    def update_thought_message(self, team_id, thought_id, message):
        message = validate_text(message, "Message")
        self._change_thought(team_id, thought_id, f"Edit thought {thought_id}", message=message)

    def upvote_thought(self, team_id, thought_id):
        def edit(blobs, files):
            thought = self._thought(blobs, team_id, thought_id)
            thought = replace(thought, hearts=thought.hearts + 1)
            self._write(files, thought_path(thought.id), thought_document(thought))

        self._mutate(team_id, f"Upvote thought {thought_id}", edit)

    def set_thought_discussed(self, team_id, thought_id, discussed):
        verb = "Discuss" if discussed else "Reopen"
        self._change_thought(team_id, thought_id, f"{verb} thought {thought_id}", discussed=bool(discussed))

    def delete_thought(self, team_id, thought_id):
        def edit(blobs, files):
            thought = self._thought(blobs, team_id, thought_id)
            del files[thought_path(thought.id)]

        self._mutate(team_id, f"Delete thought {thought_id}", edit)

    # --- Action items ---

    def _action(self, blobs, team_id, action_id) -> ActionItem:
        action_id = normalize_id(action_id)
        blob = blobs.get(action_path(action_id))
        if blob is None:
            raise NotFoundError(f"Action item '{action_id}' not found")
        return loader.parse_action(team_id, action_id, loader.read_blob(blob))

    def _change_action(self, team_id, action_id, summary, **changes) -> None:
        def edit(blobs, files):
            action = replace(self._action(blobs, team_id, action_id), **changes)
            self._write(files, action_path(action.id), action_document(action))

        self._mutate(team_id, summary, edit)

    def create_action_item(self, team_id, task, assignee="", date_created=None, completed=False, archived=False):
        task = validate_text(task, "Task")

        def edit(blobs, files):
            action = ActionItem(
                id=self._allocate(blobs, files, team_id, "action", ACTIONS_DIR),
                team_id=team_id,
                task=task,
                assignee=(assignee or "").strip(),
                completed=completed,
                date_created=date_created or utcnow(),
                archived=archived,
            )
            self._write(files, action_path(action.id), action_document(action))
            return action

        return self._mutate(team_id, f"Add action item: {task}", edit)

    def update_action_item_task(self, team_id, action_id, task):
        task = validate_text(task, "Task")
        self._change_action(team_id, action_id, f"Edit action item {action_id}", task=task)

    def update_action_item_assignee(self, team_id, action_id, assignee):
        assignee = (assignee or "").strip()
        self._change_action(team_id, action_id, f"Assign action item {action_id}", assignee=assignee)

    def set_action_item_completed(self, team_id, action_id, completed):
        verb = "Complete" if completed else "Reopen"
        self._change_action(team_id, action_id, f"{verb} action item {action_id}", completed=bool(completed))

    def delete_action_item(self, team_id, action_id):
        def edit(blobs, files):
            action = self._action(blobs, team_id, action_id)
            del files[action_path(action.id)]

        self._mutate(team_id, f"Delete action item {action_id}", edit)

    # --- Archives ---

    def archive_board(self, team_id, archive, purge):
        prefix = archive_prefix(archive.id)
        with self._lock, self._transport(f"Archive retro for {team_id}"):
            tip, blobs = loader.read_branch(self._repo(), team_id)
            if f"{prefix}{INDEX}" in blobs:
                logger.info("archive %s for %s already stored", archive.id, team_id)
                return loader.load_archive(blobs, team_id, archive.id)
            files = {path: blob.hexsha for path, blob in blobs.items()}
            self._write(files, f"{prefix}{INDEX}", archive_index_document(archive))
            for thought in archive.thoughts:
                self._write(files, thought_path(thought.id, prefix), thought_document(thought))
            for action in archive.action_items:
                self._write(files, action_path(action.id, prefix), action_document(action))
            for thought_id in purge.thought_ids:
                files.pop(thought_path(thought_id), None)
            for action_id in purge.action_item_ids:
                files.pop(action_path(action_id), None)
            commit_files(self.repo_path, team_id, files, f"Archive retro {archive.id}", parent=tip)
        logger.info(
            "archived %d thoughts and %d action items for %s",
            len(archive.thoughts),
            len(archive.action_items),
            team_id,
        )
        return archive

    def archive_ids(self, team_id):
        return self._read(team_id, f"List archives of {team_id}", loader.archive_ids)

    def get_archive(self, team_id, archive_id):
        return self._read(
            team_id,
            f"Load archive {archive_id}",
            lambda blobs: loader.load_archive(blobs, team_id, archive_id),
        )

    def _stored_action_items(self, team_id):
        return self._read(team_id, f"Load action items of {team_id}", lambda blobs: loader.load_actions(blobs, team_id))
