"""Load retro boards and archives from a git branch."""

import logging
from pathlib import Path

from git import Repo
from git.objects import Blob

from retroboard.constants import branch_name
from retroboard.errors import NotFoundError, ValidationError
from retroboard.ids import id_key, normalize_id
from retroboard.model.types import (
    DEFAULT_COLUMN_TITLES,
    ActionItem,
    Archive,
    BoardState,
    Team,
    Thought,
    Topic,
    coerce_datetime,
)
from retroboard.model.writer import (
    ACTIONS_DIR,
    ARCHIVES_DIR,
    INDEX,
    THOUGHTS_DIR,
    archive_prefix,
    get_branch_tip,
)
from retroboard.parser import parse_document

logger = logging.getLogger(__name__)


def read_blob(blob: Blob) -> str:
    return blob.data_stream.read().decode("utf-8")


def read_branch(repo: Repo, team_id: str) -> tuple[str, dict[str, Blob]]:
    """Return (commit_hash, {path: blob}) for every file on the team branch."""
    tip = get_branch_tip(Path(repo.working_tree_dir or repo.git_dir), branch_name(team_id))
    if tip is None:
        raise NotFoundError(f"Team '{team_id}' has no board")
    tree = repo.commit(tip).tree
    blobs = {item.path: item for item in tree.traverse() if isinstance(item, Blob)}
    return tip, blobs


def card_id(path: str) -> str:
    """'thoughts/007.md' -> '7'"""
    return normalize_id(path.rsplit("/", 1)[-1][:-3])


def all_card_ids(blobs: dict[str, Blob], directory: str) -> list[str]:
    """Ids of every card of one kind on the branch, archived copies included."""
    return [card_id(path) for path in blobs if path.endswith(".md") and path.rsplit("/", 2)[-2:-1] == [directory]]


def card_paths(blobs: dict[str, Blob], directory: str) -> list[str]:
    """Paths of the .md files directly inside directory."""
    prefix = f"{directory}/"
    return [
        path for path in blobs if path.startswith(prefix) and "/" not in path[len(prefix) :] and path.endswith(".md")
    ]


def parse_thought(team_id: str, thought_id: str, text: str) -> Thought:
    message, meta = parse_document(text)
    return Thought(
        id=thought_id,
        team_id=team_id,
        message=message,
        topic=meta.get("topic", ""),
        hearts=meta.get("hearts", 0),
        discussed=meta.get("discussed", False),
    )


def parse_action(team_id: str, action_id: str, text: str) -> ActionItem:
    task, meta = parse_document(text)
    return ActionItem(
        id=action_id,
        team_id=team_id,
        task=task,
        assignee=str(meta.get("assignee") or ""),
        completed=meta.get("completed", False),
        date_created=coerce_datetime(meta.get("date_created", "")),
        archived=meta.get("archived", False),
    )


def _load_cards(blobs: dict[str, Blob], team_id: str, directory: str, parse) -> list:
    """Parse every card in directory, skipping unreadable ones, in insertion order."""
    cards = []
    for path in card_paths(blobs, directory):
        try:
            cards.append(parse(team_id, card_id(path), read_blob(blobs[path])))
        except ValidationError as e:
            logger.warning("skipping unreadable card %s: %s", path, e)
    return sorted(cards, key=lambda card: id_key(card.id))


def load_thoughts(blobs: dict[str, Blob], team_id: str, prefix: str = "") -> list[Thought]:
    return _load_cards(blobs, team_id, f"{prefix}{THOUGHTS_DIR}", parse_thought)


def load_actions(blobs: dict[str, Blob], team_id: str, prefix: str = "") -> list[ActionItem]:
    return _load_cards(blobs, team_id, f"{prefix}{ACTIONS_DIR}", parse_action)


def _index_meta(blobs: dict[str, Blob]) -> dict:
    if INDEX not in blobs:
        return {}
    _, meta = parse_document(read_blob(blobs[INDEX]))
    return meta


def load_index(blobs: dict[str, Blob], team_id: str) -> tuple[Team, dict[Topic, str]]:
    """Read the team name and column titles from index.md."""
    meta = _index_meta(blobs)
    titles = dict(DEFAULT_COLUMN_TITLES)
    columns = meta.get("columns")
    if isinstance(columns, dict):
        for key, title in columns.items():
            try:
                titles[Topic.parse(key)] = str(title)
            except ValidationError:
                logger.warning("ignoring title for unknown column %r", key)
    return Team(team_id, str(meta.get("name") or team_id)), titles


def load_next_ids(blobs: dict[str, Blob]) -> dict[str, int]:
    """Read the id counters from index.md. Boards written without them give {}."""
    counters = _index_meta(blobs).get("next_ids")
    if not isinstance(counters, dict):
        return {}
    return {str(kind): value for kind, value in counters.items() if isinstance(value, int)}


def load_state(repo: Repo, team_id: str) -> BoardState:
    """Load the live board of a team. Archived action items are left out."""
    tip, blobs = read_branch(repo, team_id)
    team, titles = load_index(blobs, team_id)
    return BoardState(
        team=team,
        thoughts=tuple(load_thoughts(blobs, team_id)),
        action_items=tuple(a for a in load_actions(blobs, team_id) if not a.archived),
        column_titles=titles,
        revision=tip,
    )


def archive_ids(blobs: dict[str, Blob]) -> list[str]:
    """Ids of the archives present in a branch listing."""
    ids = set()
    for path in blobs:
        parts = path.split("/")
        if len(parts) == 3 and parts[0] == ARCHIVES_DIR and parts[2] == INDEX:
            ids.add(normalize_id(parts[1]))
    return sorted(ids, key=id_key)


def load_archive(blobs: dict[str, Blob], team_id: str, archive_id: str) -> Archive:
    prefix = archive_prefix(archive_id)
    index = blobs.get(f"{prefix}{INDEX}")
    if index is None:
        raise NotFoundError(f"Archive '{archive_id}' not found")
    _, meta = parse_document(read_blob(index))
    return Archive(
        id=normalize_id(archive_id),
        team_id=team_id,
        created_at=coerce_datetime(meta.get("created_at", "")),
        thoughts=tuple(load_thoughts(blobs, team_id, prefix)),
        action_items=tuple(load_actions(blobs, team_id, prefix)),
    )
