"""Write retro board files to a git branch without touching the working tree.

Each write is one commit built with git plumbing: blobs with hash-object,
trees with mktree, a commit with commit-tree. The branch is moved with a
compare-and-swap update-ref, so a write either lands completely on top of
the commit it was built from or not at all.
"""

import logging
import subprocess
from pathlib import Path

from retroboard.constants import branch_name
from retroboard.ids import pad_id
from retroboard.model.types import ActionItem, Archive, Team, Thought, Topic
from retroboard.parser import serialize_document

logger = logging.getLogger(__name__)

NULL_SHA = "0" * 40

INDEX = "index.md"
THOUGHTS_DIR = "thoughts"
ACTIONS_DIR = "actions"
ARCHIVES_DIR = "archives"


# --- Paths ---


def thought_path(thought_id: str, prefix: str = "") -> str:
    return f"{prefix}{THOUGHTS_DIR}/{pad_id(thought_id)}.md"


def action_path(action_id: str, prefix: str = "") -> str:
    return f"{prefix}{ACTIONS_DIR}/{pad_id(action_id)}.md"


def archive_prefix(archive_id: str) -> str:
    return f"{ARCHIVES_DIR}/{pad_id(archive_id)}/"


# --- Documents ---


def thought_document(thought: Thought) -> str:
    meta = {
        "topic": thought.topic.value,
        "hearts": thought.hearts,
        "discussed": thought.discussed,
    }
    return serialize_document(thought.message, meta)


def action_document(action: ActionItem) -> str:
    meta = {
        "assignee": action.assignee,
        "completed": action.completed,
        "date_created": action.date_created.isoformat(),
        "archived": action.archived,
    }
    return serialize_document(action.task, meta)


def index_document(team: Team, column_titles: dict[Topic, str], next_ids: dict[str, int] | None = None) -> str:
    meta = {
        "name": team.name,
        "columns": {topic.value: title for topic, title in column_titles.items()},
    }
    if next_ids:
        meta["next_ids"] = dict(next_ids)
    return serialize_document(f"# {team.name}", meta)


def archive_index_document(archive: Archive) -> str:
    return serialize_document("", {"created_at": archive.created_at.isoformat()})


# --- Git plumbing ---


def _git(repo_path: Path, args: list[str]) -> str:
    """Run a git command and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo_path,
        capture_output=True,
        check=True,
    )
    return result.stdout.decode("utf-8").strip()


def hash_object(repo_path: Path, content: str) -> str:
    """Write content to git object store and return the blob hash."""
    result = subprocess.run(
        ["git", "hash-object", "-w", "--stdin"],
        cwd=repo_path,
        input=content.encode("utf-8"),
        capture_output=True,
        check=True,
    )
    return result.stdout.decode("utf-8").strip()


def _mktree(repo_path: Path, entries: list[tuple[str, str, str, str]]) -> str:
    """Create a tree object from entries and return its hash.

    Each entry is (mode, type, sha, name).
    """
    lines = [f"{mode} {typ} {sha}\t{name}" for mode, typ, sha, name in entries]
    content = "\n".join(lines) + "\n" if lines else ""

    result = subprocess.run(
        ["git", "mktree"],
        cwd=repo_path,
        input=content.encode("utf-8"),
        capture_output=True,
        check=True,
    )
    return result.stdout.decode("utf-8").strip()


def build_tree(repo_path: Path, files: dict[str, str]) -> str:
    """Build nested trees from a flat {path: blob_sha} mapping, returning the root hash."""
    blobs: list[tuple[str, str, str, str]] = []
    subdirs: dict[str, dict[str, str]] = {}
    for path, sha in files.items():
        head, sep, rest = path.partition("/")
        if sep:
            subdirs.setdefault(head, {})[rest] = sha
        else:
            blobs.append(("100644", "blob", sha, head))
    entries = blobs + [("040000", "tree", build_tree(repo_path, sub), name) for name, sub in subdirs.items()]
    return _mktree(repo_path, entries)


def get_branch_tip(repo_path: Path, branch: str) -> str | None:
    """Get the current commit hash of a branch, or None if it doesn't exist."""
    result = subprocess.run(
        ["git", "rev-parse", "--verify", "--quiet", f"refs/heads/{branch}"],
        cwd=repo_path,
        capture_output=True,
    )
    if result.returncode != 0:
        return None
    return result.stdout.decode("utf-8").strip()


def commit_files(
    repo_path: str | Path,
    team_id: str,
    files: dict[str, str],
    message: str,
    parent: str | None,
) -> str:
    """Commit files as the new content of the team branch and return the commit hash.

    parent is the commit the files were read from (None for a new branch).
    The branch only moves if it still points at parent; otherwise git
    refuses and CalledProcessError propagates.
    """
    repo_path = Path(repo_path)
    tree = build_tree(repo_path, files)
    parent_args = ["-p", parent] if parent else []
    new_commit = _git(repo_path, ["commit-tree", tree, *parent_args, "-m", message])
    _git(repo_path, ["update-ref", f"refs/heads/{branch_name(team_id)}", new_commit, parent or NULL_SHA])
    logger.debug("%s: %s (%s)", team_id, message, new_commit[:7])
    return new_commit
