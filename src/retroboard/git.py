"""Git repository helpers and retro configuration stored in git config."""

from pathlib import Path
from typing import Any

from git import InvalidGitRepositoryError, NoSuchPathError, Repo

from retroboard.constants import BRANCH_PREFIX

RETRO_DEFAULTS = {
    "request-timeout": 10.0,
    "read-only": False,
}


def _python_key(git_key: str) -> str:
    """Convert git-style key (hyphenated) to Python-style (underscored)."""
    return git_key.replace("-", "_")


def _git_key(python_key: str) -> str:
    """Convert Python-style key (underscored) to git-style (hyphenated)."""
    return python_key.replace("_", "-")


def _coerce_retro_value(git_key: str, raw: str):
    """Type-coerce [retro] values using the type of their default."""
    default = RETRO_DEFAULTS.get(git_key)
    if default is None:
        return raw
    if isinstance(default, bool):
        return raw.lower() in ("true", "yes", "on", "1")
    if isinstance(default, float):
        return float(raw)
    return raw


def read_retro_config(repo_path: str | Path) -> dict[str, Any]:
    """Read the [retro] git config section with defaults applied.

    Keys come back underscored: {"team": ..., "request_timeout": 10.0, ...}.
    "team" is only present when configured.
    """
    reader = Repo(repo_path).config_reader()
    config: dict[str, Any] = {_python_key(k): v for k, v in RETRO_DEFAULTS.items()}
    if reader.has_section(BRANCH_PREFIX):
        for git_k, raw in reader.items(BRANCH_PREFIX):
            config[_python_key(git_k)] = _coerce_retro_value(git_k, str(raw))
    return config


def write_retro_config_key(repo_path: str | Path, key: str, value) -> None:
    """Write one [retro] key to the repository config. key is python-style."""
    writer = Repo(repo_path).config_writer("repository")
    try:
        if isinstance(value, bool):
            writer.set_value(BRANCH_PREFIX, _git_key(key), str(value).lower())
        else:
            writer.set_value(BRANCH_PREFIX, _git_key(key), str(value))
    finally:
        writer.release()


def is_git_repo(path: str | Path) -> bool:
    """Check if path is inside a git repository."""
    try:
        Repo(path)
        return True
    except (InvalidGitRepositoryError, NoSuchPathError):
        return False


def init_repo(path: str | Path) -> Repo:
    """Initialize a new git repository at path."""
    return Repo.init(path)


def team_ids(repo_path: str | Path) -> list[str]:
    """Team ids with a board branch in the repository."""
    prefix = f"{BRANCH_PREFIX}/"
    return sorted(h.name[len(prefix) :] for h in Repo(repo_path).heads if h.name.startswith(prefix))
