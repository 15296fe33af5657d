"""Shared fixtures for all tests."""

import pytest
from git import Repo

from retroboard.store import GitGateway


@pytest.fixture(autouse=True)
def git_identity(monkeypatch):
    """Give git a committer identity so commit-tree works on any machine."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Retro Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "retro@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Retro Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "retro@example.com")


@pytest.fixture
def empty_repo(tmp_path):
    """Create an empty git repo."""
    repo = Repo.init(tmp_path)
    (tmp_path / ".gitkeep").write_text("")
    repo.index.add([".gitkeep"])
    repo.index.commit("Initial commit")
    return tmp_path


@pytest.fixture
def git_gateway(empty_repo):
    """A git gateway with an empty board for team 'team'."""
    gateway = GitGateway(empty_repo)
    gateway.create_team("team", "The Team")
    return gateway
