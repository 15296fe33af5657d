"""Shared fixtures for CLI tests."""

from argparse import Namespace

import pytest

from retroboard.git import write_retro_config_key
from retroboard.model.types import Topic
from retroboard.store import GitGateway


@pytest.fixture
def initialized_repo(empty_repo):
    """A repo with a board for team 'team': two thoughts and one action item."""
    gateway = GitGateway(empty_repo)
    gateway.create_team("team", "Test Team")
    gateway.create_thought("team", "Great demo", Topic.HAPPY)
    gateway.create_thought("team", "Flaky tests", Topic.UNHAPPY, hearts=2)
    gateway.create_action_item("team", "Fix flaky tests", "sam")
    write_retro_config_key(empty_repo, "team", "team")
    return empty_repo


@pytest.fixture
def args_for(initialized_repo):
    """Build handler args for the initialized repo."""

    def build(**kwargs):
        defaults = {"repo": str(initialized_repo), "json": False, "team": None, "read_only": False, "verbose": False}
        defaults.update(kwargs)
        return Namespace(**defaults)

    return build


@pytest.fixture
def gateway(initialized_repo):
    return GitGateway(initialized_repo)
