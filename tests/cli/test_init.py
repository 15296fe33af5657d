"""Tests for 'retro init'."""

import json
from argparse import Namespace

import pytest

from retroboard.cli.init import init_board
from retroboard.git import is_git_repo, read_retro_config, team_ids


def _args(repo, **kwargs):
    defaults = {"repo": str(repo), "json": False, "team": "team", "name": None, "read_only": False}
    defaults.update(kwargs)
    return Namespace(**defaults)


def test_init_creates_board(empty_repo, capsys):
    assert init_board(_args(empty_repo, name="Platform")) == 0

    out = capsys.readouterr().out
    assert "Initialized retro board for Platform (team)" in out
    assert "Happy, Confused, Unhappy, Action Items" in out
    assert team_ids(empty_repo) == ["team"]
    assert read_retro_config(empty_repo)["team"] == "team"


def test_init_creates_git_repo(tmp_path, capsys):
    repo = tmp_path / "fresh"
    repo.mkdir()
    assert init_board(_args(repo)) == 0
    assert is_git_repo(repo)
    assert team_ids(repo) == ["team"]


def test_init_is_idempotent(empty_repo, capsys):
    init_board(_args(empty_repo))
    capsys.readouterr()

    assert init_board(_args(empty_repo, json=True)) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["created"] is False
    assert data["branch"] == "retro/team"


def test_init_json(empty_repo, capsys):
    assert init_board(_args(empty_repo, json=True, name="Platform")) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["created"] is True
    assert data["name"] == "Platform"
    assert data["columns"] == ["Happy", "Confused", "Unhappy", "Action Items"]


def test_init_needs_team(empty_repo, capsys):
    with pytest.raises(SystemExit, match="1"):
        init_board(_args(empty_repo, team=None))
    assert "--team" in capsys.readouterr().err


def test_init_bad_team_id(empty_repo, capsys):
    with pytest.raises(SystemExit, match="1"):
        init_board(_args(empty_repo, team="Bad Team"))
    assert "Invalid team id" in capsys.readouterr().err
