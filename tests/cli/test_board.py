"""Tests for 'retro board'."""

import json
from argparse import Namespace

import pytest

from retroboard.cli.board import board_show
from retroboard.model.types import Topic


def test_board_show(args_for, capsys):
    assert board_show(args_for(sort_votes=None)) == 0

    out = capsys.readouterr().out
    assert out.startswith("Test Team\n")
    assert "Happy (1 card)" in out
    assert "Unhappy (1 card)" in out
    assert "Action Items (1 card)" in out
    assert "Great demo" in out
    assert "Fix flaky tests  @sam" in out
    assert "Flaky tests  +2" in out


def test_board_show_json(args_for, capsys):
    assert board_show(args_for(json=True, sort_votes=None)) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["team"] == {"id": "team", "name": "Test Team"}
    assert [c["topic"] for c in data["columns"]] == ["happy", "confused", "unhappy", "action"]
    unhappy = data["columns"][2]
    assert unhappy["cards"][0]["hearts"] == 2
    action = data["columns"][3]["cards"][0]
    assert action["assignee"] == "sam"
    assert action["completed"] is False


def test_board_sort_votes(args_for, gateway, capsys):
    gateway.create_thought("team", "Nice", Topic.HAPPY)
    second = gateway.create_thought("team", "Nicer", Topic.HAPPY)
    gateway.upvote_thought("team", second.id)

    assert board_show(args_for(json=True, sort_votes=["happy"])) == 0

    happy = json.loads(capsys.readouterr().out)["columns"][0]
    assert happy["sort_by_votes"] is True
    assert [c["message"] for c in happy["cards"]] == ["Nicer", "Great demo", "Nice"]


def test_board_sort_votes_action_column(args_for, capsys):
    with pytest.raises(SystemExit, match="1"):
        board_show(args_for(sort_votes=["action"]))
    assert "can't be sorted by votes" in capsys.readouterr().err


def test_board_team_flag(args_for, gateway, capsys):
    gateway.create_team("other", "Other Team")
    assert board_show(args_for(team="other", sort_votes=None)) == 0
    assert capsys.readouterr().out.startswith("Other Team\n")


def test_board_unknown_team(args_for, capsys):
    with pytest.raises(SystemExit, match="1"):
        board_show(args_for(team="nobody", sort_votes=None))
    assert "has no board" in capsys.readouterr().err


def test_board_not_a_repo(tmp_path, capsys):
    args = Namespace(repo=str(tmp_path), json=False, team=None, read_only=False, sort_votes=None)
    with pytest.raises(SystemExit, match="1"):
        board_show(args)
    assert "not a git repository" in capsys.readouterr().err
