"""Tests for 'retro column' commands."""

import json

import pytest

from retroboard.cli.column import column_rename
from retroboard.model.types import Topic


def test_column_rename(args_for, gateway, capsys):
    assert column_rename(args_for(topic="happy", title="Kudos")) == 0
    assert "Renamed column 'Happy' to 'Kudos'" in capsys.readouterr().out
    assert gateway.load_board("team").column_titles[Topic.HAPPY] == "Kudos"


def test_column_rename_json(args_for, capsys):
    assert column_rename(args_for(json=True, topic="action", title="To Do")) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == {"topic": "action", "old_title": "Action Items", "title": "To Do"}


def test_column_rename_too_long(args_for, gateway, capsys):
    with pytest.raises(SystemExit, match="1"):
        column_rename(args_for(topic="happy", title="Things that went well"))
    assert "16 characters" in capsys.readouterr().err
    assert gateway.load_board("team").column_titles[Topic.HAPPY] == "Happy"


def test_column_rename_unknown_topic(args_for, capsys):
    with pytest.raises(SystemExit, match="1"):
        column_rename(args_for(topic="meh", title="x"))
    assert "Unknown topic" in capsys.readouterr().err
