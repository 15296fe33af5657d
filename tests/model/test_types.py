"""Tests for card types and payload validation."""

from datetime import datetime, timedelta, timezone

import pytest

from retroboard.errors import ValidationError
from retroboard.model.types import ActionItem, Thought, Topic, coerce_datetime
from retroboard.validation import validate_column_title, validate_team_id, validate_text


def test_topic_parse():
    assert Topic.parse("HAPPY") is Topic.HAPPY
    assert Topic.parse(" action ") is Topic.ACTION
    assert Topic.parse(Topic.CONFUSED) is Topic.CONFUSED
    with pytest.raises(ValidationError):
        Topic.parse("meh")


def test_thought_topic_from_string():
    thought = Thought("1", "team", "hi", "unhappy")
    assert thought.topic is Topic.UNHAPPY
    assert thought.text == "hi"
    assert not thought.is_resolved


def test_thought_rejects_action_topic():
    with pytest.raises(ValidationError):
        Thought("1", "team", "hi", Topic.ACTION)


@pytest.mark.parametrize("hearts", [-1, 1.5, "2", True])
def test_thought_rejects_bad_hearts(hearts):
    with pytest.raises(ValidationError):
        Thought("1", "team", "hi", Topic.HAPPY, hearts=hearts)


def test_thought_rejects_non_bool_discussed():
    with pytest.raises(ValidationError):
        Thought("1", "team", "hi", Topic.HAPPY, discussed="yes")


def test_action_item_defaults():
    action = ActionItem("1", "team", "Do it", assignee=None)
    assert action.topic is Topic.ACTION
    assert action.assignee == ""
    assert not action.completed
    assert not action.archived
    assert action.date_created.tzinfo is not None
    assert action.text == "Do it"


def test_action_item_date_from_string():
    action = ActionItem("1", "team", "Do it", date_created="2026-03-01T10:00:00+02:00")
    assert action.date_created == datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


def test_action_item_rejects_non_bool_completed():
    with pytest.raises(ValidationError):
        ActionItem("1", "team", "Do it", completed=1)


def test_cards_are_frozen():
    thought = Thought("1", "team", "hi", Topic.HAPPY)
    with pytest.raises(AttributeError):
        thought.hearts = 3


def test_coerce_datetime():
    naive = datetime(2026, 1, 1, 12, 0)
    assert coerce_datetime(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    offset = datetime(2026, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=1)))
    assert coerce_datetime(offset).hour == 11
    with pytest.raises(ValidationError):
        coerce_datetime("yesterday")
    with pytest.raises(ValidationError):
        coerce_datetime(None)


def test_validate_team_id():
    assert validate_team_id("team-1_a") == "team-1_a"
    for bad in ("", "Team", "-team", "a b", None):
        with pytest.raises(ValidationError):
            validate_team_id(bad)


def test_validate_text():
    assert validate_text("  hi  ") == "hi"
    with pytest.raises(ValidationError, match="Message can't be empty"):
        validate_text(" \n ", "Message")


def test_validate_column_title():
    assert validate_column_title("x" * 16) == "x" * 16
    with pytest.raises(ValidationError, match="16 characters"):
        validate_column_title("x" * 17)
