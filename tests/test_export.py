"""Tests for CSV export."""

from datetime import datetime, timezone

from retroboard.export import csv_filename, export_csv
from retroboard.model.board import Board
from retroboard.model.types import ActionItem, BoardState, Team, Thought, Topic

TEAM = Team("team", "The Team")
WHEN = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _board(thoughts=(), actions=(), titles=None):
    state = BoardState(team=TEAM, thoughts=tuple(thoughts), action_items=tuple(actions))
    if titles:
        state.column_titles.update(titles)
    return Board(state)


def test_empty_board_is_header_only():
    assert export_csv(_board()).encode("utf-8") == b"Column,Message,Likes,Completed,Assigned To\r\n"


def test_rows_follow_column_order():
    board = _board(
        thoughts=[
            Thought("1", "team", "Too many meetings", Topic.UNHAPPY, hearts=1),
            Thought("2", "team", "Shipped v2", Topic.HAPPY, hearts=4),
            Thought("3", "team", "Who owns CI?", Topic.CONFUSED, discussed=True),
        ],
        actions=[ActionItem("1", "team", "Cancel standup", "sam", completed=True, date_created=WHEN)],
    )
    lines = export_csv(board).split("\r\n")
    assert lines == [
        "Column,Message,Likes,Completed,Assigned To",
        "Happy,Shipped v2,4,false,",
        "Confused,Who owns CI?,0,true,",
        "Unhappy,Too many meetings,1,false,",
        "Action Items,Cancel standup,,true,sam",
        "",
    ]


def test_rows_in_display_order():
    board = _board(
        thoughts=[
            Thought("1", "team", "first", Topic.HAPPY, discussed=True),
            Thought("2", "team", "second", Topic.HAPPY),
        ]
    )
    lines = export_csv(board).split("\r\n")
    assert lines[1] == "Happy,second,0,false,"
    assert lines[2] == "Happy,first,0,true,"


def test_custom_titles_and_quoting():
    board = _board(
        thoughts=[Thought("1", "team", 'Fast, "mostly"', Topic.HAPPY)],
        titles={Topic.HAPPY: "Kudos"},
    )
    lines = export_csv(board).split("\r\n")
    assert lines[1] == 'Kudos,"Fast, ""mostly""",0,false,'


def test_csv_filename():
    assert csv_filename("platform") == "platform-board.csv"
