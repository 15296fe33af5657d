"""Shared constants for retroboard."""

BRANCH_PREFIX = "retro"

MAX_COLUMN_TITLE_LENGTH = 16

CSV_HEADER = ("Column", "Message", "Likes", "Completed", "Assigned To")

DEFAULT_TEAM_NAME = "Retro"


def branch_name(team_id: str) -> str:
    """Branch holding the board of one team."""
    return f"{BRANCH_PREFIX}/{team_id}"
