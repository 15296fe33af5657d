"""Payload validation shared by the gateways and the core."""

import re

from retroboard.constants import MAX_COLUMN_TITLE_LENGTH
from retroboard.errors import ValidationError

_TEAM_ID = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


def validate_team_id(team_id: str) -> str:
    if not isinstance(team_id, str) or not _TEAM_ID.match(team_id):
        raise ValidationError(f"Invalid team id '{team_id}': use lowercase letters, digits, '-' and '_'")
    return team_id


def validate_text(text: str, what: str = "Text") -> str:
    """Return text stripped of surrounding whitespace, rejecting blank text."""
    if not isinstance(text, str) or not text.strip():
        raise ValidationError(f"{what} can't be empty")
    return text.strip()


def validate_column_title(title: str) -> str:
    title = validate_text(title, "Column title")
    if len(title) > MAX_COLUMN_TITLE_LENGTH:
        raise ValidationError(f"Column title is limited to {MAX_COLUMN_TITLE_LENGTH} characters")
    return title
