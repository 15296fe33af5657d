"""Card and archive id handling.

Ids are decimal strings allocated per team and per kind from a counter
that only goes up. They are the insertion order of the board, so they are
compared numerically, never as plain strings ("10" comes after "9").
"""


def normalize_id(s: str) -> str:
    """Strip leading zeros and whitespace, preserving at least one digit.

    " 007" → "7", "0" → "0"
    """
    stripped = str(s).strip().lstrip("0")
    return stripped or "0"


def pad_id(s: str, width: int = 3) -> str:
    """Zero-pad an id for use as a file name, so tree listings stay readable."""
    return s.zfill(width)


def id_key(s: str) -> tuple[int, str]:
    """Sort key giving numeric order for numeric ids.

    Non-numeric ids sort after every numeric one, alphabetically.
    """
    s = normalize_id(s)
    if s.isdigit():
        return (0, s.zfill(20))
    return (1, s)


def next_id(existing) -> str:
    """Allocate the id following the highest numeric id in existing."""
    highest = 0
    for id_ in existing:
        id_ = normalize_id(id_)
        if id_.isdigit():
            highest = max(highest, int(id_))
    return str(highest + 1)


def allocate_id(counter, existing=()) -> str:
    """Allocate a fresh id from a team's counter of the next unused number.

    The id is never lower than counter and never one already in existing,
    so ids of deleted and archived cards are not handed out again. A missing
    or unreadable counter starts from 1.
    """
    try:
        start = int(counter)
    except (TypeError, ValueError):
        start = 1
    return str(max(start, int(next_id(existing))))
