"""CSV export of a live board."""

import csv
import io

from retroboard.constants import CSV_HEADER
from retroboard.model.board import Board
from retroboard.model.types import COLUMN_TOPICS, Thought


def _flag(value: bool) -> str:
    return "true" if value else "false"


def export_rows(board: Board) -> list[tuple[str, str, str, str, str]]:
    """One row per card: thought columns first, then action items, each in display order."""
    rows = []
    for topic in COLUMN_TOPICS:
        column = board.column(topic)
        for card in column:
            if isinstance(card, Thought):
                rows.append((column.title, card.message, str(card.hearts), _flag(card.discussed), ""))
            else:
                rows.append((column.title, card.task, "", _flag(card.completed), card.assignee))
    return rows


def export_csv(board: Board) -> str:
    """Render the board as CSV text with CRLF line endings."""
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\r\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(export_rows(board))
    return out.getvalue()


def csv_filename(team_id: str) -> str:
    return f"{team_id}-board.csv"
