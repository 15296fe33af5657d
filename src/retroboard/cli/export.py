"""Handler for 'retro export'."""

import sys
from pathlib import Path

from retroboard.cli._common import open_session, output_json
from retroboard.export import csv_filename, export_csv


def export_board(args) -> int:
    """Write the board as CSV to stdout, or to a file with -o.

    -o without a file name writes <team-id>-board.csv in the current
    directory.
    """
    session = open_session(args)
    text = export_csv(session.board)

    if args.output is None:
        sys.stdout.write(text)
        return 0

    path = Path(args.output or csv_filename(session.board.team_id))
    # newline="" keeps the CRLF row endings as written
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)

    rows = text.count("\r\n") - 1
    if args.json:
        output_json({"path": str(path), "rows": rows})
    else:
        print(f"Exported {rows} rows to {path}")
    return 0
