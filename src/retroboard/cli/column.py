"""Handler for 'retro column' commands."""

from retroboard.cli._common import error, open_session, output_result, run
from retroboard.errors import ValidationError
from retroboard.model.card import rename_column
from retroboard.model.types import Topic


def column_rename(args) -> int:
    """Rename one of the four columns."""
    session = open_session(args)
    if session.read_only:
        error("The board is read-only.", args.json)
    try:
        topic = Topic.parse(args.topic)
    except ValidationError as e:
        error(str(e), args.json)

    old = session.board.column_titles[topic]
    run(rename_column(session.board, session.gateway, topic, args.title, timeout=session.timeout), args.json)
    new = session.board.column_titles[topic]

    output_result(
        {"topic": topic.value, "old_title": old, "title": new},
        f"Renamed column '{old}' to '{new}'",
        args.json,
    )
    return 0
