"""Handler for 'retro board'."""

from retroboard.cli._common import column_to_dict, error, open_session, output_json, print_column
from retroboard.errors import ValidationError
from retroboard.model.types import Topic


def board_show(args) -> int:
    """Show the four columns of the board in display order."""
    session = open_session(args)
    board = session.board

    for value in args.sort_votes or []:
        try:
            topic = Topic.parse(value)
        except ValidationError as e:
            error(str(e), args.json)
        if not board.set_sort_by_votes(topic, True):
            error("Action items can't be sorted by votes.", args.json)

    columns = board.columns()
    if args.json:
        output_json(
            {
                "team": {"id": board.team.id, "name": board.team.name},
                "revision": board.revision,
                "read_only": session.read_only,
                "columns": [column_to_dict(c) for c in columns],
            }
        )
    else:
        print(board.team.name)
        for column in columns:
            print()
            print_column(column)

    return 0
