"""Handlers for 'retro archive' and 'retro archives' commands."""

from retroboard.cli._common import (
    archive_to_dict,
    card_to_dict,
    confirm,
    error,
    format_card_line,
    open_session,
    output_json,
    print_column,
    run,
)
from retroboard.model.archive import ArchiveCoordinator, ArchiveStatus
from retroboard.model.card import persist
from retroboard.model.ordering import build_column
from retroboard.model.types import COLUMN_TOPICS


async def _fetch(session, func, *args):
    return await persist(func, session.board.team_id, *args, timeout=session.timeout)


def archive_board(args) -> int:
    """Archive the current retro: snapshot it, then clear the board."""
    session = open_session(args)
    if session.read_only:
        error("The board is read-only.", args.json)

    board = session.board
    counts = f"{len(board.thoughts)} thoughts and {len(board.action_items)} action items"
    coordinator = ArchiveCoordinator(session.gateway, timeout=session.timeout)
    outcome = run(
        coordinator.archive(
            board.team_id,
            confirm=lambda: args.yes or confirm(f"Archive {counts} and start a new retro?"),
            board=board,
        ),
        args.json,
    )

    if outcome.status is ArchiveStatus.DECLINED:
        if args.json:
            output_json({"status": outcome.status.value})
        else:
            print("Not yet. Nothing archived.")
        return 0
    if outcome.status is ArchiveStatus.CONFLICT:
        error(str(outcome.error), args.json)

    archive = outcome.archive
    carried = len(board.action_items)
    if args.json:
        data = archive_to_dict(archive)
        data["status"] = outcome.status.value
        data["carried_over"] = carried
        output_json(data)
    else:
        sizes = f"{len(archive.thoughts)} thoughts, {len(archive.action_items)} action items"
        print(f"Archived retro {archive.id} ({sizes})")
        if carried:
            print(f"{carried} open action items carried over")
    return 0


def archives_list(args) -> int:
    """List the archived retros of the team, oldest first."""
    session = open_session(args)
    archives = run(_fetch(session, session.gateway.list_archives), args.json)

    if args.json:
        output_json([archive_to_dict(a) for a in archives])
    else:
        if not archives:
            print("No archives yet")
        for a in archives:
            when = a.created_at.strftime("%Y-%m-%d %H:%M")
            print(f"{a.id:>3}  {when}  {len(a.thoughts)} thoughts, {len(a.action_items)} action items")
    return 0


def archives_show(args) -> int:
    """Show one archived retro as columns."""
    session = open_session(args)
    archive = run(_fetch(session, session.gateway.get_archive, args.id), args.json)

    titles = session.board.column_titles
    cards = (*archive.thoughts, *archive.action_items)
    columns = [build_column(topic, cards, titles.get(topic)) for topic in COLUMN_TOPICS]

    if args.json:
        output_json(archive_to_dict(archive, cards=True))
    else:
        print(f"Retro {archive.id}, archived {archive.created_at.strftime('%Y-%m-%d %H:%M')}")
        for column in columns:
            print()
            print_column(column)
    return 0


def archives_actions(args) -> int:
    """List action items that are history: archived or completed in a past retro."""
    session = open_session(args)
    actions = run(_fetch(session, session.gateway.list_archived_action_items), args.json)

    if args.json:
        output_json([card_to_dict(a) for a in actions])
    else:
        if not actions:
            print("No archived action items")
        for action in actions:
            print(format_card_line(action, indent=""))
    return 0
