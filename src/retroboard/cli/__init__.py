"""CLI argument parser and dispatch for retro."""

import argparse

from retroboard.cli.action import action_add, action_assign, action_complete, action_delete, action_edit
from retroboard.cli.archive import archive_board, archives_actions, archives_list, archives_show
from retroboard.cli.board import board_show
from retroboard.cli.column import column_rename
from retroboard.cli.export import export_board
from retroboard.cli.init import init_board
from retroboard.cli.thought import thought_add, thought_delete, thought_discuss, thought_edit, thought_upvote


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--repo", default=".", help="Path to git repository (default: .)")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    common.add_argument("--team", help="Team id (default: retro.team from git config)")
    common.add_argument("--read-only", action="store_true", help="Only allow discussing and completing cards")
    common.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")

    parser = argparse.ArgumentParser(
        prog="retro",
        description="Git-based retrospective board",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- init ---
    init_p = nouns.add_parser("init", help="Create a retro board for a team", parents=[common])
    init_p.add_argument("--name", help="Team display name")
    init_p.set_defaults(func=init_board)

    # --- board ---
    board_p = nouns.add_parser("board", help="Show the board", parents=[common])
    board_p.add_argument(
        "--sort-votes",
        action="append",
        metavar="TOPIC",
        help="Sort a thought column by likes (repeatable)",
    )
    board_p.set_defaults(func=board_show)

    # --- thought ---
    thought_p = nouns.add_parser("thought", help="Thought operations", parents=[common])
    thought_verbs = thought_p.add_subparsers(dest="verb")

    thought_add_p = thought_verbs.add_parser("add", help="Add a thought", parents=[common])
    thought_add_p.add_argument("topic", help="happy, confused or unhappy")
    thought_add_p.add_argument("message", help="Thought text")
    thought_add_p.set_defaults(func=thought_add)

    thought_edit_p = thought_verbs.add_parser("edit", help="Change a thought's message", parents=[common])
    thought_edit_p.add_argument("id", help="Thought ID")
    thought_edit_p.add_argument("message", help="New text")
    thought_edit_p.set_defaults(func=thought_edit)

    thought_upvote_p = thought_verbs.add_parser("upvote", help="Like a thought", parents=[common])
    thought_upvote_p.add_argument("id", help="Thought ID")
    thought_upvote_p.set_defaults(func=thought_upvote)

    thought_discuss_p = thought_verbs.add_parser("discuss", help="Toggle discussed", parents=[common])
    thought_discuss_p.add_argument("id", help="Thought ID")
    thought_discuss_p.set_defaults(func=thought_discuss)

    thought_delete_p = thought_verbs.add_parser("delete", help="Delete a thought", parents=[common])
    thought_delete_p.add_argument("id", help="Thought ID")
    thought_delete_p.add_argument("-y", "--yes", action="store_true", help="Don't ask for confirmation")
    thought_delete_p.set_defaults(func=thought_delete)

    # thought with no verb = board
    thought_p.set_defaults(func=board_show, sort_votes=None)

    # --- action ---
    action_p = nouns.add_parser("action", help="Action item operations", parents=[common])
    action_verbs = action_p.add_subparsers(dest="verb")

    action_add_p = action_verbs.add_parser("add", help="Add an action item", parents=[common])
    action_add_p.add_argument("text", help='Task text, optionally "task @assignee"')
    action_add_p.set_defaults(func=action_add)

    action_edit_p = action_verbs.add_parser("edit", help="Change an action item's task", parents=[common])
    action_edit_p.add_argument("id", help="Action item ID")
    action_edit_p.add_argument("task", help="New task text")
    action_edit_p.set_defaults(func=action_edit)

    action_assign_p = action_verbs.add_parser("assign", help="Assign an action item", parents=[common])
    action_assign_p.add_argument("id", help="Action item ID")
    action_assign_p.add_argument("name", help="Assignee (empty to unassign)")
    action_assign_p.set_defaults(func=action_assign)

    action_complete_p = action_verbs.add_parser("complete", help="Toggle completed", parents=[common])
    action_complete_p.add_argument("id", help="Action item ID")
    action_complete_p.set_defaults(func=action_complete)

    action_delete_p = action_verbs.add_parser("delete", help="Delete an action item", parents=[common])
    action_delete_p.add_argument("id", help="Action item ID")
    action_delete_p.add_argument("-y", "--yes", action="store_true", help="Don't ask for confirmation")
    action_delete_p.set_defaults(func=action_delete)

    # action with no verb = board
    action_p.set_defaults(func=board_show, sort_votes=None)

    # --- column ---
    col_p = nouns.add_parser("column", help="Column operations", parents=[common])
    col_verbs = col_p.add_subparsers(dest="verb")

    col_rename_p = col_verbs.add_parser("rename", help="Rename a column", parents=[common])
    col_rename_p.add_argument("topic", help="happy, confused, unhappy or action")
    col_rename_p.add_argument("title", help="New title (up to 16 characters)")
    col_rename_p.set_defaults(func=column_rename)

    # --- archive ---
    archive_p = nouns.add_parser("archive", help="Archive the retro and start a new one", parents=[common])
    archive_p.add_argument("-y", "--yes", action="store_true", help="Don't ask for confirmation")
    archive_p.set_defaults(func=archive_board)

    # --- archives ---
    archives_p = nouns.add_parser("archives", help="Browse archived retros", parents=[common])
    archives_verbs = archives_p.add_subparsers(dest="verb")

    archives_list_p = archives_verbs.add_parser("list", help="List archives", parents=[common])
    archives_list_p.set_defaults(func=archives_list)

    archives_show_p = archives_verbs.add_parser("show", help="Show one archive", parents=[common])
    archives_show_p.add_argument("id", help="Archive ID")
    archives_show_p.set_defaults(func=archives_show)

    archives_actions_p = archives_verbs.add_parser("actions", help="List archived action items", parents=[common])
    archives_actions_p.set_defaults(func=archives_actions)

    # archives with no verb = list
    archives_p.set_defaults(func=archives_list)

    # --- export ---
    export_p = nouns.add_parser("export", help="Export the board as CSV", parents=[common])
    export_p.add_argument(
        "-o",
        "--output",
        nargs="?",
        const="",
        metavar="FILE",
        help="Write to FILE (default name: <team>-board.csv) instead of stdout",
    )
    export_p.set_defaults(func=export_board)

    return parser
