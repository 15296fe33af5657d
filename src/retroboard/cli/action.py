"""Handlers for 'retro action' commands."""

from retroboard.cli._common import (
    card_to_dict,
    confirm,
    error,
    find_action,
    open_session,
    output_result,
    run,
    why_not,
)
from retroboard.model.card import add_action_item


def action_add(args) -> int:
    """Create an action item from "task @assignee" text."""
    session = open_session(args)
    if session.read_only:
        error("The board is read-only.", args.json)

    action = run(
        add_action_item(session.board, session.gateway, args.text, timeout=session.timeout),
        args.json,
    )
    owner = f" for {action.assignee}" if action.assignee else ""
    output_result(card_to_dict(action), f"Added action item {action.id}{owner}", args.json)
    return 0


def action_edit(args) -> int:
    """Replace the task of an action item."""
    session = open_session(args)
    action = find_action(session.board, args.id, args.json)
    ctl = session.controller(action)

    if not ctl.begin_edit():
        error(f"Action item {action.id} can't be edited: {why_not(ctl)}.", args.json)
    if not run(ctl.commit_edit(args.task), args.json):
        error("Task can't be empty.", args.json)

    output_result(card_to_dict(ctl.card), f"Updated action item {action.id}", args.json)
    return 0


def action_assign(args) -> int:
    """Assign an action item. An empty name unassigns it."""
    session = open_session(args)
    action = find_action(session.board, args.id, args.json)
    ctl = session.controller(action)

    if not run(ctl.commit_assignee(args.name), args.json):
        error(f"Action item {action.id} can't be reassigned: {why_not(ctl)}.", args.json)

    assignee = ctl.card.assignee
    text = f"Assigned action item {action.id} to {assignee}" if assignee else f"Unassigned action item {action.id}"
    output_result(card_to_dict(ctl.card), text, args.json)
    return 0


def action_complete(args) -> int:
    """Toggle the completed flag of an action item."""
    session = open_session(args)
    action = find_action(session.board, args.id, args.json)
    ctl = session.controller(action)

    if not run(ctl.toggle_resolved(), args.json):
        error(f"Action item {action.id} can't be changed: {why_not(ctl)}.", args.json)

    state = "completed" if ctl.resolved else "open again"
    output_result(card_to_dict(ctl.card), f"Action item {action.id} is {state}", args.json)
    return 0


def action_delete(args) -> int:
    """Delete an action item after confirmation."""
    session = open_session(args)
    action = find_action(session.board, args.id, args.json)
    ctl = session.controller(action)

    if not ctl.begin_delete():
        error(f"Action item {action.id} can't be deleted: {why_not(ctl)}.", args.json)
    if not (args.yes or confirm(f"Delete action item {action.id} ({action.task})?")):
        ctl.cancel_delete()
        output_result({"id": action.id, "deleted": False}, "Nothing deleted", args.json)
        return 0
    run(ctl.confirm_delete(), args.json)

    output_result({"id": action.id, "deleted": True}, f"Deleted action item {action.id}", args.json)
    return 0
