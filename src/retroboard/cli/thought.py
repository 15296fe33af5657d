"""Handlers for 'retro thought' commands."""

from retroboard.cli._common import (
    card_to_dict,
    confirm,
    error,
    find_thought,
    open_session,
    output_result,
    run,
    why_not,
)
from retroboard.model.card import add_thought


def thought_add(args) -> int:
    """Add a thought to a happy, confused or unhappy column."""
    session = open_session(args)
    if session.read_only:
        error("The board is read-only.", args.json)

    thought = run(
        add_thought(session.board, session.gateway, args.topic, args.message, timeout=session.timeout),
        args.json,
    )
    title = session.board.column_titles[thought.topic]
    output_result(card_to_dict(thought), f"Added thought {thought.id} to {title}", args.json)
    return 0


def thought_edit(args) -> int:
    """Replace the message of a thought."""
    session = open_session(args)
    thought = find_thought(session.board, args.id, args.json)
    ctl = session.controller(thought)

    if not ctl.begin_edit():
        error(f"Thought {thought.id} can't be edited: {why_not(ctl)}.", args.json)
    if not run(ctl.commit_edit(args.message), args.json):
        error("Message can't be empty.", args.json)

    output_result(card_to_dict(ctl.card), f"Updated thought {thought.id}", args.json)
    return 0


def thought_upvote(args) -> int:
    """Add a heart to a thought."""
    session = open_session(args)
    thought = find_thought(session.board, args.id, args.json)
    ctl = session.controller(thought)

    if not run(ctl.toggle_upvote(), args.json):
        error(f"Thought {thought.id} can't be upvoted: {why_not(ctl)}.", args.json)

    hearts = ctl.card.hearts
    output_result(card_to_dict(ctl.card), f"Thought {thought.id} now has {hearts} likes", args.json)
    return 0


def thought_discuss(args) -> int:
    """Toggle the discussed flag of a thought."""
    session = open_session(args)
    thought = find_thought(session.board, args.id, args.json)
    ctl = session.controller(thought)

    if not run(ctl.toggle_resolved(), args.json):
        error(f"Thought {thought.id} can't be changed: {why_not(ctl)}.", args.json)

    state = "discussed" if ctl.resolved else "open again"
    output_result(card_to_dict(ctl.card), f"Thought {thought.id} is {state}", args.json)
    return 0


def thought_delete(args) -> int:
    """Delete a thought after confirmation."""
    session = open_session(args)
    thought = find_thought(session.board, args.id, args.json)
    ctl = session.controller(thought)

    if not ctl.begin_delete():
        error(f"Thought {thought.id} can't be deleted: {why_not(ctl)}.", args.json)
    if not (args.yes or confirm(f"Delete thought {thought.id} ({thought.message})?")):
        ctl.cancel_delete()
        output_result({"id": thought.id, "deleted": False}, "Nothing deleted", args.json)
        return 0
    run(ctl.confirm_delete(), args.json)

    output_result({"id": thought.id, "deleted": True}, f"Deleted thought {thought.id}", args.json)
    return 0
