"""Shared helpers for CLI command handlers."""

import asyncio
import json
import sys
from dataclasses import dataclass
from pathlib import Path

from retroboard.errors import RetroError
from retroboard.git import is_git_repo, read_retro_config, team_ids
from retroboard.ids import normalize_id
from retroboard.model.board import Board
from retroboard.model.interaction import ItemInteractionController
from retroboard.model.types import ActionItem, Archive, Card, Column, Thought
from retroboard.store import GitGateway


@dataclass
class Session:
    """Everything a handler needs to act on one team's board."""

    repo_path: Path
    gateway: GitGateway
    board: Board
    read_only: bool
    timeout: float

    def controller(self, card: Card) -> ItemInteractionController:
        return ItemInteractionController(
            self.board,
            card,
            self.gateway,
            read_only=self.read_only,
            timeout=self.timeout,
        )


def repo_or_die(repo: str, json_mode: bool) -> Path:
    """Resolve the repository path. Exit 1 if it isn't a git repository."""
    repo_path = Path(repo).resolve()
    if not is_git_repo(repo_path):
        error(f"{repo_path} is not a git repository. Run 'retro init' first.", json_mode)
    return repo_path


def resolve_team(args, repo_path: Path, config: dict) -> str:
    """Pick the team: --team, then retro.team from git config, then the only board present."""
    team = getattr(args, "team", None) or config.get("team")
    if team:
        return team
    teams = team_ids(repo_path)
    if len(teams) == 1:
        return teams[0]
    if not teams:
        error("No retro board found. Run 'retro init --team ID' first.", args.json)
    error("Several teams found, pick one with --team: " + ", ".join(teams), args.json)


def open_session(args) -> Session:
    """Load the board of the selected team. Exit 1 with a message on failure."""
    repo_path = repo_or_die(args.repo, args.json)
    try:
        config = read_retro_config(repo_path)
    except ValueError as e:
        error(f"Bad [retro] config: {e}", args.json)
    team = resolve_team(args, repo_path, config)
    gateway = GitGateway(repo_path)
    try:
        board = Board(gateway.load_board(team))
    except RetroError as e:
        error(str(e), args.json)
    return Session(
        repo_path=repo_path,
        gateway=gateway,
        board=board,
        read_only=bool(getattr(args, "read_only", False) or config["read_only"]),
        timeout=config["request_timeout"],
    )


def run(coro, json_mode: bool):
    """Run a coroutine to completion, turning retro errors into exit 1."""
    try:
        return asyncio.run(coro)
    except RetroError as e:
        error(str(e), json_mode)


def find_thought(board: Board, thought_id: str, json_mode: bool) -> Thought:
    """Lookup thought by ID. Exit 1 if not found."""
    thought_id = normalize_id(thought_id)
    for thought in board.thoughts:
        if thought.id == thought_id:
            return thought
    error(f"Thought '{thought_id}' not found.", json_mode)


def find_action(board: Board, action_id: str, json_mode: bool) -> ActionItem:
    """Lookup action item by ID. Exit 1 if not found."""
    action_id = normalize_id(action_id)
    for action in board.action_items:
        if action.id == action_id:
            return action
    error(f"Action item '{action_id}' not found.", json_mode)


def why_not(ctl: ItemInteractionController) -> str:
    """Short reason a card refuses a change, for error messages."""
    if ctl.read_only:
        return "the board is read-only"
    if ctl.resolved:
        return "it is discussed" if ctl.is_thought else "it is completed"
    return f"it is {ctl.mode.value}"


def confirm(prompt: str) -> bool:
    """Ask a yes/no question on the terminal. Anything but yes is no."""
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def card_to_dict(card: Card) -> dict:
    if isinstance(card, Thought):
        return {
            "id": card.id,
            "topic": card.topic.value,
            "message": card.message,
            "hearts": card.hearts,
            "discussed": card.discussed,
        }
    return {
        "id": card.id,
        "task": card.task,
        "assignee": card.assignee,
        "completed": card.completed,
        "date_created": card.date_created.isoformat(),
        "archived": card.archived,
    }


def column_to_dict(column: Column) -> dict:
    return {
        "topic": column.topic.value,
        "title": column.title,
        "sort_by_votes": column.sort_by_votes,
        "cards": [card_to_dict(card) for card in column],
    }


def archive_to_dict(archive: Archive, cards: bool = False) -> dict:
    data = {
        "id": archive.id,
        "created_at": archive.created_at.isoformat(),
        "thoughts": len(archive.thoughts),
        "action_items": len(archive.action_items),
    }
    if cards:
        data["thoughts"] = [card_to_dict(t) for t in archive.thoughts]
        data["action_items"] = [card_to_dict(a) for a in archive.action_items]
    return data


def format_card_line(card: Card, indent: str = "  ") -> str:
    """Format a card as one text line: id, text and its counters."""
    done = "x" if card.is_resolved else " "
    if isinstance(card, Thought):
        extra = f"  +{card.hearts}" if card.hearts else ""
    else:
        extra = f"  @{card.assignee}" if card.assignee else ""
    return f"{indent}[{done}] {card.id:>3}  {card.text}{extra}"


def print_column(column: Column) -> None:
    cards = "card" if len(column) == 1 else "cards"
    sort = "  (by votes)" if column.sort_by_votes else ""
    print(f"{column.title} ({len(column)} {cards}){sort}")
    for card in column:
        print(format_card_line(card))


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2))


def output_result(data: dict, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)
