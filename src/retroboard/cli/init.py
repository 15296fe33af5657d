"""Handler for 'retro init'."""

import logging
from pathlib import Path

from retroboard.cli._common import error, output_json
from retroboard.constants import DEFAULT_TEAM_NAME, branch_name
from retroboard.errors import RetroError
from retroboard.git import init_repo, is_git_repo, read_retro_config, team_ids, write_retro_config_key
from retroboard.model.types import COLUMN_TOPICS
from retroboard.store import GitGateway

logger = logging.getLogger(__name__)


def init_board(args) -> int:
    """Create a retro board for a team and make it the repository default."""
    repo_path = Path(args.repo).resolve()

    if not is_git_repo(repo_path):
        logger.info("initializing git repository at %s", repo_path)
        init_repo(repo_path)

    team = args.team or read_retro_config(repo_path).get("team")
    if not team:
        error("Pick a team id with --team.", args.json)

    created = team not in team_ids(repo_path)
    gateway = GitGateway(repo_path)
    try:
        gateway.create_team(team, args.name or DEFAULT_TEAM_NAME)
        state = gateway.load_board(team)
    except RetroError as e:
        error(str(e), args.json)
    write_retro_config_key(repo_path, "team", team)

    columns = [state.column_titles[topic] for topic in COLUMN_TOPICS]
    if args.json:
        output_json(
            {
                "repo_path": str(repo_path),
                "team": team,
                "name": state.team.name,
                "branch": branch_name(team),
                "columns": columns,
                "created": created,
            }
        )
    elif created:
        print(f"Initialized retro board for {state.team.name} ({team}) at {repo_path}")
        print(f"Columns: {', '.join(columns)}")
    else:
        print(f"Board for {team} already initialized at {repo_path}")

    return 0
