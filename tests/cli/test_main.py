"""Tests for argument parsing and the retro entry point."""

import json

import pytest

from retroboard.__main__ import main
from retroboard.cli import build_parser
from retroboard.cli.archive import archives_list
from retroboard.cli.board import board_show
from retroboard.cli.thought import thought_add


def test_parse_thought_add():
    args = build_parser().parse_args(["thought", "add", "happy", "Nice work"])
    assert args.func is thought_add
    assert args.topic == "happy"
    assert args.message == "Nice work"
    assert args.repo == "."
    assert args.read_only is False


def test_parse_common_flags_after_noun():
    args = build_parser().parse_args(["board", "--team", "ops", "--read-only", "--json", "--sort-votes", "happy"])
    assert args.func is board_show
    assert args.team == "ops"
    assert args.read_only
    assert args.json
    assert args.sort_votes == ["happy"]


def test_parse_archives_defaults_to_list():
    args = build_parser().parse_args(["archives"])
    assert args.func is archives_list


def test_parse_export_output():
    parser = build_parser()
    assert parser.parse_args(["export"]).output is None
    assert parser.parse_args(["export", "-o"]).output == ""
    assert parser.parse_args(["export", "-o", "x.csv"]).output == "x.csv"


def test_main_no_command(capsys):
    with pytest.raises(SystemExit, match="1"):
        main([])
    assert "usage: retro" in capsys.readouterr().out


def test_main_runs_handler(initialized_repo, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["thought", "add", "confused", "Why?", "--repo", str(initialized_repo), "--json"])
    assert exc.value.code == 0
    assert json.loads(capsys.readouterr().out)["message"] == "Why?"
