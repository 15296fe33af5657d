"""Shared fixtures for model tests."""

import time

import pytest

from retroboard.gateway import MemoryGateway
from retroboard.model.board import Board

MUTATIONS = {
    "create_thought",
    "update_thought_message",
    "upvote_thought",
    "set_thought_discussed",
    "delete_thought",
    "create_action_item",
    "update_action_item_task",
    "update_action_item_assignee",
    "set_action_item_completed",
    "delete_action_item",
    "rename_column",
    "archive_board",
}


class RecordingGateway(MemoryGateway):
    """MemoryGateway that records mutating calls and can be made to fail them.

    fail: exception raised instead of performing the call.
    fail_after: exception raised after the call has been performed,
    like a response lost on the way back.
    delay: seconds to sleep before the call.
    """

    def __init__(self):
        super().__init__()
        self.calls = []
        self.fail = None
        self.fail_after = None
        self.delay = 0

    def __getattribute__(self, name):
        attr = super().__getattribute__(name)
        if name not in MUTATIONS:
            return attr

        def call(*args, **kwargs):
            self.calls.append(name)
            if self.delay:
                time.sleep(self.delay)
            if self.fail is not None:
                raise self.fail
            result = attr(*args, **kwargs)
            if self.fail_after is not None:
                raise self.fail_after
            return result

        call.__name__ = name
        return call


@pytest.fixture
def gateway():
    gw = RecordingGateway()
    gw.create_team("team", "The Team")
    return gw


@pytest.fixture
def make_board(gateway):
    """Load the board from gateway, forgetting the setup calls."""

    def make():
        gateway.calls.clear()
        return Board(gateway.load_board("team"))

    return make


@pytest.fixture
def board(make_board):
    return make_board()
