"""
Pytest configuration and shared fixtures.

Adds the project root to the Python path so tests can import domain,
repositories, services and api, and provides in-memory fakes for the
outbound webhook channel, the notification state store and the Supabase
client.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.notification import NotificationState  # noqa: E402
from services.discord_client import ChannelResult  # noqa: E402


class FakeChannel:
    """Records webhook calls and replays queued results."""

    def __init__(self, create_results=None, edit_results=None):
        self.create_results = list(create_results or [])
        self.edit_results = list(edit_results or [])
        self.calls = []

    def create_message(self, payload):
        self.calls.append(("create", None, payload))
        if self.create_results:
            return self.create_results.pop(0)
        return ChannelResult.success(message_id=f"M{len(self.calls)}")

    def edit_message(self, message_id, payload):
        self.calls.append(("edit", message_id, payload))
        if self.edit_results:
            return self.edit_results.pop(0)
        return ChannelResult.success()


class MemoryStateRepository:
    """NotificationStateRepository kept in memory."""

    def __init__(self, state=None):
        self.state = state or NotificationState()
        self.saves = []

    def load(self):
        return self.state

    def save(self, state):
        self.saves.append(state)
        self.state = state


class StubQuery:
    """Records a Supabase query-builder chain; `execute` replays the next queued response."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.ops = []

    def __getattr__(self, name):
        def op(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self
        return op

    def execute(self):
        self.client.queries.append((self.table, self.ops))
        response = self.client.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class StubClient:
    """Supabase client stand-in; queue responses (or exceptions to raise) in call order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.queries = []

    def table(self, name):
        return StubQuery(self, name)


def supabase_response(data=None):
    return SimpleNamespace(data=data, count=None)


FIXED_NOW = datetime(2025, 3, 10, 15, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_channel():
    return FakeChannel()


@pytest.fixture
def memory_state():
    return MemoryStateRepository()
