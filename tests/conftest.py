"""Shared fixtures: isolated config and cache, stub and in-memory adapters."""

from typing import Dict, List, Optional

import pytest

from adapters.base import DEFAULT_MEETING_LIMIT, MunicipalityAdapter
from adapters.stub import StubTeaneckAdapter
from core.metrics import reset_metrics
from core.tools import RecordsToolSurface
from models.records import Board, Meeting, MeetingDetails, MeetingDocument
from utils import cache
from utils.config import ENV_OVERRIDES, reset_config
from utils.rate_limit import reset_rate_limits


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Fresh config, cache file, rate limits and metrics for every test."""
    for env_key in ENV_OVERRIDES:
        monkeypatch.delenv(env_key, raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setattr(cache, "CACHE_FILE", tmp_path / "cache.json")
    monkeypatch.setattr(cache, "_cache", None)
    reset_config()
    reset_rate_limits()
    reset_metrics()
    yield
    reset_config()


class InMemoryAdapter(MunicipalityAdapter):
    """Adapter over fixed records, counting lifecycle calls."""

    name = "Test Town"

    def __init__(
        self,
        boards: Optional[List[Board]] = None,
        meetings: Optional[List[Meeting]] = None,
        details: Optional[Dict[str, MeetingDetails]] = None,
        documents: Optional[List[MeetingDocument]] = None,
        fail_on: tuple = (),
    ):
        self.boards = boards or []
        self.meetings = meetings or []
        self.details = details or {}
        self.documents = documents or []
        self.fail_on = fail_on
        self.init_calls = 0
        self.close_calls = 0

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RuntimeError(f"{operation} unavailable")

    async def init(self) -> None:
        self.init_calls += 1

    async def close(self) -> None:
        self.close_calls += 1

    async def list_boards(self) -> list[Board]:
        self._maybe_fail("list_boards")
        return list(self.boards)

    async def list_meetings(
        self, board_id: str, limit: Optional[int] = DEFAULT_MEETING_LIMIT
    ) -> list[Meeting]:
        self._maybe_fail("list_meetings")
        meetings = [m for m in self.meetings if m.board_id == board_id]
        return meetings[:limit] if limit is not None else meetings

    async def get_meeting_details(self, meeting_id: str) -> MeetingDetails:
        self._maybe_fail("get_meeting_details")
        return self.details.get(meeting_id) or MeetingDetails.not_found(meeting_id)

    async def search_documents(self, query: str) -> list[MeetingDocument]:
        self._maybe_fail("search_documents")
        return [d for d in self.documents if query.lower() in d.title.lower()]


@pytest.fixture
def in_memory_adapter():
    """Factory for in-memory adapters."""
    return InMemoryAdapter


@pytest.fixture
async def stub_tools():
    """Tool surface over the recorded Teaneck data."""
    tools = RecordsToolSurface({"teaneck": StubTeaneckAdapter})
    yield tools
    await tools.shutdown()


@pytest.fixture
def township_council_tools():
    """Tool surface over a town with a single board and no meetings."""
    adapter = InMemoryAdapter(boards=[Board(id="1", name="Township Council")])
    return RecordsToolSurface({"testtown": lambda: adapter})
