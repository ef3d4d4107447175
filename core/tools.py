"""
Tool surface over municipality adapters.

``RecordsToolSurface`` is what the researcher, the assistant and the MCP
server call. It resolves a municipality key to a live adapter (created and
initialized on first use, then reused), applies the tool-level defaults and
records per-tool metrics. Adapter errors propagate unchanged.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from adapters import ADAPTERS, AdapterFactory
from adapters.base import MunicipalityAdapter
from core.errors import ConfigurationError
from core.metrics import get_tool_metrics
from models.config import Jurisdiction
from models.records import Board, Meeting, MeetingDetails, MeetingDocument

__all__ = [
    "DEFAULT_VIEW_BOARDS",
    "DEFAULT_VIEW_MEETINGS_PER_BOARD",
    "DEFAULT_VIEW_LIMIT",
    "RecordsToolSurface",
]

logger = logging.getLogger(__name__)

# No-filter meeting search: first boards, a few meetings each.
DEFAULT_VIEW_BOARDS = 3
DEFAULT_VIEW_MEETINGS_PER_BOARD = 5
DEFAULT_VIEW_LIMIT = 10


class RecordsToolSurface:
    """
    Named operations over the adapter registry.

    Example:
        >>> tools = RecordsToolSurface()
        >>> boards = await tools.list_boards("teaneck")
        >>> await tools.shutdown()
    """

    def __init__(self, registry: Optional[Mapping[str, AdapterFactory]] = None):
        self.registry = ADAPTERS if registry is None else registry
        self._adapters: Dict[str, MunicipalityAdapter] = {}
        self._lock = asyncio.Lock()

    # ══════════════════════════════════════════════════════════════════════════
    # Adapter lifecycle
    # ══════════════════════════════════════════════════════════════════════════

    async def get_adapter(self, municipality: str) -> MunicipalityAdapter:
        """Return the initialized adapter for a municipality, creating it once."""
        key = (municipality or "").strip().lower()
        factory = self.registry.get(key)
        if factory is None:
            raise ConfigurationError.unknown_municipality(municipality, self.registry.keys())

        adapter = self._adapters.get(key)
        if adapter is not None:
            return adapter

        async with self._lock:
            adapter = self._adapters.get(key)
            if adapter is None:
                adapter = factory()
                logger.info(f"Initializing adapter for {key}: {type(adapter).__name__}")
                await adapter.init()
                self._adapters[key] = adapter
        return adapter

    async def shutdown(self) -> None:
        """Close every cached adapter and forget them."""
        async with self._lock:
            adapters = list(self._adapters.items())
            self._adapters.clear()
        for key, adapter in adapters:
            try:
                await adapter.close()
            except Exception as e:
                logger.warning(f"Error closing adapter for {key}: {e}")

    async def _run(self, tool: str, operation: Callable[[], Awaitable[Any]]) -> Any:
        start = time.time()
        metrics = get_tool_metrics()
        try:
            result = await operation()
        except Exception as e:
            metrics.record_failure(tool, type(e).__name__)
            raise
        metrics.record_success(tool, (time.time() - start) * 1000)
        return result

    # ══════════════════════════════════════════════════════════════════════════
    # Operations
    # ══════════════════════════════════════════════════════════════════════════

    async def list_boards(
        self, municipality: str, jurisdiction: Optional[str] = None
    ) -> list[Board]:
        async def operation() -> list[Board]:
            adapter = await self.get_adapter(municipality)
            boards = await adapter.list_boards()
            if jurisdiction:
                wanted = Jurisdiction(jurisdiction).value
                boards = [b for b in boards if b.jurisdiction == wanted]
            return boards

        return await self._run("list_boards", operation)

    async def search_meetings(
        self,
        municipality: str,
        board_id: Optional[str] = None,
        query: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Meeting]:
        """
        Find meetings by query, by board, or the default recent view.

        A query takes precedence over a board id. With neither, the first
        DEFAULT_VIEW_BOARDS boards contribute DEFAULT_VIEW_MEETINGS_PER_BOARD
        meetings each, in board order, truncated to ``limit``
        (DEFAULT_VIEW_LIMIT when not given).
        """

        async def operation() -> list[Meeting]:
            adapter = await self.get_adapter(municipality)

            if query:
                meetings = await adapter.search_meetings(query)
                return meetings[:limit] if limit is not None else meetings

            if board_id:
                if limit is not None:
                    return await adapter.list_meetings(board_id, limit=limit)
                return await adapter.list_meetings(board_id)

            boards = (await adapter.list_boards())[:DEFAULT_VIEW_BOARDS]
            per_board = await asyncio.gather(
                *(
                    adapter.list_meetings(b.id, limit=DEFAULT_VIEW_MEETINGS_PER_BOARD)
                    for b in boards
                )
            )
            meetings = [m for batch in per_board for m in batch]
            return meetings[: DEFAULT_VIEW_LIMIT if limit is None else limit]

        return await self._run("search_meetings", operation)

    async def get_meeting(self, municipality: str, meeting_id: str) -> MeetingDetails:
        async def operation() -> MeetingDetails:
            adapter = await self.get_adapter(municipality)
            return await adapter.get_meeting_details(meeting_id)

        return await self._run("get_meeting", operation)

    async def search_documents(
        self, municipality: str, query: str
    ) -> list[MeetingDocument]:
        async def operation() -> list[MeetingDocument]:
            adapter = await self.get_adapter(municipality)
            return await adapter.search_documents(query)

        return await self._run("search_documents", operation)

    async def get_transcript(self, municipality: str, meeting_id: str) -> Optional[str]:
        async def operation() -> Optional[str]:
            adapter = await self.get_adapter(municipality)
            return await adapter.get_transcript(meeting_id)

        return await self._run("get_transcript", operation)

    async def search_by_topic(self, municipality: str, topic: str) -> dict[str, list]:
        """Meetings and documents for a topic, fetched concurrently."""

        async def operation() -> dict[str, list]:
            adapter = await self.get_adapter(municipality)
            meetings, documents = await asyncio.gather(
                adapter.search_meetings(topic),
                adapter.search_documents(topic),
            )
            return {"meetings": meetings, "documents": documents}

        return await self._run("search_by_topic", operation)
