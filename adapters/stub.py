"""Teaneck adapter backed by recorded data instead of the live portal."""

import logging
from typing import Optional

from adapters.base import DEFAULT_MEETING_LIMIT, MunicipalityAdapter
from adapters.stub_data import STUB_BOARDS, STUB_MEETING_DETAILS, STUB_MEETINGS
from adapters.teaneck import IQM2_BASE_URL
from core.errors import AdapterConnectionError
from models.config import Jurisdiction
from models.records import Board, Meeting, MeetingDetails, MeetingDocument

__all__ = ["StubTeaneckAdapter"]

logger = logging.getLogger(__name__)


class StubTeaneckAdapter(MunicipalityAdapter):
    """Serves the recorded Teaneck snapshot. No network access."""

    name = "Teaneck Township"
    jurisdiction = Jurisdiction.MUNICIPAL.value

    def __init__(self):
        self._ready = False

    async def init(self) -> None:
        logger.info(f"{self.name}: using recorded data for {IQM2_BASE_URL}")
        self._ready = True

    async def close(self) -> None:
        self._ready = False

    def _require_ready(self) -> None:
        if not self._ready:
            raise AdapterConnectionError(f"{self.name} not initialized. Call init() first.")

    async def list_boards(self) -> list[Board]:
        self._require_ready()
        return [board.model_copy() for board in STUB_BOARDS]

    async def list_meetings(
        self, board_id: str, limit: Optional[int] = DEFAULT_MEETING_LIMIT
    ) -> list[Meeting]:
        self._require_ready()
        meetings = [m.model_copy() for m in STUB_MEETINGS if m.board_id == board_id]
        return meetings[:limit] if limit is not None else meetings

    async def get_meeting_details(self, meeting_id: str) -> MeetingDetails:
        self._require_ready()
        details = STUB_MEETING_DETAILS.get(meeting_id)
        if details is None:
            return MeetingDetails.not_found(meeting_id)
        return details.model_copy(deep=True)

    async def search_meetings(self, query: str) -> list[Meeting]:
        self._require_ready()
        needle = query.lower().strip()
        return [
            m.model_copy()
            for m in STUB_MEETINGS
            if needle in m.title.lower()
            or needle in (m.board_name or "").lower()
            or needle in m.board_id.lower()
        ]

    async def search_documents(self, query: str) -> list[MeetingDocument]:
        self._require_ready()
        needle = query.lower().strip()
        results: list[MeetingDocument] = []
        for details in STUB_MEETING_DETAILS.values():
            if needle in details.title.lower() or needle in (details.board_name or "").lower():
                results.extend(doc.model_copy() for doc in details.documents)
        return results
