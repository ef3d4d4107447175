"""
Municipality adapter interface.

Each municipality implements this interface to provide access to its
meeting portal, whatever technology backs it (IQM2, Granicus, Legistar).
Adapters are the only producers of Board, Meeting and MeetingDetails.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from models.config import Jurisdiction
from models.records import Board, Meeting, MeetingDetails, MeetingDocument

__all__ = ["MunicipalityAdapter", "DEFAULT_MEETING_LIMIT", "SEARCH_MEETINGS_PER_BOARD"]

logger = logging.getLogger(__name__)

DEFAULT_MEETING_LIMIT = 50
SEARCH_MEETINGS_PER_BOARD = 20


class MunicipalityAdapter(ABC):
    """
    Uniform access to one municipality's meetings, boards and documents.

    Lifecycle: ``init()`` before any other call, ``close()`` when done.
    Both are also driven by ``async with adapter:``.
    """

    name: str = ""
    jurisdiction: str = Jurisdiction.MUNICIPAL.value

    async def __aenter__(self) -> "MunicipalityAdapter":
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # Lifecycle

    @abstractmethod
    async def init(self) -> None:
        """Acquire the session resource needed to reach the portal."""

    @abstractmethod
    async def close(self) -> None:
        """Release the session resource. Idempotent."""

    # Data access

    @abstractmethod
    async def list_boards(self) -> list[Board]:
        """All boards found on the portal."""

    @abstractmethod
    async def list_meetings(
        self, board_id: str, limit: Optional[int] = DEFAULT_MEETING_LIMIT
    ) -> list[Meeting]:
        """Meetings of one board, in portal order, at most ``limit``."""

    @abstractmethod
    async def get_meeting_details(self, meeting_id: str) -> MeetingDetails:
        """Details of one meeting; a placeholder record for unknown ids."""

    async def get_transcript(self, meeting_id: str) -> Optional[str]:
        """Video transcript for a meeting. No portal provides one yet."""
        return None

    # Search

    async def search_meetings(self, query: str) -> list[Meeting]:
        """
        Find meetings whose title or board name contains ``query``.

        Brute force: the portals have no search endpoint, so this lists up to
        20 meetings of every board. Results are board-major in board order.
        """
        needle = query.lower().strip()
        matches: list[Meeting] = []

        for board in await self.list_boards():
            meetings = await self.list_meetings(
                board.id, limit=SEARCH_MEETINGS_PER_BOARD
            )
            for meeting in meetings:
                board_name = (meeting.board_name or board.name).lower()
                if needle in meeting.title.lower() or needle in board_name:
                    if meeting.board_name is None:
                        meeting = meeting.model_copy(update={"board_name": board.name})
                    matches.append(meeting)

        logger.debug(f"{self.name}: search_meetings({query!r}) -> {len(matches)}")
        return matches

    async def search_documents(self, query: str) -> list[MeetingDocument]:
        """Document search. Documents are not indexed yet."""
        return []
