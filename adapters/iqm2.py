"""
IQM2 Meeting Portal Adapter.

Scrapes IQM2 "Citizens" portals (https://<tenant>.iqm2.com/Citizens) for
boards, meeting calendars and meeting detail pages. The portal has no API
and no search endpoint, so everything comes from HTML.

Pages:
    /Board                          Board listing
    /Calendar.aspx?Board=<id>       Meetings of one board
    /Detail_Meeting.aspx?ID=<id>    Agenda, minutes and video links

Extraction is done by pure functions over HTML (``extract_boards``,
``extract_meetings``, ``extract_meeting_details``) so tests can feed fixed
fixtures without a network.
"""

import logging
import re
import urllib.parse
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from adapters.base import DEFAULT_MEETING_LIMIT, MunicipalityAdapter
from core.errors import AdapterConnectionError, FetchError
from models.config import DocumentType, Jurisdiction
from models.records import Board, Meeting, MeetingDetails, MeetingDocument
from utils.config import get_config

__all__ = [
    "IQM2Adapter",
    "extract_boards",
    "extract_meetings",
    "extract_meeting_details",
]

logger = logging.getLogger(__name__)

# ══════════════════════════════════════════════════════════════════════════════
# Configuration
# ══════════════════════════════════════════════════════════════════════════════

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)

# /Citizens/Board/1025-Board-of-Adjustment"  ->  ("1025", "Board-of-Adjustment")
BOARD_PATH_PATTERN = re.compile(r'/Citizens/Board/(\d+)-([^"]+)"', re.IGNORECASE)
BOARD_HREF_PATTERN = re.compile(r"/Citizens/Board/(\d+)-")
MEETING_ID_PATTERN = re.compile(r"[Mm]eeting[=/](\d+)")
DETAIL_ID_PATTERN = re.compile(r"Detail_Meeting\.aspx\?(?:[^#]*&)?ID=(\d+)", re.IGNORECASE)
DATE_PATTERN = re.compile(r"(\d{1,2}/\d{1,2}/\d{2,4})")
BOARD_LABEL_PATTERN = re.compile(r"Board:\s*([^\n\r<|]+)")
TITLE_SEPARATOR = re.compile(r"\s+[-|–]\s+")

BOE_NAME_HINTS = ("education", "school")

# ══════════════════════════════════════════════════════════════════════════════
# Extraction
# ══════════════════════════════════════════════════════════════════════════════


def _board_jurisdiction(name: str, default: str) -> str:
    lowered = name.lower()
    if any(hint in lowered for hint in BOE_NAME_HINTS):
        return Jurisdiction.BOE.value
    return default


def extract_boards(
    html: str, default_jurisdiction: str = Jurisdiction.MUNICIPAL.value
) -> list[Board]:
    """
    Extract boards from the portal's board listing page.

    The primary pass reads (id, slug) pairs out of board hrefs with a regex
    and turns the slug into a name ("Board-of-Adjustment" -> "Board of
    Adjustment"). When that finds nothing, a DOM pass over the same links
    uses their text as the name. Both passes de-duplicate by id and keep
    first-seen order.
    """
    boards: list[Board] = []
    seen: set[str] = set()

    for match in BOARD_PATH_PATTERN.finditer(html):
        board_id, slug = match.group(1), match.group(2)
        name = slug.split("?")[0].replace("-", " ").strip()
        if name and board_id not in seen:
            seen.add(board_id)
            boards.append(
                Board(
                    id=board_id,
                    name=name,
                    jurisdiction=_board_jurisdiction(name, default_jurisdiction),
                )
            )

    if boards:
        return boards

    # Fallback: walk the DOM links
    soup = BeautifulSoup(html, "html.parser")
    for link in soup.select('a[href*="/Citizens/Board/"]'):
        match = BOARD_HREF_PATTERN.search(link.get("href", ""))
        name = link.get_text(strip=True)
        if not match or len(name) <= 2:
            continue
        board_id = match.group(1)
        if board_id not in seen:
            seen.add(board_id)
            boards.append(
                Board(
                    id=board_id,
                    name=name,
                    jurisdiction=_board_jurisdiction(name, default_jurisdiction),
                )
            )

    return boards


def _meeting_id(href: str) -> Optional[str]:
    match = MEETING_ID_PATTERN.search(href) or DETAIL_ID_PATTERN.search(href)
    return match.group(1) if match else None


def extract_meetings(
    html: str, board_id: str, limit: Optional[int] = DEFAULT_MEETING_LIMIT
) -> list[Meeting]:
    """
    Extract meetings from a board's calendar page.

    Every link pointing at a meeting detail page becomes a Meeting: the id
    comes from the URL, the date from the first m/d/y in the link text.
    De-duplicated by id, in document order, at most ``limit``.
    """
    soup = BeautifulSoup(html, "html.parser")
    meetings: list[Meeting] = []
    seen: set[str] = set()

    for link in soup.select('a[href*="Detail"], a[href*="Meeting"]'):
        href = link.get("href", "")
        text = link.get_text(" ", strip=True)
        meeting_id = _meeting_id(href)
        if not meeting_id or not text or meeting_id in seen:
            continue
        if limit is not None and len(meetings) >= limit:
            break

        date_match = DATE_PATTERN.search(text)
        seen.add(meeting_id)
        meetings.append(
            Meeting(
                id=meeting_id,
                date=date_match.group(1) if date_match else "",
                title=text,
                board_id=board_id,
            )
        )

    return meetings


def _scan_links(
    soup: BeautifulSoup, word: str, doc_type: DocumentType, base_url: str
) -> list[MeetingDocument]:
    """Links whose href or text mentions ``word``."""
    documents = []
    for link in soup.find_all("a", href=True):
        href = link["href"]
        text = link.get_text(" ", strip=True)
        if word in href or word.lower() in text.lower():
            documents.append(
                MeetingDocument(
                    type=doc_type,
                    url=urllib.parse.urljoin(f"{base_url}/", href),
                    title=text or word,
                )
            )
    return documents


def extract_meeting_details(
    html: str, meeting_id: str, base_url: str
) -> MeetingDetails:
    """
    Extract documents and metadata from a meeting detail page.

    Agenda, minutes and video links are scanned separately, in that order.
    The title is the first segment of the page <title>; date and board come
    from best-effort scans of the page text. A page with neither documents
    nor a date does not describe a meeting and yields the not-found
    placeholder.
    """
    soup = BeautifulSoup(html, "html.parser")

    documents: list[MeetingDocument] = []
    documents.extend(_scan_links(soup, "Agenda", DocumentType.AGENDA, base_url))
    documents.extend(_scan_links(soup, "Minutes", DocumentType.MINUTES, base_url))
    documents.extend(_scan_links(soup, "Video", DocumentType.VIDEO, base_url))

    page_text = soup.get_text("\n")
    date_match = DATE_PATTERN.search(page_text)

    if not documents and not date_match:
        return MeetingDetails.not_found(meeting_id)

    title = ""
    if soup.title and soup.title.string:
        title = TITLE_SEPARATOR.split(soup.title.string.strip())[0].strip()

    board_match = BOARD_LABEL_PATTERN.search(page_text)
    video_url = next(
        (d.url for d in documents if d.type == DocumentType.VIDEO.value), None
    )

    return MeetingDetails(
        id=meeting_id,
        date=date_match.group(1) if date_match else "",
        title=title,
        board_id=board_match.group(1).strip() if board_match else "",
        documents=documents,
        video_url=video_url,
    )


# ══════════════════════════════════════════════════════════════════════════════
# Adapter
# ══════════════════════════════════════════════════════════════════════════════


class IQM2Adapter(MunicipalityAdapter):
    """
    Adapter for any IQM2-hosted portal.

    Holds one ``httpx.AsyncClient`` for its lifetime. The client pools
    connections, so concurrent calls on one adapter are safe.

    Example:
        >>> async with IQM2Adapter("https://examplenj.iqm2.com/Citizens") as portal:
        ...     boards = await portal.list_boards()
    """

    base_url: str = ""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        name: Optional[str] = None,
        jurisdiction: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        check_connection: bool = True,
    ):
        settings = get_config()["adapters"]
        self.base_url = (base_url or self.base_url).rstrip("/")
        if name:
            self.name = name
        if jurisdiction:
            self.jurisdiction = jurisdiction
        self.page_timeout = float(settings["page_timeout_seconds"])
        self.connect_timeout = float(settings["connect_timeout_seconds"])
        self._transport = transport
        self._check_connection = check_connection
        self._client: Optional[httpx.AsyncClient] = None

    # Lifecycle

    async def init(self) -> None:
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            timeout=self.page_timeout,
            transport=self._transport,
        )
        if not self._check_connection:
            return

        url = f"{self.base_url}/default.aspx"
        try:
            response = await self._client.get(url, timeout=self.connect_timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            await self.close()
            raise AdapterConnectionError(
                f"{self.name or 'IQM2 portal'} unreachable at {url}: {e}"
            ) from e

        logger.info(f"{self.name}: connected to {self.base_url}")

    async def close(self) -> None:
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    async def can_connect(self) -> bool:
        """True when the portal home page answers with a 2xx status."""
        client = self._require_client()
        try:
            response = await client.get(
                f"{self.base_url}/default.aspx", timeout=self.connect_timeout
            )
        except httpx.HTTPError:
            return False
        return response.is_success

    # Navigation

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise AdapterConnectionError(
                f"{self.name or 'Adapter'} not initialized. Call init() first."
            )
        return self._client

    async def _fetch(self, url: str, *, allow_not_found: bool = False) -> Optional[str]:
        """GET a portal page; None for a 404 when ``allow_not_found``."""
        client = self._require_client()
        try:
            response = await client.get(url)
            if allow_not_found and response.status_code == 404:
                return None
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchError(url, f"timed out after {self.page_timeout:.0f}s") from e
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            raise FetchError(url, f"HTTP {code}", status_code=code) from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e
        return response.text

    # Data access

    async def list_boards(self) -> list[Board]:
        html = await self._fetch(f"{self.base_url}/Board")
        boards = extract_boards(html or "", self.jurisdiction)
        if not boards:
            logger.warning(f"{self.name}: no boards found on listing page")
        return boards

    async def list_meetings(
        self, board_id: str, limit: Optional[int] = DEFAULT_MEETING_LIMIT
    ) -> list[Meeting]:
        query = urllib.parse.urlencode({"Board": board_id})
        html = await self._fetch(f"{self.base_url}/Calendar.aspx?{query}")
        return extract_meetings(html or "", board_id, limit)

    async def get_meeting_details(self, meeting_id: str) -> MeetingDetails:
        query = urllib.parse.urlencode({"ID": meeting_id})
        html = await self._fetch(
            f"{self.base_url}/Detail_Meeting.aspx?{query}", allow_not_found=True
        )
        if html is None:
            logger.info(f"{self.name}: meeting {meeting_id} not found")
            return MeetingDetails.not_found(meeting_id)
        return extract_meeting_details(html, meeting_id, self.base_url)
