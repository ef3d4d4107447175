"""Tests for adapters/iqm2.py: HTML extraction and the httpx-backed adapter."""

import httpx
import pytest

from adapters.iqm2 import (
    IQM2Adapter,
    extract_boards,
    extract_meeting_details,
    extract_meetings,
)
from core.errors import AdapterConnectionError, FetchError

BASE_URL = "https://examplenj.iqm2.com/Citizens"

BOARD_HTML = """
<html><body>
<ul>
  <li><a href="/Citizens/Board/1025-Township-Council">Township Council</a></li>
  <li><a href="/Citizens/Board/1030-Planning-Board?Type=1">Planning Board</a></li>
  <li><a href="/Citizens/Board/1025-Township-Council">Township Council</a></li>
  <li><a href="/Citizens/Board/1040-Board-of-Education">Board of Education</a></li>
</ul>
</body></html>
"""

# Single-quoted hrefs defeat the regex pass
BOARD_HTML_SINGLE_QUOTES = """
<html><body>
  <a href='/Citizens/Board/1025-TC'>Township Council</a>
  <a href='/Citizens/Board/1026-XX'>TC</a>
  <a href='/Citizens/Board/1025-TC'>Township Council</a>
  <a href='/Citizens/Board/1031-Zoning'>Zoning Board of Adjustment</a>
</body></html>
"""

CALENDAR_HTML = """
<html><body>
<table>
  <tr><td><a href="Detail_Meeting.aspx?ID=2001">12/10/2024 Regular Meeting</a></td></tr>
  <tr><td><a href="Detail_Meeting.aspx?ID=2001">12/10/2024 Regular Meeting</a></td></tr>
  <tr><td><a href="/Citizens/Meeting/2002">11/26/2024 Work Session</a></td></tr>
  <tr><td><a href="Calendar.aspx?Meeting=2003">11/12/2024 Special Meeting</a></td></tr>
  <tr><td><a href="/Citizens/Board/1025-Township-Council">Township Council</a></td></tr>
</table>
</body></html>
"""

DETAIL_HTML = """
<html>
<head><title>Regular Meeting - Township Council - Teaneck</title></head>
<body>
  <div>Board: Township Council</div>
  <div>12/10/2024 7:00 PM</div>
  <a href="FileOpen.aspx?Type=14&amp;ID=2847">Agenda</a>
  <a href="FileOpen.aspx?Type=12&amp;ID=2848">Minutes</a>
  <a href="https://www.youtube.com/watch?v=abc">Video</a>
</body>
</html>
"""

EMPTY_DETAIL_HTML = "<html><head><title>Error</title></head><body><p>No such page</p></body></html>"


def portal_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path.endswith("/default.aspx"):
        return httpx.Response(200, text="<html>IQM2</html>")
    if path.endswith("/Board"):
        return httpx.Response(200, text=BOARD_HTML)
    if path.endswith("/Calendar.aspx"):
        board = request.url.params.get("Board")
        if board == "1025":
            return httpx.Response(200, text=CALENDAR_HTML)
        if board == "9999":
            return httpx.Response(500, text="Server Error")
        return httpx.Response(200, text="<html><body></body></html>")
    if path.endswith("/Detail_Meeting.aspx"):
        meeting_id = request.url.params.get("ID")
        if meeting_id == "2001":
            return httpx.Response(200, text=DETAIL_HTML)
        if meeting_id == "2002":
            return httpx.Response(200, text=EMPTY_DETAIL_HTML)
        return httpx.Response(404, text="Not Found")
    return httpx.Response(404)


def make_adapter(handler=portal_handler, **kwargs) -> IQM2Adapter:
    return IQM2Adapter(
        BASE_URL, name="Example Township", transport=httpx.MockTransport(handler), **kwargs
    )


class TestExtractBoards:
    """Test suite for extract_boards."""

    def test_regex_pass_names_from_slugs(self):
        boards = extract_boards(BOARD_HTML)
        assert [b.id for b in boards] == ["1025", "1030", "1040"]
        assert [b.name for b in boards] == [
            "Township Council",
            "Planning Board",
            "Board of Education",
        ]

    def test_education_boards_are_boe(self):
        boards = {b.id: b for b in extract_boards(BOARD_HTML)}
        assert boards["1040"].jurisdiction == "boe"
        assert boards["1025"].jurisdiction == "municipal"

    def test_dom_fallback_uses_link_text(self):
        boards = extract_boards(BOARD_HTML_SINGLE_QUOTES)
        assert [(b.id, b.name) for b in boards] == [
            ("1025", "Township Council"),
            ("1031", "Zoning Board of Adjustment"),
        ]

    def test_no_duplicate_ids(self):
        for html in (BOARD_HTML, BOARD_HTML_SINGLE_QUOTES):
            ids = [b.id for b in extract_boards(html)]
            assert len(ids) == len(set(ids))

    def test_empty_page(self):
        assert extract_boards("<html></html>") == []


class TestExtractMeetings:
    """Test suite for extract_meetings."""

    def test_ids_from_every_link_form(self):
        meetings = extract_meetings(CALENDAR_HTML, "1025")
        assert [m.id for m in meetings] == ["2001", "2002", "2003"]

    def test_dates_titles_and_board(self):
        first = extract_meetings(CALENDAR_HTML, "1025")[0]
        assert first.date == "12/10/2024"
        assert first.title == "12/10/2024 Regular Meeting"
        assert first.board_id == "1025"

    def test_limit(self):
        meetings = extract_meetings(CALENDAR_HTML, "1025", limit=2)
        assert [m.id for m in meetings] == ["2001", "2002"]

    def test_zero_limit(self):
        assert extract_meetings(CALENDAR_HTML, "1025", limit=0) == []

    def test_no_limit(self):
        assert len(extract_meetings(CALENDAR_HTML, "1025", limit=None)) >= 2


class TestExtractMeetingDetails:
    """Test suite for extract_meeting_details."""

    def test_documents_in_discovery_order(self):
        details = extract_meeting_details(DETAIL_HTML, "2001", BASE_URL)
        assert [d.type for d in details.documents] == ["agenda", "minutes", "video"]
        assert details.documents[0].url == f"{BASE_URL}/FileOpen.aspx?Type=14&ID=2847"

    def test_metadata(self):
        details = extract_meeting_details(DETAIL_HTML, "2001", BASE_URL)
        assert details.id == "2001"
        assert details.title == "Regular Meeting"
        assert details.date == "12/10/2024"
        assert details.board_id == "Township Council"
        assert details.video_url == "https://www.youtube.com/watch?v=abc"

    def test_page_without_meeting_is_placeholder(self):
        details = extract_meeting_details(EMPTY_DETAIL_HTML, "2002", BASE_URL)
        assert details.title == "Meeting not found"
        assert details.documents == []


class TestIQM2Adapter:
    """Test suite for IQM2Adapter over a mocked portal."""

    async def test_requires_init(self):
        adapter = make_adapter()
        with pytest.raises(AdapterConnectionError, match="not initialized"):
            await adapter.list_boards()

    async def test_unreachable_home_page_raises_connection_error(self):
        def handler(request):
            return httpx.Response(503)

        adapter = make_adapter(handler)
        with pytest.raises(AdapterConnectionError) as exc_info:
            await adapter.init()
        assert isinstance(exc_info.value, ConnectionError)
        assert adapter._client is None

    async def test_unreachable_portal(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AdapterConnectionError):
            await make_adapter(handler).init()

    async def test_connection_check_can_be_skipped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        adapter = make_adapter(handler, check_connection=False)
        await adapter.init()
        assert await adapter.can_connect() is False
        await adapter.close()

    async def test_list_boards(self):
        async with make_adapter() as adapter:
            boards = await adapter.list_boards()
        assert [b.id for b in boards] == ["1025", "1030", "1040"]

    async def test_context_manager_closes_client(self):
        async with make_adapter() as adapter:
            assert await adapter.can_connect() is True
        assert adapter._client is None
        await adapter.close()  # idempotent

    async def test_list_meetings_respects_limit_and_board(self):
        async with make_adapter() as adapter:
            meetings = await adapter.list_meetings("1025", limit=2)
        assert len(meetings) == 2
        assert all(m.board_id == "1025" for m in meetings)

    async def test_meeting_details(self):
        async with make_adapter() as adapter:
            details = await adapter.get_meeting_details("2001")
        assert details.title == "Regular Meeting"
        assert len(details.documents) == 3

    async def test_unknown_meeting_is_placeholder(self):
        async with make_adapter() as adapter:
            details = await adapter.get_meeting_details("does-not-exist")
        assert details.id == "does-not-exist"
        assert details.title == "Meeting not found"
        assert details.date == ""
        assert details.board_id == ""

    async def test_server_error_raises_fetch_error(self):
        async with make_adapter() as adapter:
            with pytest.raises(FetchError) as exc_info:
                await adapter.list_meetings("9999")
        assert exc_info.value.status_code == 500
        assert "Calendar.aspx" in exc_info.value.url

    async def test_timeout_raises_fetch_error(self):
        def handler(request):
            if request.url.path.endswith("/Board"):
                raise httpx.ReadTimeout("too slow", request=request)
            return portal_handler(request)

        async with make_adapter(handler) as adapter:
            with pytest.raises(FetchError, match="timed out"):
                await adapter.list_boards()

    async def test_search_meetings_brute_force(self):
        async with make_adapter() as adapter:
            meetings = await adapter.search_meetings("work session")
        assert [m.id for m in meetings] == ["2002"]
        assert meetings[0].board_name == "Township Council"

    async def test_no_transcripts_or_document_index(self):
        async with make_adapter() as adapter:
            assert await adapter.get_transcript("2001") is None
            assert await adapter.search_documents("budget") == []
