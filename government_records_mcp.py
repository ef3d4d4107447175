#!/usr/bin/env python3
"""
Government Records MCP Server

An MCP server for researching a township's public meetings: its boards and
commissions, meeting calendars, agendas, minutes and recordings, scraped
from the municipality's meeting portal.

Features:
- Record tools (boards, meetings, meeting details, documents, transcripts)
- Deep research: plan, research and synthesize a cited answer
- Meeting Q&A through Claude, with answer caching
- Rate limiting and performance metrics
"""

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP

from adapters import available_municipalities
from core.assistant import ask_about_meetings as answer_question
from core.metrics import format_metrics_report
from core.pipeline import deep_research as run_deep_research
from core.planner import create_research_plan
from core.synthesizer import format_with_citations
from core.tools import RecordsToolSurface
from models import (
    AskInput,
    ListBoardsInput,
    MeetingInput,
    ResearchInput,
    SearchDocumentsInput,
    SearchMeetingsInput,
    TopicSearchInput,
)
from models.records import RecordModel
from utils import check_rate_limit, get_anthropic_api_key, get_config
from utils import clear_cache as clear_answer_cache

logger = logging.getLogger("government_records_mcp")

# Shared adapter sessions for every tool call
tool_surface = RecordsToolSurface()


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Close adapter sessions when the server stops."""
    try:
        yield
    finally:
        logger.info("Shutting down adapters")
        await tool_surface.shutdown()


mcp = FastMCP("government_records_mcp", lifespan=app_lifespan)


# ══════════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════════


def _jsonable(value: Any) -> Any:
    if isinstance(value, RecordModel):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _to_json(value: Any) -> str:
    return json.dumps(_jsonable(value), indent=2)


def _rate_limited(tool_name: str) -> Optional[str]:
    """Error text when the tool is over its rate limit, else None."""
    if check_rate_limit(tool_name):
        return None
    settings = get_config()["rate_limit"]
    return (
        f"Error: Rate limit exceeded for {tool_name}. Maximum {settings['max_calls']} "
        f"requests per {settings['window_seconds']} seconds. Please wait and try again."
    )


def _error(tool_name: str, e: Exception) -> str:
    logger.error(f"{tool_name} failed: {e}")
    return f"Error: {e}"


# ══════════════════════════════════════════════════════════════════════════════
# Record Tools
# ══════════════════════════════════════════════════════════════════════════════


@mcp.tool(
    name="list_boards",
    annotations={
        "title": "List Government Boards",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def list_boards(params: ListBoardsInput) -> str:
    """
    List all government boards, committees and commissions for a municipality.

    Args:
        params: ListBoardsInput with municipality and optional jurisdiction
            ('municipal', 'boe', 'county' or 'state')

    Returns:
        str: JSON array of boards with id, name and jurisdiction
    """
    limited = _rate_limited("list_boards")
    if limited:
        return limited
    try:
        boards = await tool_surface.list_boards(params.municipality, params.jurisdiction)
        return _to_json(boards)
    except Exception as e:
        return _error("list_boards", e)


@mcp.tool(
    name="search_meetings",
    annotations={
        "title": "Search Meetings",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def search_meetings(params: SearchMeetingsInput) -> str:
    """
    Search for meetings by board or keyword.

    A query takes precedence over boardId. With neither, returns the most
    recent meetings of the first few boards.

    Args:
        params: SearchMeetingsInput with municipality, optional boardId,
            query and limit

    Returns:
        str: JSON array of meetings with id, date, title, boardId, boardName
    """
    limited = _rate_limited("search_meetings")
    if limited:
        return limited
    try:
        meetings = await tool_surface.search_meetings(
            params.municipality,
            board_id=params.board_id,
            query=params.query,
            limit=params.limit,
        )
        return _to_json(meetings)
    except Exception as e:
        return _error("search_meetings", e)


@mcp.tool(
    name="get_meeting",
    annotations={
        "title": "Get Meeting Details",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_meeting(params: MeetingInput) -> str:
    """
    Get full details for a meeting: agenda, minutes and video links.

    Unknown meeting ids return a record titled "Meeting not found".

    Args:
        params: MeetingInput with municipality and meetingId

    Returns:
        str: JSON meeting details with documents, videoUrl, transcriptUrl
    """
    limited = _rate_limited("get_meeting")
    if limited:
        return limited
    try:
        details = await tool_surface.get_meeting(params.municipality, params.meeting_id)
        return _to_json(details)
    except Exception as e:
        return _error("get_meeting", e)


@mcp.tool(
    name="search_documents",
    annotations={
        "title": "Search Meeting Documents",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def search_documents(params: SearchDocumentsInput) -> str:
    """
    Search agendas, minutes and recordings by keyword.

    Args:
        params: SearchDocumentsInput with municipality and query

    Returns:
        str: JSON array of documents with type, url and title
    """
    limited = _rate_limited("search_documents")
    if limited:
        return limited
    try:
        documents = await tool_surface.search_documents(params.municipality, params.query)
        return _to_json(documents)
    except Exception as e:
        return _error("search_documents", e)


@mcp.tool(
    name="get_transcript",
    annotations={
        "title": "Get Meeting Transcript",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_transcript(params: MeetingInput) -> str:
    """
    Get the transcript of a meeting recording, when one is available.

    Args:
        params: MeetingInput with municipality and meetingId

    Returns:
        str: JSON object {"meetingId": ..., "transcript": text or null}
    """
    limited = _rate_limited("get_transcript")
    if limited:
        return limited
    try:
        transcript = await tool_surface.get_transcript(params.municipality, params.meeting_id)
        return _to_json({"meetingId": params.meeting_id, "transcript": transcript})
    except Exception as e:
        return _error("get_transcript", e)


@mcp.tool(
    name="search_by_topic",
    annotations={
        "title": "Search Meetings and Documents by Topic",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def search_by_topic(params: TopicSearchInput) -> str:
    """
    Search meetings and documents mentioning a topic (e.g., "budget", "zoning").

    Args:
        params: TopicSearchInput with municipality and topic

    Returns:
        str: JSON object {"topic", "meetings": [...], "documents": [...]}
    """
    limited = _rate_limited("search_by_topic")
    if limited:
        return limited
    try:
        results = await tool_surface.search_by_topic(params.municipality, params.topic)
        return _to_json({"topic": params.topic, **results})
    except Exception as e:
        return _error("search_by_topic", e)


# ══════════════════════════════════════════════════════════════════════════════
# Research Tools
# ══════════════════════════════════════════════════════════════════════════════


@mcp.tool(
    name="plan_research",
    annotations={
        "title": "Plan Research",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def plan_research(query: str) -> str:
    """
    Break a research question into ordered sub-questions.

    WORKFLOW: call plan_research to preview how deep_research will approach
    a question, then call deep_research to run it.

    Args:
        query (str): Research question (e.g., "What happened with the Main St
            development?")

    Returns:
        str: JSON plan with originalQuery, subQuestions and estimatedSources
    """
    limited = _rate_limited("plan_research")
    if limited:
        return limited
    try:
        if not query or not query.strip():
            raise ValueError("Query must not be empty")
        return _to_json(create_research_plan(query))
    except Exception as e:
        return _error("plan_research", e)


@mcp.tool(
    name="deep_research",
    annotations={
        "title": "Deep Research",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def deep_research(params: ResearchInput) -> str:
    """
    Research a question across meetings and documents and return a cited answer.

    Plans sub-questions, answers each from the municipality's records, runs
    one follow-up round for gaps, and synthesizes the findings.

    HOW TO INTERPRET RESULTS:
    - markdown: the answer with [n] citations and a numbered source list
    - answer.sources: source n is answer.sources[n - 1]
    - answer.contradictions: findings that disagree about one topic
    - answer.gaps: sub-questions nothing was found for
    - answer.confidence: 0-1, lower when sub-questions went unanswered

    Args:
        params: ResearchInput with municipality, query and refine

    Returns:
        str: JSON object {"answer": SynthesizedAnswer, "markdown": str}
    """
    limited = _rate_limited("deep_research")
    if limited:
        return limited
    try:
        answer = await run_deep_research(
            params.query, params.municipality, tool_surface, refine=params.refine
        )
        markdown = format_with_citations(answer.answer, answer.sources)
        return _to_json({"answer": answer, "markdown": markdown})
    except Exception as e:
        return _error("deep_research", e)


@mcp.tool(
    name="ask_about_meetings",
    annotations={
        "title": "Ask About Meetings",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def ask_about_meetings(params: AskInput) -> str:
    """
    Answer a question about boards and recent meetings using Claude.

    Requires ANTHROPIC_API_KEY. Answers are cached per question.

    Args:
        params: AskInput with municipality and question

    Returns:
        str: JSON object {"answer": markdown, "cached": bool}
    """
    limited = _rate_limited("ask_about_meetings")
    if limited:
        return limited
    try:
        result = await answer_question(params.question, params.municipality, tool_surface)
        return _to_json(result)
    except Exception as e:
        return _error("ask_about_meetings", e)


# ══════════════════════════════════════════════════════════════════════════════
# Server Tools
# ══════════════════════════════════════════════════════════════════════════════


@mcp.tool(
    name="get_performance_metrics",
    annotations={
        "title": "Get System Performance Metrics",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def get_performance_metrics() -> str:
    """
    Get performance metrics for the MCP server.

    Returns:
        str: Markdown report of tool calls, latency, errors, research runs
            and answer cache hit rate
    """
    return format_metrics_report()


@mcp.tool(
    name="clear_cache",
    annotations={
        "title": "Clear Answer Cache",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
async def clear_cache() -> str:
    """
    Clear cached meeting answers so the next questions are answered fresh.

    Returns:
        str: Status message indicating whether cache was cleared
    """
    if clear_answer_cache():
        return "Cache cleared successfully."
    return "Error: Cache could not be cleared."


def configure_logging() -> None:
    """Log to stderr; stdout carries the MCP protocol."""
    level = str(get_config()["logging"]["level"]).upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def validate_environment() -> None:
    """Log configuration on startup."""
    config = get_config()
    logger.info(f"Municipalities: {', '.join(available_municipalities())}")
    logger.info(f"Teaneck adapter mode: {config['adapters']['teaneck_mode']}")
    if not get_anthropic_api_key():
        logger.warning("ANTHROPIC_API_KEY not set; ask_about_meetings will fail")
    if not config["cache"]["enabled"]:
        logger.info("Answer cache disabled")


def main() -> None:
    configure_logging()
    validate_environment()
    mcp.run()


if __name__ == "__main__":
    main()
