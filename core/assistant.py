"""
Meeting Q&A assistant.

Answers a question in one model call: gathers the board directory and the
most recent meetings of the first few boards, builds a prompt from them and
asks Claude. Answers are cached per municipality and question.
"""

import asyncio
import logging
from typing import Any, Dict, List

from core.llm_clients import call_anthropic
from core.metrics import get_performance_monitor
from core.prompts import build_meeting_qa_prompt
from core.tools import RecordsToolSurface
from models.records import Meeting
from utils.cache import get_cache_key, get_cached_result, set_cached_result
from utils.config import get_anthropic_api_key, get_config
from utils.helpers import normalize_query

__all__ = ["ask_about_meetings", "gather_meeting_context"]

logger = logging.getLogger(__name__)

CONTEXT_BOARDS = 3
CONTEXT_MEETINGS_PER_BOARD = 5


async def _board_meetings(
    tools: RecordsToolSurface, municipality: str, board_id: str
) -> List[Meeting]:
    try:
        return await tools.search_meetings(
            municipality, board_id=board_id, limit=CONTEXT_MEETINGS_PER_BOARD
        )
    except Exception as e:
        logger.warning(f"Error fetching meetings for board {board_id}: {e}")
        return []


async def gather_meeting_context(
    municipality: str, tools: RecordsToolSurface
) -> Dict[str, Any]:
    """Boards plus recent meetings of the first boards, in board order."""
    boards = await tools.list_boards(municipality)
    batches = await asyncio.gather(
        *(
            _board_meetings(tools, municipality, board.id)
            for board in boards[:CONTEXT_BOARDS]
        )
    )
    meetings = [m for batch in batches for m in batch]
    logger.info(f"Fetched {len(boards)} boards and {len(meetings)} meetings")
    return {"boards": boards, "meetings": meetings}


async def ask_about_meetings(
    question: str, municipality: str, tools: RecordsToolSurface
) -> Dict[str, Any]:
    """
    Answer a question about a municipality's meetings.

    Returns:
        {"answer": markdown text, "cached": whether it came from the cache}

    Raises:
        ConfigurationError: Unknown municipality
        UpstreamModelError: Missing API key or the model call failed
    """
    question = normalize_query(question)
    cache_key = get_cache_key(
        "ask_about_meetings", question=question, municipality=municipality.strip().lower()
    )
    monitor = get_performance_monitor()

    if get_config()["cache"]["enabled"]:
        cached = get_cached_result(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for question: '{question}'")
            monitor.record_cache_hit()
            return {"answer": cached, "cached": True}
        monitor.record_cache_miss()

    context = await gather_meeting_context(municipality, tools)
    adapter = await tools.get_adapter(municipality)
    prompt = build_meeting_qa_prompt(
        question,
        context["boards"],
        context["meetings"],
        municipality_name=adapter.name or municipality,
    )

    settings = get_config()["llm"]
    answer = await call_anthropic(
        get_anthropic_api_key(),
        prompt,
        model=settings["model"],
        max_tokens=settings["max_tokens"],
    )

    set_cached_result(cache_key, answer)
    return {"answer": answer, "cached": False}
