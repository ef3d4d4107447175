"""
Researcher.

Answers each sub-question of a research plan by calling the tool surface,
turning the records found into cited findings.

Tool selection per sub-question:

    board listing          list_boards
    which board handles X  list_boards + search_meetings(X keywords)
    names a known board    that board's meetings
    anything else          search_meetings per keyword (up to 3)
    documents target       search_documents + get_meeting (up to 3 meetings)
    transcripts target     get_transcript (up to 3 meetings)
    news target            no tool

A failing tool call is logged and counted against the finding's
confidence; an unknown municipality aborts the whole run.
"""

import asyncio
import logging
import re
from typing import Any, List, Optional, Sequence

from core.dedup import deduplicate_by_key, deduplicate_sources
from core.errors import ConfigurationError
from core.planner import is_board_listing, responsibility_topic
from core.quality import ConfidenceScorer, ResearchSignals
from core.reliability import resilient_api_call
from core.tools import RecordsToolSurface
from models.config import DocumentType, SourceType, TargetSource
from models.records import Board, Meeting
from models.research import (
    DEFAULT_TARGETS,
    Finding,
    ResearchPlan,
    ResearchResults,
    Source,
)
from utils.config import get_config
from utils.helpers import extract_keywords, normalize_text, tokenize

__all__ = ["execute_research", "execute_sub_question"]

logger = logging.getLogger(__name__)

MEETING_REF_PATTERN = re.compile(r"\(meeting ([^)\s]+)\)")
NAMED_BOARD_MEETINGS = 10
ANSWER_LIST_LIMIT = 5
EXCERPT_LENGTH = 200

# Words too generic to tie a board to a topic.
GENERIC_BOARD_WORDS = {
    "board", "commission", "committee", "council", "township", "of", "the",
    "and", "adjustment", "trustees",
}


class _ResearchSession:
    """Tool calls made for one sub-question, with success accounting."""

    def __init__(self, tools: RecordsToolSurface, municipality: str, question: str):
        self.tools = tools
        self.municipality = municipality
        self.question = question
        self.retries = get_config()["research"]["tool_retries"]
        self.calls = 0
        self.failed_calls = 0

    async def call(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        self.calls += 1
        try:
            return await resilient_api_call(
                getattr(self.tools, operation),
                self.municipality,
                *args,
                max_retries=self.retries,
                **kwargs,
            )
        except ConfigurationError:
            raise
        except Exception as e:
            self.failed_calls += 1
            logger.warning(f"{operation} failed while researching '{self.question}': {e}")
            return None


def _summarize(items: Sequence[str]) -> str:
    shown = ", ".join(items[:ANSWER_LIST_LIMIT])
    extra = len(items) - ANSWER_LIST_LIMIT
    return f"{shown}, and {extra} more" if extra > 0 else shown


def _describe_meeting(meeting: Meeting) -> str:
    label = f"{meeting.board_name} {meeting.title}" if meeting.board_name else meeting.title
    return f"{label} ({meeting.date})" if meeting.date else label


def _named_board(question: str, boards: Sequence[Board]) -> Optional[Board]:
    """Board whose full name appears in the question, longest name first."""
    text = f" {normalize_text(question)} "
    for board in sorted(boards, key=lambda b: len(b.name), reverse=True):
        name = normalize_text(board.name)
        if name and f" {name} " in text:
            return board
    return None


def _is_relevant(sources: Sequence[Source], keywords: Sequence[str]) -> bool:
    wanted = set(keywords)
    return any(tokenize(s.title) & wanted for s in sources)


async def _responsible_boards(
    session: _ResearchSession, topic: str, boards: Sequence[Board], max_keywords: int
) -> List[Board]:
    """Boards whose name or meetings mention the topic, in board order."""
    keywords = extract_keywords(topic, max_keywords)
    topic_words = set(keywords) - GENERIC_BOARD_WORDS
    matched = {b.id for b in boards if tokenize(b.name) & topic_words}

    results = await asyncio.gather(
        *(session.call("search_meetings", query=kw) for kw in keywords)
    )
    for meetings in results:
        for meeting in meetings or []:
            matched.add(meeting.board_id)
            for board in boards:
                if meeting.board_name and board.name == meeting.board_name:
                    matched.add(board.id)
    return [b for b in boards if b.id in matched]


async def execute_sub_question(
    question: str,
    municipality: str,
    tools: RecordsToolSurface,
    target_sources: Optional[Sequence[str]] = None,
) -> Optional[Finding]:
    """
    Research one sub-question.

    Returns a Finding citing the records found, or None when nothing was
    found. Raises ConfigurationError for an unknown municipality.
    """
    settings = get_config()["research"]
    targets = [TargetSource(t).value for t in (target_sources or DEFAULT_TARGETS)]
    session = _ResearchSession(tools, municipality, question)
    keywords = extract_keywords(question, settings["max_keywords"])
    scorer = ConfidenceScorer(settings["confidence_preset"])

    boards = await session.call("list_boards") or []

    # Board directory questions
    if is_board_listing(question) or responsibility_topic(question):
        topic = responsibility_topic(question)
        if topic:
            found = await _responsible_boards(session, topic, boards, settings["max_keywords"])
            answer = f"Boards responsible for {topic}: {_summarize([b.name for b in found])}."
        else:
            found = list(boards)
            answer = f"Found {len(found)} boards: {_summarize([b.name for b in found])}."
        if not found:
            logger.info(f"No boards found for '{question}'")
            return None

        sources = deduplicate_sources(Source.from_board(b) for b in found)
        signals = ResearchSignals(
            targets_attempted=1,
            targets_with_data=1,
            calls=session.calls,
            failed_calls=session.failed_calls,
            relevant=True,
            source_count=len(sources),
        )
        return Finding(
            question=question,
            answer=answer,
            sources=sources,
            confidence=scorer.score(signals),
        )

    # Meetings
    meetings: List[Meeting] = []
    exact = False
    meeting_ref = MEETING_REF_PATTERN.search(question)
    named = _named_board(question, boards)

    if meeting_ref:
        details = await session.call("get_meeting", meeting_ref.group(1))
        if details is not None and details.title != "Meeting not found":
            meetings = [details]
            exact = True
    elif named:
        meetings = await session.call(
            "search_meetings", board_id=named.id, limit=NAMED_BOARD_MEETINGS
        ) or []
        exact = True
    else:
        results = await asyncio.gather(
            *(session.call("search_meetings", query=kw) for kw in keywords)
        )
        meetings = [m for batch in results for m in batch or []]
    meetings = deduplicate_by_key(meetings, key=lambda m: m.id)

    answer_parts: List[str] = []
    meeting_sources: List[Source] = []
    document_sources: List[Source] = []
    transcript_sources: List[Source] = []

    # A meeting lookup asked only for documents cites the documents alone
    if TargetSource.MEETINGS.value in targets or not meeting_ref:
        meeting_sources = [Source.from_meeting(m) for m in meetings]
        if meetings:
            answer_parts.append(
                f"Found {len(meetings)} meetings: "
                f"{_summarize([_describe_meeting(m) for m in meetings])}."
            )

    looked_up = meetings[: settings["max_meetings_per_question"]]

    # Documents
    if TargetSource.DOCUMENTS.value in targets:
        if meeting_ref:
            details_list = meetings[:1]
        else:
            details_list = await asyncio.gather(
                *(session.call("get_meeting", m.id) for m in looked_up)
            )
        for details in details_list:
            for doc in getattr(details, "documents", None) or []:
                kind = "Video" if doc.type == DocumentType.VIDEO else doc.title
                label = f"{details.board_name} {kind}" if details.board_name else kind
                document_sources.append(
                    Source(
                        type=SourceType.DOCUMENT,
                        title=label,
                        url=doc.url,
                        date=details.date or None,
                        excerpt=f"{doc.type} for meeting {details.id}",
                    )
                )

        if not meeting_ref:
            batches = await asyncio.gather(
                *(session.call("search_documents", kw) for kw in keywords)
            )
            document_sources += [
                Source(type=SourceType.DOCUMENT, title=doc.title, url=doc.url)
                for batch in batches
                for doc in batch or []
            ]

        # The same file can come from a meeting page and a document search
        document_sources = deduplicate_by_key(document_sources, key=lambda s: s.url)
        if document_sources:
            answer_parts.append(
                f"Found {len(document_sources)} related documents: "
                f"{_summarize([s.title for s in document_sources])}."
            )

    # Transcripts
    if TargetSource.TRANSCRIPTS.value in targets and looked_up:
        transcripts = await asyncio.gather(
            *(session.call("get_transcript", m.id) for m in looked_up)
        )
        for meeting, text in zip(looked_up, transcripts):
            if text:
                transcript_sources.append(
                    Source(
                        type=SourceType.TRANSCRIPT,
                        title=f"Transcript: {_describe_meeting(meeting)}",
                        date=meeting.date or None,
                        excerpt=text[:EXCERPT_LENGTH],
                    )
                )
        if transcript_sources:
            answer_parts.append(f"{len(transcript_sources)} meeting transcripts.")

    if TargetSource.NEWS.value in targets:
        logger.debug(f"No news source available for '{question}'")

    sources = deduplicate_sources(meeting_sources + document_sources + transcript_sources)
    if not sources:
        logger.info(f"No records found for '{question}'")
        return None

    attempted = [t for t in targets if t != TargetSource.NEWS.value]
    with_data = sum(
        1
        for target, found in (
            (TargetSource.MEETINGS.value, meeting_sources),
            (TargetSource.DOCUMENTS.value, document_sources),
            (TargetSource.TRANSCRIPTS.value, transcript_sources),
        )
        if target in attempted and found
    )
    signals = ResearchSignals(
        targets_attempted=len(attempted),
        targets_with_data=with_data,
        calls=session.calls,
        failed_calls=session.failed_calls,
        relevant=exact or _is_relevant(sources, keywords),
        source_count=len(sources),
    )
    return Finding(
        question=question,
        answer=" ".join(answer_parts),
        sources=sources,
        confidence=scorer.score(signals),
    )


async def execute_research(
    plan: ResearchPlan, municipality: str, tools: RecordsToolSurface
) -> ResearchResults:
    """
    Run every sub-question of a plan in priority order.

    Each sub-question ends up in exactly one of ``findings`` or
    ``unexplored``.
    """
    findings: List[Finding] = []
    unexplored: List[str] = []

    for sq in sorted(plan.sub_questions, key=lambda sq: sq.priority):
        finding = await execute_sub_question(
            sq.question, municipality, tools, sq.target_sources
        )
        if finding is None:
            unexplored.append(sq.question)
        else:
            findings.append(finding)

    logger.info(
        f"Researched {len(plan.sub_questions)} sub-questions: "
        f"{len(findings)} answered, {len(unexplored)} unexplored"
    )
    return ResearchResults(plan=plan, findings=findings, unexplored=unexplored)
