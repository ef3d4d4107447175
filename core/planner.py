"""
Research planner.

Decomposes a natural-language query into ordered sub-questions, each tagged
with the source families it should draw from. Deterministic: no model calls.

Example:
    "What happened with the Main St development?" plans as
        1. Which board is responsible for Main St development?
        2. What happened with the Main St development?
"""

import logging
import re
from typing import Iterable, List, Optional

from models.config import TargetSource
from models.research import DEFAULT_TARGETS, Finding, ResearchPlan, SubQuestion
from utils.helpers import extract_keywords, normalize_query, normalize_text

__all__ = [
    "MAX_FOLLOW_UPS",
    "create_research_plan",
    "refine_plan",
    "is_board_listing",
    "responsibility_topic",
    "split_clauses",
]

logger = logging.getLogger(__name__)

MAX_FOLLOW_UPS = 3

# ══════════════════════════════════════════════════════════════════════════════
# Question Classification
# ══════════════════════════════════════════════════════════════════════════════

# Sentence breaks need a capital after them; abbreviations like "St." are not breaks.
CLAUSE_SPLIT_PATTERN = re.compile(
    r"(?<=\?)\s*|;\s*(?:and also\s+)?|\s+and also\s+|"
    r"(?<=[.!])(?<!\bSt\.)(?<!\bAve\.)(?<!\bRd\.)(?<!\bDr\.)(?<!\bNo\.)"
    r"(?<!\bMr\.)(?<!\bMs\.)(?<!\bMrs\.)\s+(?=(?-i:[A-Z]))",
    re.IGNORECASE,
)

SOURCE_PATTERNS = {
    TargetSource.MEETINGS.value: re.compile(
        r"\b(meet\w*|met|sessions?|hearings?|decid\w*|decisions?|approv\w*|"
        r"vot\w*|discuss\w*|happen\w*|adopt\w*|passed)\b",
        re.IGNORECASE,
    ),
    TargetSource.DOCUMENTS.value: re.compile(
        r"\b(agendas?|minutes|documents?|resolutions?|ordinances?|reports?|"
        r"budgets?|files?|pdfs?)\b",
        re.IGNORECASE,
    ),
    TargetSource.TRANSCRIPTS.value: re.compile(
        r"\b(transcripts?|videos?|recordings?|said|say|says|testimony|"
        r"spoke|speak\w*|comments?)\b",
        re.IGNORECASE,
    ),
    TargetSource.NEWS.value: re.compile(
        r"\b(news|articles?|press|reported|coverage|newspapers?)\b", re.IGNORECASE
    ),
}

DECISION_PATTERN = re.compile(
    r"\b(decid\w*|decisions?|approv\w*|happen\w*|vot\w*|passed|adopt\w*|rul\w*)\b",
    re.IGNORECASE,
)
BODY_PATTERN = re.compile(
    r"\b(boards?|councils?|commissions?|committees?|authority|trustees)\b",
    re.IGNORECASE,
)
TOPIC_PATTERN = re.compile(
    r"\b(?:about|on|with|regarding|concerning|for)\s+(?:the\s+)?(.+?)[\s?.!]*$",
    re.IGNORECASE,
)
LISTING_PATTERN = re.compile(r"\b(what|which|list|show|name)\b", re.IGNORECASE)

# Words that carry no topic when asking about boards.
BOARD_WORDS = {
    "board", "boards", "council", "councils", "commission", "commissions",
    "committee", "committees", "available", "responsible", "handles",
    "handle", "names", "government", "municipal", "local",
}


def split_clauses(query: str) -> List[str]:
    """Split a query on question marks, semicolons, "and also" and sentence breaks."""
    clauses = []
    for part in CLAUSE_SPLIT_PATTERN.split(query):
        clause = normalize_query(part).strip(" ;,")
        if clause and re.search(r"\w", clause):
            clauses.append(clause)
    return clauses


def target_sources_for(text: str) -> List[str]:
    """Source families a question draws from (meetings + documents by default)."""
    targets = [name for name, pattern in SOURCE_PATTERNS.items() if pattern.search(text)]
    return targets or list(DEFAULT_TARGETS)


def is_board_listing(question: str) -> bool:
    """True for questions that ask which boards exist, with no other topic."""
    if not (BODY_PATTERN.search(question) and LISTING_PATTERN.search(question)):
        return False
    topic = [w for w in extract_keywords(question, max_keywords=10) if w not in BOARD_WORDS]
    return not topic


def responsibility_topic(question: str) -> Optional[str]:
    """Topic of a "which board is responsible for <topic>" question, if it is one."""
    match = re.search(
        r"\bwhich\s+(?:board|council|commission|committee)\s+(?:is\s+)?"
        r"(?:responsible\s+for|handles?|oversees?)\s+(?:the\s+)?(.+?)[\s?.!]*$",
        question,
        re.IGNORECASE,
    )
    return match.group(1) if match else None


def _decision_topic(clause: str) -> Optional[str]:
    """Topic of a clause asking what was decided, when it names no board."""
    if not DECISION_PATTERN.search(clause) or BODY_PATTERN.search(clause):
        return None
    match = TOPIC_PATTERN.search(clause)
    if match:
        return match.group(1)
    keywords = extract_keywords(clause)
    return " ".join(keywords) if keywords else None


# ══════════════════════════════════════════════════════════════════════════════
# Planning
# ══════════════════════════════════════════════════════════════════════════════


def _estimated_sources(sub_questions: Iterable[SubQuestion]) -> List[str]:
    estimated: List[str] = []
    for sq in sub_questions:
        for target in sq.target_sources:
            if target not in estimated:
                estimated.append(target)
    return estimated


def create_research_plan(query: str) -> ResearchPlan:
    """
    Decompose a query into sub-questions.

    Each clause becomes a sub-question. A clause about what was decided on a
    topic, naming no board, is preceded by a question about which board is
    responsible. A multi-clause query keeps the whole query as the last
    sub-question; a single clause is the query itself.
    """
    query = normalize_query(query)
    clauses = split_clauses(query) or [query]
    if len(clauses) == 1:
        clauses = [query]

    sub_questions: List[SubQuestion] = []
    seen: set[str] = set()
    priority = 1

    def add(question: str, targets: List[str]) -> None:
        nonlocal priority
        key = normalize_text(question)
        if key in seen:
            return
        seen.add(key)
        sub_questions.append(
            SubQuestion(question=question, target_sources=targets, priority=priority)
        )
        priority += 1

    for clause in clauses:
        topic = _decision_topic(clause)
        if topic:
            add(
                f"Which board is responsible for {topic}?",
                [TargetSource.MEETINGS.value],
            )
        add(clause, target_sources_for(clause))

    if len(clauses) > 1:
        add(query, target_sources_for(query))

    plan = ResearchPlan(
        original_query=query,
        sub_questions=sub_questions,
        estimated_sources=_estimated_sources(sub_questions),
    )
    logger.info(f"Planned {len(sub_questions)} sub-questions for '{query}'")
    return plan


def _follow_up_for(finding: Finding) -> Optional[SubQuestion]:
    boards = [s for s in finding.sources if s.board_id]
    meetings = [s for s in finding.sources if s.meeting_id]
    documents = [s for s in finding.sources if s.type == "document"]

    if boards and not meetings and not is_board_listing(finding.question):
        return SubQuestion(
            question=f"What meetings has the {boards[0].title} held recently?",
            target_sources=[TargetSource.MEETINGS.value],
        )
    if meetings and not documents:
        meeting = meetings[0]
        when = f" on {meeting.date}" if meeting.date else ""
        return SubQuestion(
            question=(
                f"What agendas and minutes are available for the {meeting.title}"
                f"{when} (meeting {meeting.meeting_id})?"
            ),
            target_sources=[TargetSource.DOCUMENTS.value],
        )
    return None


def refine_plan(plan: ResearchPlan, findings: Iterable[Finding]) -> ResearchPlan:
    """
    Return a new plan with follow-up sub-questions for gaps in the findings.

    A finding that identified a board but no meetings asks for that board's
    meetings; one with meetings but no documents asks for their agendas and
    minutes. At most MAX_FOLLOW_UPS are added per call. An existing
    sub-question whose text is contained in a follow-up is replaced by it,
    except the original query.
    """
    sub_questions = list(plan.sub_questions)
    original_key = normalize_text(plan.original_query)
    next_priority = max((sq.priority for sq in sub_questions), default=0) + 1
    added = 0

    for finding in findings:
        if added >= MAX_FOLLOW_UPS:
            break
        follow_up = _follow_up_for(finding)
        if follow_up is None:
            continue

        new_key = normalize_text(follow_up.question)
        if any(normalize_text(sq.question) == new_key for sq in sub_questions):
            continue

        follow_up = follow_up.model_copy(update={"priority": next_priority})
        superseded = [
            i
            for i, sq in enumerate(sub_questions)
            if normalize_text(sq.question) != original_key
            and f" {normalize_text(sq.question)} " in f" {new_key} "
        ]
        if superseded:
            logger.debug(f"'{follow_up.question}' supersedes {len(superseded)} sub-questions")
            sub_questions[superseded[0]] = follow_up
            for i in reversed(superseded[1:]):
                del sub_questions[i]
        else:
            sub_questions.append(follow_up)

        next_priority += 1
        added += 1

    if not added:
        return plan

    logger.info(f"Refined plan with {added} follow-up sub-questions")
    return ResearchPlan(
        original_query=plan.original_query,
        sub_questions=sub_questions,
        estimated_sources=_estimated_sources(sub_questions),
    )
