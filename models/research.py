"""Models for the plan, research and synthesis phases of deep research."""

import re
from typing import Optional

from pydantic import ConfigDict, Field

from models.config import SourceType, TargetSource
from models.records import Board, Meeting, RecordModel

__all__ = [
    "DEFAULT_TARGETS",
    "SubQuestion",
    "ResearchPlan",
    "Source",
    "Finding",
    "ResearchResults",
    "Contradiction",
    "SynthesizedAnswer",
]

DEFAULT_TARGETS = [TargetSource.MEETINGS.value, TargetSource.DOCUMENTS.value]

BOARD_EXCERPT_PATTERN = re.compile(r"^Board ID: (\S+)")
MEETING_EXCERPT_PATTERN = re.compile(r"^Meeting ID: (\S+)")

# ══════════════════════════════════════════════════════════════════════════════
# Planning
# ══════════════════════════════════════════════════════════════════════════════


class SubQuestion(RecordModel):
    """One question the researcher answers; priority orders execution."""

    model_config = ConfigDict(frozen=True)

    question: str
    target_sources: list[TargetSource] = Field(
        default_factory=lambda: list(DEFAULT_TARGETS), alias="targetSources"
    )
    priority: int = 1


class ResearchPlan(RecordModel):
    """Decomposition of a query. Refinement returns a new plan."""

    model_config = ConfigDict(frozen=True)

    original_query: str = Field(alias="originalQuery")
    sub_questions: list[SubQuestion] = Field(default_factory=list, alias="subQuestions")
    estimated_sources: list[str] = Field(default_factory=list, alias="estimatedSources")


# ══════════════════════════════════════════════════════════════════════════════
# Research
# ══════════════════════════════════════════════════════════════════════════════


class Source(RecordModel):
    """A citable record. Equal sources are equal by value."""

    type: SourceType
    title: str
    url: Optional[str] = None
    date: Optional[str] = None
    excerpt: Optional[str] = None

    @classmethod
    def from_board(cls, board: Board) -> "Source":
        return cls(type=SourceType.MEETING, title=board.name, excerpt=f"Board ID: {board.id}")

    @classmethod
    def from_meeting(cls, meeting: Meeting, url: Optional[str] = None) -> "Source":
        title = f"{meeting.board_name} - {meeting.title}" if meeting.board_name else meeting.title
        excerpt = f"Meeting ID: {meeting.id}"
        if meeting.board_id:
            excerpt += f" (board {meeting.board_id})"
        return cls(
            type=SourceType.MEETING,
            title=title or meeting.id,
            url=url,
            date=meeting.date or None,
            excerpt=excerpt,
        )

    @property
    def board_id(self) -> Optional[str]:
        """Board id when this source cites a board itself."""
        match = BOARD_EXCERPT_PATTERN.match(self.excerpt or "")
        return match.group(1) if match else None

    @property
    def meeting_id(self) -> Optional[str]:
        """Meeting id when this source cites a meeting."""
        match = MEETING_EXCERPT_PATTERN.match(self.excerpt or "")
        return match.group(1) if match else None


class Finding(RecordModel):
    question: str
    answer: str
    sources: list[Source] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class ResearchResults(RecordModel):
    """Every plan sub-question is in exactly one of findings or unexplored."""

    plan: ResearchPlan
    findings: list[Finding] = Field(default_factory=list)
    unexplored: list[str] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════════
# Synthesis
# ══════════════════════════════════════════════════════════════════════════════


class Contradiction(RecordModel):
    topic: str
    source_a: Source = Field(alias="sourceA")
    claim_a: str = Field(alias="claimA")
    source_b: Source = Field(alias="sourceB")
    claim_b: str = Field(alias="claimB")


class SynthesizedAnswer(RecordModel):
    """Markdown answer whose [n] markers index sources (1-based)."""

    answer: str
    sources: list[Source] = Field(default_factory=list)
    contradictions: list[Contradiction] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
