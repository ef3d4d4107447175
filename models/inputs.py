"""Tool input models for the Government Records MCP."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.config import Jurisdiction

__all__ = [
    "ListBoardsInput",
    "SearchMeetingsInput",
    "MeetingInput",
    "SearchDocumentsInput",
    "TopicSearchInput",
    "ResearchInput",
    "AskInput",
]

MUNICIPALITY_DESCRIPTION = 'Municipality name (e.g., "teaneck")'


class ToolInput(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        populate_by_name=True,
        extra="forbid",
    )

    municipality: str = Field(
        ...,
        description=MUNICIPALITY_DESCRIPTION,
        min_length=1,
        max_length=100,
    )


class ListBoardsInput(ToolInput):
    """Input model for list_boards."""

    jurisdiction: Optional[Jurisdiction] = Field(
        default=None,
        description="Filter by jurisdiction type: 'municipal', 'boe', 'county' or 'state'",
    )


class SearchMeetingsInput(ToolInput):
    """Input model for search_meetings."""

    board_id: Optional[str] = Field(
        default=None,
        alias="boardId",
        description='Filter by board ID (e.g., "township-council")',
    )
    query: Optional[str] = Field(
        default=None,
        description="Search query for meeting title or board name",
        max_length=500,
    )
    limit: Optional[int] = Field(
        default=None,
        description="Maximum number of results to return",
        ge=1,
        le=200,
    )


class MeetingInput(ToolInput):
    """Input model for get_meeting and get_transcript."""

    meeting_id: str = Field(
        ...,
        alias="meetingId",
        description='Meeting ID (e.g., "tc-2024-12-10")',
        min_length=1,
    )


class SearchDocumentsInput(ToolInput):
    """Input model for search_documents."""

    query: str = Field(..., description="Search query", min_length=1, max_length=500)


class TopicSearchInput(ToolInput):
    """Input model for search_by_topic."""

    topic: str = Field(
        ..., description="Topic to search for", min_length=1, max_length=500
    )


class ResearchInput(ToolInput):
    """Input model for deep_research."""

    query: str = Field(
        ...,
        description=(
            "Research question about the municipality's meetings, boards or documents. "
            "Example: 'What did the Planning Board decide about Main Street?'"
        ),
        min_length=3,
        max_length=1000,
    )
    refine: bool = Field(
        default=True,
        description="Run one follow-up round for gaps found in the first pass",
    )

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        """Reject queries with no searchable words."""
        if not any(ch.isalnum() for ch in v):
            raise ValueError(f"Query '{v}' has no searchable words.")
        return v


class AskInput(ToolInput):
    """Input model for ask_about_meetings."""

    question: str = Field(
        ...,
        description="Question about the municipality's boards and recent meetings",
        min_length=3,
        max_length=1000,
    )
