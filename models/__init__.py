"""
Data models for the Government Records MCP.

Provides Pydantic models for the records adapters produce, the deep research
plan, findings and answer, tool request validation, and configuration enums.
"""

from models.config import (
    AdapterMode,
    DocumentType,
    Jurisdiction,
    SourceType,
    TargetSource,
)
from models.inputs import (
    AskInput,
    ListBoardsInput,
    MeetingInput,
    ResearchInput,
    SearchDocumentsInput,
    SearchMeetingsInput,
    TopicSearchInput,
)
from models.records import Board, Meeting, MeetingDetails, MeetingDocument
from models.research import (
    Contradiction,
    Finding,
    ResearchPlan,
    ResearchResults,
    Source,
    SubQuestion,
    SynthesizedAnswer,
)

__all__ = [
    # Enums
    "AdapterMode",
    "DocumentType",
    "Jurisdiction",
    "SourceType",
    "TargetSource",
    # Records
    "Board",
    "Meeting",
    "MeetingDocument",
    "MeetingDetails",
    # Research
    "SubQuestion",
    "ResearchPlan",
    "Source",
    "Finding",
    "ResearchResults",
    "Contradiction",
    "SynthesizedAnswer",
    # Tool inputs
    "AskInput",
    "ListBoardsInput",
    "MeetingInput",
    "ResearchInput",
    "SearchDocumentsInput",
    "SearchMeetingsInput",
    "TopicSearchInput",
]
