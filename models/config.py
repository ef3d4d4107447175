"""Configuration enums and constants for the Government Records MCP."""

from enum import Enum


class Jurisdiction(str, Enum):
    """Level of government a board belongs to."""

    MUNICIPAL = "municipal"
    BOE = "boe"  # Board of Education
    COUNTY = "county"
    STATE = "state"


class DocumentType(str, Enum):
    """Kinds of documents attached to a meeting."""

    AGENDA = "agenda"
    MINUTES = "minutes"
    VIDEO = "video"
    TRANSCRIPT = "transcript"


class SourceType(str, Enum):
    """Citation source kinds produced by the researcher."""

    MEETING = "meeting"
    DOCUMENT = "document"
    TRANSCRIPT = "transcript"
    NEWS = "news"


class TargetSource(str, Enum):
    """Source families a sub-question can draw from."""

    MEETINGS = "meetings"
    DOCUMENTS = "documents"
    TRANSCRIPTS = "transcripts"
    NEWS = "news"


class AdapterMode(str, Enum):
    """How the Teaneck adapter reaches its data."""

    LIVE = "live"  # Scrape the IQM2 portal
    STUB = "stub"  # Serve recorded data, no network
