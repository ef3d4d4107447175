"""Record models produced by municipality adapters."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.config import DocumentType, Jurisdiction

__all__ = ["Board", "Meeting", "MeetingDocument", "MeetingDetails"]


class RecordModel(BaseModel):
    """Base for records: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Board(RecordModel):
    id: str
    name: str
    jurisdiction: Optional[Jurisdiction] = None


class Meeting(RecordModel):
    id: str
    date: str = ""
    title: str = ""
    board_id: str = Field(default="", alias="boardId")
    board_name: Optional[str] = Field(default=None, alias="boardName")


class MeetingDocument(RecordModel):
    type: DocumentType
    url: str
    title: str


class MeetingDetails(Meeting):
    documents: list[MeetingDocument] = Field(default_factory=list)
    video_url: Optional[str] = Field(default=None, alias="videoUrl")
    transcript_url: Optional[str] = Field(default=None, alias="transcriptUrl")

    @classmethod
    def not_found(cls, meeting_id: str) -> "MeetingDetails":
        """Placeholder for a meeting id the adapter cannot resolve."""
        return cls(id=meeting_id, date="", title="Meeting not found", board_id="")
