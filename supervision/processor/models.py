from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class DocumentStatus(str, Enum):
    """Lifecycle of an uploaded document: pending -> processing -> completed | error."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class AnalysisSource(str, Enum):
    """Which path produced the stored analysis text."""

    HEURISTIC = "heuristic"
    AI = "ai"


@dataclass(frozen=True)
class ConversationEntry:
    message: str
    from_user: bool
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "fromUser": self.from_user,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConversationEntry":
        raw_timestamp = data.get("timestamp")
        timestamp = (
            raw_timestamp
            if isinstance(raw_timestamp, datetime)
            else datetime.fromisoformat(str(raw_timestamp))
        )
        return cls(
            message=str(data.get("message") or ""),
            from_user=bool(data.get("fromUser")),
            timestamp=timestamp,
        )


@dataclass
class Document:
    """Domain model for a row of the inspection_documents table."""

    id: str
    title: str
    filename: str
    storage_ref: str
    storage_type: str
    description: str = ""
    status: DocumentStatus = DocumentStatus.PENDING
    extracted_text: str = ""
    structured_analysis: dict[str, Any] | None = None
    ai_analysis_text: str = ""
    analysis_source: AnalysisSource | None = None
    analysis_version: int = 0
    error_message: str | None = None
    processing_started: datetime | None = None
    processing_completed: datetime | None = None
    conversation: list[ConversationEntry] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_analysis(self) -> bool:
        return bool(self.structured_analysis and self.ai_analysis_text)

    @property
    def processing_time_seconds(self) -> float | None:
        if self.processing_started is None or self.processing_completed is None:
            return None
        return (self.processing_completed - self.processing_started).total_seconds()
