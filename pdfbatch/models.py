"""
Pydantic models shared across the pipeline.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class DocumentStatus(str, Enum):
    """Lifecycle states of a document in the pipeline."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"

    @property
    def is_terminal(self) -> bool:
        return self in (DocumentStatus.COMPLETED, DocumentStatus.ERROR)


class Document(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    file_name: str
    file_path: str
    content_type: str = "application/pdf"
    content: Optional[bytes] = None
    file_size: int = 0
    status: DocumentStatus = DocumentStatus.PENDING

    # Extracted from the PDF
    page_count: int = Field(default=0, ge=0)
    title: Optional[str] = None
    author: Optional[str] = None

    # Processing bookkeeping
    processing_start_time: Optional[datetime] = None
    processing_end_time: Optional[datetime] = None
    response: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def set_status(self, status: DocumentStatus) -> None:
        """Move to *status*, refusing to leave COMPLETED or ERROR."""
        if self.status.is_terminal and status != self.status:
            raise ValueError(
                f"Document {self.id} is already {self.status.value}; "
                f"cannot move to {status.value}"
            )
        self.status = status


class CompletionResult(BaseModel):
    id: Optional[str] = None
    model: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    choices: list[dict[str, Any]] = Field(default_factory=list)
    usage: Optional[dict[str, Any]] = None
    text: str = ""

    has_error: bool = False
    error_message: Optional[str] = None
    error_code: Optional[str] = None


class PdfMetadata(BaseModel):
    page_count: int = Field(default=0, ge=0)
    title: Optional[str] = None
    author: Optional[str] = None


class RunSummary(BaseModel):
    state: str
    chunks: int = 0
    documents: int = 0
    completed: int = 0
    errors: int = 0
