"""
Error taxonomy shared by the API client, processor and engine.

Every failure is raised as a single ``ProcessorError`` tagged with one of the
closed ``ErrorCode`` members.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    PROMPT_NOT_FOUND = ("DEEP_001", "Prompt file or configuration not found")
    PDF_PROCESSING_ERROR = ("DEEP_002", "Error processing PDF document")
    API_COMMUNICATION_ERROR = ("DEEP_003", "Error communicating with completion API")
    INVALID_RESPONSE = ("DEEP_004", "Invalid response from completion API")
    STREAM_PROCESSING_ERROR = ("DEEP_005", "Error during stream processing")
    CONFIGURATION_ERROR = ("DEEP_006", "Invalid configuration")

    def __init__(self, code: str, description: str):
        self.code = code
        self.description = description


class ProcessorError(Exception):
    """Raised for any failure in the PDF processing path.

    Chain the underlying exception with ``raise ProcessorError(...) from exc``.
    """

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.details = details

    def __str__(self) -> str:
        text = f"[{self.error_code.code}] {self.message}"
        if self.details:
            text += f": {self.details}"
        return text
