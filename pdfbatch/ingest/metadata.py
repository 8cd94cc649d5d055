"""
PDF metadata extraction — page count, title and author via PyPDF2.
"""

import io
import logging

from PyPDF2 import PdfReader

from pdfbatch.errors import ErrorCode, ProcessorError
from pdfbatch.models import PdfMetadata

logger = logging.getLogger(__name__)


def extract_pdf_metadata(content: bytes) -> PdfMetadata:
    """
    Read page count, title and author from raw PDF bytes.

    Raises ``ProcessorError(PDF_PROCESSING_ERROR)`` if the bytes are not a
    readable PDF.
    """
    if not content:
        raise ProcessorError(ErrorCode.PDF_PROCESSING_ERROR, "Empty PDF content")

    try:
        reader = PdfReader(io.BytesIO(content))
        page_count = len(reader.pages)
        info = reader.metadata
        title = info.title if info else None
        author = info.author if info else None
    except Exception as e:
        raise ProcessorError(
            ErrorCode.PDF_PROCESSING_ERROR,
            "Failed to read PDF metadata",
            str(e),
        ) from e

    logger.debug("Extracted PDF metadata: pages=%d title=%r", page_count, title)
    return PdfMetadata(
        page_count=page_count,
        title=str(title) if title else None,
        author=str(author) if author else None,
    )
