"""
Per-document processing — metadata extraction plus one completion call.

Failures stop at this boundary: the document is marked ERROR, the exception is
logged, and the caller carries on with the next document.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from pdfbatch import config
from pdfbatch.errors import ProcessorError
from pdfbatch.ingest.metadata import extract_pdf_metadata
from pdfbatch.llm.client import CompletionClient
from pdfbatch.models import CompletionResult, Document, DocumentStatus, PdfMetadata

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DocumentProcessor:
    def __init__(
        self,
        client: CompletionClient,
        prompt: str | None = None,
        stream: bool | None = None,
        metadata_extractor: Callable[[bytes], PdfMetadata] = extract_pdf_metadata,
    ):
        self.client = client
        self.prompt = prompt
        self.stream = stream if stream is not None else config.STREAM_RESPONSES
        self.metadata_extractor = metadata_extractor

    async def _call_api(self, document: Document) -> CompletionResult:
        if not self.stream:
            return await self.client.complete(document, self.prompt)

        last = CompletionResult()
        async for partial in self.client.stream(document, self.prompt):
            last = partial
        return last

    async def process(self, document: Document) -> Document:
        if document.status != DocumentStatus.PENDING:
            logger.info(
                "Document %s already in status %s; skipping.",
                document.file_name, document.status.value,
            )
            return document

        logger.info("Processing PDF: %s", document.file_name)
        document.processing_start_time = _now()
        document.set_status(DocumentStatus.PROCESSING)

        try:
            metadata = self.metadata_extractor(document.content)
            document.page_count = metadata.page_count
            document.title = metadata.title
            document.author = metadata.author
            logger.debug("%s: %d pages", document.file_name, document.page_count)

            result = await self._call_api(document)
            document.response = result.text
            if result.has_error:
                document.error_code = result.error_code
                document.error_message = result.error_message
                document.set_status(DocumentStatus.ERROR)
            else:
                document.set_status(DocumentStatus.COMPLETED)

        except ProcessorError as e:
            logger.error("Error processing PDF %s: %s", document.file_name, e)
            document.error_code = e.error_code.code
            document.error_message = e.message
            document.set_status(DocumentStatus.ERROR)
        except Exception as e:
            logger.exception("Unexpected error processing PDF %s", document.file_name)
            document.error_message = str(e)[:500]
            document.set_status(DocumentStatus.ERROR)
        finally:
            document.processing_end_time = _now()

        logger.info(
            "Finished processing PDF: %s with status: %s",
            document.file_name, document.status.value,
        )
        return document
