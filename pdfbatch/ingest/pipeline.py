"""
Chunked batch pipeline — orchestrates scan → process → write.

    scanner.read()  (up to chunk_size documents)
      → processor.process() for each, in order
      → writer.write(chunk)   one commit per chunk
      → repeat until the scanner is exhausted

Documents are handled one at a time and chunks never overlap.  A writer failure
aborts the run; files from earlier commits are left in place.
"""

import logging
import time
from enum import Enum

from pdfbatch import config
from pdfbatch.errors import ErrorCode, ProcessorError
from pdfbatch.ingest.processor import DocumentProcessor
from pdfbatch.ingest.scanner import DocumentScanner
from pdfbatch.ingest.writer import ResultWriter
from pdfbatch.models import Document, DocumentStatus, RunSummary

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    INITIAL = "INITIAL"
    READING = "READING"
    PROCESSING = "PROCESSING"
    WRITING = "WRITING"
    COMMITTED = "COMMITTED"
    COMPLETED = "COMPLETED"


class ChunkedPipeline:
    def __init__(
        self,
        scanner: DocumentScanner,
        processor: DocumentProcessor,
        writer: ResultWriter,
        chunk_size: int | None = None,
    ):
        chunk_size = chunk_size if chunk_size is not None else config.CHUNK_SIZE
        if chunk_size <= 0:
            raise ProcessorError(
                ErrorCode.CONFIGURATION_ERROR,
                "Chunk size must be positive",
                f"Current value: {chunk_size}",
            )
        self.scanner = scanner
        self.processor = processor
        self.writer = writer
        self.chunk_size = chunk_size
        self.state = EngineState.INITIAL

    def _read_chunk(self) -> list[Document]:
        self.state = EngineState.READING
        chunk: list[Document] = []
        while len(chunk) < self.chunk_size:
            document = self.scanner.read()
            if document is None:
                break
            chunk.append(document)
        return chunk

    async def run(self) -> RunSummary:
        """Drive every chunk through the pipeline and return the run totals."""
        t0 = time.perf_counter()
        summary = RunSummary(state=self.state.value)
        logger.info("Starting PDF pipeline with chunk size %d", self.chunk_size)

        while True:
            chunk = self._read_chunk()
            if not chunk:
                break

            self.state = EngineState.PROCESSING
            chunk_no = summary.chunks + 1
            logger.info("Chunk %d: processing %d documents", chunk_no, len(chunk))
            processed = [await self.processor.process(doc) for doc in chunk]

            self.state = EngineState.WRITING
            self.writer.write(processed)

            self.state = EngineState.COMMITTED
            summary.chunks = chunk_no
            summary.documents += len(processed)
            summary.completed += sum(1 for d in processed if d.status == DocumentStatus.COMPLETED)
            summary.errors += sum(1 for d in processed if d.status == DocumentStatus.ERROR)
            logger.info(
                "Chunk %d committed (%d documents so far)", chunk_no, summary.documents
            )

        self.state = EngineState.COMPLETED
        summary.state = self.state.value

        logger.info("=" * 60)
        logger.info("PIPELINE SUMMARY")
        logger.info("  Chunks:     %d", summary.chunks)
        logger.info("  Documents:  %d", summary.documents)
        logger.info("  Completed:  %d", summary.completed)
        logger.info("  Errors:     %d", summary.errors)
        logger.info("  Elapsed:    %.1fs", time.perf_counter() - t0)
        logger.info("=" * 60)
        return summary
