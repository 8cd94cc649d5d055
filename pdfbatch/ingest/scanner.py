"""
Input scanner — snapshots the PDFs under a directory and serves them one by one.
"""

import itertools
import logging
from pathlib import Path
from typing import Optional

from pdfbatch import config
from pdfbatch.models import Document, DocumentStatus

logger = logging.getLogger(__name__)


class DocumentScanner:
    """
    Pull-based reader over a directory of PDF files.

    The directory is walked lazily on the first ``read()``; the resulting list
    is never refreshed, so files added or removed later are not seen.
    """

    def __init__(self, input_directory: str | Path | None = None):
        self.input_directory = Path(input_directory or config.INPUT_DIRECTORY)
        self._files: Optional[tuple[Path, ...]] = None
        self._cursor = itertools.count()

    def _scan(self) -> tuple[Path, ...]:
        logger.info("Scanning input directory: %s", self.input_directory)
        if not self.input_directory.exists():
            logger.warning("Input directory does not exist: %s", self.input_directory)
            self.input_directory.mkdir(parents=True, exist_ok=True)
            logger.info("Created input directory: %s", self.input_directory)
            return ()

        files = tuple(sorted(
            p for p in self.input_directory.rglob("*")
            if p.is_file() and p.name.lower().endswith(".pdf")
        ))
        logger.info("Found %d PDF files in %s", len(files), self.input_directory)
        return files

    @property
    def files(self) -> tuple[Path, ...]:
        if self._files is None:
            self._files = self._scan()
        return self._files

    def read(self) -> Optional[Document]:
        """
        Return the next PENDING document, or ``None`` once the snapshot is used up.

        ``None`` is returned again on every later call.  An ``OSError`` from
        reading a listed file propagates to the caller.
        """
        files = self.files
        # next() on itertools.count is atomic under the GIL
        index = next(self._cursor)
        if index >= len(files):
            return None

        path = files[index]
        logger.info("Reading PDF file %d/%d: %s", index + 1, len(files), path.name)
        try:
            content = path.read_bytes()
        except OSError:
            logger.error("Error reading PDF file: %s", path)
            raise

        return Document(
            file_name=path.name,
            file_path=str(path.resolve()),
            content=content,
            file_size=len(content),
            status=DocumentStatus.PENDING,
        )
