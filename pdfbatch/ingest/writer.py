"""
Result writer — one pretty-printed JSON file per processed document.
"""

import logging
import re
from pathlib import Path
from typing import Sequence

from pdfbatch import config
from pdfbatch.models import Document

logger = logging.getLogger(__name__)

_PDF_SUFFIX_RE = re.compile(r"\.pdf$", re.IGNORECASE)


def result_filename(file_name: str) -> str:
    """``report.pdf`` → ``report_result.json``."""
    return _PDF_SUFFIX_RE.sub("", file_name) + "_result.json"


class ResultWriter:
    def __init__(self, output_directory: str | Path | None = None):
        self.output_directory = Path(output_directory or config.OUTPUT_DIRECTORY)
        # Result file → source path, for every file written by this writer
        self._sources: dict[Path, str] = {}

    def write(self, documents: Sequence[Document]) -> list[Path]:
        """
        Write every document in *documents* and return the files written.

        The raw ``content`` is dropped from each document before it is
        serialised.  Any ``OSError`` propagates; files already written stay.
        """
        logger.info("Writing %d processed PDF results", len(documents))
        if not self.output_directory.exists():
            logger.info("Creating output directory: %s", self.output_directory)
        self.output_directory.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        for document in documents:
            out_file = self.output_directory / result_filename(document.file_name)
            previous = self._sources.get(out_file)
            if previous is not None and previous != document.file_path:
                logger.warning(
                    "%s overwrites the result of %s (same file name in another directory)",
                    document.file_path, previous,
                )
            self._sources[out_file] = document.file_path
            document.content = None
            out_file.write_text(document.model_dump_json(indent=2), encoding="utf-8")
            written.append(out_file)
            logger.info("Wrote result for %s to %s", document.file_name, out_file)
        return written
