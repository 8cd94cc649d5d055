#!/usr/bin/env python3
"""
Batch CLI — run every PDF in a directory through the completion API.

Usage
-----
Defaults from the environment / .env:
    python -m scripts.process

Explicit directories and chunk size:
    python -m scripts.process --input-dir data/input --output-dir data/output --chunk-size 5

Custom prompt, streamed responses:
    python -m scripts.process --prompt "List every date in this document." --stream

Each input ``name.pdf`` produces ``<output-dir>/name_result.json``.
"""

import argparse
import asyncio
import logging
import os
import sys

# Ensure repo root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pdfbatch import config                                  # noqa: E402
from pdfbatch.errors import ErrorCode, ProcessorError        # noqa: E402
from pdfbatch.ingest.pipeline import ChunkedPipeline         # noqa: E402
from pdfbatch.ingest.processor import DocumentProcessor      # noqa: E402
from pdfbatch.ingest.scanner import DocumentScanner          # noqa: E402
from pdfbatch.ingest.writer import ResultWriter              # noqa: E402
from pdfbatch.llm.client import CompletionClient             # noqa: E402
from pdfbatch.models import RunSummary                       # noqa: E402

logger = logging.getLogger("process")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Analyse PDF files with the DeepSeek completion API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--input-dir", default=config.INPUT_DIRECTORY,
                        help="Directory scanned recursively for PDFs")
    parser.add_argument("--output-dir", default=config.OUTPUT_DIRECTORY,
                        help="Directory for the *_result.json files")
    parser.add_argument("--chunk-size", type=int, default=config.CHUNK_SIZE,
                        help="Documents per commit (default %(default)s)")
    parser.add_argument("--prompt", default=config.PROMPT, help="Literal prompt text")
    parser.add_argument("--prompt-file", default=config.PROMPT_FILE,
                        help="Prompt file, used when --prompt is empty")
    parser.add_argument("--model", default=config.LLM_MODEL, help="Model name")
    parser.add_argument("--temperature", type=float, default=config.TEMPERATURE,
                        help="Sampling temperature in [0, 1]")
    parser.add_argument("--max-tokens", type=int, default=config.MAX_TOKENS,
                        help="Maximum tokens in the completion")
    parser.add_argument("--base-url", default=config.DEEPSEEK_BASE_URL, help="API base URL")
    parser.add_argument("--api-key", default=config.DEEPSEEK_API_KEY,
                        help="API key (default: DEEPSEEK_API_KEY)")
    parser.add_argument("--stream", action=argparse.BooleanOptionalAction,
                        default=config.STREAM_RESPONSES,
                        help="Consume streaming completions (default %(default)s)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def build_pipeline(args: argparse.Namespace) -> ChunkedPipeline:
    """Wire the pipeline from parsed arguments.  Raises on invalid configuration."""
    client = CompletionClient(
        api_key=args.api_key,
        base_url=args.base_url,
        model=args.model,
        temperature=args.temperature,
        max_tokens=args.max_tokens,
        prompt=args.prompt,
        prompt_file=args.prompt_file,
    )
    return ChunkedPipeline(
        scanner=DocumentScanner(args.input_dir),
        processor=DocumentProcessor(client, stream=args.stream),
        writer=ResultWriter(args.output_dir),
        chunk_size=args.chunk_size,
    )


async def run(args: argparse.Namespace) -> RunSummary:
    if not args.api_key:
        logger.warning("✗ DEEPSEEK_API_KEY is not set; every document will be marked ERROR.")

    try:
        pipeline = build_pipeline(args)
    except ProcessorError as e:
        if e.error_code is not ErrorCode.CONFIGURATION_ERROR:
            raise
        logger.error("✗ %s", e)
        sys.exit(1)

    async with pipeline.processor.client:
        return await pipeline.run()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s │ %(levelname)-7s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    summary = asyncio.run(run(args))
    logger.info(
        "Done: %d completed, %d errors, %d total",
        summary.completed, summary.errors, summary.documents,
    )


if __name__ == "__main__":
    main()
