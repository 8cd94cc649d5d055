"""
Tests for the batch CLI script helpers.
"""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pdfbatch import config
from pdfbatch.ingest.pipeline import ChunkedPipeline
from pdfbatch.llm.client import CompletionClient
from scripts.process import build_parser, build_pipeline, run


@pytest.fixture
def no_api_key(monkeypatch):
    """Run as if neither DEEPSEEK_API_KEY nor OPENAI_API_KEY were set."""
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(config, "DEEPSEEK_API_KEY", "")


def test_defaults_come_from_config():
    args = build_parser().parse_args([])
    assert args.chunk_size == config.CHUNK_SIZE
    assert args.model == config.LLM_MODEL
    assert args.temperature == config.TEMPERATURE
    assert args.max_tokens == config.MAX_TOKENS
    assert args.api_key == config.DEEPSEEK_API_KEY


def test_flags_override_defaults(tmp_path):
    args = build_parser().parse_args([
        "--input-dir", str(tmp_path / "in"),
        "--output-dir", str(tmp_path / "out"),
        "--chunk-size", "3",
        "--model", "deepseek-chat",
        "--temperature", "0.2",
        "--max-tokens", "100",
        "--api-key", "test-key",
        "--stream",
    ])
    pipeline = build_pipeline(args)

    assert isinstance(pipeline, ChunkedPipeline)
    assert pipeline.chunk_size == 3
    assert pipeline.processor.stream is True
    assert pipeline.processor.client.model == "deepseek-chat"
    assert pipeline.processor.client.api_key == "test-key"
    assert pipeline.scanner.input_directory == tmp_path / "in"
    assert pipeline.writer.output_directory == tmp_path / "out"


def test_no_stream_overrides_environment(monkeypatch):
    monkeypatch.setattr(config, "STREAM_RESPONSES", True)
    assert build_parser().parse_args([]).stream is True
    assert build_parser().parse_args(["--no-stream"]).stream is False


@pytest.mark.asyncio
async def test_invalid_configuration_exits(tmp_path):
    args = build_parser().parse_args(["--temperature", "1.5", "--input-dir", str(tmp_path)])
    with pytest.raises(SystemExit) as exc_info:
        await run(args)
    assert exc_info.value.code == 1


@pytest.mark.asyncio
async def test_empty_run(tmp_path, no_api_key):
    args = build_parser().parse_args([
        "--input-dir", str(tmp_path / "in"),
        "--output-dir", str(tmp_path / "out"),
    ])
    summary = await run(args)
    assert summary.documents == 0
    assert summary.state == "COMPLETED"


@pytest.mark.asyncio
async def test_missing_api_key_marks_documents_error(tmp_path, make_pdf, no_api_key):
    make_pdf("in/report.pdf")
    args = build_parser().parse_args([
        "--input-dir", str(tmp_path / "in"),
        "--output-dir", str(tmp_path / "out"),
    ])

    summary = await run(args)

    assert summary.state == "COMPLETED"
    assert summary.errors == 1
    data = json.loads((tmp_path / "out" / "report_result.json").read_text(encoding="utf-8"))
    assert data["status"] == "ERROR"
    assert data["error_code"] == "DEEP_003"
    assert data["error_message"] == "API key is not set"


@pytest.mark.asyncio
async def test_run_closes_client(tmp_path, monkeypatch):
    closed = []

    async def fake_aclose(self):
        closed.append(self)

    monkeypatch.setattr(CompletionClient, "aclose", fake_aclose)
    args = build_parser().parse_args([
        "--input-dir", str(tmp_path / "in"),
        "--output-dir", str(tmp_path / "out"),
        "--api-key", "test-key",
    ])

    await run(args)

    assert len(closed) == 1
