"""
Central configuration — reads environment variables and provides defaults.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Completion API (DeepSeek, OpenAI-compatible) ─────────────────────────────
DEEPSEEK_API_KEY: str = os.getenv("DEEPSEEK_API_KEY") or os.getenv("OPENAI_API_KEY", "")
DEEPSEEK_BASE_URL: str = os.getenv("DEEPSEEK_BASE_URL", "https://api.deepseek.com")
LLM_MODEL: str = os.getenv("LLM_MODEL", "deepseek-coder")
TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
MAX_TOKENS: int = int(os.getenv("MAX_TOKENS", "4096"))
STREAM_RESPONSES: bool = os.getenv("STREAM_RESPONSES", "false").lower() in ("1", "true", "yes")

# ── Prompt ────────────────────────────────────────────────────────────────────
PROMPT: str = os.getenv("PROMPT", "")
PROMPT_FILE: str = os.getenv(
    "PROMPT_FILE",
    str(Path(__file__).parent / "prompts" / "default_prompt.txt"),
)
DEFAULT_PROMPT = "Please analyze this PDF and provide a detailed summary."

# ── Paths ─────────────────────────────────────────────────────────────────────
INPUT_DIRECTORY: str = os.getenv("INPUT_DIRECTORY", "data/input")
OUTPUT_DIRECTORY: str = os.getenv("OUTPUT_DIRECTORY", "data/output")

# ── Batching ──────────────────────────────────────────────────────────────────
CHUNK_SIZE: int = int(os.getenv("CHUNK_SIZE", "10"))
