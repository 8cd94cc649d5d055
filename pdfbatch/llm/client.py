"""
Async wrapper around the DeepSeek (OpenAI-compatible) chat completion API.

Builds one user message per PDF carrying the prompt and the base64-encoded file
as an attachment, and exposes a single-shot call (``complete``) and a streaming
call (``stream``).  Every failure is raised as ``ProcessorError``.
"""

import base64
import logging
import time
from pathlib import Path
from typing import Any, AsyncIterator, Optional

import httpx
import openai

from pdfbatch import config
from pdfbatch.errors import ErrorCode, ProcessorError
from pdfbatch.models import CompletionResult, Document

logger = logging.getLogger(__name__)

_UNUSABLE_FINISH_REASONS = ("content_filter", "length")


def validate_settings(temperature: float, max_tokens: int) -> None:
    """Reject a temperature outside [0, 1] or a non-positive token limit."""
    if not 0 <= temperature <= 1:
        raise ProcessorError(
            ErrorCode.CONFIGURATION_ERROR,
            "Temperature must be between 0 and 1",
            f"Current value: {temperature}",
        )
    if max_tokens <= 0:
        raise ProcessorError(
            ErrorCode.CONFIGURATION_ERROR,
            "Max tokens must be positive",
            f"Current value: {max_tokens}",
        )


def _operation_id() -> str:
    return f"OP{int(time.time() * 1000) % 10000:04d}"


class CompletionClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        prompt: str | None = None,
        prompt_file: str | Path | None = None,
        client: Optional[openai.AsyncOpenAI] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model or config.LLM_MODEL
        self.temperature = temperature if temperature is not None else config.TEMPERATURE
        self.max_tokens = max_tokens if max_tokens is not None else config.MAX_TOKENS
        self.prompt = prompt if prompt is not None else config.PROMPT
        self.prompt_file = prompt_file if prompt_file is not None else config.PROMPT_FILE

        logger.info(
            "Initializing completion client: model=%s temperature=%s max_tokens=%s",
            self.model, self.temperature, self.max_tokens,
        )
        validate_settings(self.temperature, self.max_tokens)

        self.api_key = api_key or config.DEEPSEEK_API_KEY
        self.base_url = base_url or config.DEEPSEEK_BASE_URL
        self._http_client = http_client
        # Created on the first call by _get_client()
        self._client = client

    def _get_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise ProcessorError(
                    ErrorCode.API_COMMUNICATION_ERROR,
                    "API key is not set",
                    "Set DEEPSEEK_API_KEY or pass --api-key",
                )
            # Each request is sent exactly once
            self._client = openai.AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying SDK client and its connection pool, if one was opened."""
        if self._client is not None and hasattr(self._client, "close"):
            await self._client.close()

    async def __aenter__(self) -> "CompletionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ── request construction ─────────────────────────────────────────────────

    def resolve_prompt(self, override: str | None = None) -> str:
        """
        Pick the prompt text: *override*, then the configured literal, then the
        prompt file, then the built-in default.
        """
        if override:
            return override
        if self.prompt:
            logger.debug("Using configured prompt")
            return self.prompt

        path = Path(self.prompt_file) if self.prompt_file else None
        if path is None or not path.exists():
            logger.warning("Prompt file not found at %s, using default prompt", path)
            return config.DEFAULT_PROMPT

        logger.debug("Loading prompt from file: %s", path)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ProcessorError(
                ErrorCode.PROMPT_NOT_FOUND, "Failed to load prompt", str(e)
            ) from e

    def build_message(self, document: Document, prompt: str | None = None) -> dict[str, Any]:
        """Single user message with the prompt text and the PDF as a file attachment."""
        if document is None or document.content is None:
            raise ProcessorError(
                ErrorCode.PDF_PROCESSING_ERROR,
                "Invalid PDF document",
                "PDF document or content is null",
            )

        text = self.resolve_prompt(prompt)
        encoded = base64.b64encode(document.content).decode("ascii")
        return {
            "role": "user",
            "content": text,
            "file_attachment": {
                "type": "file_attachment",
                "file_type": "pdf",
                "content": encoded,
                "name": document.file_name,
            },
        }

    def build_request(
        self,
        document: Document,
        prompt: str | None = None,
        stream: bool = False,
    ) -> dict[str, Any]:
        return {
            "messages": [self.build_message(document, prompt)],
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": stream,
        }

    # ── calls ────────────────────────────────────────────────────────────────

    async def complete(self, document: Document, prompt: str | None = None) -> CompletionResult:
        """Send one non-streaming request and return the parsed result."""
        op_id = _operation_id()
        logger.info("[%s] Processing PDF: %s", op_id, document.file_name)

        request = self.build_request(document, prompt, stream=False)
        try:
            logger.debug("[%s] Sending request to completion API", op_id)
            response = await self._get_client().chat.completions.create(**request)
        except ProcessorError:
            raise
        except Exception as e:
            logger.error("[%s] Completion request failed: %s", op_id, e)
            raise ProcessorError(
                ErrorCode.API_COMMUNICATION_ERROR, "Failed to process PDF", str(e)
            ) from e

        if response is None or not getattr(response, "choices", None):
            raise ProcessorError(
                ErrorCode.INVALID_RESPONSE,
                "Received null or invalid response from API",
                "Response or choices is missing",
            )

        data = response.model_dump()
        first = data["choices"][0]
        text = (first.get("message") or {}).get("content") or ""
        result = CompletionResult(
            id=data.get("id"),
            model=data.get("model"),
            object=data.get("object"),
            created=data.get("created"),
            choices=data["choices"],
            usage=data.get("usage"),
            text=text,
        )
        logger.debug("[%s] Response tokens used: %s", op_id, data.get("usage"))

        # A filtered or truncated completion with no text is reported, not raised
        finish_reason = first.get("finish_reason")
        if not text and finish_reason in _UNUSABLE_FINISH_REASONS:
            logger.warning(
                "[%s] Empty completion for %s (finish_reason=%s)",
                op_id, document.file_name, finish_reason,
            )
            result.has_error = True
            result.error_code = ErrorCode.INVALID_RESPONSE.code
            result.error_message = f"Completion ended with finish_reason={finish_reason}"
            return result

        logger.info("[%s] Successfully processed PDF: %s", op_id, document.file_name)
        return result

    async def stream(
        self,
        document: Document,
        prompt: str | None = None,
    ) -> AsyncIterator[CompletionResult]:
        """
        Stream the completion, yielding one result per incoming chunk.

        Each result's ``text`` is everything received so far, not the delta.
        Transport errors end the stream with ``STREAM_PROCESSING_ERROR``.
        """
        op_id = _operation_id()
        logger.info("[%s] Starting streaming PDF processing for: %s", op_id, document.file_name)

        request = self.build_request(document, prompt, stream=True)
        text = ""
        try:
            response_stream = await self._get_client().chat.completions.create(**request)
            async for chunk in response_stream:
                data = chunk.model_dump()
                choices = data.get("choices") or []
                delta = (choices[0].get("delta") or {}).get("content") if choices else None
                text += delta or ""
                logger.debug("[%s] Received stream chunk, current length: %d", op_id, len(text))
                yield CompletionResult(
                    id=data.get("id"),
                    model=data.get("model"),
                    object=data.get("object"),
                    created=data.get("created"),
                    choices=choices,
                    usage=data.get("usage"),
                    text=text,
                )
        except ProcessorError:
            raise
        except Exception as e:
            logger.error("[%s] Error in streaming response: %s", op_id, e)
            raise ProcessorError(
                ErrorCode.STREAM_PROCESSING_ERROR, "Error during stream processing", str(e)
            ) from e

        logger.info("[%s] Completed streaming for PDF: %s", op_id, document.file_name)
