# app/llm/providers/gemini.py
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from app.core.config import settings
from app.llm.errors import (
    LLMEmptyResponseError,
    LLMNonRetryableError,
    LLMRateLimitError,
    LLMRetryableError,
)
from app.llm.types import LLMRequest, LLMResponse

# Candidates stopped for these reasons carry no usable answer
BLOCKED_FINISH_REASONS = {"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}


def _finish_reason(resp) -> str | None:
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return None
    reason = getattr(candidates[0], "finish_reason", None)
    if reason is None:
        return None
    return getattr(reason, "name", None) or str(reason)


@dataclass
class GeminiProvider:
    """
    Gemini provider using Google Gen AI SDK (google-genai).
    Single-attempt. Retries/backoff handled by app/llm/client.py.
    """
    _client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if not settings.GEMINI_API_KEY:
            raise LLMNonRetryableError("GEMINI_API_KEY is missing")
        if self._client is None:
            self._client = genai.Client(api_key=settings.GEMINI_API_KEY)
        return self._client

    def _config(self, req: LLMRequest) -> types.GenerateContentConfig:
        # HttpOptions.timeout is in milliseconds
        return types.GenerateContentConfig(
            temperature=req.temperature,
            max_output_tokens=req.max_output_tokens,
            response_mime_type=req.response_mime_type,
            response_schema=req.response_schema,
            system_instruction=req.system_instruction,
            http_options=types.HttpOptions(timeout=int(req.timeout_seconds * 1000)),
        )

    def generate(self, req: LLMRequest, prompt: str) -> LLMResponse:
        client = self._get_client()
        start_ms = int(time.time() * 1000)

        try:
            resp = client.models.generate_content(
                model=req.model,
                contents=prompt,
                config=self._config(req),
            )
        # ---- classify failures so client.py knows what to retry ----
        except genai_errors.APIError as e:
            if e.code == 429:
                raise LLMRateLimitError(f"Gemini rate limited: {e}") from e
            if e.code is not None and e.code >= 500:
                raise LLMRetryableError(f"Gemini server error: {e}") from e
            raise LLMNonRetryableError(f"Gemini request rejected: {e}") from e
        except (httpx.TimeoutException, TimeoutError) as e:
            raise LLMRetryableError(f"Gemini call timed out: {e}") from e
        except httpx.HTTPError as e:
            raise LLMRetryableError(f"Gemini http error (retryable): {e}") from e
        except Exception as e:
            msg = str(e).lower()
            if any(x in msg for x in ["429", "resource_exhausted", "quota", "rate limit"]):
                raise LLMRateLimitError(f"Gemini rate limited: {e}") from e
            if any(x in msg for x in ["500", "503", "unavailable", "temporarily"]):
                raise LLMRetryableError(f"Gemini retryable failure: {e}") from e
            raise LLMNonRetryableError(f"Gemini non-retryable failure: {e}") from e

        finish_reason = _finish_reason(resp)
        text = (getattr(resp, "text", None) or "").strip()
        if not text:
            if finish_reason in BLOCKED_FINISH_REASONS:
                raise LLMEmptyResponseError(f"Gemini blocked the response (finish_reason={finish_reason})")
            raise LLMEmptyResponseError("Gemini returned no text")

        # Token usage: best-effort, won't break if missing
        input_tokens = None
        output_tokens = None
        usage = getattr(resp, "usage_metadata", None)
        if usage is not None:
            input_tokens = getattr(usage, "prompt_token_count", None)
            output_tokens = getattr(usage, "candidates_token_count", None)

        return LLMResponse(
            trace_id=req.trace_id,
            provider=req.provider,
            model=req.model,
            output_text=text,
            latency_ms=int(time.time() * 1000) - start_ms,
            retries=0,
            raw={"sdk_response_type": str(type(resp))},
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            finish_reason=finish_reason,
        )
