# app/llm/client.py

import json
import logging
import re
import time
import uuid
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.llm.errors import LLMNonRetryableError, LLMRateLimitError, LLMRetryableError
from app.llm.prompts.registry import get_prompt
from app.llm.telemetry import LLMCallLog, log_llm_call, now_ms
from app.llm.types import LLMRequest, LLMResponse
from app.llm.providers.gemini import GeminiProvider

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger("llm")


_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def _render_template(template: str, variables: dict) -> str:
    # single pass: substituted values are never re-scanned for placeholders
    def sub(m: re.Match) -> str:
        key = m.group(1)
        return str(variables[key]) if key in variables else m.group(0)

    return _PLACEHOLDER.sub(sub, template)


def _backoff_seconds(attempt: int) -> float:
    return min(2.0, 0.25 * (2 ** attempt))


def llm_generate(
    *,
    purpose: str,
    prompt_name: str,
    prompt_version: str,
    variables: dict,
    response_mime_type: str | None = None,
    response_schema: Any | None = None,
    provider: GeminiProvider | None = None,
) -> LLMResponse:
    trace_id = str(uuid.uuid4())

    if settings.LLM_PROVIDER != "gemini":
        raise LLMNonRetryableError(f"Unsupported provider: {settings.LLM_PROVIDER}")

    # Repair placeholder exists and is empty by default
    safe_vars = dict(variables)
    safe_vars.setdefault("__REPAIR_INSTRUCTIONS__", "")

    tmpl = get_prompt(prompt_name, prompt_version)
    rendered = _render_template(tmpl.template, safe_vars)

    req = LLMRequest(
        trace_id=trace_id,
        purpose=purpose,
        prompt_name=prompt_name,
        prompt_version=prompt_version,
        variables=safe_vars,
        provider="gemini",
        model=settings.GEMINI_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
        timeout_seconds=settings.LLM_TIMEOUT_SECONDS,
        response_mime_type=response_mime_type,
        response_schema=response_schema,
        system_instruction=tmpl.system_instruction,
    )

    if settings.LLM_LOG_PROMPTS:
        log_prompt = rendered if len(rendered) <= 2000 else rendered[:2000] + "..."
        logger.debug("llm_prompt trace_id=%s prompt=%s", trace_id, log_prompt)

    client = provider or GeminiProvider()

    start_ms = now_ms()
    retries = 0
    last_err: Exception | None = None

    def _log(ok: bool, err: Exception | None = None, resp: LLMResponse | None = None) -> None:
        log_llm_call(
            LLMCallLog(
                trace_id=trace_id,
                provider=req.provider,
                model=req.model,
                purpose=purpose,
                prompt_name=prompt_name,
                prompt_version=prompt_version,
                latency_ms=(now_ms() - start_ms),
                retries=retries,
                ok=ok,
                error_type=type(err).__name__ if err else None,
                input_tokens=resp.input_tokens if resp else None,
                output_tokens=resp.output_tokens if resp else None,
            )
        )

    for attempt in range(settings.LLM_MAX_RETRIES + 1):
        try:
            resp = client.generate(req, rendered)
            _log(True, resp=resp)

            return LLMResponse(
                trace_id=resp.trace_id,
                provider=resp.provider,
                model=resp.model,
                output_text=resp.output_text,
                latency_ms=resp.latency_ms,
                retries=retries,
                raw=resp.raw,
                input_tokens=resp.input_tokens,
                output_tokens=resp.output_tokens,
                finish_reason=resp.finish_reason,
            )

        except (LLMRateLimitError, LLMNonRetryableError) as e:
            # quota errors are not worth hammering within one call
            _log(False, e)
            raise

        except LLMRetryableError as e:
            last_err = e
            retries += 1

            if attempt >= settings.LLM_MAX_RETRIES:
                break

            time.sleep(_backoff_seconds(attempt))

    _log(False, last_err or LLMRetryableError("LLM failed after retries"))
    raise last_err if last_err else LLMRetryableError("LLM failed after retries")


def llm_generate_structured(
    *,
    purpose: str,
    prompt_name: str,
    prompt_version: str,
    variables: dict,
    schema: Type[T],
    provider: GeminiProvider | None = None,
) -> T:
    """Schema-constrained call with one repair attempt when the output does not validate."""
    resp = llm_generate(
        purpose=purpose,
        prompt_name=prompt_name,
        prompt_version=prompt_version,
        variables=variables,
        response_mime_type="application/json",
        response_schema=schema,
        provider=provider,
    )

    try:
        return schema.model_validate(json.loads(resp.output_text))
    except (json.JSONDecodeError, ValidationError):
        repaired_vars = dict(variables)
        repaired_vars["__REPAIR_INSTRUCTIONS__"] = (
            "You MUST return valid JSON only. "
            "Escape all quotes and newlines inside strings. "
            "No markdown. No trailing commas. "
            "Return EXACTLY the schema with correct types."
        )

        resp2 = llm_generate(
            purpose=purpose + "_repair",
            prompt_name=prompt_name,
            prompt_version=prompt_version,
            variables=repaired_vars,
            response_mime_type="application/json",
            response_schema=schema,
            provider=provider,
        )

        try:
            return schema.model_validate(json.loads(resp2.output_text))
        except (json.JSONDecodeError, ValidationError) as e:
            raise LLMNonRetryableError(f"{purpose}: output did not match schema after repair") from e
