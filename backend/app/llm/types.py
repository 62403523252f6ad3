# app/llm/types.py
from dataclasses import dataclass
from typing import Any, Literal

JsonDict = dict[str, Any]

@dataclass(frozen=True)
class LLMRequest:
    trace_id: str
    purpose: str                    # e.g. "generate_questions", "answer_question"
    prompt_name: str                # registry key
    prompt_version: str             # e.g. "v1"
    variables: JsonDict             # variables for prompt template

    provider: str                   # "gemini"
    model: str                      # e.g. "gemini-2.5-flash"

    temperature: float
    max_output_tokens: int
    timeout_seconds: int

    # Strict JSON outputs for certain calls
    response_mime_type: str | None = None  # e.g. "application/json"
    # Pydantic model class handed to the SDK as the output schema
    response_schema: Any | None = None
    system_instruction: str | None = None

@dataclass(frozen=True)
class LLMResponse:
    trace_id: str
    provider: str
    model: str
    output_text: str

    # Optional metadata (provider-dependent)
    latency_ms: int
    retries: int
    raw: JsonDict | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None
    finish_reason: str | None = None

LLMStatus = Literal["ok", "error"]
