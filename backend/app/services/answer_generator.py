"""
answer_generator.py
- Purpose: Produce the full study record for one question, and interlinear breakdowns.
- Raises LLMError only when the provider call fails or returns no text.
  Off-topic input comes back as StudyResponse(is_relevant=False, refusal_message=...).
"""

import logging

from app.llm.client import llm_generate, llm_generate_structured
from app.llm.parsing import parse_study_response
from app.schemas.study import InterlinearData, StudyResponse

logger = logging.getLogger("app.services.answer_generator")

PROMPT_VERSION = "v1"


def generate_answer(question: str) -> StudyResponse:
    resp = llm_generate(
        purpose="answer_question",
        prompt_name="answer_question",
        prompt_version=PROMPT_VERSION,
        variables={"question": question},
        response_mime_type="application/json",
        response_schema=StudyResponse,
    )

    parsed = parse_study_response(resp.output_text, question)
    if parsed.kind != "structured":
        logger.warning(
            "answer.parse_degraded",
            extra={"parse_path": parsed.kind, "trace_id": resp.trace_id, "chars": len(resp.output_text)},
        )
    return parsed.value


def generate_interlinear(reference: str) -> InterlinearData:
    return llm_generate_structured(
        purpose="interlinear",
        prompt_name="interlinear",
        prompt_version=PROMPT_VERSION,
        variables={"reference": reference},
        schema=InterlinearData,
    )
