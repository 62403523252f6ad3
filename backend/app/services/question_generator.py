"""
question_generator.py
- Purpose: Ask the LLM for a batch of new biblical questions.
- Contract: never raises for provider trouble; an empty list means "try again later".
"""

import logging

from app.llm.client import llm_generate
from app.llm.errors import LLMError, LLMRateLimitError
from app.llm.parsing import parse_question_list

logger = logging.getLogger("app.services.question_generator")

PROMPT_NAME = "generate_questions"
PROMPT_VERSION = "v1"


def generate_questions(count: int) -> list[str]:
    try:
        resp = llm_generate(
            purpose="generate_questions",
            prompt_name=PROMPT_NAME,
            prompt_version=PROMPT_VERSION,
            variables={"count": count},
        )
    except LLMRateLimitError as e:
        logger.warning("questions.rate_limited", extra={"requested": count, "error": str(e)})
        return []
    except LLMError as e:
        logger.error("questions.llm_failed", extra={"requested": count, "error": str(e), "error_type": type(e).__name__})
        return []

    parsed = parse_question_list(resp.output_text, count)
    log = logger.info if parsed.ok else logger.warning
    log(
        "questions.parsed",
        extra={"parse_path": parsed.kind, "requested": count, "returned": len(parsed.value), "trace_id": resp.trace_id},
    )
    return parsed.value
