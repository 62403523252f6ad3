"""
parsing.py
- Purpose: Turn free-form LLM text into typed values without string-matching control flow.
- Every parser returns a ParseResult tagged with which path produced it:
    structured   -> the primary (JSON) path worked
    fallback     -> a recovery path (line split / embedded JSON) worked
    unparseable  -> nothing usable; `value` holds the caller's empty/synthetic default
"""

import json
import re
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from pydantic import ValidationError

from app.schemas.study import GeographicalAnchor, StudyContent, StudyResponse

T = TypeVar("T")

ParseKind = Literal["structured", "fallback", "unparseable"]

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_ENUMERATION = re.compile(r"^[0-9]+\.\s*")
_BULLET = re.compile(r"^[-*]\s*")
_WRAPPING_QUOTES = re.compile(r"^[\"']|[\"']$")

MIN_QUESTION_LENGTH = 10
SYNTHETIC_ANSWER_CHARS = 500


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    kind: ParseKind
    value: T

    @property
    def ok(self) -> bool:
        return self.kind != "unparseable"


def _questions_from_json(text: str) -> list[str] | None:
    match = _JSON_ARRAY.search(text)
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(data, list):
        return None
    return [str(q).strip() for q in data if isinstance(q, str) and q.strip()]


def _questions_from_lines(text: str) -> list[str]:
    out: list[str] = []
    for line in text.splitlines():
        q = line.strip()
        if len(q) <= MIN_QUESTION_LENGTH or q.startswith(("{", "[")):
            continue
        q = _ENUMERATION.sub("", q)
        q = _BULLET.sub("", q)
        q = _WRAPPING_QUOTES.sub("", q).strip()
        if q:
            out.append(q)
    return out


def parse_question_list(text: str, count: int) -> ParseResult[list[str]]:
    """JSON array first, then one-question-per-line. Always truncated to `count`."""
    text = text or ""

    questions = _questions_from_json(text)
    if questions is not None:
        return ParseResult("structured", questions[:count])

    questions = _questions_from_lines(text)
    if questions:
        return ParseResult("fallback", questions[:count])

    return ParseResult("unparseable", [])


def synthetic_study(question: str, raw_text: str) -> StudyResponse:
    return StudyResponse(
        is_relevant=True,
        content=StudyContent(
            literal_answer=raw_text[:SYNTHETIC_ANSWER_CHARS],
            search_topic=question,
            geographical_anchor=GeographicalAnchor(),
            historical_context=raw_text,
        ),
    )


def _validate_study(candidate: str) -> StudyResponse | None:
    try:
        return StudyResponse.model_validate(json.loads(candidate))
    except (json.JSONDecodeError, ValidationError):
        return None


def parse_study_response(text: str, question: str) -> ParseResult[StudyResponse]:
    """Whole text as JSON, then the outermost {...} inside it, then a synthetic record."""
    text = text or ""

    study = _validate_study(text)
    if study is not None:
        return ParseResult("structured", study)

    match = _JSON_OBJECT.search(text)
    if match:
        study = _validate_study(match.group(0))
        if study is not None:
            return ParseResult("fallback", study)

    return ParseResult("unparseable", synthetic_study(question, text))
