"""
similar_topics.py
- Purpose: Rank stored questions by how related they are to the one being viewed.
- Score = search-topic match/overlap + key-term overlap + query-word overlap + recency boost.
  Records scoring 0 are dropped.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

MAX_RESULTS = 8
CANDIDATE_POOL = 100

TOPIC_CONTAINS_SCORE = 10
TOPIC_WORD_SCORE = 3
KEY_TERM_SCORE = 5
QUERY_WORD_SCORE = 2

# words this short or this common say nothing about the topic
QUERY_STOP_WORDS = frozenset(
    {"what", "is", "the", "of", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "with", "by"}
)


@dataclass(frozen=True)
class ScoredTopic:
    query: str
    slug: str | None
    score: int
    created_at: datetime


def _topic_score(current: str, other: str) -> int:
    if not current or not other:
        return 0
    score = TOPIC_CONTAINS_SCORE if (current in other or other in current) else 0
    other_words = set(other.split())
    shared = [w for w in current.split() if len(w) > 3 and w in other_words]
    return score + TOPIC_WORD_SCORE * len(shared)


def _key_term_score(current: Sequence[str], other: Sequence[str]) -> int:
    matches = [t for t in current if any(o in t or t in o for o in other)]
    return KEY_TERM_SCORE * len(matches)


def _query_words(query: str) -> list[str]:
    return [w for w in query.lower().split() if len(w) > 2 and w not in QUERY_STOP_WORDS]


def _recency_score(created_at: datetime, now: datetime) -> int:
    days = (now - created_at).total_seconds() / 86400
    if days < 7:
        return 2
    if days < 30:
        return 1
    return 0


def _result_topic(result: dict | None) -> str:
    content = (result or {}).get("content") or {}
    return str(content.get("searchTopic") or "").lower()


def _result_terms(result: dict | None) -> list[str]:
    content = (result or {}).get("content") or {}
    terms = []
    for kt in content.get("keyTerms") or []:
        term = kt.get("term") if isinstance(kt, dict) else None
        if term:
            terms.append(str(term).lower())
    return terms


def rank_similar(
    query: str,
    candidates: Iterable,
    *,
    search_topic: str | None = None,
    key_terms: Sequence[str] = (),
    now: datetime,
    limit: int = MAX_RESULTS,
) -> list[ScoredTopic]:
    """`candidates` are complete QuestionRecord-like objects (query, slug, result, created_at)."""
    topic = (search_topic or "").lower()
    terms = [t.lower() for t in key_terms if t]
    words = _query_words(query)

    scored: list[ScoredTopic] = []
    for rec in candidates:
        other_words = set(_query_words(rec.query))
        score = (
            _topic_score(topic, _result_topic(rec.result))
            + _key_term_score(terms, _result_terms(rec.result))
            + QUERY_WORD_SCORE * sum(1 for w in words if w in other_words)
            + _recency_score(rec.created_at, now)
        )
        if score > 0:
            scored.append(ScoredTopic(query=rec.query, slug=rec.slug, score=score, created_at=rec.created_at))

    # stable sort keeps newest-first among equal scores
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:limit]
