"""
slugify.py
- Purpose: SEO-friendly URL slugs for question pages.

  "tell me something about noah prophet" -> "noah-prophet"
  "what is hell"                          -> "what-is-hell"   (<= 3 words keep everything)
"""

import random
import re
import string
import uuid
from typing import Collection

MAX_SLUG_LENGTH = 60
FALLBACK_SLUG = "search"
SUFFIX_LENGTH = 4
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_ATTEMPTS = 5

NOISE_WORDS = frozenset(
    {
        "tell", "me", "something", "about", "can", "you", "please",
        "what", "is", "are", "who", "where", "when", "why", "how",
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    }
)

_PUNCTUATION = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def _finish(slug: str) -> str:
    slug = _HYPHENS.sub("-", slug).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


def generate_slug(query: str) -> str:
    cleaned = _PUNCTUATION.sub("", (query or "").lower().strip())
    words = cleaned.split()

    if len((query or "").split()) > 3:
        words = [w for w in words if w not in NOISE_WORDS]

    slug = _finish("-".join(words))
    if not slug:
        # only noise words: keep them rather than return nothing
        slug = _finish(_WHITESPACE.sub("-", cleaned))

    return slug or FALLBACK_SLUG


def _random_suffix() -> str:
    return "".join(random.choices(_SUFFIX_ALPHABET, k=SUFFIX_LENGTH))


def generate_unique_slug(query: str, existing_slugs: Collection[str] = ()) -> str:
    slug = generate_slug(query)
    if slug not in existing_slugs:
        return slug

    for _ in range(_SUFFIX_ATTEMPTS):
        candidate = f"{slug}-{_random_suffix()}"
        if candidate not in existing_slugs:
            return candidate

    return f"{slug}-{uuid.uuid4().hex[:8]}"
