# app/llm/errors.py
class LLMError(Exception):
    """Base LLM error (wrapped)."""

class LLMRetryableError(LLMError):
    """Transient error: timeouts, 5xx, network."""

class LLMRateLimitError(LLMRetryableError):
    """Provider quota / 429. Not retried in-call; callers back off on their own schedule."""

class LLMNonRetryableError(LLMError):
    """Bad request, auth, missing API key, prompt too large."""

class LLMEmptyResponseError(LLMNonRetryableError):
    """Provider answered but returned no text (blocked, filtered, or empty candidate)."""
