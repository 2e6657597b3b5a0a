"""
Utility functions for working with API errors and response bodies.

This module provides helper functions that can be used independently
of the client classes.
"""

import re
from typing import Optional

from .exceptions import ErrorKind

SNIPPET_LENGTH = 200

_WHITESPACE = re.compile(r"\s+")


def is_rate_limit_error(error: BaseException) -> bool:
    """
    Determine if an exception is related to rate limiting.

    The client never retries on its own. Callers that want a retry policy
    can use this to decide when to back off. It looks for:

    1. A :class:`~resendex.exceptions.RateLimitError` (or anything with a
       ``kind`` of ``ErrorKind.RATE_LIMIT``)
    2. HTTP 429 status code directly on the error
    3. HTTP 429 status code on ``error.response``
    4. Rate limit related phrases in the error message

    Args:
        error: The exception to check

    Returns:
        True if the error appears to be a rate limit error, False otherwise

    Examples:
        ```python
        try:
            await client.emails.send(email)
        except ResendError as e:
            if is_rate_limit_error(e):
                await asyncio.sleep(e.retry_after or 1)
                # Then retry
            else:
                raise
        ```
    """
    if getattr(error, "kind", None) == ErrorKind.RATE_LIMIT:
        return True

    if getattr(error, "status_code", None) == 429:
        return True

    response = getattr(error, "response", None)
    if getattr(response, "status_code", None) == 429:
        return True

    error_str = str(error).lower()
    rate_limit_phrases = ["rate limit", "ratelimit", "too many requests", "quota exceeded", "throttl"]
    return any(phrase in error_str for phrase in rate_limit_phrases)


def body_snippet(raw: bytes, limit: int = SNIPPET_LENGTH) -> str:
    """
    A short, single-line excerpt of a response body for error messages.

    Runs of whitespace collapse to one space and the result is cut to
    ``limit`` characters, with ``...`` marking the cut.
    """
    text = raw.decode("utf-8", errors="replace")
    text = _WHITESPACE.sub(" ", text).strip()
    if len(text) > limit:
        return text[: limit - 3].rstrip() + "..."
    return text


def is_html_content_type(content_type: Optional[str]) -> bool:
    """True for HTML bodies, such as error pages served by an edge proxy."""
    return bool(content_type) and "html" in content_type.lower()
