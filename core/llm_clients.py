"""
LLM API client functions.

Calls the Anthropic Messages API over httpx and returns the model's text.
Every failure surfaces as UpstreamModelError; there is no fallback answer.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Sequence, Union

import httpx

from core.errors import UpstreamModelError

__all__ = ["ANTHROPIC_URL", "call_anthropic"]

logger = logging.getLogger(__name__)

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_TIMEOUT = 60.0


def _extract_text_field(
    data: Dict[str, Any], path: Sequence[Union[str, int]], provider: str
) -> str:
    """Safely walk a nested provider response and return a text field."""

    current: Any = data
    for key in path:
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError) as exc:
            message = f"Unexpected {provider} response structure; missing {key!r}"
            raise UpstreamModelError(message) from exc

    if not isinstance(current, str):
        message = (
            f"Expected {provider} response text at {list(path)} "
            f"but received {type(current).__name__}"
        )
        raise UpstreamModelError(message)

    return current


async def _post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Iterable[tuple[str, str]] | None = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """Execute a JSON POST request and return the decoded body."""

    normalized_headers = dict(headers or [])
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT, transport=transport) as client:
        response = await client.post(url, headers=normalized_headers, json=payload)
        response.raise_for_status()
        return response.json()


async def call_anthropic(
    api_key: Optional[str],
    prompt: str,
    model: str,
    max_tokens: int = 2048,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Call Anthropic Claude API and return the first text block."""
    if not api_key:
        raise UpstreamModelError("ANTHROPIC_API_KEY is not set")

    headers = {
        "x-api-key": api_key,
        "anthropic-version": ANTHROPIC_VERSION,
        "Content-Type": "application/json",
    }

    payload = {
        "model": model,
        "max_tokens": max_tokens,
        "messages": [{"role": "user", "content": prompt}],
    }

    try:
        data = await _post_json(
            ANTHROPIC_URL, payload, headers=headers.items(), transport=transport
        )
    except httpx.HTTPStatusError as e:
        raise UpstreamModelError(
            f"Anthropic API returned HTTP {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise UpstreamModelError(f"Anthropic API request failed: {e}") from e
    except ValueError as e:
        raise UpstreamModelError(f"Anthropic API returned invalid JSON: {e}") from e

    text = _extract_text_field(data, ("content", 0, "text"), "anthropic")
    logger.debug(f"Anthropic returned {len(text)} characters")
    return text
