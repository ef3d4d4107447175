"""
Reliability utilities: retry logic for tool calls.

Portal requests fail transiently (timeouts, 5xx from IQM2). Retries use
exponential backoff with jitter; once attempts are exhausted the last error
is raised so the caller can account for the failure.
"""

import asyncio
import logging
import random
from enum import Enum
from typing import Any, Callable, Tuple, Type

from core.errors import ConfigurationError

__all__ = [
    "RetryStrategy",
    "resilient_api_call",
]

logger = logging.getLogger(__name__)

# Errors that a retry cannot fix.
NON_RETRYABLE: Tuple[Type[BaseException], ...] = (ConfigurationError,)

# ══════════════════════════════════════════════════════════════════════════════
# Retry Logic
# ══════════════════════════════════════════════════════════════════════════════


class RetryStrategy(Enum):
    """Retry delay strategies."""

    EXPONENTIAL = "exponential"  # 1s, 2s, 4s, 8s
    LINEAR = "linear"  # 1s, 2s, 3s, 4s
    CONSTANT = "constant"  # 2s, 2s, 2s, 2s


async def resilient_api_call(
    func: Callable,
    *args,
    max_retries: int = 1,
    base_delay: float = 0.5,
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL,
    **kwargs,
) -> Any:
    """
    Execute function with automatic retry logic.

    Args:
        func: Async function to call
        *args: Positional arguments
        max_retries: Maximum retry attempts (0 calls once)
        base_delay: Base delay between retries
        strategy: Retry delay strategy
        **kwargs: Keyword arguments

    Returns:
        Result from func

    Raises:
        The last error raised by func once retries are exhausted, or
        immediately for errors in NON_RETRYABLE.
    """
    for attempt in range(max_retries + 1):
        try:
            return await func(*args, **kwargs)
        except NON_RETRYABLE:
            raise
        except Exception as e:
            if attempt >= max_retries:
                if max_retries:
                    logger.error(f"Failed after {max_retries + 1} attempts: {e}")
                raise

            delay = _calculate_delay(attempt, base_delay, strategy)
            logger.warning(
                f"Retry {attempt + 1}/{max_retries}: {type(e).__name__}. "
                f"Waiting {delay:.1f}s..."
            )
            await asyncio.sleep(delay)


def _calculate_delay(attempt: int, base: float, strategy: RetryStrategy) -> float:
    """Calculate retry delay with jitter."""
    if strategy == RetryStrategy.EXPONENTIAL:
        delay = min(base * (2**attempt), 10.0)
    elif strategy == RetryStrategy.LINEAR:
        delay = min(base * (attempt + 1), 10.0)
    else:
        delay = base

    return delay + random.uniform(0, 0.1 * delay)
