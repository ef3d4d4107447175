"""Rate limiting utilities for the Government Records MCP."""

import time
from typing import Dict, List

from utils.config import get_config

# Rate limit tracker (tool_name -> list of timestamps)
_rate_limit_tracker: Dict[str, List[float]] = {}


def check_rate_limit(tool_name: str) -> bool:
    """
    Check if tool call is within rate limit.
    Returns True if allowed, False if rate limited.
    """
    settings = get_config()["rate_limit"]
    window = settings["window_seconds"]
    max_calls = settings["max_calls"]

    now = time.time()
    if tool_name not in _rate_limit_tracker:
        _rate_limit_tracker[tool_name] = []

    # Remove old timestamps outside the window
    _rate_limit_tracker[tool_name] = [
        ts for ts in _rate_limit_tracker[tool_name] if now - ts < window
    ]

    if len(_rate_limit_tracker[tool_name]) >= max_calls:
        return False

    _rate_limit_tracker[tool_name].append(now)
    return True


def reset_rate_limits() -> None:
    """Forget all recorded calls."""
    _rate_limit_tracker.clear()
