"""Answer caching for the Government Records MCP."""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from utils.config import get_config

logger = logging.getLogger(__name__)

# Cache configuration
CACHE_FILE = Path(".government_records_cache.json")

# In-memory cache (loaded from disk on first use)
_cache: Optional[Dict[str, Dict[str, Any]]] = None


def _ttl_seconds() -> int:
    return int(get_config()["cache"]["ttl_seconds"])


def _entries() -> Dict[str, Dict[str, Any]]:
    global _cache
    if _cache is None:
        _cache = load_cache()
    return _cache


def get_cache_key(tool_name: str, **params) -> str:
    """Generate cache key from tool name and parameters."""
    param_str = json.dumps(params, sort_keys=True)
    return hashlib.md5(f"{tool_name}:{param_str}".encode()).hexdigest()


def load_cache() -> Dict[str, Any]:
    """Load cache from disk."""
    if CACHE_FILE.exists():
        try:
            return json.loads(CACHE_FILE.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load cache: {e}")
    return {}


def save_cache() -> None:
    """Save cache to disk."""
    try:
        CACHE_FILE.write_text(json.dumps(_entries(), indent=2), encoding="utf-8")
    except OSError as e:
        logger.warning(f"Failed to save cache: {e}")


def get_cached_result(cache_key: str) -> Optional[str]:
    """Retrieve cached result if not expired."""
    entries = _entries()
    if cache_key in entries:
        cached = entries[cache_key]
        if time.time() - cached["timestamp"] < _ttl_seconds():
            return cached["result"]
        del entries[cache_key]
        save_cache()  # Clean up expired
    return None


def set_cached_result(cache_key: str, result: str) -> None:
    """Store result in cache with timestamp."""
    if not get_config()["cache"]["enabled"]:
        return
    _entries()[cache_key] = {"result": result, "timestamp": time.time()}
    save_cache()


def clear_cache() -> bool:
    """Clear all cached results."""
    global _cache
    _cache = {}
    try:
        if CACHE_FILE.exists():
            CACHE_FILE.unlink()
        return True
    except OSError as e:
        logger.error(f"Failed to clear cache: {e}")
        return False
