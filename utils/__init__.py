"""
Utility functions for configuration, caching, rate limiting and text helpers.

All utilities are lightweight with minimal dependencies.
"""

from utils.cache import (
    clear_cache,
    get_cache_key,
    get_cached_result,
    set_cached_result,
)
from utils.config import get_anthropic_api_key, get_config, load_config
from utils.helpers import (
    extract_keywords,
    jaccard,
    normalize_query,
    normalize_text,
    tokenize,
)
from utils.rate_limit import check_rate_limit, reset_rate_limits

__all__ = [
    # Config
    "get_config",
    "load_config",
    "get_anthropic_api_key",
    # Cache
    "get_cache_key",
    "get_cached_result",
    "set_cached_result",
    "clear_cache",
    # Rate limiting
    "check_rate_limit",
    "reset_rate_limits",
    # Helpers
    "normalize_query",
    "normalize_text",
    "tokenize",
    "extract_keywords",
    "jaccard",
]
