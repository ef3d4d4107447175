"""Configuration loading for the Government Records MCP.

Defaults live here; an optional ``config.json`` next to the server module
overrides them section by section, and environment variables (or a
``.env`` file) override both.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "adapters": {
        "teaneck_mode": "live",  # live | stub
        "page_timeout_seconds": 30.0,
        "connect_timeout_seconds": 15.0,
    },
    "research": {
        "max_keywords": 3,
        "max_meetings_per_question": 3,
        "tool_retries": 0,
        "confidence_preset": "balanced",
        "refine": True,
    },
    "llm": {
        "model": "claude-sonnet-4-5-20250929",
        "max_tokens": 2048,
    },
    "cache": {"enabled": True, "ttl_seconds": 3600},
    "rate_limit": {"window_seconds": 60, "max_calls": 30},
    "logging": {"level": "WARNING"},
}

# Environment variable -> (section, key, type)
ENV_OVERRIDES: Dict[str, tuple] = {
    "TEANECK_ADAPTER_MODE": ("adapters", "teaneck_mode", str),
    "PORTAL_TIMEOUT_SECONDS": ("adapters", "page_timeout_seconds", float),
    "RESEARCH_MAX_KEYWORDS": ("research", "max_keywords", int),
    "RESEARCH_TOOL_RETRIES": ("research", "tool_retries", int),
    "CONFIDENCE_PRESET": ("research", "confidence_preset", str),
    "ANTHROPIC_MODEL": ("llm", "model", str),
    "CACHE_TTL_SECONDS": ("cache", "ttl_seconds", int),
    "RATE_LIMIT_MAX_CALLS": ("rate_limit", "max_calls", int),
    "LOG_LEVEL": ("logging", "level", str),
}

_config: Optional[Dict[str, Any]] = None


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from config.json and the environment with fallback defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = path or CONFIG_PATH

    try:
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                overrides = json.load(f)
            for section, values in overrides.items():
                if isinstance(values, dict):
                    config.setdefault(section, {}).update(values)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not load {config_path.name}: {e}")

    for env_key, (section, key, cast) in ENV_OVERRIDES.items():
        raw = os.getenv(env_key, "").strip()
        if not raw:
            continue
        try:
            config[section][key] = cast(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid {env_key}={raw!r}")

    return config


def get_config() -> Dict[str, Any]:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration so the next access reloads it."""
    global _config
    _config = None


def get_anthropic_api_key() -> Optional[str]:
    """Get the Anthropic API key from the environment."""
    value = os.getenv("ANTHROPIC_API_KEY", "").strip()
    return value or None
