"""Tests for utils: config, cache, rate limiting and text helpers."""

import json
import time

import pytest

from utils import cache
from utils.cache import clear_cache, get_cache_key, get_cached_result, set_cached_result
from utils.config import get_anthropic_api_key, get_config, load_config, reset_config
from utils.helpers import extract_keywords, jaccard, normalize_query, normalize_text
from utils.rate_limit import check_rate_limit


class TestConfig:
    def test_defaults(self):
        config = get_config()
        assert config["adapters"]["teaneck_mode"] == "live"
        assert config["research"]["max_keywords"] == 3
        assert config["rate_limit"] == {"window_seconds": 60, "max_calls": 30}

    def test_adapter_settings_are_the_ones_adapters_read(self):
        assert set(get_config()["adapters"]) == {
            "teaneck_mode",
            "page_timeout_seconds",
            "connect_timeout_seconds",
        }

    def test_file_overrides_section_keys(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"research": {"max_keywords": 5}}))
        config = load_config(path)
        assert config["research"]["max_keywords"] == 5
        assert config["research"]["max_meetings_per_question"] == 3

    def test_invalid_file_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert load_config(path)["research"]["max_keywords"] == 3

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_MAX_CALLS", "2")
        monkeypatch.setenv("RESEARCH_MAX_KEYWORDS", "lots")
        reset_config()
        config = get_config()
        assert config["rate_limit"]["max_calls"] == 2
        assert config["research"]["max_keywords"] == 3

    def test_api_key(self, monkeypatch):
        assert get_anthropic_api_key() is None
        monkeypatch.setenv("ANTHROPIC_API_KEY", "  sk-test  ")
        assert get_anthropic_api_key() == "sk-test"


class TestCache:
    def test_round_trip(self):
        key = get_cache_key("ask_about_meetings", question="Budget?", municipality="teaneck")
        assert get_cached_result(key) is None
        set_cached_result(key, "The budget passed.")
        assert get_cached_result(key) == "The budget passed."
        assert cache.CACHE_FILE.exists()

    def test_key_ignores_param_order(self):
        assert get_cache_key("t", a=1, b=2) == get_cache_key("t", b=2, a=1)
        assert get_cache_key("t", a=1) != get_cache_key("u", a=1)

    def test_expired_entries_dropped(self, monkeypatch):
        set_cached_result("k", "old")
        later = time.time() + get_config()["cache"]["ttl_seconds"] + 1
        monkeypatch.setattr(cache.time, "time", lambda: later)
        assert get_cached_result("k") is None

    def test_disabled(self):
        get_config()["cache"]["enabled"] = False
        set_cached_result("k", "value")
        assert get_cached_result("k") is None

    def test_loaded_from_disk(self, monkeypatch):
        set_cached_result("k", "value")
        monkeypatch.setattr(cache, "_cache", None)
        assert get_cached_result("k") == "value"

    def test_clear(self):
        set_cached_result("k", "value")
        assert clear_cache() is True
        assert get_cached_result("k") is None
        assert not cache.CACHE_FILE.exists()


class TestRateLimit:
    def test_limit_per_tool(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_MAX_CALLS", "2")
        reset_config()
        assert check_rate_limit("list_boards")
        assert check_rate_limit("list_boards")
        assert not check_rate_limit("list_boards")
        assert check_rate_limit("get_meeting")


class TestHelpers:
    def test_normalize_query(self):
        assert normalize_query("  What   boards\nexist? ") == "What boards exist?"

    def test_normalize_text(self):
        assert normalize_text("Zoning Board - Regular Meeting!") == "zoning board regular meeting"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("What did the Planning Board say about Main Street?", ["planning", "board", "main"]),
            ("Any zoning hearings?", ["zoning", "hearings"]),
            ("What is it?", []),
            ("Resolution 2024-15 on the budget", ["resolution", "2024-15", "budget"]),
        ],
    )
    def test_extract_keywords(self, text, expected):
        assert extract_keywords(text) == expected

    def test_jaccard(self):
        assert jaccard("site plan approved", "site plan approved") == 1.0
        assert jaccard("", "") == 1.0
        assert jaccard("a b", "c d") == 0.0
