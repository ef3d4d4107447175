"""End-to-end tests for core/pipeline.py deep research."""

import re

import pytest

from core.errors import ConfigurationError
from core.metrics import get_performance_monitor
from core.pipeline import deep_research


class TestDeepResearch:
    """Test suite for deep_research."""

    @pytest.mark.asyncio
    async def test_what_boards_exist(self, township_council_tools):
        answer = await deep_research("What boards exist?", "testtown", township_council_tools)

        assert any(
            s.title == "Township Council" and s.type == "meeting" for s in answer.sources
        )
        assert answer.gaps == []
        assert answer.contradictions == []
        assert "### What boards exist?" in answer.answer
        assert "[1]" in answer.answer
        assert answer.confidence == 1.0

    @pytest.mark.asyncio
    async def test_nothing_found(self, township_council_tools):
        answer = await deep_research(
            "What happened with the Main St development?", "testtown", township_council_tools
        )
        assert answer.sources == []
        assert answer.confidence == 0.0
        assert answer.gaps == [
            "Which board is responsible for Main St development?",
            "What happened with the Main St development?",
        ]
        assert answer.answer.startswith("No information was found for:")

    @pytest.mark.asyncio
    async def test_refinement_finds_meeting_documents(self, stub_tools):
        answer = await deep_research("When did the Zoning Board meet?", "teaneck", stub_tools)

        document_urls = [s.url for s in answer.sources if s.type == "document"]
        assert any(url.endswith("ID=2851") for url in document_urls)
        assert "(meeting zb-2024-12-05)" in answer.answer
        assert answer.gaps == []

    @pytest.mark.asyncio
    async def test_without_refinement(self, stub_tools):
        answer = await deep_research(
            "When did the Zoning Board meet?", "teaneck", stub_tools, refine=False
        )
        assert all(s.type == "meeting" for s in answer.sources)
        assert "(meeting" not in answer.answer

    @pytest.mark.asyncio
    async def test_citations_resolve(self, stub_tools):
        answer = await deep_research(
            "Which board is responsible for zoning? Are the minutes posted?",
            "teaneck",
            stub_tools,
        )
        markers = {int(n) for n in re.findall(r"\[(\d+)\]", answer.answer)}
        assert markers
        assert max(markers) <= len(answer.sources)
        assert 0.0 <= answer.confidence <= 1.0

    @pytest.mark.asyncio
    async def test_records_run(self, township_council_tools):
        await deep_research("What boards exist?", "testtown", township_council_tools)
        summary = get_performance_monitor().summary()
        assert summary["total_research_runs"] == 1

    @pytest.mark.asyncio
    async def test_unknown_municipality(self, stub_tools):
        with pytest.raises(ConfigurationError):
            await deep_research("What boards exist?", "atlantis", stub_tools)
