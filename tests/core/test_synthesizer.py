"""Tests for core/synthesizer.py."""

import re

from core.synthesizer import detect_contradictions, format_with_citations, synthesize
from models.research import Finding, ResearchPlan, ResearchResults, Source, SubQuestion


def make_results(findings, unexplored=(), extra_questions=()):
    questions = [f.question for f in findings] + list(unexplored) + list(extra_questions)
    plan = ResearchPlan(
        original_query="Test query",
        sub_questions=[SubQuestion(question=q, priority=i) for i, q in enumerate(questions, 1)],
    )
    return ResearchResults(plan=plan, findings=findings, unexplored=list(unexplored))


AGENDA = Source(type="document", title="Council Agenda", url="https://x/agenda/1", date="2024-12-10")
MINUTES = Source(type="document", title="Council Minutes", url="https://x/minutes/1")
MEETING = Source(type="meeting", title="Township Council - Regular Meeting", date="2024-12-10")


class TestSynthesize:
    """Test suite for synthesize."""

    def test_nothing_found(self):
        results = ResearchResults(
            plan=ResearchPlan(
                original_query="Parking?",
                sub_questions=[SubQuestion(question="Parking?")],
            ),
            unexplored=["Parking?"],
        )
        answer = synthesize(results)
        assert answer.answer.startswith("No information was found for: Parking?")
        assert "### Unanswered questions" in answer.answer
        assert answer.sources == []
        assert answer.gaps == ["Parking?"]
        assert answer.confidence == 0.0

    def test_citations_index_sources(self):
        findings = [
            Finding(question="When did the council meet?", answer="On Dec 10.",
                    sources=[MEETING, AGENDA], confidence=0.9),
            Finding(question="What was on the agenda?", answer="The budget.",
                    sources=[AGENDA, MINUTES], confidence=0.9),
        ]
        answer = synthesize(make_results(findings))

        assert answer.sources == [MEETING, AGENDA, MINUTES]
        assert "### When did the council meet?\n\nOn Dec 10. [1][2]" in answer.answer
        assert "The budget. [2][3]" in answer.answer

        # Every marker points at a real source
        markers = {int(n) for n in re.findall(r"\[(\d+)\]", answer.answer)}
        assert markers == {1, 2, 3}
        assert all(1 <= n <= len(answer.sources) for n in markers)

    def test_duplicate_sources_merged(self):
        findings = [
            Finding(question="Q1", answer="A1", sources=[AGENDA], confidence=1.0),
            Finding(question="Q2", answer="A2", sources=[AGENDA.model_copy()], confidence=1.0),
        ]
        answer = synthesize(make_results(findings))
        assert answer.sources == [AGENDA]
        assert "A2 [1]" in answer.answer

    def test_gaps_listed(self):
        findings = [Finding(question="Q1", answer="A1", sources=[AGENDA], confidence=1.0)]
        answer = synthesize(make_results(findings, unexplored=["Anything about parking?"]))
        assert answer.gaps == ["Anything about parking?"]
        assert answer.answer.endswith("### Unanswered questions\n\n- Anything about parking?")

    def test_confidence_weighted_by_sources_and_answered_share(self):
        findings = [
            Finding(question="Q1", answer="A1", sources=[AGENDA], confidence=0.9),
            Finding(question="Q2", answer="A2", sources=[MEETING, MINUTES, Source(type="meeting", title="Planning Board")], confidence=0.5),
        ]
        assert synthesize(make_results(findings)).confidence == 0.6
        assert synthesize(make_results(findings, unexplored=["Q3"])).confidence == 0.4

    def test_confidence_in_range(self):
        findings = [Finding(question="Q1", answer="A1", sources=[AGENDA], confidence=1.0)]
        answer = synthesize(make_results(findings))
        assert 0.0 <= answer.confidence <= 1.0


class TestContradictions:
    """Test suite for detect_contradictions."""

    def test_same_meeting_different_claims(self):
        approved = Source(type="meeting", title="Planning Board - Regular Meeting",
                          date="2024-12-04", excerpt="Approved the site plan")
        denied = approved.model_copy(update={"excerpt": "Denied the site plan"})
        findings = [
            Finding(question="What did the Planning Board decide on the site plan?",
                    answer="It was approved.", sources=[approved], confidence=0.8),
            Finding(question="Was the site plan denied?",
                    answer="Reports say it was denied.", sources=[denied], confidence=0.8),
        ]
        contradictions = detect_contradictions(findings)
        assert len(contradictions) == 1
        c = contradictions[0]
        assert c.topic == "Planning Board - Regular Meeting (2024-12-04)"
        assert (c.claim_a, c.claim_b) == ("Approved the site plan", "Denied the site plan")

        answer = synthesize(make_results(findings))
        assert "### Conflicting information" in answer.answer
        assert '"Approved the site plan" [1] vs. "Denied the site plan" [2]' in answer.answer

    def test_near_duplicate_questions_share_a_topic(self):
        findings = [
            Finding(question="When did the Planning Board last meet?",
                    answer="It met on 2024-12-04.", sources=[MEETING], confidence=0.8),
            Finding(question="When did the Planning Board last meet",
                    answer="The last session was in November to review budgets.",
                    sources=[AGENDA], confidence=0.8),
        ]
        contradictions = detect_contradictions(findings)
        assert [c.topic for c in contradictions] == ["When did the Planning Board last meet?"]

    def test_agreeing_sources(self):
        source = Source(type="meeting", title="Council", url="https://x/m/1", excerpt="Adopted")
        findings = [
            Finding(question="Q1", answer="Adopted.", sources=[source], confidence=1.0),
            Finding(question="Something else entirely", answer="Adopted.", sources=[source], confidence=1.0),
        ]
        assert detect_contradictions(findings) == []

    def test_single_finding(self):
        findings = [Finding(question="Q1", answer="A1", sources=[AGENDA, MINUTES], confidence=1.0)]
        assert detect_contradictions(findings) == []


class TestFormatWithCitations:
    def test_numbered_source_list(self):
        text = format_with_citations("Answer [1][2]", [AGENDA, MEETING])
        assert text.splitlines() == [
            "Answer [1][2]",
            "",
            "## Sources",
            "",
            "1. [Council Agenda](https://x/agenda/1) (2024-12-10)",
            "2. Township Council - Regular Meeting (2024-12-10)",
        ]

    def test_no_sources(self):
        assert format_with_citations("Nothing", []) == "Nothing"
