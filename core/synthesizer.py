"""
Synthesizer.

Combines research findings into one markdown answer with numbered citations,
flags findings that disagree about the same topic, lists the questions that
went unanswered and computes an overall confidence.
"""

import logging
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

from core.dedup import deduplicate_sources, value_key
from core.quality import weighted_mean
from models.research import (
    Contradiction,
    Finding,
    ResearchResults,
    Source,
    SynthesizedAnswer,
)
from utils.helpers import jaccard, normalize_text

__all__ = [
    "NEAR_DUPLICATE_THRESHOLD",
    "detect_contradictions",
    "format_with_citations",
    "synthesize",
]

logger = logging.getLogger(__name__)

NEAR_DUPLICATE_THRESHOLD = 0.8

# ══════════════════════════════════════════════════════════════════════════════
# Contradictions
# ══════════════════════════════════════════════════════════════════════════════

# (finding index, source, claim)
Claim = Tuple[int, Source, str]


def _question_topics(findings: Sequence[Finding]) -> List[str]:
    """Topic label per finding; near-duplicate questions share one."""
    labels: List[str] = []
    topics: List[str] = []
    for finding in findings:
        question = normalize_text(finding.question)
        label = next(
            (t for t in topics if jaccard(t, question) >= NEAR_DUPLICATE_THRESHOLD),
            None,
        )
        if label is None:
            topics.append(question)
            label = question
        labels.append(label)
    return labels


def _meeting_key(source: Source) -> Optional[str]:
    if source.url:
        return f"url:{source.url}"
    if source.date:
        return f"meeting:{normalize_text(source.title)}|{source.date}"
    return None


def detect_contradictions(findings: Sequence[Finding]) -> List[Contradiction]:
    """
    Find claims from different findings that disagree about one topic.

    A topic is either a sub-question (near-duplicate questions count as one)
    or a meeting (same url, or same title and date). Claims are finding
    answers and source excerpts. Two claims conflict when they come from
    different findings and different sources and their text is not a near
    duplicate.
    """
    groups: Dict[str, List[Claim]] = {}
    labels: Dict[str, str] = {}

    for index, (finding, label) in enumerate(zip(findings, _question_topics(findings))):
        if finding.sources and finding.answer:
            key = f"question:{label}"
            groups.setdefault(key, []).append((index, finding.sources[0], finding.answer))
            labels.setdefault(key, finding.question)

        for source in finding.sources:
            key = _meeting_key(source)
            if key is None or not source.excerpt:
                continue
            groups.setdefault(key, []).append((index, source, source.excerpt))
            labels.setdefault(key, f"{source.title} ({source.date})" if source.date else source.title)

    contradictions: List[Contradiction] = []
    seen: set = set()
    for key, claims in groups.items():
        for (ia, sa, ca), (ib, sb, cb) in combinations(claims, 2):
            if ia == ib or sa == sb:
                continue
            if jaccard(ca, cb) >= NEAR_DUPLICATE_THRESHOLD:
                continue
            pair = (key, ia, ib)
            if pair in seen:
                continue
            seen.add(pair)
            contradictions.append(
                Contradiction(
                    topic=labels[key],
                    source_a=sa,
                    claim_a=ca,
                    source_b=sb,
                    claim_b=cb,
                )
            )

    if contradictions:
        logger.info(f"Detected {len(contradictions)} contradictions")
    return contradictions


# ══════════════════════════════════════════════════════════════════════════════
# Synthesis
# ══════════════════════════════════════════════════════════════════════════════


def _overall_confidence(results: ResearchResults) -> float:
    findings = results.findings
    if not findings:
        return 0.0
    mean = weighted_mean(
        (f.confidence for f in findings),
        [max(len(f.sources), 1) for f in findings],
    )
    total = len(results.plan.sub_questions)
    answered = len(findings) / total if total else 1.0
    return round(min(1.0, mean * min(answered, 1.0)), 2)


def synthesize(results: ResearchResults) -> SynthesizedAnswer:
    """
    Merge findings into a cited markdown answer.

    Sources are merged in finding order with duplicates removed; source
    ``i`` is cited as ``[i + 1]``. Unexplored sub-questions become gaps.
    """
    gaps = list(results.unexplored)
    query = results.plan.original_query

    if not results.findings:
        lines = [f"No information was found for: {query}"]
        if gaps:
            lines += ["", "### Unanswered questions", ""]
            lines += [f"- {gap}" for gap in gaps]
        logger.info(f"Nothing found for '{query}'")
        return SynthesizedAnswer(answer="\n".join(lines), gaps=gaps, confidence=0.0)

    sources = deduplicate_sources(s for f in results.findings for s in f.sources)
    numbers = {value_key(s): i for i, s in enumerate(sources, 1)}

    sections: List[str] = []
    for finding in results.findings:
        cited = sorted({numbers[value_key(s)] for s in finding.sources})
        markers = "".join(f"[{n}]" for n in cited)
        body = f"{finding.answer} {markers}".strip()
        sections.append(f"### {finding.question}\n\n{body}")

    contradictions = detect_contradictions(results.findings)
    if contradictions:
        lines = ["### Conflicting information", ""]
        for c in contradictions:
            a = numbers.get(value_key(c.source_a))
            b = numbers.get(value_key(c.source_b))
            lines.append(f'- {c.topic}: "{c.claim_a}" [{a}] vs. "{c.claim_b}" [{b}]')
        sections.append("\n".join(lines))

    if gaps:
        sections.append("\n".join(["### Unanswered questions", ""] + [f"- {g}" for g in gaps]))

    answer = SynthesizedAnswer(
        answer="\n\n".join(sections),
        sources=sources,
        contradictions=contradictions,
        gaps=gaps,
        confidence=_overall_confidence(results),
    )
    logger.info(
        f"Synthesized {len(results.findings)} findings with {len(sources)} sources "
        f"(confidence {answer.confidence})"
    )
    return answer


def format_with_citations(text: str, sources: Sequence[Source]) -> str:
    """Append a numbered markdown source list: ``n. [title](url) (date)``."""
    if not sources:
        return text

    lines = [text, "", "## Sources", ""]
    for i, source in enumerate(sources, 1):
        entry = f"[{source.title}]({source.url})" if source.url else source.title
        if source.date:
            entry += f" ({source.date})"
        lines.append(f"{i}. {entry}")
    return "\n".join(lines)
