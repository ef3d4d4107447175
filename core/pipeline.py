"""
Deep research pipeline: plan, research, refine, synthesize.
"""

import logging
import time

from core.metrics import get_performance_monitor
from core.planner import create_research_plan, refine_plan
from core.researcher import execute_research
from core.synthesizer import synthesize
from core.tools import RecordsToolSurface
from models.research import ResearchPlan, ResearchResults, SynthesizedAnswer

__all__ = ["deep_research", "research_refinements"]

logger = logging.getLogger(__name__)


async def research_refinements(
    results: ResearchResults, municipality: str, tools: RecordsToolSurface
) -> ResearchResults:
    """
    Refine the plan once from the findings and research only what was added.

    Findings for sub-questions the refinement superseded are dropped, so
    every sub-question of the refined plan is accounted for exactly once.
    """
    plan = results.plan
    refined = refine_plan(plan, results.findings)
    if refined is plan:
        return results

    added = [sq for sq in refined.sub_questions if sq not in plan.sub_questions]
    logger.info(f"Researching {len(added)} follow-up sub-questions")
    extra = await execute_research(
        ResearchPlan(original_query=plan.original_query, sub_questions=added),
        municipality,
        tools,
    )

    kept = {sq.question for sq in refined.sub_questions}
    return ResearchResults(
        plan=refined,
        findings=[f for f in results.findings + extra.findings if f.question in kept],
        unexplored=[q for q in results.unexplored + extra.unexplored if q in kept],
    )


async def deep_research(
    query: str,
    municipality: str,
    tools: RecordsToolSurface,
    refine: bool = True,
) -> SynthesizedAnswer:
    """
    Answer a research question end to end.

    Example:
        >>> answer = await deep_research("What boards exist?", "teaneck", tools)
        >>> answer.sources[0].title
        'Township Council'
    """
    start = time.time()

    logger.info(f"Planning: '{query}'")
    plan = create_research_plan(query)

    logger.info(f"Researching {len(plan.sub_questions)} sub-questions in {municipality}")
    results = await execute_research(plan, municipality, tools)

    if refine:
        results = await research_refinements(results, municipality, tools)

    logger.info(f"Synthesizing {len(results.findings)} findings")
    answer = synthesize(results)

    get_performance_monitor().record_research(time.time() - start, len(results.findings))
    return answer
