"""Query planning: topic + prior learnings -> unique search queries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import QueryPlan, ResearchQuery
from .parsing import ParseFailure, parse_structured
from .prompts import query_planning_prompt, system_prompt

if TYPE_CHECKING:
    from ..llm.protocol import LanguageModel

logger = logging.getLogger(__name__)


class QueryPlanner:
    """Turns a topic into at most N unique ResearchQuery objects."""

    def __init__(self, model: LanguageModel):
        self.model = model

    async def generate_queries(
        self,
        topic: str,
        max_count: int,
        prior_learnings: list[str] | None = None,
    ) -> list[ResearchQuery]:
        """
        Plan search queries for a topic.

        Returns an empty list on any generation or shape failure; retrying is
        up to the caller.
        """
        if max_count <= 0:
            return []

        try:
            output = await self.model.generate(
                system_prompt(),
                query_planning_prompt(topic, max_count, prior_learnings),
                structured=True,
            )
        except Exception as e:
            logger.error(f"Query planning call failed: {e}")
            return []

        outcome = parse_structured(output.text, QueryPlan)
        if isinstance(outcome, ParseFailure):
            logger.warning(f"Malformed query plan ({outcome.reason}): {outcome.raw_text[:200]}")
            return []

        seen: set[str] = set()
        queries: list[ResearchQuery] = []
        for planned in outcome.value.queries:
            if planned.query in seen:
                continue
            seen.add(planned.query)
            queries.append(planned)

        if not queries:
            logger.warning("Query plan contained no queries")
            return []

        queries = queries[:max_count]
        logger.info(f"Planned {len(queries)} queries: {[q.query for q in queries]}")
        return queries
