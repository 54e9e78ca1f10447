"""
Recursive research orchestration.

Each node of the research tree plans up to `breadth` queries, runs one branch
per query (search -> distill -> optionally recurse with a smaller budget) and
merges the branches' results. Every failure below the top-level call is
absorbed into an empty partial result at the point where it happens.

Limiter scope:
- "global": one semaphore per top-level research() call, shared by the
  whole tree. A branch holds a permit only for its own search + distill
  step and releases it before recursing, so at most `concurrency_limit`
  search/distill steps are ever in flight and recursion cannot deadlock.
- "per_node": a fresh semaphore for every node, held by each branch for its
  entire subtree. In-flight work can multiply across levels.
"""

from __future__ import annotations

import asyncio
import logging
import math
from contextlib import AbstractAsyncContextManager, nullcontext
from typing import TYPE_CHECKING, Literal

from ..utils.logging import StructuredLogger
from .models import Distillation, ResearchQuery, ResearchResult, unique
from .prompts import next_query

if TYPE_CHECKING:
    from .distiller import ContentDistiller
    from .executor import SearchExecutor
    from .planner import QueryPlanner

logger = logging.getLogger(__name__)

LimiterScope = Literal["global", "per_node"]


class ResearchOrchestrator:
    """Bounded, self-similar research tree with failure isolation."""

    def __init__(
        self,
        planner: QueryPlanner,
        executor: SearchExecutor,
        distiller: ContentDistiller,
        concurrency_limit: int = 2,
        limiter_scope: LimiterScope = "global",
        max_learnings: int = 3,
    ):
        """
        Initialize orchestrator.

        Args:
            planner: Query planner
            executor: Bounded search executor
            distiller: Content distiller
            concurrency_limit: Max simultaneously running branch steps
            limiter_scope: "global" or "per_node" (see module docstring)
            max_learnings: Learnings requested per distillation
        """
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be >= 1")
        if limiter_scope not in ("global", "per_node"):
            raise ValueError(f"Unknown limiter_scope: {limiter_scope}")

        self.planner = planner
        self.executor = executor
        self.distiller = distiller
        self.concurrency_limit = concurrency_limit
        self.limiter_scope = limiter_scope
        self.max_learnings = max_learnings

    async def research(
        self,
        query: str,
        breadth: int,
        depth: int,
        learnings: list[str] | None = None,
        visited_urls: list[str] | None = None,
    ) -> ResearchResult:
        """
        Research query to the given breadth and depth.

        Args:
            query: Topic or synthesized follow-up query
            breadth: Max sibling queries at this node
            depth: Remaining research rounds
            learnings: Learnings carried in from earlier research
            visited_urls: URLs carried in from earlier research

        Returns:
            Deduplicated learnings and URLs of the whole tree

        Raises:
            ValueError: On negative breadth or depth
        """
        if breadth < 0:
            raise ValueError("breadth must be >= 0")
        if depth < 0:
            raise ValueError("depth must be >= 0")

        shared_limiter = (
            asyncio.Semaphore(self.concurrency_limit)
            if self.limiter_scope == "global"
            else None
        )
        logger.info(f"Starting research: breadth={breadth} depth={depth} scope={self.limiter_scope}")

        return await self._research_node(
            query,
            breadth,
            depth,
            unique(learnings or []),
            unique(visited_urls or []),
            shared_limiter,
        )

    async def _research_node(
        self,
        query: str,
        breadth: int,
        depth: int,
        learnings: list[str],
        visited_urls: list[str],
        shared_limiter: asyncio.Semaphore | None,
    ) -> ResearchResult:
        log = StructuredLogger(__name__, depth=depth, breadth=breadth)

        serp_queries = await self._plan(query, breadth, learnings, log)
        if not serp_queries:
            log.info("No queries planned, retrying once")
            serp_queries = await self._plan(query, breadth, learnings, log)
        if not serp_queries:
            log.warning("Planning failed twice, pruning this node")
            return ResearchResult()

        node_limiter = (
            asyncio.Semaphore(self.concurrency_limit) if shared_limiter is None else None
        )

        results = await asyncio.gather(
            *(
                self._run_branch(
                    serp_query,
                    breadth,
                    depth,
                    learnings,
                    visited_urls,
                    node_limiter,
                    shared_limiter,
                    log,
                )
                for serp_query in serp_queries
            )
        )

        return ResearchResult.merge(results)

    async def _plan(
        self, query: str, breadth: int, learnings: list[str], log: StructuredLogger
    ) -> list[ResearchQuery]:
        try:
            return await self.planner.generate_queries(query, breadth, learnings)
        except Exception as e:
            log.error(f"Query planning failed: {e}")
            return []

    async def _run_branch(
        self,
        serp_query: ResearchQuery,
        breadth: int,
        depth: int,
        learnings: list[str],
        visited_urls: list[str],
        node_limiter: asyncio.Semaphore | None,
        shared_limiter: asyncio.Semaphore | None,
        log: StructuredLogger,
    ) -> ResearchResult:
        """One branch; never raises (except on cancellation)."""
        log = log.add_context(query=serp_query.query[:40])
        try:
            async with _hold(node_limiter):
                return await self._explore(
                    serp_query, breadth, depth, learnings, visited_urls, shared_limiter, log
                )
        except Exception as e:
            log.error(f"Branch failed: {e}")
            return ResearchResult()

    async def _explore(
        self,
        serp_query: ResearchQuery,
        breadth: int,
        depth: int,
        learnings: list[str],
        visited_urls: list[str],
        shared_limiter: asyncio.Semaphore | None,
        log: StructuredLogger,
    ) -> ResearchResult:
        child_breadth = math.ceil(breadth / 2)
        child_depth = max(depth - 1, 0)

        async with _hold(shared_limiter):
            documents = await self.executor.search(serp_query.query)
            new_urls = [doc.url for doc in documents if doc.url]
            distilled = await self._distill(serp_query.query, documents, child_breadth, log)

        all_learnings = unique([*learnings, *distilled.learnings])
        all_urls = unique([*visited_urls, *new_urls])

        if child_depth > 0:
            log.info(f"Researching deeper, breadth: {child_breadth}, depth: {child_depth}")
            return await self._research_node(
                next_query(serp_query.research_goal, distilled.follow_up_questions),
                child_breadth,
                child_depth,
                all_learnings,
                all_urls,
                shared_limiter,
            )

        return ResearchResult(learnings=all_learnings, visited_urls=all_urls)

    async def _distill(
        self,
        query: str,
        documents: list,
        max_follow_ups: int,
        log: StructuredLogger,
    ) -> Distillation:
        distilled = await self.distiller.distill(
            query, documents, max_learnings=self.max_learnings, max_follow_ups=max_follow_ups
        )
        if not distilled.learnings:
            log.info(f"No learnings for '{query[:50]}', retrying once")
            distilled = await self.distiller.distill(
                query, documents, max_learnings=self.max_learnings, max_follow_ups=max_follow_ups
            )
        return distilled


def _hold(limiter: asyncio.Semaphore | None) -> AbstractAsyncContextManager:
    """The limiter itself, or a no-op context when there is none."""
    return limiter if limiter is not None else nullcontext()
