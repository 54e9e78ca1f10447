"""
deepresearch - Recursive web research agent.

Expands a topic into search queries, distills the results into learnings,
follows up on what it found to a bounded breadth and depth, and writes a
final markdown report.

Example:
    import asyncio
    from deepresearch import (
        ContentDistiller, ContextBudgeter, QueryPlanner, ReportComposer,
        ResearchOrchestrator, SearchExecutor, TiktokenTokenizer,
    )
    from deepresearch.llm.adapters import OpenAICompatibleAdapter
    from deepresearch.search import FirecrawlSearchProvider

    async def main():
        model = OpenAICompatibleAdapter(model="gpt-4o", api_key="...")
        budgeter = ContextBudgeter(TiktokenTokenizer())
        orchestrator = ResearchOrchestrator(
            planner=QueryPlanner(model),
            executor=SearchExecutor(FirecrawlSearchProvider(api_key="...")),
            distiller=ContentDistiller(model, budgeter),
        )

        result = await orchestrator.research("Solid-state batteries", breadth=4, depth=2)
        report = await ReportComposer(model, budgeter).compose(
            "Solid-state batteries", result.learnings, result.visited_urls
        )
        print(report)

    asyncio.run(main())
"""

__version__ = "0.1.0"

from .config import ResearchConfig, load_config
from .llm.protocol import GenerationOutput, LanguageModel
from .research import (
    ContentDistiller,
    ContextBudgeter,
    QueryPlanner,
    ReportComposer,
    ResearchOrchestrator,
    ResearchQuery,
    ResearchResult,
    SearchExecutor,
    TiktokenTokenizer,
)
from .search.base import SearchDocument, SearchError

__all__ = [
    "__version__",
    "ResearchConfig",
    "load_config",
    "GenerationOutput",
    "LanguageModel",
    "ContentDistiller",
    "ContextBudgeter",
    "QueryPlanner",
    "ReportComposer",
    "ResearchOrchestrator",
    "ResearchQuery",
    "ResearchResult",
    "SearchExecutor",
    "TiktokenTokenizer",
    "SearchDocument",
    "SearchError",
]
