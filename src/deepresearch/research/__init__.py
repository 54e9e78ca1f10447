"""Recursive research pipeline: plan, search, distill, recurse, report."""

from .budget import ContextBudgeter, RecursiveCharacterTextSplitter, TiktokenTokenizer
from .distiller import ContentDistiller
from .executor import SearchExecutor
from .feedback import FeedbackError, FeedbackGenerator, build_research_brief
from .models import Distillation, QueryPlan, ResearchQuery, ResearchResult
from .orchestrator import ResearchOrchestrator
from .parsing import ParseFailure, ParseSuccess, parse_structured
from .planner import QueryPlanner
from .report import ReportComposer

__all__ = [
    "ContextBudgeter",
    "RecursiveCharacterTextSplitter",
    "TiktokenTokenizer",
    "ContentDistiller",
    "SearchExecutor",
    "FeedbackError",
    "FeedbackGenerator",
    "build_research_brief",
    "Distillation",
    "QueryPlan",
    "ResearchQuery",
    "ResearchResult",
    "ResearchOrchestrator",
    "ParseFailure",
    "ParseSuccess",
    "parse_structured",
    "QueryPlanner",
    "ReportComposer",
]
