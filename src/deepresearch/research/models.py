"""
Data model for the research tree.

Model output shapes (QueryPlan, Distillation) are pydantic models so the
shared parse step can validate them; ResearchResult is a plain dataclass
built bottom-up by the orchestrator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


def unique(values: Iterable[str]) -> list[str]:
    """Exact-string dedup, first occurrence wins."""
    return list(dict.fromkeys(values))


class ResearchQuery(BaseModel):
    """One planned search query and the goal it serves."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    query: str = Field(min_length=1)
    research_goal: str = Field(default="", alias="researchGoal")


class QueryPlan(BaseModel):
    """Planner response shape: {"queries": [{"query", "researchGoal"}]}."""

    queries: list[ResearchQuery]

    @field_validator("queries", mode="before")
    @classmethod
    def drop_invalid_queries(cls, v: Any) -> Any:
        """Skip unusable items instead of rejecting the whole plan."""
        if not isinstance(v, list):
            return v
        kept = []
        for item in v:
            try:
                kept.append(ResearchQuery.model_validate(item))
            except ValidationError:
                logger.debug(f"Dropping invalid query item: {item!r}")
        return kept


class Distillation(BaseModel):
    """Distiller response shape: {"learnings": [...], "followUpQuestions": [...]}."""

    model_config = ConfigDict(populate_by_name=True)

    learnings: list[str] = Field(default_factory=list)
    follow_up_questions: list[str] = Field(default_factory=list, alias="followUpQuestions")


class FeedbackQuestions(BaseModel):
    """Clarifying-question response shape: {"questions": [...]}."""

    questions: list


@dataclass
class ResearchResult:
    """Learnings and visited URLs accumulated by one subtree."""

    learnings: list[str] = field(default_factory=list)
    visited_urls: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.learnings = unique(self.learnings)
        self.visited_urls = unique(self.visited_urls)

    @classmethod
    def merge(cls, results: Iterable[ResearchResult]) -> ResearchResult:
        """Set-union of several results."""
        results = list(results)
        return cls(
            learnings=[item for r in results for item in r.learnings],
            visited_urls=[url for r in results for url in r.visited_urls],
        )

    @property
    def is_empty(self) -> bool:
        return not self.learnings and not self.visited_urls
