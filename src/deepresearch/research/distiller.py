"""Distillation: search documents -> learnings + follow-up questions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import Distillation
from .parsing import ParseFailure, parse_structured
from .prompts import distillation_prompt, system_prompt

if TYPE_CHECKING:
    from ..llm.protocol import LanguageModel
    from ..search.base import SearchDocument
    from .budget import ContextBudgeter

logger = logging.getLogger(__name__)

DOCUMENT_TOKEN_BUDGET = 25_000


class ContentDistiller:
    """Extracts capped learnings and follow-up questions from documents."""

    def __init__(
        self,
        model: LanguageModel,
        budgeter: ContextBudgeter,
        document_token_budget: int = DOCUMENT_TOKEN_BUDGET,
    ):
        self.model = model
        self.budgeter = budgeter
        self.document_token_budget = document_token_budget

    async def distill(
        self,
        query: str,
        documents: list[SearchDocument],
        max_learnings: int = 3,
        max_follow_ups: int = 3,
    ) -> Distillation:
        """
        Distill documents retrieved for query.

        Malformed model output yields an empty Distillation. Generation
        errors propagate.
        """
        contents = [
            self.budgeter.trim(doc.content, self.document_token_budget)
            for doc in documents
            if doc.content
        ]
        logger.info(f"Ran '{query[:50]}', found {len(contents)} contents")

        prompt = distillation_prompt(query, contents, max_learnings, max_follow_ups)
        logger.debug(f"Distillation prompt length: {len(prompt):,} chars")

        output = await self.model.generate(system_prompt(), prompt, structured=True)

        outcome = parse_structured(output.text, Distillation)
        if isinstance(outcome, ParseFailure):
            logger.warning(f"Malformed distillation ({outcome.reason}): {outcome.raw_text[:200]}")
            return Distillation()

        distilled = Distillation(
            learnings=outcome.value.learnings[:max_learnings],
            follow_up_questions=outcome.value.follow_up_questions[:max_follow_ups],
        )
        logger.info(f"Created {len(distilled.learnings)} learnings for '{query[:50]}'")
        return distilled
