"""Final report synthesis from accumulated learnings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .prompts import report_prompt, system_prompt

if TYPE_CHECKING:
    from ..llm.protocol import LanguageModel
    from .budget import ContextBudgeter

logger = logging.getLogger(__name__)

REPORT_TOKEN_BUDGET = 150_000


class ReportComposer:
    """Generates a long-form markdown report and appends its sources.

    Unlike planning and distillation there is no fallback here: generation
    errors propagate to the caller.
    """

    def __init__(
        self,
        model: LanguageModel,
        budgeter: ContextBudgeter,
        token_budget: int = REPORT_TOKEN_BUDGET,
    ):
        self.model = model
        self.budgeter = budgeter
        self.token_budget = token_budget

    async def compose(self, topic: str, learnings: list[str], visited_urls: list[str]) -> str:
        learnings_block = self.budgeter.trim(
            "\n".join(f"<learning>\n{learning}\n</learning>" for learning in learnings),
            self.token_budget,
        )

        logger.info(f"Writing report from {len(learnings)} learnings and {len(visited_urls)} sources")
        output = await self.model.generate(system_prompt(), report_prompt(topic, learnings_block))

        sources = "\n".join(f"- {url}" for url in visited_urls)
        return f"{output.text}\n\n## Sources\n\n{sources}"
