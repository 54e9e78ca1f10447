"""Clarifying questions asked before a research run."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import FeedbackQuestions
from .parsing import ParseFailure, parse_structured
from .prompts import feedback_prompt, system_prompt

if TYPE_CHECKING:
    from ..llm.protocol import LanguageModel

logger = logging.getLogger(__name__)


class FeedbackError(Exception):
    """Raised when the model's clarifying questions cannot be parsed."""


class FeedbackGenerator:
    """Asks the model what it would need to know to research a query well."""

    def __init__(self, model: LanguageModel):
        self.model = model

    async def generate_questions(self, query: str, max_questions: int = 3) -> list[str]:
        """
        Generate up to max_questions clarifying questions.

        Raises:
            FeedbackError: If the response is not a {"questions": [...]} object
        """
        if max_questions <= 0:
            return []

        output = await self.model.generate(
            system_prompt(), feedback_prompt(query, max_questions), structured=True
        )

        outcome = parse_structured(output.text, FeedbackQuestions)
        if isinstance(outcome, ParseFailure):
            raise FeedbackError(f"Invalid questions format in model response: {outcome.reason}")

        questions = [q for q in outcome.value.questions if isinstance(q, str) and q.strip()]
        logger.info(f"Feedback questions: {questions}")
        return questions[:max_questions]


def build_research_brief(query: str, answers: list[tuple[str, str]]) -> str:
    """Combine the initial query with the user's answers to the clarifying questions."""
    if not answers:
        return query
    qa = "\n".join(f"Q: {question}\nA: {answer}" for question, answer in answers)
    return f"Initial Query: {query}\nFollow-up Questions and Answers:\n{qa}"
