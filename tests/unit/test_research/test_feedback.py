"""
Tests for clarifying-question generation and research brief assembly.
"""

import pytest

from deepresearch.llm.protocol import GenerationOutput
from deepresearch.research.feedback import (
    FeedbackError,
    FeedbackGenerator,
    build_research_brief,
)


class MockModel:
    def __init__(self, response: str):
        self.response = response
        self.calls = 0

    @property
    def name(self) -> str:
        return "mock-model"

    async def generate(self, system_prompt, user_prompt, *, structured=False):
        self.calls += 1
        return GenerationOutput(text=self.response, model="mock-model")


@pytest.mark.asyncio
async def test_questions_filtered_and_capped():
    model = MockModel('{"questions": ["Which region?", "", 7, "Which years?", "Budget?"]}')

    questions = await FeedbackGenerator(model).generate_questions("EV market", max_questions=2)

    assert questions == ["Which region?", "Which years?"]


@pytest.mark.asyncio
async def test_malformed_questions_raise():
    generator = FeedbackGenerator(MockModel('{"question": "singular"}'))

    with pytest.raises(FeedbackError):
        await generator.generate_questions("EV market")


@pytest.mark.asyncio
async def test_zero_questions_skips_model():
    model = MockModel('{"questions": ["x"]}')

    assert await FeedbackGenerator(model).generate_questions("q", max_questions=0) == []
    assert model.calls == 0


def test_brief_combines_answers():
    brief = build_research_brief(
        "EV market",
        [("Which region?", "Europe"), ("Which years?", "2020-2025")],
    )

    assert brief == (
        "Initial Query: EV market\n"
        "Follow-up Questions and Answers:\n"
        "Q: Which region?\nA: Europe\n"
        "Q: Which years?\nA: 2020-2025"
    )


def test_brief_without_answers_is_query():
    assert build_research_brief("EV market", []) == "EV market"
