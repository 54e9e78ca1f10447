"""
Tests for content distillation.

These tests verify:
- Only documents with content reach the prompt, each trimmed to budget
- Learnings and follow-up questions are capped
- Malformed output yields an empty distillation
- Generation errors propagate
"""

import json

import pytest

from deepresearch.llm.protocol import GenerationOutput
from deepresearch.research.distiller import ContentDistiller
from deepresearch.search.base import SearchDocument


class MockModel:
    """Model returning one canned response."""

    def __init__(self, response: str = "", error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls = []

    @property
    def name(self) -> str:
        return "mock-model"

    async def generate(self, system_prompt, user_prompt, *, structured=False):
        self.calls.append((system_prompt, user_prompt, structured))
        if self.error:
            raise self.error
        return GenerationOutput(text=self.response, model="mock-model")


class RecordingBudgeter:
    """Budgeter that truncates to a fixed length and records budgets."""

    def __init__(self, keep: int = 1000):
        self.keep = keep
        self.budgets = []

    def trim(self, text, token_budget):
        self.budgets.append(token_budget)
        return text[: self.keep]


def distillation(learnings, follow_ups) -> str:
    return json.dumps({"learnings": learnings, "followUpQuestions": follow_ups})


@pytest.mark.asyncio
async def test_documents_without_content_skipped():
    model = MockModel(distillation(["a"], []))
    budgeter = RecordingBudgeter()
    distiller = ContentDistiller(model, budgeter, document_token_budget=500)

    await distiller.distill(
        "query",
        [
            SearchDocument(url="https://a", content="first page"),
            SearchDocument(url="https://b", content=None),
            SearchDocument(url="https://c", content=""),
            SearchDocument(url=None, content="second page"),
        ],
    )

    user_prompt = model.calls[0][1]
    assert user_prompt.count("<content>") == 2
    assert "first page" in user_prompt
    assert "second page" in user_prompt
    assert budgeter.budgets == [500, 500]


@pytest.mark.asyncio
async def test_documents_trimmed():
    model = MockModel(distillation(["a"], []))
    distiller = ContentDistiller(model, RecordingBudgeter(keep=5))

    await distiller.distill("query", [SearchDocument(content="0123456789")])

    assert "<content>\n01234\n</content>" in model.calls[0][1]


@pytest.mark.asyncio
async def test_output_capped():
    model = MockModel(distillation(["l1", "l2", "l3", "l4"], ["f1", "f2", "f3"]))
    distiller = ContentDistiller(model, RecordingBudgeter())

    result = await distiller.distill(
        "query", [SearchDocument(content="x")], max_learnings=2, max_follow_ups=1
    )

    assert result.learnings == ["l1", "l2"]
    assert result.follow_up_questions == ["f1"]


@pytest.mark.asyncio
async def test_fewer_than_cap_kept():
    model = MockModel(distillation(["only one"], []))
    distiller = ContentDistiller(model, RecordingBudgeter())

    result = await distiller.distill("query", [SearchDocument(content="x")])

    assert result.learnings == ["only one"]
    assert result.follow_up_questions == []


@pytest.mark.asyncio
async def test_malformed_output_yields_empty():
    model = MockModel('{"learnings": 42}')
    distiller = ContentDistiller(model, RecordingBudgeter())

    result = await distiller.distill("query", [SearchDocument(content="x")])

    assert result.learnings == []
    assert result.follow_up_questions == []


@pytest.mark.asyncio
async def test_no_documents_still_calls_model():
    model = MockModel(distillation([], []))
    distiller = ContentDistiller(model, RecordingBudgeter())

    result = await distiller.distill("query", [])

    assert len(model.calls) == 1
    assert result.learnings == []


@pytest.mark.asyncio
async def test_generation_error_propagates():
    model = MockModel(error=ConnectionError("model down"))
    distiller = ContentDistiller(model, RecordingBudgeter())

    with pytest.raises(ConnectionError):
        await distiller.distill("query", [SearchDocument(content="x")])
