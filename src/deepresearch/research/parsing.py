"""
Typed parse-or-fail step for structured model output.

Planner, distiller and feedback generator all receive free-form model text
that should contain one JSON object. parse_structured() extracts and
validates it against a pydantic model and returns a tagged outcome, so each
call site branches on the tag instead of re-implementing defensive checks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from ..llm.adapters.base import extract_json_from_text

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ParseSuccess(Generic[ModelT]):
    value: ModelT
    ok: bool = True


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    raw_text: str = ""
    ok: bool = False


ParseOutcome = ParseSuccess[ModelT] | ParseFailure


def parse_structured(raw_text: str, schema: type[ModelT]) -> ParseOutcome[ModelT]:
    """
    Parse model text into ``schema``.

    Never raises; every failure becomes a ParseFailure with a reason.
    """
    payload = extract_json_from_text(raw_text)
    if payload is None:
        return ParseFailure(reason="no JSON object found", raw_text=raw_text)
    if not isinstance(payload, dict):
        return ParseFailure(
            reason=f"expected JSON object, got {type(payload).__name__}",
            raw_text=raw_text,
        )

    try:
        return ParseSuccess(schema.model_validate(payload))
    except ValidationError as e:
        return ParseFailure(
            reason=f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}",
            raw_text=raw_text,
        )
