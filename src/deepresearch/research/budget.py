"""
Context budgeting: keep text under a token budget before it reaches a model.

The budgeter measures text with a tokenizer and, when it is too long, cuts
it down with a text segmenter so cuts land on paragraph, line or sentence
boundaries where possible. Termination does not depend on the segmenter
behaving: every iteration strictly shortens the text, and a fixed character
floor ends the loop.
"""

from __future__ import annotations

import logging
from typing import Protocol

import tiktoken

logger = logging.getLogger(__name__)

MIN_CHUNK_CHARS = 140
CHARS_PER_TOKEN = 3
DEFAULT_SEPARATORS = ["\n\n", "\n", ".", ",", ">", "<", " ", ""]


class Tokenizer(Protocol):
    def count(self, text: str) -> int:
        """Deterministic token count for text."""
        ...


class TextSegmenter(Protocol):
    def split(self, text: str, chunk_size: int, chunk_overlap: int = 0) -> list[str]:
        """Ordered chunks approximately partitioning text."""
        ...


class TiktokenTokenizer:
    """Token counter backed by a tiktoken encoding (loaded on first use)."""

    def __init__(self, encoding_name: str = "o200k_base"):
        self.encoding_name = encoding_name
        self._encoding: tiktoken.Encoding | None = None

    @property
    def encoding(self) -> tiktoken.Encoding:
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self.encoding_name)
        return self._encoding

    def count(self, text: str) -> int:
        # Documents may contain literal special-token strings like <|endoftext|>
        return len(self.encoding.encode(text, disallowed_special=()))


class RecursiveCharacterTextSplitter:
    """
    Split text into chunks of at most chunk_size characters.

    Tries each separator in order; pieces that are still too large are split
    again with the remaining, finer separators. Small neighbouring pieces are
    merged back together up to chunk_size.
    """

    def __init__(self, separators: list[str] | None = None):
        self.separators = separators or list(DEFAULT_SEPARATORS)

    def split(self, text: str, chunk_size: int, chunk_overlap: int = 0) -> list[str]:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap >= chunk_size:
            raise ValueError("Cannot have chunk_overlap >= chunk_size")
        return self._split(text, self.separators, chunk_size, chunk_overlap)

    def _split(
        self, text: str, separators: list[str], chunk_size: int, chunk_overlap: int
    ) -> list[str]:
        separator = separators[-1]
        finer: list[str] = []
        for i, candidate in enumerate(separators):
            if candidate == "" or candidate in text:
                separator = candidate
                finer = separators[i + 1:]
                break

        pieces = text.split(separator) if separator else list(text)

        chunks: list[str] = []
        pending: list[str] = []
        for piece in pieces:
            if len(piece) < chunk_size:
                pending.append(piece)
                continue
            if pending:
                chunks.extend(self._merge(pending, separator, chunk_size, chunk_overlap))
                pending = []
            if finer:
                chunks.extend(self._split(piece, finer, chunk_size, chunk_overlap))
            else:
                chunks.append(piece)

        if pending:
            chunks.extend(self._merge(pending, separator, chunk_size, chunk_overlap))
        return chunks

    def _merge(
        self, pieces: list[str], separator: str, chunk_size: int, chunk_overlap: int
    ) -> list[str]:
        sep_len = len(separator)
        docs: list[str] = []
        window: list[str] = []
        total = 0

        for piece in pieces:
            piece_len = len(piece)
            joined_len = total + piece_len + (sep_len if window else 0)
            if window and joined_len > chunk_size:
                doc = separator.join(window).strip()
                if doc:
                    docs.append(doc)
                # Slide the window until it fits the overlap and the new piece
                while window and (
                    total > chunk_overlap
                    or total + piece_len + (sep_len if window else 0) > chunk_size
                ):
                    total -= len(window[0]) + (sep_len if len(window) > 1 else 0)
                    window.pop(0)
            window.append(piece)
            total += piece_len + (sep_len if len(window) > 1 else 0)

        doc = separator.join(window).strip()
        if doc:
            docs.append(doc)
        return docs


class ContextBudgeter:
    """Trims text to a token budget."""

    def __init__(
        self,
        tokenizer: Tokenizer,
        segmenter: TextSegmenter | None = None,
        min_chunk_chars: int = MIN_CHUNK_CHARS,
        chars_per_token: int = CHARS_PER_TOKEN,
    ):
        self.tokenizer = tokenizer
        self.segmenter = segmenter or RecursiveCharacterTextSplitter()
        self.min_chunk_chars = min_chunk_chars
        self.chars_per_token = chars_per_token

    def trim(self, text: str, token_budget: int) -> str:
        """
        Return text whose token count is within token_budget.

        Text already within budget is returned unchanged. Otherwise the
        result is a prefix-like fragment of the text, or the first
        min_chunk_chars characters when the budget is too tight to estimate.
        """
        if not text:
            return ""

        current = text
        while True:
            length = self.tokenizer.count(current)
            if length <= token_budget:
                return current

            overflow = length - token_budget
            char_budget = len(current) - overflow * self.chars_per_token
            if char_budget < self.min_chunk_chars:
                return current[: self.min_chunk_chars]

            chunks = self.segmenter.split(current, chunk_size=char_budget, chunk_overlap=0)
            candidate = chunks[0] if chunks else ""

            if len(candidate) >= len(current):
                # Segmenter made no progress, hard cut instead
                candidate = current[:char_budget]

            logger.debug(
                f"Trimmed {len(current):,} -> {len(candidate):,} chars "
                f"({length:,} tokens, budget {token_budget:,})"
            )
            current = candidate
