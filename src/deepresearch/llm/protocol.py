"""
Protocol definitions for language model adapters.

Every generation provider implements the same two-mode interface: free text
for reports, structured (JSON object) for planning and distillation. Shape
validation of structured output is the caller's job, not the adapter's.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class GenerationOutput:
    """Raw result of one generation call."""

    text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    duration_seconds: float = 0.0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@runtime_checkable
class LanguageModel(Protocol):
    """
    Protocol for generation adapters.

    Any chat model can back the research pipeline by implementing this.
    """

    @property
    def name(self) -> str:
        """Human-readable model name (e.g., 'openai:gpt-4o')."""
        ...

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        structured: bool = False,
    ) -> GenerationOutput:
        """
        Run one completion.

        Args:
            system_prompt: System-level instructions
            user_prompt: The task prompt
            structured: Ask the provider for a single JSON object

        Returns:
            GenerationOutput with the raw response text
        """
        ...
