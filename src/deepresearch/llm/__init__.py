"""Language model layer for multi-provider generation."""

from .protocol import GenerationOutput, LanguageModel

__all__ = ["GenerationOutput", "LanguageModel"]
