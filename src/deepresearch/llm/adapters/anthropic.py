"""Anthropic Claude adapter."""

import logging
import time

import anthropic

from ..protocol import GenerationOutput
from .base import TRANSIENT_ERRORS, AdapterAuthenticationError, BaseAdapter

logger = logging.getLogger(__name__)

JSON_INSTRUCTION = (
    "\n\nRespond with a single JSON object only. "
    "Do not wrap it in backticks or add any other text."
)


class AnthropicAdapter(BaseAdapter):
    """Adapter for Anthropic Claude models."""

    transient_errors = TRANSIENT_ERRORS + (anthropic.APIConnectionError,)

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        api_key_env: str = "ANTHROPIC_API_KEY",
        timeout: int = 300,
        max_retries: int = 3,
        max_tokens: int = 8192,
        temperature: float | None = None,
    ):
        """
        Initialize Anthropic adapter.

        Args:
            model: Model identifier
            api_key: API key
            api_key_env: Environment variable the key came from (for errors)
            timeout: Request timeout in seconds
            max_retries: Attempts for transient transport errors
            max_tokens: Completion token cap (reports are long)
            temperature: Optional sampling temperature
        """
        super().__init__(model, api_key, max_retries=max_retries)
        if not api_key:
            raise ValueError("api_key required for AnthropicAdapter")
        # Retries are handled by _with_retry
        self.client = anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)
        self.api_key_env = api_key_env
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def name(self) -> str:
        return f"anthropic:{self.model}"

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        structured: bool = False,
    ) -> GenerationOutput:
        start = time.monotonic()
        system = system_prompt + JSON_INSTRUCTION if structured else system_prompt

        kwargs = {}
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature

        try:
            response = await self._with_retry(
                self.client.messages.create,
                model=self.model,
                system=system,
                messages=[{"role": "user", "content": user_prompt}],
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                **kwargs,
            )
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise AdapterAuthenticationError(
                provider="Anthropic", api_key_env=self.api_key_env
            ) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        output = GenerationOutput(
            text=text,
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            duration_seconds=time.monotonic() - start,
        )

        logger.debug(
            f"[{self.name}] {response.stop_reason}, "
            f"{output.input_tokens:,} in / {output.output_tokens:,} out"
        )
        return output
