"""
OpenAI-compatible chat completions adapter.

One adapter covers every provider that speaks the /chat/completions wire
format: OpenAI, DeepSeek, Volcengine Ark and OpenRouter. Only the base URL,
the key and whether JSON mode is available differ between them.
"""

import logging
import time
from typing import Any

import httpx

from ..protocol import GenerationOutput
from .base import AdapterAuthenticationError, BaseAdapter

logger = logging.getLogger(__name__)

DEFAULT_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "deepseek": "https://api.deepseek.com/v1",
    "ark": "https://ark.cn-beijing.volces.com/api/v3",
    "openrouter": "https://openrouter.ai/api/v1",
}

# Providers whose models reject response_format=json_object
NO_JSON_MODE = {"ark"}


class OpenAICompatibleAdapter(BaseAdapter):
    """Adapter for any OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        model: str,
        api_key: str,
        provider: str = "openai",
        base_url: str | None = None,
        api_key_env: str = "OPENAI_API_KEY",
        timeout: int = 300,
        max_retries: int = 3,
        temperature: float | None = None,
    ):
        super().__init__(model, api_key, max_retries=max_retries)
        if provider not in DEFAULT_BASE_URLS and not base_url:
            raise ValueError(f"base_url required for provider '{provider}'")
        self.provider = provider
        self.base_url = (base_url or DEFAULT_BASE_URLS[provider]).rstrip("/")
        self.api_key_env = api_key_env
        self.timeout = timeout
        self.temperature = temperature
        self.supports_json_mode = provider not in NO_JSON_MODE

    @property
    def name(self) -> str:
        return f"{self.provider}:{self.model}"

    def _headers(self) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self.provider == "openrouter":
            headers["X-Title"] = "deepresearch"
        return headers

    def _build_payload(
        self, system_prompt: str, user_prompt: str, structured: bool
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if structured and self.supports_json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json=payload,
            )

        if response.status_code in (401, 403):
            raise AdapterAuthenticationError(
                provider=self.provider, api_key_env=self.api_key_env
            )
        response.raise_for_status()
        return response.json()

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        structured: bool = False,
    ) -> GenerationOutput:
        start = time.monotonic()
        payload = self._build_payload(system_prompt, user_prompt, structured)

        result = await self._with_retry(self._post, payload)

        choices = result.get("choices") or []
        if not choices:
            raise RuntimeError(f"{self.name} returned no choices: {str(result)[:200]}")

        content = choices[0].get("message", {}).get("content") or ""
        usage = result.get("usage") or {}
        output = GenerationOutput(
            text=content,
            model=result.get("model", self.model),
            input_tokens=usage.get("prompt_tokens", 0),
            output_tokens=usage.get("completion_tokens", 0),
            duration_seconds=time.monotonic() - start,
        )

        logger.debug(
            f"[{self.name}] {output.input_tokens:,} in / {output.output_tokens:,} out "
            f"in {output.duration_seconds:.1f}s"
        )
        return output
