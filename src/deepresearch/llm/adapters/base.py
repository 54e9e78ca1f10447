"""
Base adapter utilities shared across all generation adapters.

Provides:
- Transport-level reconnect with exponential backoff
- JSON object extraction from model text
"""

import json
import logging
import re
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Only connection-level failures are retried here. Malformed model output is
# handled by the research pipeline, never by the adapter.
TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.ConnectError,
    httpx.TimeoutException,
)


class AdapterAuthenticationError(Exception):
    """Raised when a provider rejects the configured API key."""

    def __init__(self, provider: str, api_key_env: str):
        self.provider = provider
        self.api_key_env = api_key_env
        super().__init__(
            f"{provider} authentication failed. "
            f"Check that {api_key_env} is set to a valid API key."
        )


class BaseAdapter:
    """Base class with shared adapter utilities."""

    transient_errors: tuple[type[BaseException], ...] = TRANSIENT_ERRORS

    def __init__(self, model: str, api_key: str | None = None, max_retries: int = 3):
        """
        Initialize base adapter.

        Args:
            model: Model identifier
            api_key: API key for authentication
            max_retries: Attempts for transient transport errors
        """
        self.model = model
        self.api_key = api_key
        self.max_retries = max_retries

    async def _with_retry(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Execute an async call, retrying transient transport errors.

        Raises:
            Last exception if all attempts fail
        """
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(self.transient_errors),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            reraise=True,
        ):
            with attempt:
                logger.debug(
                    f"Attempt {attempt.retry_state.attempt_number}/{self.max_retries}"
                )
                return await func(*args, **kwargs)

        # Unreachable with reraise=True
        raise RuntimeError("Retry logic failed unexpectedly")


def extract_json_from_text(text: str) -> Any | None:
    """
    Extract a JSON object from model text (handles markdown code blocks).

    Args:
        text: Text potentially containing JSON

    Returns:
        Parsed JSON value or None if nothing parseable was found
    """
    if not text:
        return None

    stripped = text.strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    # Fenced block
    fenced = re.search(r"```(?:json)?\s*(\{.*?\})\s*```", stripped, re.DOTALL)
    if fenced:
        try:
            return json.loads(fenced.group(1))
        except json.JSONDecodeError:
            pass

    # Outermost braces
    braces = re.search(r"\{.*\}", stripped, re.DOTALL)
    if braces:
        try:
            return json.loads(braces.group(0))
        except json.JSONDecodeError:
            pass

    return None
