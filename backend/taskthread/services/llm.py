"""
Client for the external text-generation service.

One request per call, no retries. Every SDK failure (connection error,
timeout, non-2xx status) surfaces as UpstreamCallError so callers deal with
a single failure type.
"""

from functools import lru_cache

import httpx
import openai
from openai import AsyncOpenAI

from taskthread.config import get_settings
from taskthread.exceptions import UpstreamCallError
from taskthread.logging_config import get_logger

logger = get_logger(__name__)


class LLMClient:
    """Thin async wrapper around chat completions."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        timeout_seconds: float,
    ):
        self.model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            timeout=httpx.Timeout(timeout_seconds, connect=5.0),
            max_retries=0,
        )

    async def complete(self, prompt: str, *, json_output: bool = False) -> str:
        """
        Send a single user prompt and return the completion text.

        Args:
            prompt: The full prompt
            json_output: Ask the model for a JSON object instead of prose

        Raises:
            UpstreamCallError: the call failed or returned no content
        """
        request = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if json_output:
            request["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**request)
        except openai.APIError as exc:
            logger.error(f"Text generation failed (model={self.model}): {exc.__class__.__name__}: {exc}")
            raise UpstreamCallError(f"Text generation failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise UpstreamCallError(f"Text generation returned no content (model={self.model})")
        return content


@lru_cache
def get_llm_client() -> LLMClient:
    """Build the process-wide client from settings."""
    settings = get_settings()
    return LLMClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout_seconds=settings.llm_timeout_seconds,
    )
