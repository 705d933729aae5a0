"""Client for the hosted, OpenAI-compatible model gateway."""

from typing import Any, Optional

import structlog
from openai import AsyncOpenAI

from krishimitra.config.settings import settings

logger = structlog.get_logger()

FALLBACK_ANSWER = "I apologize, but I couldn't generate a response. Please try again."


class ConfigurationError(RuntimeError):
    """Raised when a required credential is not configured."""


class ModelGateway:
    """Sends assembled chat messages to the gateway and returns the answer.

    Upstream HTTP errors surface as ``openai.APIStatusError`` (with
    ``status_code``) so the API layer can map them to user-facing messages.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        api_key = api_key or settings.lovable_api_key
        if not api_key:
            raise ConfigurationError("LOVABLE_API_KEY is not configured")

        self.model = model or settings.gateway_model
        self.max_tokens = max_tokens or settings.gateway_max_tokens
        self.temperature = settings.gateway_temperature if temperature is None else temperature
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or settings.gateway_base_url,
            max_retries=0,
        )

    async def complete(self, messages: list[dict[str, Any]]) -> str:
        """Run a chat completion and return the first choice's text."""
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

        if not response.choices or not response.choices[0].message.content:
            logger.warning("Gateway returned no content", model=self.model)
            return FALLBACK_ANSWER

        return response.choices[0].message.content
