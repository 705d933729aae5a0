"""Chat orchestration: route, build the prompt, enrich, and call the model."""

from typing import Any, Iterable, Literal, Optional, Sequence

import structlog
from pydantic import BaseModel

from krishimitra.agents.prompts import (
    REFERENCE_SOURCES,
    build_clarifying_prompt,
    build_system_prompt,
)
from krishimitra.agents.router import QueryType, route
from krishimitra.config.settings import settings
from krishimitra.llm.gateway import ModelGateway
from krishimitra.logging import EventCategory, LogTimer
from krishimitra.tools.language import detect_language
from krishimitra.tools.web_search import SearchOutcome, needs_web_search, search_with_tavily

logger = structlog.get_logger()

DEFAULT_IMAGE_PROMPT = (
    "Please analyze this crop image for any diseases, pests, or health issues. "
    "Provide detailed diagnosis and treatment recommendations."
)

DEFAULT_REFERENCES = tuple(url for _, url in REFERENCE_SOURCES)


class ConversationMessage(BaseModel):
    """A previous turn in the conversation."""
    role: Literal["user", "assistant"]
    content: str


class ChatResult(BaseModel):
    """Aggregated answer plus the routing details behind it."""

    response: str
    sources: list[str] = []
    active_agents: list[str]
    query_type: QueryType
    clarification_requested: bool
    detected_language: str


def merge_sources(found: Iterable[str], defaults: Iterable[str] = DEFAULT_REFERENCES) -> list[str]:
    """Merge search URLs with the default references, keeping first occurrences."""
    return list(dict.fromkeys([*found, *defaults]))


def format_search_context(outcome: SearchOutcome) -> str:
    """Render search snippets as a block appended to the user's message."""
    if not outcome.snippets:
        return ""
    return "\n\n**Web Search Results (from agricultural sources):**\n" + "\n\n".join(outcome.snippets)


def build_user_content(
    message: str,
    image_base64: Optional[str],
    search_context: str,
) -> Any:
    """Build the user turn, multimodal when an image is attached."""
    if not image_base64:
        return message + search_context

    content: list[dict[str, Any]] = [
        {
            "type": "image_url",
            "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"},
        },
        {"type": "text", "text": message or DEFAULT_IMAGE_PROMPT},
    ]
    if search_context:
        content.append({"type": "text", "text": search_context})
    return content


class ChatService:
    """Answers one farmer query per call; holds no per-request state."""

    def __init__(
        self,
        gateway: ModelGateway,
        tavily_api_key: Optional[str] = None,
        history_window: int = 6,
        search_timeout: float = 20.0,
    ):
        self.gateway = gateway
        self.tavily_api_key = tavily_api_key
        self.history_window = history_window
        self.search_timeout = search_timeout

    async def _search(self, message: str) -> SearchOutcome:
        if not self.tavily_api_key or not needs_web_search(message):
            return SearchOutcome.empty()

        logger.info("Performing web search", message=message[:100])
        return await search_with_tavily(
            message, self.tavily_api_key, timeout=self.search_timeout
        )

    async def handle(
        self,
        message: str,
        has_image: bool = False,
        language: str = "en",
        conversation_history: Sequence[ConversationMessage] = (),
        image_base64: Optional[str] = None,
    ) -> ChatResult:
        """Answer a farmer query.

        Args:
            message: The farmer's text (may be empty when an image is attached)
            has_image: Whether the client attached an image
            language: Response language code
            conversation_history: Previous turns, oldest first
            image_base64: Base64 image data, forwarded to the model as-is

        Returns:
            ChatResult with the model's answer and routing details

        Raises:
            openai.APIStatusError: If the gateway rejects the request
        """
        decision = route(message, has_image)

        system_prompt = build_system_prompt(language, decision.active_roles)
        if decision.clarify:
            system_prompt = f"{system_prompt}\n\n{build_clarifying_prompt(language)}"

        outcome = await self._search(message)

        messages: list[dict[str, Any]] = [{"role": "system", "content": system_prompt}]
        history = list(conversation_history)
        if self.history_window > 0:
            for turn in history[-self.history_window:]:
                messages.append({"role": turn.role, "content": turn.content})
        messages.append({
            "role": "user",
            "content": build_user_content(
                message,
                image_base64 if has_image else None,
                format_search_context(outcome),
            ),
        })

        with LogTimer(
            "gateway_completion",
            category=EventCategory.GATEWAY,
            query_type=decision.query_type.value,
        ):
            answer = await self.gateway.complete(messages)

        return ChatResult(
            response=answer,
            sources=merge_sources(outcome.source_urls),
            active_agents=[role.value for role in decision.active_roles],
            query_type=decision.query_type,
            clarification_requested=decision.clarify,
            detected_language=detect_language(message) if message.strip() else language,
        )


def get_chat_service() -> ChatService:
    """Create a chat service from application settings.

    Raises:
        ConfigurationError: If the gateway API key is missing
    """
    return ChatService(
        gateway=ModelGateway(),
        tavily_api_key=settings.tavily_api_key,
        history_window=settings.history_window,
        search_timeout=settings.search_timeout_seconds,
    )
