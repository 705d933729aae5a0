"""API routes for the agricultural chat assistant."""

from typing import Optional

import openai
import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from krishimitra.agents.roles import ROLE_PROFILES
from krishimitra.llm.gateway import ConfigurationError
from krishimitra.services import chat as chat_service
from krishimitra.services.chat import ConversationMessage

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["chat"])

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
PAYMENT_REQUIRED_MESSAGE = "Payment required. Please add credits to continue."


class ChatRequest(BaseModel):
    """Request to answer a farmer query."""
    message: str = ""
    image_base64: Optional[str] = None
    has_image: bool = False
    language: str = "en"
    conversation_history: list[ConversationMessage] = []


class ChatResponse(BaseModel):
    """Answer returned to the client."""
    response: str
    sources: Optional[list[str]] = None
    active_agents: list[str]
    query_type: str
    clarification_requested: bool
    detected_language: str


class AgentInfo(BaseModel):
    """Display information for one specialist agent."""
    id: str
    name: str
    description: str


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/agri-chat", response_model=ChatResponse)
async def agri_chat(request: ChatRequest):
    """Route the query, build the prompt, and return the model's answer."""
    try:
        service = chat_service.get_chat_service()
        result = await service.handle(
            message=request.message,
            has_image=request.has_image,
            language=request.language or "en",
            conversation_history=request.conversation_history,
            image_base64=request.image_base64,
        )
    except ConfigurationError as e:
        logger.error("Chat service misconfigured", error=str(e))
        return error_response(500, str(e))
    except openai.APIStatusError as e:
        logger.error("AI Gateway error", status=e.status_code, error=str(e))
        if e.status_code == 429:
            return error_response(429, RATE_LIMIT_MESSAGE)
        if e.status_code == 402:
            return error_response(402, PAYMENT_REQUIRED_MESSAGE)
        return error_response(500, f"AI Gateway error: {e.status_code}")
    except openai.APIError as e:
        logger.error("AI Gateway unreachable", error=str(e))
        return error_response(500, "AI Gateway error: connection failed")

    return ChatResponse(
        response=result.response,
        sources=result.sources or None,
        active_agents=result.active_agents,
        query_type=result.query_type.value,
        clarification_requested=result.clarification_requested,
        detected_language=result.detected_language,
    )


@router.get("/agents")
async def list_agents() -> list[AgentInfo]:
    """List the specialist agents the router can activate."""
    return [
        AgentInfo(id=role.value, name=profile.name, description=profile.description)
        for role, profile in ROLE_PROFILES.items()
    ]
