"""Agent router: picks the active specialist roles for a farmer query.

Routing is keyword based and deterministic. The router also decides whether
the query is too vague to answer without asking a follow-up question, and
assigns a coarse query type used for logging and the UI.
"""

import re
from enum import Enum
from typing import Iterable

from pydantic import BaseModel

from krishimitra.agents.roles import ALWAYS_ON_ROLES, IMAGE_ROLES, Role, match_keyword_roles
from krishimitra.logging import log_routing


class QueryType(str, Enum):
    """Coarse classification of a query."""

    VISUAL_DIAGNOSIS = "visual_diagnosis"
    WEATHER = "weather"
    MARKET = "market"
    SOIL_ANALYSIS = "soil_analysis"
    CROP_ADVICE = "crop_advice"
    GENERAL = "general"


class RoutingDecision(BaseModel):
    """Result of routing a single query."""

    active_roles: tuple[Role, ...]
    clarify: bool
    query_type: QueryType

    model_config = {"frozen": True}


# Explicit phrasing that is answerable as-is; takes priority over everything below.
SIMPLE_QUERY_PATTERNS = (
    re.compile(r"\bprice of\b|\bmarket rate\b|\bcurrent price\b", re.IGNORECASE),
    re.compile(r"\bweather forecast\b|\btemperature today\b", re.IGNORECASE),
    re.compile(r"\bhow to grow\b|\bhow to plant\b", re.IGNORECASE),
)

AMBIGUOUS_PATTERNS = (
    re.compile(r"^(what|why|how|when|which|where)\s+(is|are|should|can|do)", re.IGNORECASE),
    re.compile(r"problem|issue|help|disease|pest", re.IGNORECASE),
    re.compile(r"not growing|dying|yellow|brown|wilting", re.IGNORECASE),
    # Hindi
    re.compile(r"क्या|कैसे|कब|क्यों|कौन"),
    # Marathi
    re.compile(r"काय|कसे|केव्हा|का|कोण"),
)

MIN_SPECIFIC_TOKENS = 5

# Checked in order, first hit wins
_QUERY_TYPE_PRIORITY = (
    (Role.WEATHER, QueryType.WEATHER),
    (Role.MARKET, QueryType.MARKET),
    (Role.SOIL, QueryType.SOIL_ANALYSIS),
    (Role.CROP, QueryType.CROP_ADVICE),
)


def is_simple_query(message: str) -> bool:
    """Check whether the message uses phrasing that needs no clarification."""
    return any(pattern.search(message) for pattern in SIMPLE_QUERY_PATTERNS)


def needs_clarification(message: str, has_image: bool) -> bool:
    """Decide whether to ask a clarifying question before answering.

    Simple queries never need clarification. Otherwise an ambiguous pattern
    triggers it, and so does a short message (under five tokens) without an
    image.
    """
    if is_simple_query(message):
        return False

    clarify = any(pattern.search(message) for pattern in AMBIGUOUS_PATTERNS)

    if len(message.split()) < MIN_SPECIFIC_TOKENS and not has_image:
        clarify = True

    return clarify


def classify_query(has_image: bool, active_roles: Iterable[Role]) -> QueryType:
    """Derive the query type from image presence and the active roles."""
    if has_image:
        return QueryType.VISUAL_DIAGNOSIS

    roles = set(active_roles)
    for role, query_type in _QUERY_TYPE_PRIORITY:
        if role in roles:
            return query_type
    return QueryType.GENERAL


def route(message: str, has_image: bool) -> RoutingDecision:
    """Route a farmer query to the specialist roles that should answer it.

    Args:
        message: Raw user text, possibly empty or in Devanagari script
        has_image: Whether an image accompanies the query

    Returns:
        RoutingDecision with roles ordered as always-on roles, image roles,
        then keyword-matched roles
    """
    roles: list[Role] = list(ALWAYS_ON_ROLES)

    candidates = list(IMAGE_ROLES) if has_image else []
    candidates.extend(match_keyword_roles(message))
    for role in candidates:
        if role not in roles:
            roles.append(role)

    decision = RoutingDecision(
        active_roles=tuple(roles),
        clarify=needs_clarification(message, has_image),
        query_type=classify_query(has_image, roles),
    )

    log_routing(
        active_agents=[role.value for role in decision.active_roles],
        query_type=decision.query_type.value,
        clarify=decision.clarify,
        has_image=has_image,
    )
    return decision
