"""Agent routing and prompt composition exports."""

from krishimitra.agents.prompts import build_clarifying_prompt, build_system_prompt
from krishimitra.agents.roles import ALWAYS_ON_ROLES, ROLE_KEYWORDS, ROLE_PROFILES, Role
from krishimitra.agents.router import QueryType, RoutingDecision, classify_query, route

__all__ = [
    "ALWAYS_ON_ROLES",
    "ROLE_KEYWORDS",
    "ROLE_PROFILES",
    "QueryType",
    "Role",
    "RoutingDecision",
    "build_clarifying_prompt",
    "build_system_prompt",
    "classify_query",
    "route",
]
