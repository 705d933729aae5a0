"""Specialist roles and their static activation tables.

Roles are prompt fragments, not running agents. A role is either always on
for every request or gated by a keyword list; no role is both.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel


class Role(str, Enum):
    """Specialist roles that can contribute to an answer."""

    ORCHESTRATOR = "orchestrator"
    VISION = "vision"
    TEXT = "text"
    CROP = "crop"
    WEATHER = "weather"
    SOIL = "soil"
    RECOMMEND = "recommend"
    MARKET = "market"


ALWAYS_ON_ROLES: tuple[Role, ...] = (Role.ORCHESTRATOR, Role.TEXT, Role.RECOMMEND)

# Roles added whenever an image accompanies the query
IMAGE_ROLES: tuple[Role, ...] = (Role.VISION, Role.CROP)

# Matched as lower-cased substrings, checked in this order.
ROLE_KEYWORDS: Mapping[Role, tuple[str, ...]] = MappingProxyType({
    Role.VISION: (
        "image", "photo", "picture", "see", "look", "leaf", "color", "spot",
        "तस्वीर", "फोटो", "चित्र",
    ),
    Role.CROP: (
        "crop", "plant", "grow", "harvest", "seed", "variety", "yield",
        "rice", "wheat", "cotton", "sugarcane", "soybean", "onion", "tomato",
        "फसल", "पौधा", "बीज", "उपज", "पीक", "बियाणे",
    ),
    Role.WEATHER: (
        "weather", "rain", "temperature", "climate", "humidity", "monsoon",
        "forecast", "season", "drought", "flood", "heat", "cold",
        "मौसम", "बारिश", "तापमान", "हवामान", "पाऊस",
    ),
    Role.SOIL: (
        "soil", "ph", "npk", "moisture", "fertilizer", "nutrient", "compost",
        "manure", "irrigation", "water", "drainage",
        "मिट्टी", "खाद", "पानी", "माती", "खत", "पाणी",
    ),
    Role.MARKET: (
        "price", "market", "sell", "cost", "mandi", "rate", "buyer", "profit",
        "कीमत", "बाजार", "बेचना", "भाव", "विकणे",
    ),
})


class RoleProfile(BaseModel):
    """Display information for a role."""

    role: Role
    name: str
    description: str

    model_config = {"frozen": True}


ROLE_PROFILES: Mapping[Role, RoleProfile] = MappingProxyType({
    profile.role: profile
    for profile in (
        RoleProfile(
            role=Role.ORCHESTRATOR,
            name="Orchestrator",
            description="Manages agent communication and routes tasks",
        ),
        RoleProfile(
            role=Role.VISION,
            name="Vision Agent",
            description="Analyzes crop images for diseases and pests",
        ),
        RoleProfile(
            role=Role.TEXT,
            name="Text/NLP Agent",
            description="Understands farmer queries and questions",
        ),
        RoleProfile(
            role=Role.CROP,
            name="Crop Intelligence",
            description="Makes agronomic decisions and diagnoses diseases",
        ),
        RoleProfile(
            role=Role.WEATHER,
            name="Weather & Climate",
            description="Fetches and analyzes weather data",
        ),
        RoleProfile(
            role=Role.SOIL,
            name="Soil & Sensor",
            description="Analyzes soil data and IoT sensor readings",
        ),
        RoleProfile(
            role=Role.RECOMMEND,
            name="Recommendation",
            description="Generates actionable farming advice",
        ),
        RoleProfile(
            role=Role.MARKET,
            name="Market & Price",
            description="Predicts crop prices and market trends",
        ),
    )
})


def match_keyword_roles(message: str) -> list[Role]:
    """Return the keyword-gated roles whose keywords appear in the message.

    Roles come back in table order. Scanning a role stops at its first hit.
    """
    lower_message = message.lower()
    matched = []
    for role, keywords in ROLE_KEYWORDS.items():
        for keyword in keywords:
            if keyword.lower() in lower_message:
                matched.append(role)
                break
    return matched
