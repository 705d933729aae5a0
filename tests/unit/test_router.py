"""Tests for the agent router."""

import pytest

from krishimitra.agents.roles import ALWAYS_ON_ROLES, ROLE_KEYWORDS, Role, match_keyword_roles
from krishimitra.agents.router import (
    QueryType,
    classify_query,
    is_simple_query,
    needs_clarification,
    route,
)

SEED = (Role.ORCHESTRATOR, Role.TEXT, Role.RECOMMEND)


class TestRoleTables:
    """Tests for the static role configuration."""

    def test_every_role_is_always_on_or_keyword_gated(self):
        """Each role belongs to exactly one of the two groups."""
        for role in Role:
            in_always_on = role in ALWAYS_ON_ROLES
            in_keywords = role in ROLE_KEYWORDS
            assert in_always_on != in_keywords, role

    def test_keyword_lists_are_not_empty(self):
        """Keyword-gated roles must have something to match."""
        for role, keywords in ROLE_KEYWORDS.items():
            assert len(keywords) > 0, role

    def test_keyword_table_is_read_only(self):
        """The keyword table cannot be mutated at runtime."""
        with pytest.raises(TypeError):
            ROLE_KEYWORDS[Role.ORCHESTRATOR] = ("anything",)  # type: ignore[index]

    def test_match_is_case_insensitive(self):
        """Keywords match regardless of case."""
        assert match_keyword_roles("WEATHER next week") == [Role.WEATHER]

    def test_matching_is_substring_based(self):
        """Keywords match inside longer words ("heat" in "wheat")."""
        matched = match_keyword_roles("wheat")
        assert Role.CROP in matched
        assert Role.WEATHER in matched

    def test_devanagari_keywords(self):
        """Hindi and Marathi keywords activate their roles."""
        assert Role.WEATHER in match_keyword_roles("कल बारिश होगी")
        assert Role.SOIL in match_keyword_roles("माती परीक्षण")
        assert Role.MARKET in match_keyword_roles("कांद्याचा भाव")


class TestActiveRoles:
    """Tests for which roles the router activates."""

    def test_no_keywords_yields_seed_roles(self):
        """A message without keywords activates only the always-on roles."""
        decision = route("hello there my good friend", has_image=False)
        assert decision.active_roles == SEED

    def test_seed_roles_come_first(self):
        """Always-on roles lead the active set in fixed order."""
        decision = route("Will it rain in Pune next week for the market", has_image=False)
        assert decision.active_roles[:3] == SEED

    def test_image_adds_vision_and_crop(self):
        """An image always activates vision and crop."""
        decision = route("anything at all", has_image=True)
        assert Role.VISION in decision.active_roles
        assert Role.CROP in decision.active_roles
        assert decision.query_type == QueryType.VISUAL_DIAGNOSIS

    def test_image_roles_not_duplicated(self):
        """Keyword matches do not repeat roles already added for the image."""
        decision = route("look at this crop leaf", has_image=True)
        assert len(decision.active_roles) == len(set(decision.active_roles))
        assert decision.active_roles == SEED + (Role.VISION, Role.CROP)

    def test_weather_keyword(self):
        """A weather keyword activates the weather role and query type."""
        decision = route("Will it rain tomorrow in Pune district", has_image=False)
        assert Role.WEATHER in decision.active_roles
        assert decision.query_type == QueryType.WEATHER

    def test_matched_roles_in_table_order(self):
        """Matched roles follow keyword table order, not message order."""
        decision = route("market rates after the rain", has_image=False)
        assert decision.active_roles == SEED + (Role.WEATHER, Role.MARKET)

    def test_keywords_match_inside_words(self):
        """Keywords are substrings, so "rice" inside "price" activates crop."""
        decision = route("market price after the rain", has_image=False)
        assert decision.active_roles == SEED + (Role.CROP, Role.WEATHER, Role.MARKET)


class TestClarification:
    """Tests for the clarification heuristic."""

    def test_simple_query_skips_clarification(self):
        """Simple phrasing wins even when an ambiguous pattern also matches."""
        message = "What is the current price of onion"
        assert is_simple_query(message)
        assert needs_clarification(message, has_image=False) is False

    def test_simple_query_skips_length_check(self):
        """Short simple queries are not forced into clarification."""
        assert needs_clarification("weather forecast", has_image=False) is False

    def test_short_message_forces_clarification(self):
        """Fewer than five tokens without an image asks for more detail."""
        assert needs_clarification("crops dying", has_image=False) is True
        assert needs_clarification("tomato leaves", has_image=False) is True

    def test_short_message_with_image_not_forced(self):
        """The length check is skipped when an image is attached."""
        assert needs_clarification("tomato leaves", has_image=True) is False

    def test_long_specific_message_no_clarification(self):
        """A detailed message without ambiguous phrasing is answered directly."""
        message = "Tell me about organic farming practices for small farms"
        assert needs_clarification(message, has_image=False) is False

    def test_ambiguous_pattern_with_image(self):
        """Ambiguous phrasing asks for clarification even with an image."""
        assert needs_clarification("there is some disease on it", has_image=True) is True

    def test_wh_question_opener(self):
        """Questions starting with a wh-word and auxiliary are ambiguous."""
        message = "Why are the tomato plants in my field drooping so much"
        assert needs_clarification(message, has_image=False) is True

    def test_hindi_interrogative(self):
        """Hindi question words are ambiguous."""
        message = "मेरी फसल क्यों सूख रही है बताइए कृपया"
        assert needs_clarification(message, has_image=False) is True

    def test_marathi_interrogative(self):
        """Marathi question words are ambiguous."""
        message = "माझ्या शेतात काय झाले आहे ते सांगा"
        assert needs_clarification(message, has_image=False) is True

    def test_empty_message_without_image(self):
        """An empty message has zero tokens and needs clarification."""
        assert needs_clarification("", has_image=False) is True


class TestClassifyQuery:
    """Tests for query type derivation."""

    def test_image_wins(self):
        assert classify_query(True, [Role.WEATHER, Role.MARKET]) == QueryType.VISUAL_DIAGNOSIS

    def test_priority_order(self):
        """weather > market > soil > crop."""
        assert classify_query(False, [Role.MARKET, Role.WEATHER]) == QueryType.WEATHER
        assert classify_query(False, [Role.SOIL, Role.MARKET]) == QueryType.MARKET
        assert classify_query(False, [Role.CROP, Role.SOIL]) == QueryType.SOIL_ANALYSIS
        assert classify_query(False, [Role.CROP]) == QueryType.CROP_ADVICE

    def test_general_fallback(self):
        assert classify_query(False, SEED) == QueryType.GENERAL


class TestRouteScenarios:
    """End-to-end routing scenarios."""

    def test_onion_price_query(self):
        """Market question with simple phrasing."""
        decision = route("What is the price of onion in Nashik?", has_image=False)
        assert {Role.ORCHESTRATOR, Role.TEXT, Role.RECOMMEND, Role.MARKET} <= set(decision.active_roles)
        assert decision.clarify is False
        assert decision.query_type == QueryType.MARKET

    def test_dying_crop_query(self):
        """Short distress message asks for clarification."""
        decision = route("my crop is dying", has_image=False)
        assert decision.clarify is True
        assert {Role.ORCHESTRATOR, Role.TEXT, Role.RECOMMEND, Role.CROP} <= set(decision.active_roles)
        assert decision.query_type == QueryType.CROP_ADVICE

    def test_image_only_query(self):
        """Empty message with an image: no pattern matches, length check suppressed."""
        decision = route("", has_image=True)
        assert set(decision.active_roles) == {
            Role.ORCHESTRATOR, Role.TEXT, Role.RECOMMEND, Role.VISION, Role.CROP,
        }
        assert decision.query_type == QueryType.VISUAL_DIAGNOSIS
        assert decision.clarify is False

    def test_empty_message_without_image(self):
        """Empty text yields the seed roles and a general query."""
        decision = route("", has_image=False)
        assert decision.active_roles == SEED
        assert decision.query_type == QueryType.GENERAL
        assert decision.clarify is True

    def test_soil_query_type(self):
        decision = route("Which fertilizer suits black cotton soil for tur", has_image=False)
        assert decision.query_type == QueryType.SOIL_ANALYSIS

    def test_route_is_idempotent(self):
        """Same inputs give equal decisions."""
        message = "पाऊस कधी येईल आणि कापूस कधी पेरावा"
        assert route(message, False) == route(message, False)

    def test_decision_is_frozen(self):
        decision = route("hello", has_image=False)
        with pytest.raises(Exception):
            decision.clarify = False
