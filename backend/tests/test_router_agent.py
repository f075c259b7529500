"""
Tests for query classification and intent routing
"""

import pytest

from genium.agents import RouterAgent, classify, extract_bedroom_count, route_by_intent
from genium.models.state import create_initial_state


class TestExtractBedroomCount:
    """Tests for extract_bedroom_count"""

    def test_studio_is_zero(self):
        assert extract_bedroom_count("studio unit") == 0

    def test_explicit_count(self):
        assert extract_bedroom_count("3 bedroom unit") == 3

    def test_default_is_two(self):
        assert extract_bedroom_count("need something nice") == 2

    @pytest.mark.parametrize("query,expected", [
        ("cheapest 1br available", 1),
        ("4 bed unit", 4),
        ("lowest price 3BEDROOM", 3),
        ("cheapest 2 BR", 2),
    ])
    def test_count_variants(self, query, expected):
        assert extract_bedroom_count(query) == expected

    def test_digit_match_wins_over_studio(self):
        assert extract_bedroom_count("studio or 1 bedroom") == 1


class TestClassify:
    """Tests for the rule-based classifier"""

    def test_cheapest(self):
        result = classify("What is the cheapest residential unit available?")

        assert result.intent == "cheapest"
        assert result.bedroom_count is None

    def test_cheapest_with_bedrooms(self):
        result = classify("Show me the most affordable 2 bedroom unit")

        assert result.intent == "cheapest_with_bedrooms"
        assert result.bedroom_count == 2

    def test_price_term_without_subject_is_general(self):
        assert classify("Is anything cheap?").intent == "general"

    def test_subject_without_price_term_is_general(self):
        assert classify("Which unit has the best view?").intent == "general"

    def test_bedrooms_alone_is_general(self):
        assert classify("Tell me about the 3 bedroom units").intent == "general"

    def test_case_insensitive(self):
        result = classify("LOWEST PRICE 3 BR")

        assert result.intent == "cheapest_with_bedrooms"
        assert result.bedroom_count == 3

    def test_least_expensive_phrase(self):
        assert classify("least expensive unit please").intent == "cheapest"

    @pytest.mark.parametrize("query,expected", [
        ("What is the cheapest 2BR unit?", 2),
        ("cheapest 1br available", 1),
        ("lowest price 3 br", 3),
        ("Cheapest available 2 BR", 2),
    ])
    def test_unit_type_spelling_is_a_bedroom_query(self, query, expected):
        result = classify(query)

        assert result.intent == "cheapest_with_bedrooms"
        assert result.bedroom_count == expected

    def test_br_inside_a_word_is_ignored(self):
        assert classify("cheapest brand new unit").intent == "cheapest"

    def test_br_must_be_a_token(self):
        # "library" contains "br" but is not a bedroom reference
        assert classify("cheapest unit near the library").intent == "cheapest"

    def test_studio_bedroom_query_without_digits(self):
        result = classify("cheapest studio bedroom unit")

        assert result.intent == "cheapest_with_bedrooms"
        assert result.bedroom_count == 0

    def test_bedroom_word_without_count_defaults_to_two(self):
        result = classify("cheapest bedroom unit")

        assert result.intent == "cheapest_with_bedrooms"
        assert result.bedroom_count == 2


class TestRouterAgent:
    """Tests for RouterAgent and route_by_intent"""

    def test_process_sets_intent(self):
        state = create_initial_state("cheapest 3 bed unit", "+1234567890")

        state = RouterAgent().process(state)

        assert state["intent"] == "cheapest_with_bedrooms"
        assert state["bedroom_count"] == 3

    @pytest.mark.parametrize("intent,node", [
        ("cheapest", "pricing"),
        ("cheapest_with_bedrooms", "pricing"),
        ("general", "semantic"),
    ])
    def test_route_by_intent(self, intent, node):
        assert route_by_intent({"intent": intent}) == node
