"""
Tests for the deterministic pricing answers
"""

import pytest

from genium.agents import PricingAgent


@pytest.fixture
def agent(unit_service):
    return PricingAgent(units=unit_service)


class TestCheapest:
    """Tests for the 'cheapest' intent"""

    def test_finds_cheapest_available(self, agent, seeded_units):
        answer = agent.answer("cheapest")

        assert answer.text == "The most affordable unit is $298,000 - 2 bedrooms."
        assert answer.confidence == 1.0
        assert answer.unit_id == seeded_units["two_bed"].id

    def test_ignores_unavailable_units(self, agent, unit_service, seeded_units, make_unit):
        unit_service.upsert_units([
            make_unit(price=150000, status="reserved"),
            make_unit(price=120000, status="sold"),
        ])

        answer = agent.answer("cheapest")

        assert answer.unit_id == seeded_units["two_bed"].id

    def test_no_units(self, agent):
        answer = agent.answer("cheapest")

        assert answer.text == "Sorry, no available units at the moment."
        assert answer.confidence == 1.0
        assert answer.unit_id is None

    def test_price_tie_resolves_to_lowest_id(self, agent, unit_service, make_unit):
        first = make_unit(id="00000000-0000-0000-0000-000000000001", price=200000)
        second = make_unit(id="00000000-0000-0000-0000-000000000002", price=200000)
        unit_service.upsert_units([second, first])

        assert agent.answer("cheapest").unit_id == first.id


class TestCheapestWithBedrooms:
    """Tests for the 'cheapest_with_bedrooms' intent"""

    def test_filters_on_bedrooms(self, agent, seeded_units):
        answer = agent.answer("cheapest_with_bedrooms", 3)

        assert answer.text == "The cheapest 3-bedroom unit is $425,000."
        assert answer.confidence == 1.0
        assert answer.unit_id == seeded_units["three_bed"].id

    def test_no_matching_bedrooms(self, agent, seeded_units):
        answer = agent.answer("cheapest_with_bedrooms", 5)

        assert answer.text == "Sorry, no available 5-bedroom units at the moment."
        assert answer.confidence == 1.0
        assert answer.unit_id is None

    def test_requires_bedroom_count(self, agent):
        with pytest.raises(ValueError):
            agent.answer("cheapest_with_bedrooms")


def test_general_intent_is_rejected(agent):
    with pytest.raises(ValueError):
        agent.answer("general")


def test_process_updates_state(agent, seeded_units):
    state = agent.process({"intent": "cheapest_with_bedrooms", "bedroom_count": 2})

    assert state["answer"] == "The cheapest 2-bedroom unit is $298,000."
    assert state["confidence"] == 1.0
    assert state["unit_id"] == seeded_units["two_bed"].id
