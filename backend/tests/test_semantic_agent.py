"""
Tests for the semantic answerer: confidence gate, composition and fallback
"""

from unittest.mock import MagicMock

import pytest

from genium.agents import SemanticAgent, INSUFFICIENT_INFORMATION, template_answer
from genium.exceptions import UpstreamServiceError
from genium.models.records import ScoredUnit
from genium.services import UnitService



@pytest.fixture
def agent(fake_llm, unit_service):
    return SemanticAgent(llm=fake_llm, units=unit_service)


class TestConfidenceGate:
    """Tests for the similarity threshold"""

    def test_confident_match_is_composed(self, agent, fake_llm, seeded_units):
        answer = agent.answer("Which unit has city views?")

        assert answer.text == fake_llm.complete.return_value
        assert answer.unit_id == seeded_units["two_bed"].id
        assert answer.confidence == pytest.approx(0.9, abs=1e-3)

    def test_low_score_is_insufficient(self, agent, fake_llm, seeded_units):
        fake_llm.embed.return_value = [0.6, 0.8]

        answer = agent.answer("Tell me about parking")

        assert answer.text == INSUFFICIENT_INFORMATION
        assert answer.confidence == 0.0
        assert answer.unit_id is None
        fake_llm.complete.assert_not_called()

    def test_no_candidates_is_insufficient(self, agent):
        answer = agent.answer("Anything with a pool?")

        assert answer.text == INSUFFICIENT_INFORMATION
        assert answer.confidence == 0.0

    def test_score_equal_to_threshold_is_rejected(self, fake_llm, make_unit):
        units = MagicMock(spec=UnitService)
        units.similarity_search.return_value = [ScoredUnit(unit=make_unit(), score=0.85)]
        agent = SemanticAgent(confidence_threshold=0.85, llm=fake_llm, units=units)

        answer = agent.answer("Tell me about the views")

        assert answer.confidence == 0.0
        assert answer.text == INSUFFICIENT_INFORMATION

    def test_searches_top_three(self, fake_llm, make_unit):
        units = MagicMock(spec=UnitService)
        units.similarity_search.return_value = [ScoredUnit(unit=make_unit(), score=0.95)]
        agent = SemanticAgent(llm=fake_llm, units=units)

        agent.answer("Tell me about the views")

        units.similarity_search.assert_called_once_with(fake_llm.embed.return_value, top_k=3)

    def test_only_available_units_are_candidates(self, agent, unit_service, make_unit):
        unit_service.upsert_units([make_unit(status="sold")])

        answer = agent.answer("Which unit has city views?")

        assert answer.text == INSUFFICIENT_INFORMATION


class TestComposition:
    """Tests for answer composition and its fallback"""

    def test_prompt_carries_unit_attributes(self, agent, fake_llm, seeded_units):
        agent.answer("Which unit has city views?")

        kwargs = fake_llm.complete.call_args.kwargs
        assert "Which unit has city views?" in kwargs["prompt"]
        assert "2BR, 2 bed, 2 bath, 1200 sqft, $298000" in kwargs["prompt"]
        assert "city views" in kwargs["prompt"]
        assert "real estate assistant" in kwargs["system_prompt"]

    def test_generation_failure_falls_back_to_template(self, agent, fake_llm, seeded_units):
        fake_llm.complete.side_effect = UpstreamServiceError("openai", "timeout", retryable=True)

        answer = agent.answer("Which unit has city views?")

        assert answer.text == template_answer(seeded_units["two_bed"])
        assert answer.confidence == pytest.approx(0.9, abs=1e-3)
        assert answer.unit_id == seeded_units["two_bed"].id

    def test_embedding_failure_propagates(self, agent, fake_llm):
        fake_llm.embed.side_effect = UpstreamServiceError("openai", "connection refused", retryable=True)

        with pytest.raises(UpstreamServiceError):
            agent.answer("Which unit has city views?")


def test_template_answer(make_unit):
    text = template_answer(make_unit(bathrooms=2.5))

    assert text == (
        "2BR unit - 2 bed, 2.5 bath, 1200 sqft. Price: $298,000. "
        "Spacious 2-bedroom unit with city views."
    )
