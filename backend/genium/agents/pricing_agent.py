"""
Pricing Agent - Answers cheapest-unit questions from the catalogue.
"""

from typing import Optional

from .base_agent import BaseAgent
from ..models.records import Answer
from ..models.state import QueryState, IntentType
from ..utils.helpers import format_number, format_price

DETERMINISTIC_CONFIDENCE = 1.0


class PricingAgent(BaseAgent):
    """
    Pricing Agent for closed-form price lookups.

    Answers are rendered from fixed templates and always carry
    confidence 1.0, whether or not a unit was found.
    """

    def __init__(self, **services):
        super().__init__("pricing_agent", **services)

    def process(self, state: QueryState) -> QueryState:
        """
        Answer a cheapest / cheapest-with-bedrooms query.

        Args:
            state: Current workflow state (intent already classified)

        Returns:
            Updated state with answer, confidence and unit reference
        """
        answer = self.answer(state["intent"], state.get("bedroom_count"))

        state["answer"] = answer.text
        state["confidence"] = answer.confidence
        state["unit_id"] = answer.unit_id

        return state

    def answer(self, intent: str, bedroom_count: Optional[int] = None) -> Answer:
        """
        Look up the cheapest matching available unit.

        Args:
            intent: 'cheapest' or 'cheapest_with_bedrooms'
            bedroom_count: Bedroom filter for 'cheapest_with_bedrooms'

        Returns:
            Answer with confidence 1.0

        Raises:
            ValueError: For intents without a closed-form answer
        """
        intent_type = IntentType(intent)

        if intent_type == IntentType.CHEAPEST:
            unit = self.units.cheapest_available()
            if unit is None:
                return Answer(text="Sorry, no available units at the moment.", confidence=DETERMINISTIC_CONFIDENCE)
            return Answer(
                text=f"The most affordable unit is ${format_price(unit.price)} - {format_number(unit.bedrooms)} bedrooms.",
                confidence=DETERMINISTIC_CONFIDENCE,
                unit_id=unit.id,
            )

        if intent_type == IntentType.CHEAPEST_WITH_BEDROOMS:
            if bedroom_count is None:
                raise ValueError("bedroom_count is required for cheapest_with_bedrooms")
            unit = self.units.cheapest_available(bedrooms=bedroom_count)
            if unit is None:
                return Answer(
                    text=f"Sorry, no available {bedroom_count}-bedroom units at the moment.",
                    confidence=DETERMINISTIC_CONFIDENCE,
                )
            return Answer(
                text=f"The cheapest {bedroom_count}-bedroom unit is ${format_price(unit.price)}.",
                confidence=DETERMINISTIC_CONFIDENCE,
                unit_id=unit.id,
            )

        raise ValueError(f"No deterministic answer for intent '{intent}'")
