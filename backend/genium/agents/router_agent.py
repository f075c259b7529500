"""
Router Agent - Classifies broker queries and routes them to the pricing or semantic agent.
"""

import re
from typing import Optional

from .base_agent import BaseAgent
from ..models.records import Classification
from ..models.state import QueryState, IntentType

# A query is about price when it mentions one term from each group
PRICE_TERMS = ["cheap", "afford", "lowest", "least expensive"]
PRICE_SUBJECTS = ["price", "cost", "unit", "available"]

# "br" counts after a digit ("2BR") but not inside a word ("library")
BEDROOM_MENTION = re.compile(r"bedroom|(?<![a-z])br\b|\d+\s*(?:bed|br)", re.IGNORECASE)
BEDROOM_COUNT = re.compile(r"(\d+)\s*(bedroom|br|bed)", re.IGNORECASE)

DEFAULT_BEDROOM_COUNT = 2


def extract_bedroom_count(query: str) -> int:
    """
    Extract the requested bedroom count from a query.

    Args:
        query: Query text

    Returns:
        The stated count, 0 for a studio, otherwise 2
    """
    match = BEDROOM_COUNT.search(query)
    if match:
        return int(match.group(1))

    if "studio" in query.lower():
        return 0

    return DEFAULT_BEDROOM_COUNT


def classify(query: str) -> Classification:
    """
    Rule-based intent classification.

    Price terms are checked before bedroom details, so a bedroom
    mention alone never makes a price query.

    Args:
        query: Query text

    Returns:
        Classification with the intent and, for bedroom queries, the count
    """
    query_lower = query.lower()

    is_price_query = (
        any(term in query_lower for term in PRICE_TERMS)
        and any(subject in query_lower for subject in PRICE_SUBJECTS)
    )
    if not is_price_query:
        return Classification(intent=IntentType.GENERAL.value)

    if BEDROOM_MENTION.search(query_lower):
        return Classification(
            intent=IntentType.CHEAPEST_WITH_BEDROOMS.value,
            bedroom_count=extract_bedroom_count(query),
        )

    return Classification(intent=IntentType.CHEAPEST.value)


class RouterAgent(BaseAgent):
    """
    Router Agent that classifies the query and determines the workflow path.
    """

    def __init__(self, **services):
        super().__init__("router_agent", **services)

    def process(self, state: QueryState) -> QueryState:
        """
        Classify the broker's query and update state.

        Args:
            state: Current workflow state

        Returns:
            Updated state with intent and bedroom count
        """
        classification = classify(state.get("query", ""))

        state["intent"] = classification.intent
        state["bedroom_count"] = classification.bedroom_count

        return state


def route_by_intent(state: QueryState) -> str:
    """
    Pick the answering node for a classified state.

    Returns:
        'pricing' for closed-form price questions, otherwise 'semantic'
    """
    intent: Optional[str] = state.get("intent")
    if intent and IntentType(intent).is_deterministic:
        return "pricing"
    return "semantic"
