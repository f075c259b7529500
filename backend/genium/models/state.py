"""
LangGraph state definitions for the broker query workflow.
"""

from typing import TypedDict, Optional
from enum import Enum

from .records import Broker


class IntentType(str, Enum):
    """Enumeration of broker query intents."""

    CHEAPEST = "cheapest"
    CHEAPEST_WITH_BEDROOMS = "cheapest_with_bedrooms"
    GENERAL = "general"

    @property
    def is_deterministic(self) -> bool:
        """Whether the intent has a closed-form (price lookup) answer."""
        return self in (IntentType.CHEAPEST, IntentType.CHEAPEST_WITH_BEDROOMS)


class QueryState(TypedDict, total=False):
    """
    State object passed through the LangGraph workflow.

    Holds everything one broker query needs from authorization
    to the persisted conversation turns.
    """

    # Input
    query: str
    phone_number: str

    # Authorization
    authorized: bool
    broker: Optional[Broker]

    # Classification
    intent: Optional[str]  # One of IntentType values
    bedroom_count: Optional[int]

    # Answer
    answer: str
    confidence: Optional[float]
    unit_id: Optional[str]

    # Persistence
    conversation_id: Optional[str]

    # Output
    success: bool


def create_initial_state(query: str, phone_number: str) -> QueryState:
    """
    Create an initial state object for a new query.

    Args:
        query: The broker's message text
        phone_number: Sender phone number

    Returns:
        Initialized QueryState
    """
    return QueryState(
        query=query,
        phone_number=phone_number,
        authorized=False,
        broker=None,
        intent=None,
        bedroom_count=None,
        answer="",
        confidence=None,
        unit_id=None,
        conversation_id=None,
        success=False,
    )
