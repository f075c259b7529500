"""
Authorization Agent - Admits only registered, authorized brokers.
"""

import logging

from .base_agent import BaseAgent
from ..models.state import QueryState

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized. Please contact support to authorize your number."


class AuthAgent(BaseAgent):
    """
    Authorization Agent checking the sender against the broker registry.

    A rejected query ends the workflow before anything is persisted.
    """

    def __init__(self, **services):
        super().__init__("auth_agent", **services)

    def process(self, state: QueryState) -> QueryState:
        """
        Look up the sender and mark the state authorized or rejected.

        Args:
            state: Current workflow state

        Returns:
            Updated state with the broker, or the rejection message
        """
        phone_number = state.get("phone_number", "")
        result = self.brokers.is_authorized(phone_number)

        if not result.authorized or result.broker is None:
            logger.warning(f"Rejected query from unauthorized number {phone_number}")
            state["authorized"] = False
            state["success"] = False
            state["answer"] = UNAUTHORIZED_MESSAGE
            return state

        state["authorized"] = True
        state["broker"] = result.broker
        return state


def route_by_authorization(state: QueryState) -> str:
    """Continue to classification only for authorized senders."""
    return "router" if state.get("authorized") else "reject"
