"""
Conversation Manager - Records each answered query in the conversation log.
"""

from .base_agent import BaseAgent
from ..models.state import QueryState


class ConversationManager(BaseAgent):
    """
    Conversation Manager persisting the inbound and outbound turns.

    Runs after the answer is fully computed, so a failed query leaves
    no turns behind.
    """

    def __init__(self, **services):
        super().__init__("conversation_manager", **services)

    def process(self, state: QueryState) -> QueryState:
        """
        Append the query and its answer to the broker's conversation.

        Args:
            state: Workflow state carrying broker, intent and answer

        Returns:
            Updated state with the conversation id and success flag
        """
        conversation, _, _ = self.conversations.record_exchange(
            broker=state["broker"],
            query=state["query"],
            answer=state["answer"],
            intent=state.get("intent"),
            confidence=state["confidence"],
            unit_id=state.get("unit_id"),
        )

        state["conversation_id"] = conversation.id
        state["success"] = True

        return state
