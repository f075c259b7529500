"""
LangGraph workflow definition for the broker query pipeline.
"""

import logging
from typing import Optional

from langgraph.graph import StateGraph, END

from ..models.records import QueryResult
from ..models.state import QueryState, create_initial_state
from ..services import LLMService, UnitService, BrokerService, ConversationService
from ..agents import (
    AuthAgent,
    RouterAgent,
    PricingAgent,
    SemanticAgent,
    ConversationManager,
    route_by_authorization,
    route_by_intent,
)

logger = logging.getLogger(__name__)


class QueryWorkflow:
    """
    Main workflow class that orchestrates a broker query.

    Graph:
        authorize -> (reject: END) -> router -> pricing | semantic -> conversation_manager -> END

    The answer is computed before the conversation manager runs, so an
    authorized query persists exactly two turns and a failed or rejected
    one persists none.
    """

    def __init__(
        self,
        llm: Optional[LLMService] = None,
        units: Optional[UnitService] = None,
        brokers: Optional[BrokerService] = None,
        conversations: Optional[ConversationService] = None,
        confidence_threshold: Optional[float] = None,
    ):
        services = dict(llm=llm, units=units, brokers=brokers, conversations=conversations)

        self.auth_agent = AuthAgent(**services)
        self.router_agent = RouterAgent(**services)
        self.pricing_agent = PricingAgent(**services)
        self.semantic_agent = SemanticAgent(confidence_threshold=confidence_threshold, **services)
        self.conversation_manager = ConversationManager(**services)

        self._graph = None
        self._compiled_app = None
        self._build_graph()

    def _build_graph(self):
        """Build the LangGraph workflow graph."""
        self._graph = StateGraph(QueryState)

        # Add nodes for each agent
        self._graph.add_node("authorize", self.auth_agent.process)
        self._graph.add_node("router", self.router_agent.process)
        self._graph.add_node("pricing", self.pricing_agent.process)
        self._graph.add_node("semantic", self.semantic_agent.process)
        self._graph.add_node("conversation_manager", self.conversation_manager.process)

        self._graph.set_entry_point("authorize")

        # Unauthorized senders stop here, before any persistence
        self._graph.add_conditional_edges(
            "authorize",
            route_by_authorization,
            {
                "router": "router",
                "reject": END,
            }
        )

        self._graph.add_conditional_edges(
            "router",
            route_by_intent,
            {
                "pricing": "pricing",
                "semantic": "semantic",
            }
        )

        for agent in ["pricing", "semantic"]:
            self._graph.add_edge(agent, "conversation_manager")

        self._graph.add_edge("conversation_manager", END)

        self._compiled_app = self._graph.compile()

    def run(self, query: str, phone_number: str) -> QueryState:
        """
        Run the workflow for a broker query.

        Args:
            query: The broker's message text
            phone_number: Sender phone number

        Returns:
            Final state after workflow execution

        Raises:
            UpstreamServiceError: If embedding, search or persistence fails
        """
        initial_state = create_initial_state(query=query, phone_number=phone_number)
        return self._compiled_app.invoke(initial_state)

    def process_query(self, query: str, phone_number: str) -> QueryResult:
        """
        Process a broker query end to end.

        Args:
            query: The broker's message text
            phone_number: Sender phone number

        Returns:
            QueryResult; success is False only for unauthorized senders

        Raises:
            UpstreamServiceError: If embedding, search or persistence fails
        """
        state = self.run(query, phone_number)

        if not state.get("authorized"):
            return QueryResult(success=False, text=state.get("answer", ""))

        logger.info(
            f"Answered query from {phone_number}: intent={state.get('intent')}, "
            f"confidence={state.get('confidence')}"
        )
        return QueryResult(
            success=bool(state.get("success")),
            text=state.get("answer", ""),
            confidence=state.get("confidence"),
            intent=state.get("intent"),
            unit_id=state.get("unit_id"),
            bedroom_count=state.get("bedroom_count"),
        )

    def get_graph_visualization(self) -> str:
        """
        Get a Mermaid representation of the workflow graph.

        Returns:
            Mermaid diagram source
        """
        return self._compiled_app.get_graph().draw_mermaid()


# Singleton instance
_workflow: Optional[QueryWorkflow] = None


def create_workflow(**services) -> QueryWorkflow:
    """
    Create a new workflow instance.

    Args:
        **services: Optional llm, units, brokers, conversations overrides

    Returns:
        New QueryWorkflow instance
    """
    return QueryWorkflow(**services)


def get_workflow() -> QueryWorkflow:
    """
    Get or create the workflow singleton.

    Returns:
        QueryWorkflow instance
    """
    global _workflow

    if _workflow is None:
        _workflow = QueryWorkflow()

    return _workflow
