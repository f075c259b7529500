"""
Base agent class providing common functionality for all agents.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..config import load_system_prompt, get_settings
from ..models.state import QueryState
from ..services import (
    LLMService,
    UnitService,
    BrokerService,
    ConversationService,
    get_llm_service,
    get_unit_service,
    get_broker_service,
    get_conversation_service,
)


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    Provides prompt loading and access to services. Services passed to the
    constructor take precedence over the application singletons, which
    keeps agents usable against in-memory doubles.
    """

    def __init__(
        self,
        agent_name: str,
        llm: Optional[LLMService] = None,
        units: Optional[UnitService] = None,
        brokers: Optional[BrokerService] = None,
        conversations: Optional[ConversationService] = None,
    ):
        """
        Initialize the agent.

        Args:
            agent_name: Name of the agent (used for loading prompts)
            llm: Embedding and text-generation service
            units: Unit registry
            brokers: Broker registry
            conversations: Conversation log
        """
        self.agent_name = agent_name
        self._prompts: Dict[str, str] = {}
        self._settings = get_settings()
        self._llm = llm
        self._units = units
        self._brokers = brokers
        self._conversations = conversations

    def prompt(self, name: str) -> str:
        """Get a prompt by name, loading it from file on first use."""
        if name not in self._prompts:
            self._prompts[name] = load_system_prompt(name)
        return self._prompts[name]

    @property
    def llm(self) -> LLMService:
        """Get the LLM service."""
        return self._llm if self._llm is not None else get_llm_service()

    @property
    def units(self) -> UnitService:
        """Get the unit registry (Qdrant)."""
        return self._units if self._units is not None else get_unit_service()

    @property
    def brokers(self) -> BrokerService:
        """Get the broker registry."""
        return self._brokers if self._brokers is not None else get_broker_service()

    @property
    def conversations(self) -> ConversationService:
        """Get the conversation log."""
        return self._conversations if self._conversations is not None else get_conversation_service()

    @abstractmethod
    def process(self, state: QueryState) -> QueryState:
        """
        Process the current state and return updated state.

        Args:
            state: Current workflow state

        Returns:
            Updated workflow state
        """
        pass

    def __call__(self, state: QueryState) -> QueryState:
        """Allow agents to be used directly as graph nodes."""
        return self.process(state)
