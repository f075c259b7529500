"""
Data models for the Genium broker assistant.
"""

from .schemas import (
    QueryRequest,
    QueryResponse,
    InboundMessage,
    WebhookResponse,
    BrokerCreate,
    BrokerAuthorizeRequest,
    BrokerUpdate,
    BrokerSummary,
    ConversationSummary,
    MessageSummary,
    UnitSummary,
    UnitUpdateRequest,
    HealthResponse,
)
from .records import (
    Broker,
    Unit,
    UnitStatus,
    ScoredUnit,
    Conversation,
    Message,
    Direction,
    Classification,
    Answer,
    QueryResult,
)
from .state import QueryState, IntentType

__all__ = [
    "QueryRequest",
    "QueryResponse",
    "InboundMessage",
    "WebhookResponse",
    "BrokerCreate",
    "BrokerAuthorizeRequest",
    "BrokerUpdate",
    "BrokerSummary",
    "ConversationSummary",
    "MessageSummary",
    "UnitSummary",
    "UnitUpdateRequest",
    "HealthResponse",
    "Broker",
    "Unit",
    "UnitStatus",
    "ScoredUnit",
    "Conversation",
    "Message",
    "Direction",
    "Classification",
    "Answer",
    "QueryResult",
    "QueryState",
    "IntentType",
]
