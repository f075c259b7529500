"""
Services for the Genium broker assistant.

- UnitService: Unit catalogue and vector search via Qdrant
- LLMService: OpenAI embeddings and answer composition
- BrokerService: Broker registry and authorization
- ConversationService: Conversation log
- UnitIndexer: Embedding and seeding of the catalogue
- WhatsAppSender: Outbound delivery through the WhatsApp gateway
"""

from .llm_service import LLMService, get_llm_service
from .unit_service import UnitService, get_unit_service
from .broker_service import BrokerService, AuthorizationResult, get_broker_service
from .conversation_service import ConversationService, get_conversation_service
from .indexing_service import UnitIndexer, build_unit_text, read_units_csv, read_brokers_csv
from .whatsapp_service import WhatsAppSender, get_whatsapp_sender, normalize_sender

__all__ = [
    "LLMService",
    "get_llm_service",
    "UnitService",
    "get_unit_service",
    "BrokerService",
    "AuthorizationResult",
    "get_broker_service",
    "ConversationService",
    "get_conversation_service",
    "UnitIndexer",
    "build_unit_text",
    "read_units_csv",
    "read_brokers_csv",
    "WhatsAppSender",
    "get_whatsapp_sender",
    "normalize_sender",
]
