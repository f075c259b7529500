"""
Agent modules for the Genium broker assistant.

Each agent is one step of the query workflow.
"""

from .auth_agent import AuthAgent, UNAUTHORIZED_MESSAGE, route_by_authorization
from .router_agent import RouterAgent, classify, extract_bedroom_count, route_by_intent
from .pricing_agent import PricingAgent
from .semantic_agent import SemanticAgent, INSUFFICIENT_INFORMATION, template_answer
from .conversation_manager import ConversationManager

__all__ = [
    "AuthAgent",
    "UNAUTHORIZED_MESSAGE",
    "route_by_authorization",
    "RouterAgent",
    "classify",
    "extract_bedroom_count",
    "route_by_intent",
    "PricingAgent",
    "SemanticAgent",
    "INSUFFICIENT_INFORMATION",
    "template_answer",
    "ConversationManager",
]
