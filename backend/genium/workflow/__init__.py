"""
LangGraph workflow for the Genium broker assistant.
"""

from .graph import (
    QueryWorkflow,
    create_workflow,
    get_workflow,
)

__all__ = [
    "QueryWorkflow",
    "create_workflow",
    "get_workflow",
]
