"""
Shared fixtures for the Genium test suite.

The unit registry runs against an in-process Qdrant collection with
2-dimensional vectors, so cosine scores are easy to control:
a unit stored at [1, 0] scores 0.6 against [0.6, 0.8] and about 0.9
against [0.9, 0.43589].
"""

from unittest.mock import MagicMock

import pytest
from qdrant_client import QdrantClient

from genium.models.records import Unit
from genium.services import LLMService, UnitService, BrokerService, ConversationService
from genium.workflow import QueryWorkflow

AUTHORIZED_PHONE = "+1234567890"
UNAUTHORIZED_PHONE = "+1999000000"
UNKNOWN_PHONE = "+1555000000"

UNIT_VECTOR = [1.0, 0.0]
CLOSE_QUERY_VECTOR = [0.9, 0.43589]
FAR_QUERY_VECTOR = [0.6, 0.8]


@pytest.fixture
def make_unit():
    """Factory for units stored at UNIT_VECTOR unless told otherwise."""

    def _make(**overrides):
        values = dict(
            project_name="Sunset Heights",
            unit_type="2BR",
            bedrooms=2,
            bathrooms=2,
            sqft=1200,
            price=298000,
            floor=3,
            status="available",
            description="Spacious 2-bedroom unit with city views.",
            embedding=list(UNIT_VECTOR),
        )
        values.update(overrides)
        return Unit(**values)

    return _make


@pytest.fixture
def unit_service():
    return UnitService(client=QdrantClient(":memory:"), collection_name="test_units", vector_size=2)


@pytest.fixture
def seeded_units(unit_service, make_unit):
    """Two available units (2BR at 298,000 and 3BR at 425,000)."""
    two_bed = make_unit()
    three_bed = make_unit(
        unit_type="3BR",
        bedrooms=3,
        price=425000,
        floor=5,
        description="Premium 3-bedroom corner unit.",
        embedding=[0.0, 1.0],
    )
    unit_service.upsert_units([two_bed, three_bed])
    return {"two_bed": two_bed, "three_bed": three_bed}


@pytest.fixture
def broker_service():
    service = BrokerService()
    service.add_broker(AUTHORIZED_PHONE, "John Smith", email="john.smith@realty.com", authorized=True)
    service.add_broker(UNAUTHORIZED_PHONE, "Pending Broker", authorized=False)
    return service


@pytest.fixture
def authorized_broker(broker_service):
    return broker_service.is_authorized(AUTHORIZED_PHONE).broker


@pytest.fixture
def conversation_service():
    return ConversationService()


@pytest.fixture
def fake_llm():
    llm = MagicMock(spec=LLMService)
    llm.embed.return_value = list(CLOSE_QUERY_VECTOR)
    llm.complete.return_value = "The 2BR unit on floor 3 has city views and costs $298,000."
    return llm


@pytest.fixture
def workflow(fake_llm, unit_service, broker_service, conversation_service):
    return QueryWorkflow(
        llm=fake_llm,
        units=unit_service,
        brokers=broker_service,
        conversations=conversation_service,
    )
