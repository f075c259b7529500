"""
Domain records for brokers, units and the conversation log.
"""

import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


def new_id() -> str:
    """Generate a unique record identifier."""
    return str(uuid.uuid4())


class UnitStatus(str, Enum):
    """Sales status of a unit."""

    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"


class Direction(str, Enum):
    """Direction of a conversation turn."""

    INBOUND = "inbound"
    OUTBOUND = "outbound"


@dataclass
class Broker:
    """A broker allowed (or not) to query the assistant over WhatsApp."""

    phone_number: str
    name: str
    email: Optional[str] = None
    authorized: bool = False
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return data


@dataclass
class Unit:
    """
    A real estate unit in a project catalogue.

    The embedding is stored as the point vector in the vector store,
    everything else as payload.
    """

    project_name: str
    unit_type: str
    bedrooms: int
    bathrooms: float
    sqft: float
    price: float
    description: str = ""
    status: str = UnitStatus.AVAILABLE.value
    floor: Optional[int] = None
    id: str = field(default_factory=new_id)
    embedding: Optional[List[float]] = None

    @property
    def is_available(self) -> bool:
        return self.status == UnitStatus.AVAILABLE.value

    def to_payload(self) -> Dict[str, Any]:
        """Payload stored alongside the vector (no id, no embedding)."""
        return {
            "project_name": self.project_name,
            "unit_type": self.unit_type,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "sqft": self.sqft,
            "price": self.price,
            "floor": self.floor,
            "status": self.status,
            "description": self.description,
        }

    @classmethod
    def from_payload(cls, unit_id: Any, payload: Dict[str, Any], vector: Optional[List[float]] = None) -> "Unit":
        return cls(
            id=str(unit_id),
            project_name=payload.get("project_name", ""),
            unit_type=payload.get("unit_type", ""),
            bedrooms=int(payload.get("bedrooms", 0)),
            bathrooms=payload.get("bathrooms", 0),
            sqft=payload.get("sqft", 0),
            price=payload.get("price", 0),
            floor=payload.get("floor"),
            status=payload.get("status", UnitStatus.AVAILABLE.value),
            description=payload.get("description", ""),
            embedding=vector,
        )


@dataclass
class ScoredUnit:
    """A unit returned by similarity search with its score."""

    unit: Unit
    score: float


@dataclass
class Conversation:
    """
    The running conversation with one broker.

    message_count counts every turn ever appended; it is never decremented.
    """

    broker_id: str
    phone_number: str
    id: str = field(default_factory=new_id)
    started_at: datetime = field(default_factory=datetime.now)
    last_message_at: datetime = field(default_factory=datetime.now)
    message_count: int = 0

    def touch(self):
        """Update last activity time."""
        self.last_message_at = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        data["last_message_at"] = self.last_message_at.isoformat()
        return data


@dataclass
class Message:
    """One inbound or outbound turn of a conversation."""

    conversation_id: str
    broker_id: str
    direction: str
    content: str
    intent: Optional[str] = None
    confidence: Optional[float] = None
    unit_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


@dataclass
class Classification:
    """Result of classifying a query."""

    intent: str
    bedroom_count: Optional[int] = None


@dataclass
class Answer:
    """Answer produced by the pricing or semantic agent."""

    text: str
    confidence: float
    unit_id: Optional[str] = None


@dataclass
class QueryResult:
    """Outcome of processing one broker query."""

    success: bool
    text: str
    confidence: Optional[float] = None
    intent: Optional[str] = None
    unit_id: Optional[str] = None
    bedroom_count: Optional[int] = None
