"""
Pydantic schemas for API request/response models.
"""

from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime


class UnitSummary(BaseModel):
    """Summary of a unit in the project catalogue."""

    id: str = Field(..., description="Unique identifier for the unit")
    project_name: str = Field(..., description="Project the unit belongs to")
    unit_type: str = Field(..., description="Unit type, e.g. '2BR' or 'Studio'")
    bedrooms: int = Field(..., description="Number of bedrooms (0 for studios)")
    bathrooms: float = Field(..., description="Number of bathrooms")
    sqft: float = Field(..., description="Area in square feet")
    price: float = Field(..., description="Listing price in USD")
    floor: Optional[int] = Field(None, description="Floor number")
    status: str = Field(..., description="available, reserved or sold")
    description: str = Field("", description="Free-text description")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "4b0d6c1e-2b35-5a53-9d42-0f2d7f5b8f11",
                "project_name": "Sunset Heights",
                "unit_type": "2BR",
                "bedrooms": 2,
                "bathrooms": 2,
                "sqft": 1200,
                "price": 298000,
                "floor": 3,
                "status": "available",
                "description": "Spacious 2-bedroom unit with city views."
            }
        }


class UnitUpdateRequest(BaseModel):
    """Partial update of a unit."""

    status: Optional[str] = Field(None, pattern="^(available|reserved|sold)$")
    price: Optional[float] = Field(None, gt=0)
    description: Optional[str] = None


class QueryRequest(BaseModel):
    """Request model for the direct query endpoint."""

    query: str = Field(..., min_length=1, description="Broker's question")
    phone_number: str = Field(..., min_length=1, description="Sender phone number, e.g. +1234567890")

    class Config:
        json_schema_extra = {
            "example": {
                "query": "What is the cheapest 2 bedroom unit available?",
                "phone_number": "+1234567890"
            }
        }


class QueryResponse(BaseModel):
    """Response model for query processing."""

    success: bool = Field(..., description="Whether the query was answered")
    text: str = Field(..., description="Answer text, or the rejection/error message")
    confidence: Optional[float] = Field(None, ge=0, le=1, description="Answer confidence")
    intent: Optional[str] = Field(None, description="Classified intent of the query")
    unit_id: Optional[str] = Field(None, description="Unit used as evidence")
    error: Optional[str] = Field(None, description="Upstream error detail on failure")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "text": "The cheapest 2-bedroom unit is $298,000.",
                "confidence": 1.0,
                "intent": "cheapest_with_bedrooms",
                "unit_id": "4b0d6c1e-2b35-5a53-9d42-0f2d7f5b8f11"
            }
        }


class InboundMessage(BaseModel):
    """Normalized inbound WhatsApp message posted by the gateway."""

    sender: str = Field(..., alias="from", description="Sender number or JID")
    text: str = Field("", description="Message text")
    from_me: bool = Field(False, description="True for echoes of our own outgoing messages")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "from": "1234567890@s.whatsapp.net",
                "text": "Show me the most affordable 2 bedroom unit",
                "from_me": False
            }
        }


class WebhookResponse(BaseModel):
    """Response model for the WhatsApp webhook."""

    success: bool
    skipped: bool = False
    delivered: bool = False
    text: Optional[str] = None
    confidence: Optional[float] = None
    intent: Optional[str] = None
    unit_id: Optional[str] = None
    error: Optional[str] = None


class BrokerCreate(BaseModel):
    """Request model for registering a broker."""

    phone_number: str = Field(..., min_length=1, description="Phone number, format +1234567890")
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    authorized: bool = True


class BrokerAuthorizeRequest(BaseModel):
    """Register-or-authorize request used when onboarding a broker."""

    phone_number: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: Optional[str] = None


class BrokerUpdate(BaseModel):
    """Request model for changing a broker's authorization."""

    authorized: bool


class BrokerSummary(BaseModel):
    """A registered broker."""

    id: str
    phone_number: str
    name: str
    email: Optional[str] = None
    authorized: bool
    created_at: datetime


class ConversationSummary(BaseModel):
    """A broker conversation as listed on the dashboard."""

    id: str
    broker_id: str
    broker_name: str
    phone_number: str
    started_at: datetime
    last_message_at: datetime
    message_count: int


class MessageSummary(BaseModel):
    """One conversation turn."""

    id: str
    conversation_id: str
    broker_id: str
    broker_name: Optional[str] = None
    direction: str
    content: str
    timestamp: datetime
    intent: Optional[str] = None
    confidence: Optional[float] = None
    unit_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="Application version")
    vector_store_connected: bool = Field(..., description="Whether vector store is connected")
    llm_available: bool = Field(..., description="Whether LLM service is available")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "vector_store_connected": True,
                "llm_available": True
            }
        }
