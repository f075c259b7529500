"""
FastAPI main application for the Genium broker assistant.

This is the entry point for the backend API server: the WhatsApp webhook,
the direct query endpoint used for testing, and the admin API behind the
dashboard.
"""

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional
import logging

from .config import get_settings
from .exceptions import NotFoundError, UpstreamServiceError
from .models.records import Unit, Message
from .models.schemas import (
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
from .services import (
    BrokerService,
    ConversationService,
    UnitService,
    UnitIndexer,
    WhatsAppSender,
    get_broker_service,
    get_conversation_service,
    get_unit_service,
    get_llm_service,
    get_whatsapp_sender,
    normalize_sender,
    read_brokers_csv,
    read_units_csv,
)
from .utils.helpers import truncate_text
from .workflow import QueryWorkflow, get_workflow
from . import __version__

# Settings
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

PROCESSING_ERROR = "Sorry, I couldn't process your question right now. Please try again shortly."


def get_unit_indexer() -> UnitIndexer:
    """Dependency provider for the unit indexer."""
    return UnitIndexer()


def _seed_from_files():
    """Load seed brokers and units when the data files are present."""
    data_path = Path(settings.DATA_PATH)

    brokers_file = data_path / settings.BROKERS_FILENAME
    if brokers_file.exists():
        added = get_broker_service().load_brokers(read_brokers_csv(brokers_file))
        logger.info(f"Seeded {added} brokers from {brokers_file}")

    units_file = data_path / settings.UNITS_FILENAME
    units = get_unit_service()
    if units_file.exists() and units.count() == 0:
        result = UnitIndexer().index_units(read_units_csv(units_file))
        logger.info(f"Seeded unit catalogue: {result}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup/shutdown events.
    """
    # Startup
    logger.info("Starting Genium API...")
    logger.info(f"Version: {__version__}")

    if settings.SEED_ON_STARTUP:
        try:
            _seed_from_files()
        except Exception as e:
            logger.warning(f"Seeding deferred: {e}")

    try:
        stats = get_unit_service().get_stats()
        logger.info(f"Unit catalogue ready. Stats: {stats}")
    except Exception as e:
        logger.warning(f"Unit catalogue initialization deferred: {e}")

    logger.info("Genium API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Genium API...")


# Create FastAPI application
app = FastAPI(
    title="Genium Broker Assistant API",
    description="""
    WhatsApp query assistant for real estate brokers.

    Features:
    - Broker authorization by phone number
    - Deterministic cheapest-unit answers
    - Semantic answers grounded in the unit catalogue
    - Conversation log and admin API for the dashboard
    """,
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify allowed origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# Converters
# ============================================================

def _unit_summary(unit: Unit) -> UnitSummary:
    return UnitSummary(
        id=unit.id,
        project_name=unit.project_name,
        unit_type=unit.unit_type,
        bedrooms=unit.bedrooms,
        bathrooms=unit.bathrooms,
        sqft=unit.sqft,
        price=unit.price,
        floor=unit.floor,
        status=unit.status,
        description=unit.description,
    )


def _message_summary(message: Message, brokers: BrokerService) -> MessageSummary:
    broker = brokers.get_broker(message.broker_id)
    return MessageSummary(
        **message.to_dict(),
        broker_name=broker.name if broker else "Unknown",
    )


# ============================================================
# API Endpoints
# ============================================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Genium Broker Assistant API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/test", tags=["Root"])
async def test():
    """Liveness check used by the WhatsApp gateway setup."""
    return {"message": "Genium API is running"}


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """
    Health check endpoint to verify service status.
    """
    vector_store_connected = False
    llm_available = False

    try:
        vector_store_connected = get_unit_service().is_connected()
    except Exception:
        pass

    try:
        llm_available = get_llm_service().is_available()
    except Exception:
        pass

    return HealthResponse(
        status="healthy" if vector_store_connected else "degraded",
        version=__version__,
        vector_store_connected=vector_store_connected,
        llm_available=llm_available,
    )


@app.post("/query", response_model=QueryResponse, tags=["Query"])
def query_assistant(
    request: QueryRequest,
    workflow: QueryWorkflow = Depends(get_workflow),
):
    """
    Direct query endpoint (for testing without WhatsApp).

    Returns the same result the broker would receive over WhatsApp.
    """
    logger.info(f"Query from {request.phone_number}: {truncate_text(request.query, 50)}")

    try:
        result = workflow.process_query(request.query, request.phone_number)
    except UpstreamServiceError as e:
        logger.error(f"Error processing query: {e}", exc_info=True)
        return JSONResponse(
            status_code=502,
            content=QueryResponse(success=False, text=PROCESSING_ERROR, error=str(e)).model_dump(),
        )

    return QueryResponse(
        success=result.success,
        text=result.text,
        confidence=result.confidence,
        intent=result.intent,
        unit_id=result.unit_id,
    )


@app.post("/webhook/whatsapp", response_model=WebhookResponse, tags=["WhatsApp"])
def whatsapp_webhook(
    message: InboundMessage,
    workflow: QueryWorkflow = Depends(get_workflow),
    sender: WhatsAppSender = Depends(get_whatsapp_sender),
):
    """
    Receive a normalized inbound WhatsApp message, answer it and
    send the answer back to the broker.
    """
    if message.from_me:
        logger.info("Skipping outgoing message echo")
        return WebhookResponse(success=True, skipped=True)

    phone_number = normalize_sender(message.sender)
    text = message.text.strip()
    if not phone_number or not text:
        logger.info("Skipping message without sender or text")
        return WebhookResponse(success=True, skipped=True)

    logger.info(f"Processing WhatsApp query for {phone_number}")

    try:
        result = workflow.process_query(text, phone_number)
    except UpstreamServiceError as e:
        logger.error(f"Webhook error: {e}", exc_info=True)
        return JSONResponse(
            status_code=502,
            content=WebhookResponse(success=False, error=str(e)).model_dump(),
        )

    delivered = False
    if result.success:
        delivered = sender.send_text(phone_number, result.text)

    return WebhookResponse(
        success=result.success,
        delivered=delivered,
        text=result.text,
        confidence=result.confidence,
        intent=result.intent,
        unit_id=result.unit_id,
    )


# ============================================================
# Brokers
# ============================================================

@app.get("/brokers", response_model=List[BrokerSummary], tags=["Brokers"])
async def list_brokers(brokers: BrokerService = Depends(get_broker_service)):
    """List all registered brokers."""
    return [BrokerSummary(**b.to_dict()) for b in brokers.list_brokers()]


@app.post("/brokers", response_model=BrokerSummary, status_code=201, tags=["Brokers"])
async def add_broker(
    request: BrokerCreate,
    brokers: BrokerService = Depends(get_broker_service),
):
    """Register a new broker."""
    try:
        broker = brokers.add_broker(
            phone_number=request.phone_number,
            name=request.name,
            email=request.email,
            authorized=request.authorized,
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return BrokerSummary(**broker.to_dict())


@app.post("/brokers/authorize", tags=["Brokers"])
async def authorize_broker(
    request: BrokerAuthorizeRequest,
    brokers: BrokerService = Depends(get_broker_service),
):
    """Register a broker as authorized, or authorize an existing number."""
    return brokers.authorize_broker(request.phone_number, request.name, email=request.email)


@app.patch("/brokers/{broker_id}", response_model=BrokerSummary, tags=["Brokers"])
async def update_broker(
    broker_id: str,
    request: BrokerUpdate,
    brokers: BrokerService = Depends(get_broker_service),
):
    """Grant or revoke a broker's authorization."""
    try:
        broker = brokers.update_authorization(broker_id, request.authorized)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return BrokerSummary(**broker.to_dict())


@app.delete("/brokers/{broker_id}", tags=["Brokers"])
async def delete_broker(
    broker_id: str,
    brokers: BrokerService = Depends(get_broker_service),
):
    """Delete a broker."""
    if not brokers.delete_broker(broker_id):
        raise HTTPException(status_code=404, detail=f"Broker {broker_id} not found")

    return {"success": True, "message": "Broker deleted"}


# ============================================================
# Conversations
# ============================================================

@app.get("/conversations", response_model=List[ConversationSummary], tags=["Conversations"])
async def list_conversations(
    conversations: ConversationService = Depends(get_conversation_service),
    brokers: BrokerService = Depends(get_broker_service),
):
    """List conversations, most recently active first."""
    summaries = []
    for conversation in conversations.list_conversations():
        broker = brokers.get_broker(conversation.broker_id)
        summaries.append(ConversationSummary(
            **conversation.to_dict(),
            broker_name=broker.name if broker else "Unknown",
        ))
    return summaries


@app.get("/conversations/{conversation_id}/messages", response_model=List[MessageSummary], tags=["Conversations"])
async def get_conversation_messages(
    conversation_id: str,
    conversations: ConversationService = Depends(get_conversation_service),
    brokers: BrokerService = Depends(get_broker_service),
):
    """Get the turns of a conversation, oldest first."""
    try:
        messages = conversations.get_messages(conversation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return [_message_summary(m, brokers) for m in messages]


@app.get("/messages/recent", response_model=List[MessageSummary], tags=["Conversations"])
async def get_recent_messages(
    limit: int = 50,
    conversations: ConversationService = Depends(get_conversation_service),
    brokers: BrokerService = Depends(get_broker_service),
):
    """Get the most recent turns across all conversations."""
    return [_message_summary(m, brokers) for m in conversations.get_recent_messages(limit)]


@app.delete("/conversations", tags=["Conversations"])
async def clear_conversations(conversations: ConversationService = Depends(get_conversation_service)):
    """Delete all conversations and messages."""
    deleted = conversations.clear()
    return {"success": True, "deleted": deleted}


# ============================================================
# Units
# ============================================================

@app.get("/units", response_model=List[UnitSummary], tags=["Units"])
def list_units(
    status: Optional[str] = None,
    units: UnitService = Depends(get_unit_service),
):
    """List the unit catalogue, cheapest first."""
    try:
        return [_unit_summary(u) for u in units.list_units(status=status)]
    except UpstreamServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.patch("/units/{unit_id}", response_model=UnitSummary, tags=["Units"])
def update_unit(
    unit_id: str,
    request: UnitUpdateRequest,
    units: UnitService = Depends(get_unit_service),
    indexer: UnitIndexer = Depends(get_unit_indexer),
):
    """
    Update a unit's status, price or description.

    A changed price or description is re-embedded so semantic search sees it.
    """
    try:
        unit = units.update_unit(unit_id, request.model_dump(exclude_none=True))
        if request.description is not None or request.price is not None:
            unit.embedding = None
            indexer.index_units([unit])
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return _unit_summary(unit)


@app.post("/units/embeddings", tags=["Units"])
def generate_unit_embeddings(
    reembed: bool = False,
    units: UnitService = Depends(get_unit_service),
    indexer: UnitIndexer = Depends(get_unit_indexer),
):
    """
    Embed stored units that have no vector yet.

    Only the stored catalogue is indexed, so admin edits survive. Pass
    reembed=true to rebuild every vector from the stored payloads; the
    seed file is loaded on startup or by scripts/seed_data.py.
    """
    try:
        catalogue = units.list_units(with_vectors=True)
        if reembed:
            for unit in catalogue:
                unit.embedding = None
        result = indexer.index_units(catalogue)
    except UpstreamServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"success": True, **result}


# ============================================================
# Debug
# ============================================================

@app.get("/workflow/diagram", tags=["Debug"])
async def get_workflow_diagram(workflow: QueryWorkflow = Depends(get_workflow)):
    """
    Get a visual representation of the workflow graph.
    """
    return {
        "diagram": workflow.get_graph_visualization(),
    }


@app.get("/stats", tags=["Debug"])
def get_stats(
    brokers: BrokerService = Depends(get_broker_service),
    conversations: ConversationService = Depends(get_conversation_service),
    units: UnitService = Depends(get_unit_service),
):
    """
    Get system statistics (for debugging/monitoring).
    """
    stats = {
        "brokers": len(brokers.list_brokers()),
        "conversations": len(conversations.list_conversations()),
        "messages": conversations.count_messages(),
    }

    try:
        stats["units"] = units.get_stats()
    except UpstreamServiceError as e:
        stats["units"] = {"error": str(e)}

    return stats


# ============================================================
# Run with Uvicorn (for development)
# ============================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "genium.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
