"""
Unit registry backed by Qdrant.

Each unit is one point: the embedding of its description is the vector,
the remaining attributes are payload. Payload indexes on status, bedrooms
and price back the deterministic lookups; cosine similarity over the vector
backs semantic search.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import List, Dict, Any, Optional, Iterator

from qdrant_client import QdrantClient
from qdrant_client.http.exceptions import UnexpectedResponse, ResponseHandlingException
from qdrant_client.models import (
    Distance,
    VectorParams,
    PointStruct,
    Filter,
    FieldCondition,
    MatchValue,
    Range,
    PayloadSchemaType,
)

from ..config import get_settings
from ..exceptions import UpstreamServiceError, NotFoundError
from ..models.records import Unit, ScoredUnit, UnitStatus

logger = logging.getLogger(__name__)

SCROLL_BATCH_SIZE = 256

PAYLOAD_INDEXES = {
    "status": PayloadSchemaType.KEYWORD,
    "bedrooms": PayloadSchemaType.INTEGER,
    "price": PayloadSchemaType.FLOAT,
}


@contextmanager
def _qdrant_call(operation: str) -> Iterator[None]:
    """Translate Qdrant client failures into UpstreamServiceError."""
    try:
        yield
    except UnexpectedResponse as e:
        status = e.status_code or 0
        retryable = status == 429 or status >= 500
        logger.error(f"Qdrant {operation} failed with status {status}: {e}")
        raise UpstreamServiceError("qdrant", f"{operation} failed: {e}", retryable=retryable, cause=e) from e
    except ResponseHandlingException as e:
        logger.error(f"Qdrant {operation} failed (connection): {e}")
        raise UpstreamServiceError("qdrant", f"{operation} failed: {e}", retryable=True, cause=e) from e


def _dense_vector(point) -> Optional[List[float]]:
    """The point's unnamed dense vector, or None when it was not loaded."""
    vector = getattr(point, "vector", None)
    return list(vector) if isinstance(vector, list) and vector else None


class UnitService:
    """
    Service for the unit catalogue stored in a Qdrant collection.

    Supports:
    - Cheapest-available lookups (optionally by bedroom count)
    - Similarity search over available units
    - Catalogue listing, filtering and partial updates
    """

    def __init__(
        self,
        client: Optional[QdrantClient] = None,
        collection_name: Optional[str] = None,
        vector_size: Optional[int] = None,
    ):
        """
        Initialize the unit service.

        Args:
            client: Qdrant client; built from settings when omitted
            collection_name: Collection holding the units
            vector_size: Embedding dimension of the collection
        """
        self.settings = get_settings()
        self.collection_name = collection_name or self.settings.QDRANT_COLLECTION_NAME
        self.vector_size = vector_size or self.settings.EMBEDDING_DIMENSION
        self._client = client or self._create_client()
        self._ensure_collection()

    def _create_client(self) -> QdrantClient:
        """
        Create the Qdrant client.

        Supports:
        - In-process storage (QDRANT_USE_MEMORY)
        - Local Qdrant server (docker or standalone)
        - Qdrant Cloud
        """
        if self.settings.QDRANT_USE_MEMORY:
            logger.info("Using in-memory Qdrant collection")
            return QdrantClient(":memory:")

        url = self._get_qdrant_url()
        logger.info(f"Connecting to Qdrant at {url}")
        return QdrantClient(
            url=url,
            api_key=self.settings.QDRANT_API_KEY or None,
            timeout=self.settings.QDRANT_TIMEOUT_SECONDS,
        )

    def _get_qdrant_url(self) -> str:
        """Get Qdrant URL from settings."""
        if self.settings.QDRANT_URL:
            return self.settings.QDRANT_URL

        # Use http for local, https for cloud
        protocol = "https" if self.settings.QDRANT_API_KEY else "http"
        return f"{protocol}://{self.settings.QDRANT_HOST}:{self.settings.QDRANT_PORT}"

    def _ensure_collection(self):
        """Create the collection and its payload indexes if missing."""
        with _qdrant_call("collection bootstrap"):
            if self._client.collection_exists(self.collection_name):
                return

            self._client.create_collection(
                collection_name=self.collection_name,
                vectors_config=VectorParams(size=self.vector_size, distance=Distance.COSINE),
            )
            for field_name, schema in PAYLOAD_INDEXES.items():
                self._client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name=field_name,
                    field_schema=schema,
                )
        logger.info(f"Created Qdrant collection '{self.collection_name}' ({self.vector_size}d, cosine)")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert_units(self, units: List[Unit]) -> int:
        """
        Insert or replace units.

        Args:
            units: Units to store; every unit must carry an embedding

        Returns:
            Number of units written

        Raises:
            ValueError: If a unit has no embedding
        """
        points = []
        for unit in units:
            if not unit.embedding:
                raise ValueError(f"Unit {unit.id} has no embedding")
            points.append(PointStruct(id=unit.id, vector=unit.embedding, payload=unit.to_payload()))

        if not points:
            return 0

        with _qdrant_call("upsert"):
            self._client.upsert(collection_name=self.collection_name, points=points)

        return len(points)

    def update_unit(self, unit_id: str, updates: Dict[str, Any]) -> Unit:
        """
        Apply a partial update (status, price, description) to a unit.

        Raises:
            NotFoundError: If the unit does not exist
        """
        allowed = {k: v for k, v in updates.items() if k in ("status", "price", "description") and v is not None}
        unit = self.get_by_id(unit_id)
        if unit is None:
            raise NotFoundError(f"Unit {unit_id} not found")

        if allowed:
            with _qdrant_call("set payload"):
                self._client.set_payload(
                    collection_name=self.collection_name,
                    payload=allowed,
                    points=[unit_id],
                )
            for key, value in allowed.items():
                setattr(unit, key, value)

        return unit

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def cheapest_available(self, bedrooms: Optional[int] = None) -> Optional[Unit]:
        """
        Find the cheapest available unit.

        Ties on price resolve to the lowest unit id.

        Args:
            bedrooms: Exact bedroom count to filter on (None for any)

        Returns:
            The cheapest matching unit or None
        """
        candidates = self.search_units(status=UnitStatus.AVAILABLE.value, bedrooms=bedrooms)
        if not candidates:
            return None
        return min(candidates, key=lambda u: (u.price, u.id))

    def similarity_search(self, vector: List[float], top_k: int = 3) -> List[ScoredUnit]:
        """
        Rank available units by cosine similarity to a query vector.

        Args:
            vector: Query embedding
            top_k: Number of results to return

        Returns:
            Scored units, highest score first
        """
        with _qdrant_call("similarity search"):
            response = self._client.query_points(
                collection_name=self.collection_name,
                query=vector,
                query_filter=self._build_filter(status=UnitStatus.AVAILABLE.value),
                limit=top_k,
                with_payload=True,
            )

        results = [
            ScoredUnit(unit=Unit.from_payload(point.id, point.payload or {}), score=float(point.score))
            for point in response.points
        ]
        results.sort(key=lambda r: r.score, reverse=True)
        return results

    def search_units(
        self,
        status: Optional[str] = None,
        bedrooms: Optional[int] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        with_vectors: bool = False,
    ) -> List[Unit]:
        """
        List units matching structured criteria, ordered by price.

        Args:
            status: Exact status
            bedrooms: Exact bedroom count
            min_price: Inclusive lower price bound
            max_price: Inclusive upper price bound
            with_vectors: Load each unit's stored embedding

        Returns:
            Matching units, cheapest first
        """
        scroll_filter = self._build_filter(
            status=status, bedrooms=bedrooms, min_price=min_price, max_price=max_price
        )
        units = []
        offset = None

        with _qdrant_call("scroll"):
            while True:
                points, offset = self._client.scroll(
                    collection_name=self.collection_name,
                    scroll_filter=scroll_filter,
                    limit=SCROLL_BATCH_SIZE,
                    offset=offset,
                    with_payload=True,
                    with_vectors=with_vectors,
                )
                units.extend(Unit.from_payload(p.id, p.payload or {}, vector=_dense_vector(p)) for p in points)
                if offset is None:
                    break

        units.sort(key=lambda u: (u.price, u.id))
        return units

    def list_units(self, status: Optional[str] = None, with_vectors: bool = False) -> List[Unit]:
        """List the catalogue, optionally restricted to one status."""
        return self.search_units(status=status, with_vectors=with_vectors)

    def get_by_id(self, unit_id: str) -> Optional[Unit]:
        """
        Retrieve a unit by its ID.

        Args:
            unit_id: The unit ID

        Returns:
            Unit or None
        """
        try:
            uuid.UUID(str(unit_id))
        except ValueError:
            # Point ids are UUIDs
            return None

        with _qdrant_call("retrieve"):
            points = self._client.retrieve(
                collection_name=self.collection_name,
                ids=[unit_id],
                with_payload=True,
                with_vectors=True,
            )

        if not points:
            return None

        return Unit.from_payload(points[0].id, points[0].payload or {}, vector=_dense_vector(points[0]))

    def count(self, status: Optional[str] = None) -> int:
        """Count units, optionally restricted to one status."""
        with _qdrant_call("count"):
            result = self._client.count(
                collection_name=self.collection_name,
                count_filter=self._build_filter(status=status),
                exact=True,
            )
        return result.count

    @staticmethod
    def _build_filter(
        status: Optional[str] = None,
        bedrooms: Optional[int] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> Optional[Filter]:
        conditions = []
        if status is not None:
            conditions.append(FieldCondition(key="status", match=MatchValue(value=status)))
        if bedrooms is not None:
            conditions.append(FieldCondition(key="bedrooms", match=MatchValue(value=bedrooms)))
        if min_price is not None or max_price is not None:
            conditions.append(FieldCondition(key="price", range=Range(gte=min_price, lte=max_price)))
        return Filter(must=conditions) if conditions else None

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the indexed catalogue."""
        return {
            "collection": self.collection_name,
            "vector_size": self.vector_size,
            "total_units": self.count(),
            "available_units": self.count(status=UnitStatus.AVAILABLE.value),
        }

    def is_connected(self) -> bool:
        """Check if Qdrant is reachable."""
        try:
            self._client.get_collections()
            return True
        except Exception:
            return False


# Singleton instance
_unit_service: Optional[UnitService] = None


def get_unit_service() -> UnitService:
    """
    Get or create the unit service singleton.

    Returns:
        UnitService instance
    """
    global _unit_service

    if _unit_service is None:
        _unit_service = UnitService()

    return _unit_service
