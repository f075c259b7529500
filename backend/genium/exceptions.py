"""
Exception types shared across services and the HTTP layer.
"""

from typing import Optional


class GeniumError(Exception):
    """Base class for application errors."""


class NotFoundError(GeniumError):
    """Raised when a broker, conversation or unit does not exist."""


class UpstreamServiceError(GeniumError):
    """
    Raised when an external capability (embeddings, vector search,
    text generation, persistence) fails or times out.

    Attributes:
        service: Name of the failing collaborator (e.g. 'openai', 'qdrant')
        retryable: Whether the same call may succeed if repeated
    """

    def __init__(self, service: str, message: str, retryable: bool = False, cause: Optional[Exception] = None):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.retryable = retryable
        self.cause = cause
