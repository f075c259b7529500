"""
LLM service for OpenAI embeddings and chat completions.
"""

import logging
from typing import Optional, List

import openai
from openai import OpenAI

from ..config import get_settings
from ..exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

# Errors worth retrying at a later time; anything else is a hard failure.
RETRYABLE_ERRORS = (
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class LLMService:
    """
    Service for interacting with OpenAI: query/unit embeddings and
    short answer composition.
    """

    def __init__(self, client: Optional[OpenAI] = None):
        self.settings = get_settings()
        self._client = client or OpenAI(
            api_key=self.settings.OPENAI_API_KEY,
            timeout=self.settings.OPENAI_TIMEOUT_SECONDS,
            max_retries=self.settings.OPENAI_MAX_RETRIES,
        )
        logger.info(
            f"Initialized OpenAI client (chat: {self.settings.OPENAI_MODEL}, "
            f"embeddings: {self.settings.OPENAI_EMBEDDING_MODEL})"
        )

    def embed(self, text: str) -> List[float]:
        """
        Generate an embedding vector for a text.

        Args:
            text: Text to embed

        Returns:
            Embedding vector

        Raises:
            UpstreamServiceError: If the embeddings call fails
        """
        try:
            response = self._client.embeddings.create(
                input=text,
                model=self.settings.OPENAI_EMBEDDING_MODEL,
            )
        except openai.OpenAIError as e:
            raise _wrap_error("embedding", e) from e

        return list(response.data[0].embedding)

    def complete(
        self,
        system_prompt: str,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None
    ) -> str:
        """
        Generate a response from the chat model.

        Args:
            system_prompt: System prompt framing the assistant
            prompt: The user prompt
            temperature: Sampling temperature (uses settings default if not provided)
            max_tokens: Maximum tokens in response (uses settings default if not provided)
            model: Model to use (uses settings default if not provided)

        Returns:
            Generated text, stripped

        Raises:
            UpstreamServiceError: If the completion call fails or returns nothing
        """
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]

        try:
            response = self._client.chat.completions.create(
                model=model or self.settings.OPENAI_MODEL,
                messages=messages,
                temperature=self.settings.OPENAI_TEMPERATURE if temperature is None else temperature,
                max_tokens=max_tokens or self.settings.OPENAI_MAX_TOKENS,
            )
        except openai.OpenAIError as e:
            raise _wrap_error("completion", e) from e

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise UpstreamServiceError("openai", "completion returned no content")

        return content.strip()

    def is_available(self) -> bool:
        """Check if LLM service is available."""
        try:
            self._client.models.retrieve(self.settings.OPENAI_MODEL)
            return True
        except Exception:
            return False


def _wrap_error(operation: str, error: Exception) -> UpstreamServiceError:
    retryable = isinstance(error, RETRYABLE_ERRORS)
    logger.error(f"OpenAI {operation} failed (retryable={retryable}): {error}")
    return UpstreamServiceError(
        "openai",
        f"{operation} failed: {error}",
        retryable=retryable,
        cause=error,
    )


# Singleton instance
_llm_service: Optional[LLMService] = None


def get_llm_service() -> LLMService:
    """
    Get or create the LLM service singleton.

    Returns:
        LLMService instance
    """
    global _llm_service

    if _llm_service is None:
        _llm_service = LLMService()

    return _llm_service
