"""
Configuration settings for the Genium broker assistant.
"""

from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    OPENAI_API_KEY: str = ""

    # OpenAI Model Settings
    OPENAI_MODEL: str = "gpt-4"
    OPENAI_EMBEDDING_MODEL: str = "text-embedding-ada-002"
    OPENAI_TEMPERATURE: float = 0.3
    OPENAI_MAX_TOKENS: int = 100
    OPENAI_TIMEOUT_SECONDS: float = 20.0
    OPENAI_MAX_RETRIES: int = 2

    # Qdrant Settings
    QDRANT_HOST: str = "localhost"
    QDRANT_PORT: int = 6333
    QDRANT_URL: str = ""  # Full URL (optional, overrides host:port if set)
    QDRANT_API_KEY: str = ""  # API key for Qdrant Cloud (leave empty for local)
    QDRANT_COLLECTION_NAME: str = "units"
    QDRANT_USE_MEMORY: bool = False  # Use an in-process collection instead of a server
    QDRANT_TIMEOUT_SECONDS: int = 10

    # Embedding Dimensions
    EMBEDDING_DIMENSION: int = 1536  # OpenAI ada-002

    # Answering Settings
    SEARCH_TOP_K: int = 3
    CONFIDENCE_THRESHOLD: float = 0.85

    # WhatsApp gateway (outbound delivery)
    WHATSAPP_API_URL: str = ""
    WHATSAPP_API_KEY: str = ""
    WHATSAPP_TIMEOUT_SECONDS: float = 10.0

    # Data Settings
    DATA_PATH: str = "./data"
    UNITS_FILENAME: str = "units.csv"
    BROKERS_FILENAME: str = "brokers.csv"
    SEED_ON_STARTUP: bool = True

    # Paths
    SYSTEM_PROMPTS_DIR: Path = Path(__file__).resolve().parent / "prompts"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_system_prompt(prompt_name: str) -> str:
    """
    Load a prompt from the prompts directory.

    Args:
        prompt_name: Name of the prompt (e.g., 'answer_composer', 'answer_composer_user')

    Returns:
        The prompt text content

    Raises:
        FileNotFoundError: If the prompt file is missing
    """
    settings = get_settings()
    prompt_file = settings.SYSTEM_PROMPTS_DIR / f"{prompt_name}_prompt.txt"
    return prompt_file.read_text(encoding="utf-8").strip()
