"""Environment-based configuration for the lead scanner service."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Lead scanner settings, loaded from environment variables."""

    # Server
    PORT: int = 8092

    # Crawler collaborator (empty = URL payloads resolve to the URL only)
    CRAWLER_SERVICE_URL: str = ""
    CRAWLER_TIMEOUT_SECONDS: float = 45.0

    # Vision model (empty key = card scanning disabled)
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    VISION_TIMEOUT_SECONDS: float = 60.0
    VISION_MAX_TOKENS: int = 1000
    VISION_TEMPERATURE: float = 0.1

    # Card images
    MAX_IMAGE_SIZE_MB: int = 20  # vision API upload limit
    CARD_IMAGE_MAX_DIMENSION: int = 2048  # 0 = send images untouched

    model_config = {"env_prefix": "", "case_sensitive": True}


settings = Settings()
