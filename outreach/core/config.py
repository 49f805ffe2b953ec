# outreach/core/config.py
from typing import List, Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
import logging

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings"""
    APP_NAME: str = "Portal do Paciente"
    DEBUG: bool = False

    # LLM settings
    OPENAI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "OPENAI_APIKEY")
    )
    GPT_MODEL: str = "gpt-4o-mini"
    GPT_TEMPERATURE: float = 0.7
    GPT_TIMEOUT: int = 30
    GPT_MAX_RETRIES: int = 2

    # Delivery settings
    WHATSAPP_COUNTRY_CODE: str = "55"
    COPY_FEEDBACK_SECONDS: float = 2.0
    EXPORT_DIR: Optional[str] = None

    # Branding printed on the shareable message card
    PRACTITIONER_NAME: str = "Dr. Carlos Franciozi"
    PRACTITIONER_TITLE: str = "Orientação Médica"
    PRACTITIONER_REGISTRY: str = "CRM 111501"
    PRACTITIONER_WEBSITE: str = "seujoelho.com"

    # HTTP
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }


# Settings available as a module-level singleton
settings = Settings()


def validate_required_settings(current: Optional[Settings] = None) -> bool:
    """Check that all required settings are present"""
    current = current or settings
    missing = []

    if not current.OPENAI_API_KEY:
        missing.append("OPENAI_API_KEY/OPENAI_APIKEY")

    if missing:
        logger.warning(f"Missing environment variables: {', '.join(missing)}")
        logger.warning("Message generation will fail until they are set.")
        return False

    return True
