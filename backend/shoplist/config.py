"""
Configuration settings for the shoplist backend.

Loads environment variables from .env file and provides typed configuration.
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Database Configuration
    DATABASE_URL: str = Field(
        default="sqlite:///./data/shoplist.db", description="SQLAlchemy database URL"
    )
    DATABASE_ECHO: bool = Field(
        default=False, description="Echo SQL queries (for debugging)"
    )

    # Lists
    DEFAULT_LIST_NAME: str = Field(
        default="Lista de Compras", description="Name given to freshly created lists"
    )
    POINTER_FILE: str = Field(
        default="./data/current_list.json",
        description="Where the current list pointer is persisted",
    )
    SHARE_BASE_ORIGIN: str = Field(
        default="http://localhost:5173",
        description="Origin used to build share links ({origin}/?list={id})",
    )

    # Catalog
    DEFAULT_CATEGORY_NAME: str = Field(
        default="Mercearia",
        description="Fallback category when no keyword rule matches",
    )
    SUGGESTION_LIMIT: int = Field(
        default=10, description="Maximum number of 'did you mean' suggestions"
    )
    POPULAR_PRODUCTS_LIMIT: int = Field(
        default=6, description="Products shown per category picker"
    )

    # Search
    SEARCH_DEBOUNCE_MS: int = Field(
        default=300, ge=0, description="Inactivity delay before a suggestion query fires"
    )
    SEARCH_RATE_LIMIT: str = Field(
        default="120/minute", description="slowapi limit for the suggestions endpoint"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
