"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.similarity import SimilarityWeights


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_path: str = "./data/civicboard.db"

    # Duplicate detection
    word_similarity_weight: float = Field(0.7, ge=0, le=1)
    edit_similarity_weight: float = Field(0.3, ge=0, le=1)
    suggestion_threshold: float = Field(0.5, ge=0, le=1)
    duplicate_threshold: float = Field(0.65, ge=0, le=1)
    max_suggestions: int = Field(5, ge=1)
    candidate_limit: int = Field(100, ge=1)

    # Minimum title/query lengths before running a lookup
    min_duplicate_title_length: int = Field(10, ge=0)
    min_search_query_length: int = Field(2, ge=1)

    # Frontends allowed to call the API
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    log_level: str = "INFO"
    similarity_log_threshold: float = Field(0.3, ge=0, le=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def check_weights(self) -> "Settings":
        # Raises ValueError for negative weights or weights not summing to 1
        SimilarityWeights(word=self.word_similarity_weight, edit=self.edit_similarity_weight)
        return self

    @property
    def similarity_weights(self) -> SimilarityWeights:
        return SimilarityWeights(
            word=self.word_similarity_weight,
            edit=self.edit_similarity_weight,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
