"""Application settings and configuration."""
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Related posts
    related_posts_default_limit: int = 6
    related_posts_max_limit: int = 50

    # Similarity weights (see services.content_similarity.SimilarityWeights)
    similarity_category_weight: float = 5.0
    similarity_tag_weight: float = 2.0
    similarity_text_weight: float = 1.0
    similarity_title_boost: float = 0.5
    similarity_title_overlap_threshold: float = 0.5
    similarity_title_boost_mode: str = "additive"  # additive, multiplicative
    similarity_thin_excerpt_tokens: int = 5

    # Text normalization
    normalizer_min_token_length: int = 2

    # Interlinking
    pillar_min_words: int = 2000
    pillar_link_min_score: float = 1.0

    @field_validator(
        "similarity_category_weight",
        "similarity_tag_weight",
        "similarity_text_weight",
        "similarity_title_boost",
        "similarity_thin_excerpt_tokens",
        "pillar_link_min_score",
        "pillar_min_words",
    )
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be non-negative")
        return v

    @field_validator("similarity_title_overlap_threshold")
    @classmethod
    def fraction(cls, v: float) -> float:
        if not 0 <= v <= 1:
            raise ValueError("must be between 0 and 1")
        return v

    @field_validator("similarity_title_boost_mode", mode="before")
    @classmethod
    def normalize_boost_mode(cls, v: str) -> str:
        """Accept any casing; only additive and multiplicative are valid."""
        mode = str(v).strip().lower()
        if mode not in ("additive", "multiplicative"):
            raise ValueError("must be 'additive' or 'multiplicative'")
        return mode

    @field_validator("normalizer_min_token_length", "related_posts_max_limit")
    @classmethod
    def positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @model_validator(mode="after")
    def clamp_default_limit(self) -> "Settings":
        """Keep the default limit within [0, related_posts_max_limit]."""
        self.related_posts_default_limit = max(
            0, min(self.related_posts_default_limit, self.related_posts_max_limit)
        )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
