"""Application configuration using Pydantic Settings.

Reads configuration from environment variables with sensible defaults.
All secrets should be provided via environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    environment: Literal["prod", "staging", "dev"] = Field(
        default="dev",
        description="Environment name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # =========================================================================
    # Database (Cloud SQL via Unix socket)
    # =========================================================================
    db_user: str = Field(
        default="storefront_app",
        description="Database user",
    )
    db_password: str = Field(
        default="",
        description="Database password",
    )
    db_name: str = Field(
        default="storefront",
        description="Database name",
    )
    db_connection_name: str = Field(
        default="",
        description="Cloud SQL connection name (project:region:instance)",
    )
    db_host: str = Field(
        default="localhost",
        description="Database host (for local development)",
    )
    db_port: int = Field(
        default=5432,
        description="Database port (for local development)",
    )
    db_pool_size: int = Field(
        default=5,
        description="Database connection pool size",
    )
    db_pool_max_overflow: int = Field(
        default=10,
        description="Max overflow connections beyond pool size",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Build database URL based on environment.

        In Cloud Run, uses Unix socket for Cloud SQL.
        In local dev, uses TCP connection.
        """
        if self.db_connection_name:
            socket_path = f"/cloudsql/{self.db_connection_name}"
            return (
                f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
                f"@/{self.db_name}?host={socket_path}"
            )
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================================================================
    # Product images (Cloud Storage behind a CDN)
    # =========================================================================
    gcs_bucket: str = Field(
        default="storefront-product-images-dev",
        description="Cloud Storage bucket for product images",
    )
    cdn_base_url: str = Field(
        default="https://cdn.example.com",
        description="Public CDN base URL serving the image bucket",
    )
    image_max_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
    )
    image_allowed_formats: list[str] = Field(
        default=["JPEG", "PNG", "WEBP", "GIF"],
        description="Pillow image formats accepted for upload",
    )

    # =========================================================================
    # Catalog
    # =========================================================================
    similar_products_limit: int = Field(
        default=10,
        ge=1,
        description="Number of similar products returned on a product page",
    )
    similar_candidate_limit: int = Field(
        default=50,
        ge=1,
        description="Maximum candidate pool fetched for similarity ranking",
    )
    featured_products_limit: int = Field(
        default=8,
        ge=1,
        description="Number of featured products on the home page",
    )
    unresolved_slug_policy: Literal["ignore", "match_nothing"] = Field(
        default="ignore",
        description="What a filter slug that matches no attribute does",
    )

    # =========================================================================
    # Holds
    # =========================================================================
    default_hold_duration_hours: int = Field(
        default=48,
        ge=1,
        description="Hold duration used when the site setting is absent or invalid",
    )
    site_settings_refresh_seconds: float = Field(
        default=300,
        description="Interval between reloads of the key/value site settings",
    )

    # =========================================================================
    # Spec sheets
    # =========================================================================
    business_name: str = Field(
        default="WAREHOUSE 414",
        description="Business name printed on spec sheets",
    )
    business_phone: str = Field(
        default="785.232.8008",
        description="Phone number printed on spec sheets",
    )
    public_base_url: str = Field(
        default="http://localhost:8080",
        description="Public storefront URL used for product links",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=True,
        description="Output logs as JSON (for Cloud Logging)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for convenience
settings = get_settings()
