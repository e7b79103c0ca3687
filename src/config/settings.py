"""
Centralized settings management using pydantic-settings.

All environment variables and configuration values are defined here.
Use get_settings() to access the singleton settings instance.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Public catalog (PostgreSQL):
        - DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD
        - DB_SSLMODE: libpq sslmode (default: require)
        - CATALOG_TABLE: table holding public products

    Private store (Supabase):
        - SUPABASE_URL: Supabase project URL
        - SUPABASE_SERVICE_KEY: Supabase service role key
        - PRIVATE_PRODUCTS_TABLE: table holding user-owned products

    Optional environment variables:
        - HOST: Server host (default: 0.0.0.0)
        - PORT: Server port (default: 8080)
        - ENVIRONMENT: Environment name (development, staging, production)
        - ENFORCE_OUTFIT_CONSTRAINTS: trim outfits with body-area caps
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Server Configuration
    # ==========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # CORS Configuration
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ==========================================================================
    # Public Catalog (PostgreSQL)
    # ==========================================================================
    db_host: str = Field(default="localhost", description="Catalog database host")
    db_port: int = Field(default=5432, description="Catalog database port")
    db_name: str = Field(default="postgres", description="Catalog database name")
    db_user: str = Field(default="postgres", description="Catalog database user")
    db_password: str = Field(default="", description="Catalog database password")
    db_sslmode: str = Field(default="require", description="libpq sslmode")
    db_connect_timeout_seconds: int = Field(
        default=10,
        description="Timeout for establishing a catalog connection (seconds)"
    )
    catalog_table: str = Field(
        default="product_look_dim",
        description="Table holding the public product catalog"
    )

    @property
    def catalog_connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for psycopg2.connect()."""
        return {
            "host": self.db_host,
            "port": self.db_port,
            "dbname": self.db_name,
            "user": self.db_user,
            "password": self.db_password,
            "sslmode": self.db_sslmode,
            "connect_timeout": self.db_connect_timeout_seconds,
        }

    # ==========================================================================
    # Private Store (Supabase)
    # ==========================================================================
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_service_key: str = Field(default="", description="Supabase service role key")
    private_products_table: str = Field(
        default="user_products",
        description="Table holding user-owned private products"
    )

    @property
    def private_store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)

    # ==========================================================================
    # Outfit Assembly
    # ==========================================================================
    enforce_outfit_constraints: bool = Field(
        default=False,
        description="Trim outfits with body-area/layer caps instead of a plain prefix cut"
    )
    constraint_refill_rounds: int = Field(
        default=2,
        ge=0,
        description="Extra sampling rounds after constraint trimming leaves a shortfall"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure only one instance is created.
    Settings are loaded from environment variables and .env file.

    Returns:
        Settings: The application settings instance
    """
    # Try to find .env file in project root
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        os.environ.setdefault("ENV_FILE", str(env_file))

    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a settings instance for testing with optional overrides.

    This bypasses the cache to allow different settings in tests.

    Args:
        **overrides: Setting values to override

    Returns:
        Settings: A new settings instance with overrides applied
    """
    test_defaults = {
        "supabase_url": "https://test.supabase.co",
        "supabase_service_key": "test-key",
        "environment": "testing",
        "debug": True,
    }
    test_defaults.update(overrides)

    return Settings(_env_file=None, **test_defaults)
