"""
Configuration management for the GroupTherapy backend.
"""
import json
from typing import Annotated, Optional, List
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

from grouptherapy import __version__
from grouptherapy.constants import DEFAULT_BCRYPT_ROUNDS


def _parse_cors_origins(value: str) -> List[str]:
    """Parse CORS_ORIGINS from a comma-separated or JSON array string."""
    value = (value or "").strip()
    if not value:
        return []
    if value.startswith("["):
        return [str(x).strip() for x in json.loads(value) if x]
    return [x.strip() for x in value.split(",") if x.strip()]


class AuthConfig(BaseModel):
    """Authentication configuration."""
    bcrypt_rounds: int = Field(
        DEFAULT_BCRYPT_ROUNDS,
        ge=4,
        le=31,
        description="bcrypt work factor used when hashing admin passwords"
    )


class Settings(BaseSettings):
    """Application settings loaded from environment and .env file."""

    # Application
    app_name: str = "GroupTherapy"
    app_version: str = __version__
    debug: bool = False
    environment: str = Field("development", description="development or production")

    # Storage
    database_url: str = Field(
        "sqlite+aiosqlite:///./grouptherapy.db",
        description="Async SQLAlchemy connection URL"
    )
    storage_backend: str = Field("database", description="database or memory")
    seed_demo_content: bool = Field(False, description="Load demo releases/artists into an empty memory store")

    # HTTP
    # Raw env values are parsed by cors_origins_list, not JSON-decoded by the settings source
    cors_origins: Annotated[List[str], NoDecode] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Logging
    log_dir: Optional[str] = Field(None, description="Directory for the rotating log file (console only if unset)")

    # Auth
    auth: AuthConfig = Field(default_factory=AuthConfig)

    # First-run admin seed
    initial_admin_username: Optional[str] = None
    initial_admin_password: Optional[str] = None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def cors_origins_list(cls, v: object) -> List[str]:
        if isinstance(v, list):
            return [str(x).strip() for x in v if x]
        return _parse_cors_origins(str(v) if v else "")

    @field_validator("storage_backend")
    @classmethod
    def known_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("database", "memory"):
            raise ValueError("storage_backend must be 'database' or 'memory'")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_nested_delimiter = "__"


settings = Settings()
