"""Application configuration settings.

This module defines the application-wide settings using Pydantic's BaseSettings.
It allows for loading configurations from environment variables and .env files,
providing type validation and default values. The collection core never reads
these settings directly; the HTTP app turns them into an ``UploadPolicy``.
"""

from typing import Annotated

from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import NoDecode

from filetray.core.exceptions import ConfigurationError
from filetray.models.file_models import UploadPolicy

# Default list of CORS allowed origins
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8000",
]


def _split_csv(v: str | list[str] | None) -> list[str]:
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    if isinstance(v, list):
        return v
    return []


class Settings(BaseSettings):
    """Manages application settings, loading them from environment variables or an .env file.

    Attributes:
        allowed_extensions: Extensions accepted by the app's collection, empty for any.
        allowed_mime_types: MIME labels or ``group/*`` wildcards accepted, empty for any.
        max_file_size: Per-file byte ceiling, unset for unlimited.
        max_files: Maximum number of files held at once, unset for unlimited.
        allow_duplicates: Whether identical files may be added twice.
        cors_allowed_origins: List of allowed origins for CORS.
        log_level: Level applied to the package loggers.
    """

    allowed_extensions: Annotated[list[str], NoDecode] = Field(default_factory=list)
    allowed_mime_types: Annotated[list[str], NoDecode] = Field(default_factory=list)
    max_file_size: int | None = Field(default=None)
    max_files: int | None = Field(default=None)
    allow_duplicates: bool = Field(default=False)

    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
    )
    log_level: str = Field(default="INFO")

    model_config = {
        "env_file": ".env",
        "env_prefix": "FILETRAY_",
        "extra": "ignore",
    }

    @field_validator("allowed_extensions", "allowed_mime_types", mode="before")
    @classmethod
    def assemble_allow_list(cls, v: str | list[str] | None) -> list[str]:
        """Accepts either a comma-separated string or a list."""
        return _split_csv(v)

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str] | None) -> list[str]:
        """Assembles the list of CORS allowed origins, falling back to the defaults."""
        origins = _split_csv(v)
        return origins or list(DEFAULT_CORS_ORIGINS)

    def to_policy(self) -> UploadPolicy:
        """Build the admission policy described by these settings.

        Raises:
            ConfigurationError: If the limits are not valid policy values.
        """
        try:
            return UploadPolicy(
                allowed_extensions=frozenset(self.allowed_extensions),
                allowed_mime_types=frozenset(self.allowed_mime_types),
                max_file_size=self.max_file_size,
                max_files=self.max_files,
                allow_duplicates=self.allow_duplicates,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid upload policy settings: {e}") from e


settings = Settings()
