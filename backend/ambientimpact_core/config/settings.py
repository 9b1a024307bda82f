"""
Application Settings using Pydantic Settings
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, List

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    APP_NAME: str = Field(default="Ambient.Impact Core")
    APP_VERSION: str = Field(default="0.1.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Backend Server
    BACKEND_HOST: str = Field(default="localhost")
    BACKEND_PORT: int = Field(default=8005)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8005"]
    )

    # Providers: provider name -> root directory on disk
    PROVIDER_ROOTS: Dict[str, str] = Field(default_factory=dict)
    # Providers considered active; empty means every provider in PROVIDER_ROOTS
    ENABLED_PROVIDERS: List[str] = Field(default_factory=list)
    # Directory the front-end is served from; provider web paths are relative to it
    WEB_ROOT: str = Field(default=str(PACKAGE_ROOT.parent))

    # Components
    COMPONENTS_DIRECTORY: str = Field(default="components")
    COMPONENT_MANIFEST: str | None = Field(default=None)
    FRAMEWORK_LIBRARY: str = Field(default="ambientimpact_core/framework")
    LIBRARIES_FILE_SUFFIX: str = Field(default="libraries.yml")
    TEMPLATE_FILE_SUFFIX: str = Field(default="html.j2")

    # Front-end
    DEFAULT_LANGUAGE: str = Field(default="en")
    # Languages HTML is rendered and cached for; others fall back to the default
    LANGUAGES: List[str] = Field(default=["en"])
    HTML_ENDPOINT_PATH: str = Field(default="/api/components/html")

    @computed_field  # type: ignore[misc]
    @property
    def PROVIDER_PATHS(self) -> Dict[str, str]:
        """Provider roots including this package, which always provides itself."""
        roots = {"ambientimpact_core": str(PACKAGE_ROOT)}
        roots.update(self.PROVIDER_ROOTS)
        return roots


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
