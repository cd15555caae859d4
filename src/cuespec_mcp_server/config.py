"""Configuration management for CueSpec MCP Server.

Uses pydantic-settings for environment variable support with validation.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional

from .models.drawing import DrawingSettings


PLACEHOLDER_PREFIX = "placeholder"


class ServerConfig(BaseSettings):
    """Server configuration with environment variable support."""

    # Server settings
    server_transport: str = Field(
        default="stdio",
        description="MCP transport type: sse or stdio"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="json",
        description="Log format: json or console"
    )

    # Storage
    storage_backend: str = Field(
        default="auto",
        description="Record storage: auto, firestore or local"
    )
    firestore_project_id: Optional[str] = Field(
        default=None,
        description="Google Cloud project hosting the Firestore database"
    )
    firestore_api_key: Optional[str] = Field(
        default=None,
        description="Web API key sent with Firestore REST requests"
    )
    firestore_database: str = Field(
        default="(default)",
        description="Firestore database name"
    )
    firestore_base_url: str = Field(
        default="https://firestore.googleapis.com/v1",
        description="Firestore REST endpoint"
    )
    local_data_dir: str = Field(
        default=".cuespec",
        description="Directory for the local JSON record store"
    )

    # Timeouts
    request_timeout: float = Field(
        default=30.0,
        description="HTTP request timeout in seconds"
    )

    # Retry settings
    max_retries: int = Field(default=3, description="Maximum retry attempts")
    retry_delay: float = Field(default=1.0, description="Delay between retries in seconds")

    # Drawing
    thumbnail_scale: float = Field(default=40.0, description="Thumbnail pixels per inch")
    full_scale: float = Field(default=120.0, description="Full view pixels per inch")
    default_radius: float = Field(default=0.25, description="Fallback stock radius in inches")
    default_depth: float = Field(default=1.0, description="Fallback part length in inches")
    stock_allowance: float = Field(
        default=1.25,
        description="Stock factor applied to the largest machined diameter"
    )
    exposed_diameter: float = Field(
        default=0.25,
        description="Diameter of the exposed pin portion in inches"
    )
    hatch_pitch: float = Field(default=8.0, description="Cross hatch spacing in pixels")

    @property
    def firestore_configured(self) -> bool:
        """Whether real Firestore credentials are present."""
        project = self.firestore_project_id or ""
        key = self.firestore_api_key or ""
        if not project or not key:
            return False
        return not (
            project.startswith(PLACEHOLDER_PREFIX) or key.startswith(PLACEHOLDER_PREFIX)
        )

    @property
    def firestore_documents_url(self) -> str:
        """Get the base URL for Firestore documents."""
        return (
            f"{self.firestore_base_url.rstrip('/')}/projects/{self.firestore_project_id}"
            f"/databases/{self.firestore_database}/documents"
        )

    def drawing_settings(self) -> DrawingSettings:
        """Build the drawing core settings from this configuration."""
        return DrawingSettings(
            thumbnail_scale=self.thumbnail_scale,
            full_scale=self.full_scale,
            default_radius=self.default_radius,
            default_depth=self.default_depth,
            stock_allowance=self.stock_allowance,
            exposed_diameter=self.exposed_diameter,
            hatch_pitch=self.hatch_pitch,
        )

    model_config = {
        "env_prefix": "CUESPEC_MCP_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


# Singleton instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the configuration singleton."""
    global _config
    if _config is None:
        _config = ServerConfig()
    return _config


def reset_config() -> None:
    """Reset the configuration singleton (for testing)."""
    global _config
    _config = None
