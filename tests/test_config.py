"""Unit tests for configuration and logging helpers."""

import pytest
import structlog

from cuespec_mcp_server.config import ServerConfig, get_config, reset_config
from cuespec_mcp_server.logging import LogContext, correlation_id_var, get_correlation_id
from cuespec_mcp_server.models import DrawingSettings


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_env_prefix(self, monkeypatch):
        """Test settings are read from CUESPEC_MCP_ variables."""
        monkeypatch.setenv("CUESPEC_MCP_STORAGE_BACKEND", "local")
        monkeypatch.setenv("CUESPEC_MCP_FULL_SCALE", "200")
        config = ServerConfig()
        assert config.storage_backend == "local"
        assert config.full_scale == 200.0

    def test_firestore_configured(self):
        """Test the credentials check."""
        assert ServerConfig(firestore_project_id="p", firestore_api_key="k").firestore_configured
        assert not ServerConfig(firestore_project_id="p", firestore_api_key=None).firestore_configured
        assert not ServerConfig(
            firestore_project_id="p", firestore_api_key="placeholder-api-key"
        ).firestore_configured

    def test_documents_url(self):
        """Test the Firestore documents root."""
        config = ServerConfig(
            firestore_project_id="cue-project",
            firestore_base_url="https://firestore.googleapis.com/v1/",
        )
        assert config.firestore_documents_url == (
            "https://firestore.googleapis.com/v1/projects/cue-project/databases/(default)/documents"
        )

    def test_drawing_settings(self):
        """Test drawing overrides flow into DrawingSettings."""
        settings = ServerConfig(thumbnail_scale=50, stock_allowance=1.5).drawing_settings()
        assert isinstance(settings, DrawingSettings)
        assert settings.thumbnail_scale == 50
        assert settings.stock_allowance == 1.5
        assert settings.full_scale == 120.0

    def test_singleton(self):
        """Test get_config caches until reset."""
        reset_config()
        first = get_config()
        assert get_config() is first
        reset_config()
        assert get_config() is not first
        reset_config()


class TestLogContext:
    """Tests for scoped logging context."""

    def test_sets_and_restores_correlation_id(self):
        """Test the correlation id is scoped to the block."""
        correlation_id_var.set(None)
        with LogContext(correlation_id="abc12345"):
            assert get_correlation_id() == "abc12345"
        assert correlation_id_var.get() is None

    def test_generates_id(self):
        """Test a fresh id is generated when none is set."""
        correlation_id_var.set(None)
        with LogContext():
            cid = correlation_id_var.get()
            assert cid is not None
            assert len(cid) == 8

    def test_binds_extra_fields(self):
        """Test extras are bound for the block only."""
        structlog.contextvars.clear_contextvars()
        with LogContext(tool="render_drawing"):
            assert structlog.contextvars.get_contextvars() == {"tool": "render_drawing"}
        assert structlog.contextvars.get_contextvars() == {}
