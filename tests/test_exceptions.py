"""Unit tests for the exception hierarchy."""

import pytest

from cuespec_mcp_server.exceptions import (
    ConnectionError as StoreConnectionError,
    CueSpecError,
    InvalidParameterError,
    RecordNotFoundError,
    StorageError,
)


class TestCueSpecError:
    """Tests for error text and context."""

    def test_text_carries_suggestion(self):
        """Test the reported text names the error and how to recover."""
        error = RecordNotFoundError("Pin", "abc")
        assert error.message == "Pin record 'abc' does not exist"
        assert str(error) == (
            "RecordNotFound: Pin record 'abc' does not exist. "
            "Use list_specs() to see the available records."
        )

    def test_custom_suggestion(self):
        """Test an explicit suggestion replaces the default."""
        error = CueSpecError("Broken", suggestion="Try later.")
        assert str(error) == "CueSpecError: Broken. Try later."

    def test_invalid_parameter_context(self):
        """Test valid values and the parameter name are kept."""
        error = InvalidParameterError("order", "up", valid_values=["asc", "desc"])
        assert error.context.valid_values == ["asc", "desc"]
        assert error.context.additional_info == {"parameter_name": "order"}
        assert "Valid values" in str(error)

    def test_storage_error_status(self):
        """Test the HTTP status is recorded when present."""
        error = StorageError("list", "denied", status_code=403)
        assert error.context.additional_info == {"operation": "list", "status_code": 403}

    def test_connection_error_suggests_local_backend(self):
        """Test connection failures point at the local backend switch."""
        with pytest.raises(CueSpecError) as exc_info:
            raise StoreConnectionError("Firestore", "https://firestore.test", reason="refused")
        assert "CUESPEC_MCP_STORAGE_BACKEND=local" in str(exc_info.value)
        assert exc_info.value.message.endswith(": refused")
