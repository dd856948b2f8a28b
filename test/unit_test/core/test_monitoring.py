"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Environment variable parsing
- Initialization with Logfire disabled, missing token and enabled
- Helpers degrading gracefully when Logfire is not configured
"""

import importlib
import os
import sys
from unittest.mock import MagicMock, patch

import pytest

import commerflow.core.monitoring as monitoring


@pytest.fixture
def reload_monitoring():
    """Reload the module under patched environment variables and restore it afterwards."""

    def _reload(env):
        with patch.dict(os.environ, env, clear=False):
            return importlib.reload(monitoring)

    yield _reload

    with patch.dict(os.environ, {"LOGFIRE_ENABLED": "false"}):
        importlib.reload(monitoring)


class TestLogfireEnvironmentConfiguration:
    """Test environment variable configuration for Logfire."""

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("yes", True), ("false", False), ("no", False)])
    def test_enabled_flag(self, reload_monitoring, value, expected):
        module = reload_monitoring({"LOGFIRE_ENABLED": value})
        assert module.LOGFIRE_ENABLED is expected

    def test_service_name_default(self, reload_monitoring):
        module = reload_monitoring({"LOGFIRE_ENABLED": "false"})
        assert module.LOGFIRE_SERVICE_NAME == os.environ.get("LOGFIRE_SERVICE_NAME", "commerflow-api")


class TestInitializeLogfire:
    def test_disabled(self, reload_monitoring):
        module = reload_monitoring({"LOGFIRE_ENABLED": "false"})
        assert module.initialize_logfire() is False
        assert module.is_logfire_ready() is False

    def test_enabled_without_token(self, reload_monitoring):
        module = reload_monitoring({"LOGFIRE_ENABLED": "true", "LOGFIRE_TOKEN": ""})
        assert module.initialize_logfire() is False

    def test_enabled_with_token_configures_logfire(self, reload_monitoring):
        module = reload_monitoring(
            {"LOGFIRE_ENABLED": "true", "LOGFIRE_TOKEN": "token-123", "LOGFIRE_TRACE_FASTAPI": "true"}
        )
        fake_logfire = MagicMock()
        app = MagicMock()

        with patch.dict(sys.modules, {"logfire": fake_logfire}):
            assert module.initialize_logfire(app) is True

        fake_logfire.configure.assert_called_once()
        assert fake_logfire.configure.call_args[1]["token"] == "token-123"
        fake_logfire.instrument_fastapi.assert_called_once_with(app=app)

    def test_configure_failure_is_reported_not_raised(self, reload_monitoring):
        module = reload_monitoring({"LOGFIRE_ENABLED": "true", "LOGFIRE_TOKEN": "token-123"})
        fake_logfire = MagicMock()
        fake_logfire.configure.side_effect = RuntimeError("bad token")

        with patch.dict(sys.modules, {"logfire": fake_logfire}):
            assert module.initialize_logfire() is False


class TestHelpersWithoutLogfire:
    def test_log_api_request_falls_back_to_debug(self):
        with patch.object(monitoring, "_logfire_ready", False), patch.object(monitoring, "logger") as mock_logger:
            monitoring.log_api_request("GET", "/health", 200, 1.5)

        mock_logger.debug.assert_called_once()
        assert "GET /health -> 200" in mock_logger.debug.call_args[0][0]

    def test_log_order_event_always_logs(self):
        with patch.object(monitoring, "_logfire_ready", False), patch.object(monitoring, "logger") as mock_logger:
            monitoring.log_order_event("created", "order-1", "PENDING", total=10.0)

        mock_logger.info.assert_called_once_with("Order order-1 created: status=PENDING")

    def test_log_error_is_silent(self):
        with patch.object(monitoring, "_logfire_ready", False):
            monitoring.log_error("ValueError", "boom", {"path": "/x"})

    def test_log_order_event_sent_to_logfire_when_ready(self):
        fake_logfire = MagicMock()
        with patch.object(monitoring, "_logfire_ready", True), patch.dict(sys.modules, {"logfire": fake_logfire}):
            monitoring.log_order_event("cancelled", "order-1", "CANCELLED")

        fake_logfire.info.assert_called_once_with(
            "Order event", event="cancelled", order_id="order-1", status="CANCELLED", total=None
        )
