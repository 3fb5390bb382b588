"""
Unit tests for logging configuration.

Tests the text renderer, service context extraction, request ID handling
and the HTTP error logging helper.
"""

import json
import logging
from unittest.mock import MagicMock, patch

import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from services.common.logging_config import (
    EnhancedTextRenderer,
    add_request_context,
    add_service_context,
    create_request_logging_middleware,
    get_logger,
    log_http_error,
    request_id_var,
    setup_service_logging,
)


class TestLoggingConfiguration:
    def setup_method(self):
        request_id_var.set("uninitialized")

        # Clear any existing logging configuration
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()

    def teardown_method(self):
        # Handlers created here hold the captured stdout of this test
        logging.getLogger().handlers.clear()
        logging.getLogger().setLevel(logging.WARNING)
        structlog.reset_defaults()

    def test_add_request_context(self):
        request_id_var.set("test-request-123")

        result = add_request_context(MagicMock(), "info", {"event": "test message"})

        assert result["request_id"] == "test-request-123"

    def test_add_request_context_no_context(self):
        result = add_request_context(MagicMock(), "info", {"event": "test message"})

        assert "request_id" not in result

    def test_add_service_context(self):
        event_dict = {"logger": "services.scheduling.api.calendar", "event": "test"}
        result = add_service_context(MagicMock(), "info", event_dict)

        assert result["service"] == "scheduling"

        event_dict = {"logger": "some.other.logger", "event": "test"}
        result = add_service_context(MagicMock(), "info", event_dict)

        assert "service" not in result

    def test_enhanced_text_renderer(self):
        renderer = EnhancedTextRenderer("scheduling")

        event_dict = {
            "timestamp": "2024-01-15T09:00:00.000000Z",
            "level": "info",
            "logger": "services.scheduling.main",
            "event": "Found 128 free slots",
            "request_id": "9f1b0f5d-a388-4ae2-8d66-67256cc71235",
            "employee1_id": 1,
        }

        result = renderer(MagicMock(), "info", event_dict)

        assert "2024-01-15T09:00:00.000000Z" in result
        assert "[scheduling]" in result
        assert "[INFO]" in result
        assert "[1235]" in result
        assert "scheduling.main" in result
        assert "services.scheduling.main" not in result
        assert "- Found 128 free slots" in result
        assert "employee1_id=1" in result

    def test_enhanced_text_renderer_truncates_long_values(self):
        renderer = EnhancedTextRenderer("scheduling")

        result = renderer(
            MagicMock(), "info", {"event": "big", "payload": {"ids": list(range(500))}}
        )

        payload = result.split("payload=", 1)[1]
        assert len(payload) <= 150

    def test_setup_service_logging_json(self, capsys):
        setup_service_logging("scheduling", log_level="INFO", log_format="json")
        request_id_var.set("req-42")

        get_logger("services.scheduling.tests").info("Booked meeting", meeting_id=7)

        lines = [line for line in capsys.readouterr().out.splitlines() if line]
        record = json.loads(lines[-1])
        assert record["event"] == "Booked meeting"
        assert record["meeting_id"] == 7
        assert record["service"] == "scheduling"
        assert record["request_id"] == "req-42"
        assert record["level"] == "info"

    def test_setup_service_logging_respects_level(self, capsys):
        setup_service_logging("scheduling", log_level="WARNING", log_format="json")

        get_logger("services.scheduling.tests").info("hidden")

        assert "hidden" not in capsys.readouterr().out


class TestLogHttpError:
    def test_server_errors_log_at_error_level(self):
        logger = MagicMock()
        with patch("services.common.logging_config.get_logger", return_value=logger):
            log_http_error("internal_error", "boom", 500, request_id="req-1")

        logger.error.assert_called_once()
        _, kwargs = logger.error.call_args
        assert kwargs["status_code"] == 500
        assert kwargs["request_id"] == "req-1"

    def test_client_errors_log_at_warning_level(self):
        logger = MagicMock()
        with patch("services.common.logging_config.get_logger", return_value=logger):
            log_http_error(
                "validation_error",
                "Duration must be positive",
                400,
                details={"field": "durationMinutes"},
            )

        logger.warning.assert_called_once()
        logger.error.assert_not_called()
        _, kwargs = logger.warning.call_args
        assert kwargs["details"] == {"field": "durationMinutes"}


class TestRequestLoggingMiddleware:
    def setup_method(self):
        app = FastAPI()
        app.middleware("http")(create_request_logging_middleware())

        @app.get("/ping")
        def ping():
            return {"request_id": request_id_var.get()}

        self.client = TestClient(app)

    def test_incoming_request_id_is_used(self):
        response = self.client.get("/ping", headers={"X-Request-Id": "abc-123"})

        assert response.json() == {"request_id": "abc-123"}
        assert response.headers["X-Request-Id"] == "abc-123"

    def test_request_id_is_generated(self):
        response = self.client.get("/ping")

        request_id = response.headers["X-Request-Id"]
        assert request_id
        assert response.json() == {"request_id": request_id}
