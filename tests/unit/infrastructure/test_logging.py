"""Unit tests for structured logging configuration and the service mixin."""

from __future__ import annotations

import contextvars

import pytest
import structlog
from structlog.testing import capture_logs

from whistleledger.application.services.base import LoggingMixin
from whistleledger.infrastructure.observability.correlation import set_correlation_id
from whistleledger.infrastructure.observability.logging import configure_structlog


def _processor_types() -> list[type]:
    return [type(p) for p in structlog.get_config()["processors"]]


class TestConfigureStructlog:
    def test_production_renders_json(self) -> None:
        configure_structlog(environment="production")
        assert structlog.processors.JSONRenderer in _processor_types()

    def test_development_renders_console(self) -> None:
        configure_structlog(environment="development")
        assert structlog.dev.ConsoleRenderer in _processor_types()

    def test_defaults_to_production(self) -> None:
        configure_structlog()
        assert structlog.processors.JSONRenderer in _processor_types()


class _ExampleService(LoggingMixin):
    def __init__(self) -> None:
        self._init_logger(component="example")


class TestLoggingMixin:
    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        structlog.reset_defaults()
        yield
        structlog.reset_defaults()

    def test_operation_context_is_bound(self) -> None:
        with capture_logs() as logs:
            service = _ExampleService()
            service._log_operation("assign", report_id="r1").info("report_assigned")

        assert len(logs) == 1
        entry = logs[0]
        assert entry["event"] == "report_assigned"
        assert entry["service"] == "_ExampleService"
        assert entry["component"] == "example"
        assert entry["operation"] == "assign"
        assert entry["report_id"] == "r1"

    def test_request_correlation_id_is_bound(self) -> None:
        def run() -> list[dict]:
            set_correlation_id("corr-9")
            with capture_logs() as logs:
                service = _ExampleService()
                service._log_operation("reopen").info("report_reopened")
            return logs

        logs = contextvars.Context().run(run)
        assert logs[0]["correlation_id"] == "corr-9"
