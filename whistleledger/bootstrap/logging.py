"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

import structlog

from whistleledger.config.case_config import get_environment
from whistleledger.infrastructure.observability import configure_structlog


def configure_logging() -> None:
    """Configure structlog from the ENVIRONMENT variable.

    production: JSON output. Anything else: colored console output.
    Call first in the startup sequence, before any logging occurs.
    """
    environment = get_environment()
    configure_structlog(environment=environment)

    log = structlog.get_logger().bind(component="startup_logging")
    log.info("structured_logging_configured", environment=environment)


__all__ = ["configure_logging"]
