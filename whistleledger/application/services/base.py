"""Structured logging mixin shared by application services.

Usage:
    class ReportChatService(LoggingMixin):
        def __init__(self, store: LedgerStoreProtocol) -> None:
            self._store = store
            self._init_logger(component="chat")

        async def send_chat_message(self, ...) -> ChatMessage:
            log = self._log_operation("send_chat_message", report_id=report_id)
            log.info("chat_message_sending")
"""

import structlog

from whistleledger.infrastructure.observability.correlation import get_correlation_id


class LoggingMixin:
    """Mixin giving each service a bound structlog logger.

    The logger carries ``service`` (the class name) and ``component``.
    ``_log_operation`` adds ``operation``, the request correlation ID and
    any keyword context.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "cases") -> None:
        """Bind the service logger. Call from ``__init__``."""
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Return a logger scoped to one operation.

        Example:
            log = self._log_operation("reopen", report_id=report_id)
            log.info("report_reopened", reason_count=3)
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )
