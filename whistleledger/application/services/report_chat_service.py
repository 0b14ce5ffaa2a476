"""Report Chat Service.

Chat between the whistleblower and the people handling the case. Messages
are appended to the report's chat history through the ledger store's
atomic update, so concurrent senders never lose each other's messages.

Read-marking rule: a reader marks every message they did not send; their
own messages keep whatever flag they had.
"""

from __future__ import annotations

from uuid import uuid4

from whistleledger.application.ports.ledger_store import LedgerStoreProtocol
from whistleledger.application.services.base import LoggingMixin
from whistleledger.application.services.report_event_dispatcher import (
    ReportEventDispatcher,
)
from whistleledger.domain.errors import ReportNotFoundError, ValidationError
from whistleledger.domain.events.report import new_message_event
from whistleledger.domain.models.caller import Caller
from whistleledger.domain.models.chat_message import ChatMessage
from whistleledger.domain.models.file_attachment import FileAttachment
from whistleledger.domain.models.report import Report
from whistleledger.domain.services.access_policy import (
    CHAT_PARTICIPANT_ROLES,
    require_role,
)


class ReportChatService(LoggingMixin):
    """Send, read-mark and list chat messages of a report."""

    def __init__(
        self,
        store: LedgerStoreProtocol,
        dispatcher: ReportEventDispatcher | None = None,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher or ReportEventDispatcher()
        self._init_logger(component="chat")

    async def send_chat_message(
        self,
        caller: Caller,
        report_id: str,
        content: str = "",
        attachment: FileAttachment | None = None,
    ) -> ChatMessage:
        """Append a message to the report's chat history.

        Returns:
            The stored message (unread, server-assigned id and timestamp).

        Raises:
            ForbiddenError: If the caller may not chat.
            ValidationError: If neither content nor attachment is given, or
                the content is too long.
            ReportNotFoundError: If the report doesn't exist.
        """
        require_role(caller, CHAT_PARTICIPANT_ROLES, action="send chat message")
        log = self._log_operation(
            "send_chat_message", report_id=report_id, sender=caller.id
        )

        try:
            message = ChatMessage(
                id=str(uuid4()),
                report_id=report_id,
                sender=caller.id,
                sender_role=caller.role,
                content=content or "",
                attachment=attachment,
            )
        except ValueError as e:
            raise ValidationError(str(e), field="content") from None

        async def mutate(report: Report) -> Report:
            return report.with_message(message)

        await self._store.update(report_id, mutate)
        log.info(
            "chat_message_sent",
            message_id=message.id,
            sender_role=caller.role.value,
            has_attachment=message.has_attachment,
        )

        await self._dispatcher.dispatch(new_message_event(message))
        return message

    async def mark_messages_as_read(
        self,
        caller: Caller,
        report_id: str,
        reader: str | None = None,
    ) -> int:
        """Mark every message not sent by ``reader`` as read.

        ``reader`` defaults to the caller's identity. Idempotent: a second
        call flips nothing and writes nothing.

        Returns:
            Number of messages flipped from unread to read.

        Raises:
            ForbiddenError: If the caller may not chat.
            ReportNotFoundError: If the report doesn't exist.
        """
        require_role(caller, CHAT_PARTICIPANT_ROLES, action="mark messages as read")
        reader = reader or caller.id
        flipped: list[int] = []

        async def mutate(report: Report) -> Report:
            updated, count = report.with_messages_read(reader)
            flipped.append(count)
            return updated

        await self._store.update(report_id, mutate)
        count = flipped[-1] if flipped else 0
        self._log_operation(
            "mark_messages_as_read", report_id=report_id, reader=reader
        ).info("chat_messages_marked_read", count=count)
        return count

    async def get_chat_history(self, report_id: str) -> list[ChatMessage]:
        """Return the report's messages in send order.

        Raises:
            ReportNotFoundError: If the report doesn't exist.
        """
        report = await self._store.get(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return list(report.chat_history)
