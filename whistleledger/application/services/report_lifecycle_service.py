"""Report Lifecycle Service.

The lifecycle engine: every state-changing report operation goes through
this service. Each operation validates the caller's role, then applies the
transition inside LedgerStoreProtocol.update() so the precondition check
and the write are atomic per report.

Lifecycles (one per deployment, see LifecycleConfig):
    four_tier: pending -> under_investigation -> investigation_complete
               -> completed (permanently closed)
               investigation_complete | completed -> pending (reopen)
    two_tier:  pending -> under_investigation -> completed (reward paid
               best-effort) -> pending (reopen)

Developer Golden Rules:
1. ROLE CHECK FIRST - Callers are checked before any store access
2. GUARDS INSIDE UPDATE - Preconditions are evaluated on the locked report
3. FAIL LOUD - Raise domain errors; never retry
4. EVENT AFTER SAVE - Publish only after the store commit
5. NOTIFICATION FIRE-AND-FORGET - Publish failures never fail an operation
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import Decimal
from uuid import uuid4

from whistleledger.application.ports.ledger_store import LedgerStoreProtocol
from whistleledger.application.ports.payout_gateway import PayoutGatewayPort
from whistleledger.application.ports.reward_ledger import RewardLedgerProtocol
from whistleledger.application.services.base import LoggingMixin
from whistleledger.application.services.report_event_dispatcher import (
    ReportEventDispatcher,
)
from whistleledger.application.services.reward_ledger_service import parse_amount
from whistleledger.config.case_config import (
    DEFAULT_LIFECYCLE_CONFIG,
    DEFAULT_REWARD_CONFIG,
    LifecycleConfig,
    RewardConfig,
)
from whistleledger.domain.errors import (
    AlreadyProcessedError,
    InvalidTransitionError,
    PreconditionFailedError,
    ValidationError,
    WhistleLedgerError,
)
from whistleledger.domain.events.report import (
    new_report_event,
    reward_processed_event,
    status_changed_event,
)
from whistleledger.domain.models.caller import Caller, CallerRole
from whistleledger.domain.models.file_attachment import FileAttachment
from whistleledger.domain.models.report import (
    LifecycleVariant,
    Report,
    ReportStatus,
    mask_report_id,
    normalize_criticality,
)
from whistleledger.domain.services.access_policy import (
    require_assignee,
    require_assignment_eligibility,
    require_role,
)

COMPLETION_REWARD_NOTE = "Reward for completed investigation"


def _require_text(value: str | None, field: str, message: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message, field=field)
    return value.strip()


class ReportLifecycleService(LoggingMixin):
    """Lifecycle engine for whistleblower reports.

    Attributes:
        _store: Ledger store holding the reports.
        _reward_ledger: Shared reward balance.
        _payout_gateway: Sends rewards to wallets.
        _dispatcher: Best-effort event publication.
        _lifecycle: Lifecycle configuration (variant, masked id length).
        _rewards: Reward configuration (currency, completion amount).
    """

    def __init__(
        self,
        store: LedgerStoreProtocol,
        reward_ledger: RewardLedgerProtocol,
        payout_gateway: PayoutGatewayPort,
        dispatcher: ReportEventDispatcher | None = None,
        lifecycle_config: LifecycleConfig | None = None,
        reward_config: RewardConfig | None = None,
    ) -> None:
        self._store = store
        self._reward_ledger = reward_ledger
        self._payout_gateway = payout_gateway
        self._dispatcher = dispatcher or ReportEventDispatcher()
        self._lifecycle = lifecycle_config or DEFAULT_LIFECYCLE_CONFIG
        self._rewards = reward_config or DEFAULT_REWARD_CONFIG
        self._init_logger(component="lifecycle")

    @property
    def variant(self) -> LifecycleVariant:
        """The lifecycle applied by this engine."""
        return self._lifecycle.variant

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------

    async def submit_report(
        self,
        caller: Caller | None = None,
        *,
        title: str = "",
        description: str = "",
        criticality: object = None,
        anonymous: bool = True,
        submitter: str | None = None,
        reward_wallet: str | None = None,
        attachments: Sequence[FileAttachment] = (),
        voice_note: str | None = None,
        department: str = "",
        location: str = "",
        monetary_value: str = "",
        relationship: str = "",
        encounter: str = "",
        authorities_aware: bool = False,
    ) -> Report:
        """Create a new report in ``pending``.

        Anonymous callers are allowed; ``submitter`` is dropped when the
        report is anonymous. Out-of-range criticality becomes 3.

        Raises:
            ForbiddenError: If the caller is not a whistleblower.
            ValidationError: If no content channel is provided or the
                description is too long.
        """
        caller = caller or Caller.anonymous_whistleblower()
        require_role(caller, {CallerRole.WHISTLEBLOWER}, action="submit report")

        title = (title or "").strip()
        description = description or ""
        voice_note = voice_note or None
        if not (title or description.strip() or voice_note or attachments):
            raise ValidationError(
                "A report needs a title, description, voice note or attachment",
                field="description",
            )
        if len(description) > Report.MAX_TEXT_LENGTH:
            raise ValidationError(
                f"Description exceeds maximum length of {Report.MAX_TEXT_LENGTH} characters",
                field="description",
            )

        report_id = str(uuid4())
        log = self._log_operation("submit_report", report_id=report_id)

        wallet = reward_wallet.strip() if reward_wallet else None
        report = Report(
            id=report_id,
            masked_id=mask_report_id(report_id, self._lifecycle.masked_id_length),
            title=title,
            description=description,
            criticality=normalize_criticality(criticality),
            submitter=None if anonymous else (submitter or None),
            anonymous=anonymous,
            reward_wallet=wallet or None,
            attachments=tuple(attachments),
            has_voice_note=voice_note is not None,
            voice_note=voice_note,
            department=department,
            location=location,
            monetary_value=monetary_value,
            relationship=relationship,
            encounter=encounter,
            authorities_aware=authorities_aware,
        )

        stored = await self._store.save(report)
        log.info(
            "report_submitted",
            masked_id=stored.masked_id,
            criticality=stored.criticality,
            anonymous=stored.anonymous,
            attachment_count=len(stored.attachments),
        )

        await self._dispatcher.dispatch(new_report_event(stored))
        return stored

    # ------------------------------------------------------------------
    # Investigation
    # ------------------------------------------------------------------

    async def assign(self, caller: Caller, report_id: str) -> Report:
        """Take a pending report for investigation.

        Raises:
            ForbiddenError: If the caller is not an investigator, or is the
                previous investigator of a reopened report.
            ReportNotFoundError: If the report doesn't exist.
            InvalidTransitionError: If the report is not pending. Checked
                before eligibility.
        """
        require_role(caller, {CallerRole.INVESTIGATOR}, action="assign report")
        log = self._log_operation("assign", report_id=report_id, investigator=caller.id)

        async def mutate(report: Report) -> Report:
            assigned = report.with_assignment(caller.id, caller.name, self.variant)
            require_assignment_eligibility(caller, report)
            return assigned

        try:
            updated = await self._store.update(report_id, mutate)
        except WhistleLedgerError as e:
            log.warning("transition_rejected", error_code=e.code, error=str(e))
            raise

        log.info("report_assigned", status=updated.status.value)
        await self._dispatcher.dispatch(
            status_changed_event(
                updated,
                assigned_to=updated.assigned_to,
                assigned_to_name=updated.assigned_to_name,
            )
        )
        return updated

    async def investigate(self, caller: Caller, report_id: str) -> Report:
        """Alias of assign()."""
        return await self.assign(caller, report_id)

    async def add_management_summary(
        self,
        caller: Caller,
        report_id: str,
        summary: str,
    ) -> Report:
        """Record (or overwrite) the assigned investigator's findings.

        Raises:
            ValidationError: If the summary is empty.
            ForbiddenError: If the caller is not the assigned investigator.
            ReportNotFoundError: If the report doesn't exist.
            InvalidTransitionError: If the report is not under investigation.
        """
        require_role(caller, {CallerRole.INVESTIGATOR}, action="add management summary")
        summary = _require_text(summary, "summary", "Management summary is required")
        log = self._log_operation("add_management_summary", report_id=report_id)

        async def mutate(report: Report) -> Report:
            require_assignee(caller, report, action="add management summary")
            return report.with_management_summary(summary)

        try:
            updated = await self._store.update(report_id, mutate)
        except WhistleLedgerError as e:
            log.warning("transition_rejected", error_code=e.code, error=str(e))
            raise

        log.info("management_summary_recorded", summary_length=len(summary))
        return updated

    async def complete_investigation(self, caller: Caller, report_id: str) -> Report:
        """Complete the investigation of an assigned report.

        Four-tier: moves to ``investigation_complete`` for management review.
        Two-tier: moves to ``completed`` and then pays the configured reward
        best-effort. A failed payment is logged and leaves
        ``reward_processed`` False; the completion stands.

        Raises:
            ForbiddenError: If the caller is not the assigned investigator.
            ReportNotFoundError: If the report doesn't exist.
            InvalidTransitionError: If the report is not under investigation.
            ManagementSummaryRequiredError: If no summary was recorded.
        """
        require_role(caller, {CallerRole.INVESTIGATOR}, action="complete investigation")
        log = self._log_operation("complete_investigation", report_id=report_id)

        async def mutate(report: Report) -> Report:
            require_assignee(caller, report, action="complete investigation")
            return report.with_investigation_completed(self.variant)

        try:
            updated = await self._store.update(report_id, mutate)
        except WhistleLedgerError as e:
            log.warning("transition_rejected", error_code=e.code, error=str(e))
            raise

        log.info("investigation_completed", status=updated.status.value)

        if self.variant == LifecycleVariant.TWO_TIER:
            updated = await self._settle_completion_reward(updated)

        await self._dispatcher.dispatch(
            status_changed_event(updated, reward_processed=updated.reward_processed)
        )
        return updated

    # ------------------------------------------------------------------
    # Management
    # ------------------------------------------------------------------

    async def permanently_close(
        self,
        caller: Caller,
        report_id: str,
        closure_summary: str,
    ) -> Report:
        """Permanently close a report awaiting management review.

        Raises:
            ForbiddenError: If the caller is not management.
            ValidationError: If the closure summary is empty.
            ReportNotFoundError: If the report doesn't exist.
            InvalidTransitionError: If the report is not investigation_complete
                or is already permanently closed.
        """
        require_role(caller, {CallerRole.MANAGEMENT}, action="close report")
        closure_summary = _require_text(
            closure_summary, "closure_summary", "Closure summary is required"
        )
        log = self._log_operation("permanently_close", report_id=report_id)

        async def mutate(report: Report) -> Report:
            return report.with_permanent_closure(closure_summary)

        try:
            updated = await self._store.update(report_id, mutate)
        except WhistleLedgerError as e:
            log.warning("transition_rejected", error_code=e.code, error=str(e))
            raise

        log.info("report_permanently_closed")
        await self._dispatcher.dispatch(
            status_changed_event(updated, permanently_closed=True)
        )
        return updated

    async def reopen(self, caller: Caller, report_id: str, reason: str) -> Report:
        """Send a finished report back to ``pending``.

        The reason is appended to the audit trail and the current assignee
        becomes the previous investigator, who may not pick the case up
        again.

        Raises:
            ForbiddenError: If the caller is not management.
            ValidationError: If the reason is empty.
            ReportNotFoundError: If the report doesn't exist.
            ReportPermanentlyClosedError: If the report is permanently closed.
            InvalidTransitionError: If the report is not finished.
        """
        require_role(caller, {CallerRole.MANAGEMENT}, action="reopen report")
        reason = _require_text(reason, "reason", "Reopen reason is required")
        log = self._log_operation("reopen", report_id=report_id)

        async def mutate(report: Report) -> Report:
            return report.with_reopen(reason, self.variant)

        try:
            updated = await self._store.update(report_id, mutate)
        except WhistleLedgerError as e:
            log.warning("transition_rejected", error_code=e.code, error=str(e))
            raise

        log.info(
            "report_reopened",
            previous_investigator=updated.previous_investigator,
            reopen_count=len(updated.reopen_reasons),
        )
        await self._dispatcher.dispatch(
            status_changed_event(
                updated,
                reopen_reason=reason,
                previous_investigator=updated.previous_investigator,
            )
        )
        return updated

    async def process_reward(
        self,
        caller: Caller,
        report_id: str,
        note: str,
        amount: object,
    ) -> Report:
        """Pay the whistleblower of a permanently closed report.

        All-or-nothing: the balance deduction and the reward flag commit
        together, then the payout is sent. If the payout fails the amount
        is credited back and the reward flag cleared.

        Raises:
            ForbiddenError: If the caller is not management.
            ValidationError: If amount is not a number greater than 0.
            ReportNotFoundError: If the report doesn't exist.
            InvalidTransitionError: If the report is not permanently closed.
            PreconditionFailedError: If the report has no reward wallet.
            AlreadyProcessedError: If the reward was already paid.
            InsufficientFundsError: If the balance doesn't cover amount.
            PayoutFailedError: If the payout gateway rejects the transfer.
        """
        require_role(caller, {CallerRole.MANAGEMENT}, action="process reward")
        reward = parse_amount(amount)
        log = self._log_operation(
            "process_reward", report_id=report_id, amount=str(reward)
        )

        def require_closed(report: Report) -> None:
            if not report.permanently_closed:
                raise InvalidTransitionError(
                    report_id=report.id,
                    from_status=report.status,
                    to_status=report.status,
                    reason="Rewards can only be paid on permanently closed reports.",
                )

        try:
            updated = await self._settle_reward(
                report_id, reward, note or "", require_closed
            )
        except WhistleLedgerError as e:
            log.warning("reward_rejected", error_code=e.code, error=str(e))
            raise

        log.info("reward_processed", transaction_id=updated.reward_transaction_id)
        await self._dispatcher.dispatch(
            reward_processed_event(
                updated.id, reward, updated.reward_note or "", updated.reward_transaction_id
            )
        )
        return updated

    # ------------------------------------------------------------------
    # Reward settlement
    # ------------------------------------------------------------------

    async def _settle_reward(
        self,
        report_id: str,
        amount: Decimal,
        note: str,
        eligibility_check: Callable[[Report], None],
    ) -> Report:
        """Reserve, pay and confirm a reward.

        The balance deduction and the reward flag are committed together in
        one report update, so a second request sees AlreadyProcessedError.
        The payout call runs after that commit; no report lock is held
        across it. If the payout fails the reservation is dropped and the
        amount credited back before the error is re-raised.
        """
        deducted: list[Decimal] = []

        async def reserve(report: Report) -> Report:
            eligibility_check(report)
            if not report.reward_wallet:
                raise PreconditionFailedError(
                    report_id=report.id,
                    requirement="reward_wallet",
                    message="No reward wallet specified for this report",
                )
            if report.reward_processed:
                raise AlreadyProcessedError(report.id)

            await self._reward_ledger.deduct(amount)
            deducted.append(amount)
            return report.with_reward(amount, note)

        try:
            reserved = await self._store.update(report_id, reserve)
        except Exception:
            if deducted:
                await self._reward_ledger.credit(amount)
                self._log_operation(
                    "settle_reward", report_id=report_id, amount=str(amount)
                ).warning("reward_deduction_reverted")
            raise

        try:
            transaction = await self._payout_gateway.send_reward(
                reserved.reward_wallet or "", amount, self._rewards.currency
            )
        except Exception:
            await self._release_reward(report_id, amount)
            raise

        async def confirm(report: Report) -> Report:
            return report.with_reward_transaction(transaction.id)

        return await self._store.update(report_id, confirm)

    async def _release_reward(self, report_id: str, amount: Decimal) -> None:
        """Undo a reservation after a failed payout."""

        async def release(report: Report) -> Report:
            return report.without_reward()

        await self._store.update(report_id, release)
        await self._reward_ledger.credit(amount)
        self._log_operation(
            "settle_reward", report_id=report_id, amount=str(amount)
        ).warning("reward_deduction_reverted")

    async def _settle_completion_reward(self, report: Report) -> Report:
        """Pay the fixed completion reward of the two-tier lifecycle.

        Best-effort: failures are logged and the completed report is
        returned with ``reward_processed`` still False. Never retried.
        """
        log = self._log_operation(
            "settle_completion_reward",
            report_id=report.id,
            amount=str(self._rewards.reward_amount),
        )
        if not report.reward_wallet:
            log.info("completion_reward_skipped_no_wallet")
            return report

        def require_completed(current: Report) -> None:
            if current.status != ReportStatus.COMPLETED:
                raise InvalidTransitionError(
                    report_id=current.id,
                    from_status=current.status,
                    to_status=current.status,
                    reason="Completion reward requires a completed report.",
                )

        try:
            updated = await self._settle_reward(
                report.id,
                self._rewards.reward_amount,
                COMPLETION_REWARD_NOTE,
                require_completed,
            )
        except Exception as e:
            log.warning(
                "completion_reward_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return report

        log.info("completion_reward_processed", transaction_id=updated.reward_transaction_id)
        await self._dispatcher.dispatch(
            reward_processed_event(
                updated.id,
                self._rewards.reward_amount,
                COMPLETION_REWARD_NOTE,
                updated.reward_transaction_id,
            )
        )
        return updated
