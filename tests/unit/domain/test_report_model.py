"""Unit tests for the Report domain model.

Tests the lifecycle transitions, management summary precondition,
permanent closure, reopen audit trail and read-marking rule.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from whistleledger.domain.errors import (
    InvalidTransitionError,
    ManagementSummaryRequiredError,
    PreconditionFailedError,
    ReportPermanentlyClosedError,
)
from whistleledger.domain.models.caller import CallerRole
from whistleledger.domain.models.chat_message import ChatMessage
from whistleledger.domain.models.file_attachment import FileAttachment
from whistleledger.domain.models.report import (
    DEFAULT_CRITICALITY,
    LifecycleVariant,
    Report,
    ReportStatus,
    mask_report_id,
    normalize_criticality,
    valid_transitions,
)

REPORT_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"


def _report(**overrides) -> Report:
    defaults = {
        "id": REPORT_ID,
        "masked_id": mask_report_id(REPORT_ID),
        "title": "Invoices",
        "description": "Duplicate invoices paid to a shell vendor",
    }
    defaults.update(overrides)
    return Report(**defaults)


def _under_investigation(summary: str = "") -> Report:
    report = _report().with_assignment("investigator1", "Ines")
    if summary:
        report = report.with_management_summary(summary)
    return report


def _message(sender: str, role: CallerRole, read: bool = False) -> ChatMessage:
    return ChatMessage(
        id=f"msg-{sender}-{read}",
        report_id=REPORT_ID,
        sender=sender,
        sender_role=role,
        content="hello",
        read=read,
    )


class TestCriticalityNormalization:
    @pytest.mark.parametrize("value", [1, 2, 3, 4, 5, "4", " 5 "])
    def test_in_range_values_are_kept(self, value: object) -> None:
        assert normalize_criticality(value) == int(str(value).strip())

    @pytest.mark.parametrize(
        ("value", "expected"), [(5.0, 5), ("4.7", 4), (1.9, 1), ("2.0", 2)]
    )
    def test_fractional_values_are_truncated(self, value: object, expected: int) -> None:
        assert normalize_criticality(value) == expected

    @pytest.mark.parametrize(
        "value", [None, 0, 6, -1, "abc", "", True, [], "NaN", "Infinity", 0.5]
    )
    def test_invalid_values_become_default(self, value: object) -> None:
        assert normalize_criticality(value) == DEFAULT_CRITICALITY

    def test_report_rejects_out_of_range_criticality(self) -> None:
        with pytest.raises(ValueError, match="Criticality"):
            _report(criticality=7)


class TestReportCreation:
    def test_masked_id_uses_first_eight_characters(self) -> None:
        assert _report().masked_id == "M-0f8fad5b"

    def test_new_report_is_pending_and_unassigned(self) -> None:
        report = _report()
        assert report.status == ReportStatus.PENDING
        assert report.assigned_to is None
        assert report.version == 0

    def test_anonymous_report_cannot_carry_submitter(self) -> None:
        with pytest.raises(ValueError, match="Anonymous"):
            _report(anonymous=True, submitter="alice")

    def test_identified_report_keeps_submitter(self) -> None:
        assert _report(anonymous=False, submitter="alice").submitter == "alice"

    def test_has_attachments_is_derived(self) -> None:
        attachment = FileAttachment(name="ledger.xlsx", storage_path="s3://evidence/1")
        assert _report().has_attachments is False
        assert _report(attachments=(attachment,)).has_attachments is True


class TestTransitionMatrix:
    def test_four_tier_edges(self) -> None:
        assert valid_transitions(ReportStatus.PENDING) == {ReportStatus.UNDER_INVESTIGATION}
        assert valid_transitions(ReportStatus.UNDER_INVESTIGATION) == {
            ReportStatus.INVESTIGATION_COMPLETE
        }
        assert valid_transitions(ReportStatus.INVESTIGATION_COMPLETE) == {
            ReportStatus.COMPLETED,
            ReportStatus.PENDING,
        }
        assert valid_transitions(ReportStatus.COMPLETED) == {ReportStatus.PENDING}

    def test_two_tier_skips_management_review(self) -> None:
        variant = LifecycleVariant.TWO_TIER
        assert valid_transitions(ReportStatus.UNDER_INVESTIGATION, variant) == {
            ReportStatus.COMPLETED
        }
        assert valid_transitions(ReportStatus.INVESTIGATION_COMPLETE, variant) == frozenset()


class TestAssignment:
    def test_assignment_moves_to_under_investigation(self) -> None:
        report = _report().with_assignment("investigator1", "Ines")
        assert report.status == ReportStatus.UNDER_INVESTIGATION
        assert report.assigned_to == "investigator1"
        assert report.assigned_to_name == "Ines"

    def test_assignment_returns_new_instance(self) -> None:
        original = _report()
        original.with_assignment("investigator1", "Ines")
        assert original.status == ReportStatus.PENDING

    def test_assigning_twice_is_rejected(self) -> None:
        report = _under_investigation()
        with pytest.raises(InvalidTransitionError):
            report.with_assignment("investigator2", "Ivo")


class TestCompletion:
    def test_completion_requires_summary(self) -> None:
        report = _under_investigation()
        with pytest.raises(ManagementSummaryRequiredError) as exc_info:
            report.with_investigation_completed()
        assert isinstance(exc_info.value, PreconditionFailedError)
        assert exc_info.value.code == "MANAGEMENT_SUMMARY_REQUIRED"

    def test_whitespace_summary_does_not_count(self) -> None:
        report = _under_investigation().with_management_summary("   ")
        with pytest.raises(ManagementSummaryRequiredError):
            report.with_investigation_completed()

    def test_four_tier_completion_awaits_management(self) -> None:
        report = _under_investigation("Vendor confirmed fake").with_investigation_completed()
        assert report.status == ReportStatus.INVESTIGATION_COMPLETE

    def test_two_tier_completion_closes(self) -> None:
        report = _under_investigation("Vendor confirmed fake").with_investigation_completed(
            LifecycleVariant.TWO_TIER
        )
        assert report.status == ReportStatus.COMPLETED

    def test_completing_pending_report_is_invalid_transition(self) -> None:
        with pytest.raises(InvalidTransitionError):
            _report().with_investigation_completed()

    def test_summary_only_during_investigation(self) -> None:
        with pytest.raises(InvalidTransitionError):
            _report().with_management_summary("too early")

    def test_summary_can_be_overwritten(self) -> None:
        report = _under_investigation("first").with_management_summary("second")
        assert report.management_summary == "second"


class TestPermanentClosure:
    def test_closure_from_investigation_complete(self) -> None:
        report = (
            _under_investigation("done")
            .with_investigation_completed()
            .with_permanent_closure("Referred to prosecutors")
        )
        assert report.status == ReportStatus.COMPLETED
        assert report.permanently_closed is True
        assert report.closure_summary == "Referred to prosecutors"

    def test_closure_twice_is_rejected(self) -> None:
        report = (
            _under_investigation("done")
            .with_investigation_completed()
            .with_permanent_closure("closed")
        )
        with pytest.raises(InvalidTransitionError):
            report.with_permanent_closure("again")

    def test_closure_requires_completed_investigation(self) -> None:
        with pytest.raises(InvalidTransitionError):
            _under_investigation("done").with_permanent_closure("premature")


class TestReopen:
    def test_reopen_records_audit_trail(self) -> None:
        report = _under_investigation("done").with_investigation_completed()
        reopened = report.with_reopen("Missing bank records")

        assert reopened.status == ReportStatus.PENDING
        assert reopened.is_reopened is True
        assert reopened.reopen_reasons == ("Missing bank records",)
        assert reopened.previous_investigator == "investigator1"
        assert reopened.assigned_to is None
        assert reopened.assigned_to_name is None

    def test_reopen_reasons_accumulate_in_order(self) -> None:
        first = _under_investigation("done").with_investigation_completed().with_reopen("one")
        second = (
            first.with_assignment("investigator2", "Ivo")
            .with_investigation_completed()
            .with_reopen("two")
        )
        assert second.reopen_reasons == ("one", "two")
        assert second.previous_investigator == "investigator2"

    def test_reopen_permanently_closed_is_rejected(self) -> None:
        report = (
            _under_investigation("done")
            .with_investigation_completed()
            .with_permanent_closure("closed")
        )
        with pytest.raises(ReportPermanentlyClosedError) as exc_info:
            report.with_reopen("try again")
        assert isinstance(exc_info.value, InvalidTransitionError)

    @pytest.mark.parametrize("status", [ReportStatus.PENDING, ReportStatus.UNDER_INVESTIGATION])
    def test_reopen_unfinished_report_is_rejected(self, status: ReportStatus) -> None:
        with pytest.raises(InvalidTransitionError):
            _report(status=status).with_reopen("not finished")

    def test_two_tier_completed_report_can_be_reopened(self) -> None:
        variant = LifecycleVariant.TWO_TIER
        report = _under_investigation("done").with_investigation_completed(variant)
        assert report.with_reopen("recheck", variant).status == ReportStatus.PENDING


class TestReward:
    def test_with_reward_sets_reward_fields(self) -> None:
        report = _report().with_reward(Decimal("50"), "thanks", "txn_1")
        assert report.reward_processed is True
        assert report.reward_amount == Decimal("50")
        assert report.reward_note == "thanks"
        assert report.reward_transaction_id == "txn_1"

    def test_reservation_is_confirmed_with_transaction(self) -> None:
        reserved = _report().with_reward(Decimal("50"), "thanks")
        assert reserved.reward_processed is True
        assert reserved.reward_transaction_id is None

        confirmed = reserved.with_reward_transaction("txn_2")
        assert confirmed.reward_transaction_id == "txn_2"
        assert confirmed.reward_amount == Decimal("50")

    def test_without_reward_clears_reservation(self) -> None:
        released = _report().with_reward(Decimal("50"), "thanks").without_reward()
        assert released.reward_processed is False
        assert released.reward_amount is None
        assert released.reward_note is None


class TestChatReadMarking:
    def test_reader_marks_only_messages_from_others(self) -> None:
        report = _report(
            chat_history=(
                _message("whistleblower", CallerRole.WHISTLEBLOWER),
                _message("investigator1", CallerRole.INVESTIGATOR),
            )
        )
        updated, flipped = report.with_messages_read("investigator1")

        assert flipped == 1
        assert updated.chat_history[0].read is True
        assert updated.chat_history[1].read is False

    def test_read_marking_is_idempotent(self) -> None:
        report = _report(chat_history=(_message("whistleblower", CallerRole.WHISTLEBLOWER),))
        once, _ = report.with_messages_read("investigator1")
        twice, flipped = once.with_messages_read("investigator1")

        assert flipped == 0
        assert twice is once

    def test_messages_are_never_unread(self) -> None:
        report = _report(
            chat_history=(_message("investigator1", CallerRole.INVESTIGATOR, read=True),)
        )
        updated, _ = report.with_messages_read("investigator1")
        assert updated.chat_history[0].read is True

    def test_unread_count_skips_read_messages(self) -> None:
        report = _report(
            chat_history=(
                _message("whistleblower", CallerRole.WHISTLEBLOWER),
                _message("investigator1", CallerRole.INVESTIGATOR, read=True),
            )
        )
        assert report.unread_count_for("investigator1") == 1

    def test_unread_count_ignores_own_messages(self) -> None:
        report = _report(
            chat_history=(
                _message("whistleblower", CallerRole.WHISTLEBLOWER),
                _message("investigator1", CallerRole.INVESTIGATOR),
            )
        )
        assert report.unread_count_for("whistleblower") == 1
        assert report.unread_count_for("investigator1") == 1
        assert report.unread_count_for("manager1") == 2

    def test_with_message_appends(self) -> None:
        message = _message("whistleblower", CallerRole.WHISTLEBLOWER)
        report = _report().with_message(message)
        assert report.chat_history == (message,)


class TestToDict:
    def test_to_dict_is_json_friendly(self) -> None:
        data = _report().with_reward(Decimal("12.5"), "note").to_dict()
        assert data["status"] == "pending"
        assert data["masked_id"] == "M-0f8fad5b"
        assert data["reopen_reasons"] == []
        assert data["reward_processed"] is True
