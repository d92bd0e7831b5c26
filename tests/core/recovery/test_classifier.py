"""
Tests for failure classification

Poll failures split into notify / log / restart; staking action failures
use the same split but never restart the polls.
"""

import pytest

from walletsync.core.recovery import (
    DirectiveAction,
    ErrorCategory,
    ErrorEntry,
    NodeApiFailure,
    classify_poll_failure,
    classify_staking_failure,
)


def _failure(status_code, *entries):
    return NodeApiFailure(status_code, list(entries) if entries else None)


# =============================================================================
# Poll Classification
# =============================================================================

class TestPollClassification:
    """Decision order for balance, history and staking-status failures."""

    def test_no_connectivity_notifies_without_message_and_cancels(self):
        directive = classify_poll_failure(_failure(0))

        assert directive.action == DirectiveAction.NOTIFY
        assert directive.message is None
        assert directive.cancel_polls is True
        assert directive.category == ErrorCategory.CONNECTIVITY

    def test_application_error_without_entries_is_logged(self):
        directive = classify_poll_failure(_failure(500))

        assert directive.action == DirectiveAction.LOG_ONLY
        assert directive.category == ErrorCategory.MALFORMED_PAYLOAD
        assert directive.cancel_polls is False

    def test_empty_entry_list_is_logged(self):
        directive = classify_poll_failure(NodeApiFailure(400, []))

        assert directive.action == DirectiveAction.LOG_ONLY

    def test_described_entry_notifies_with_message(self):
        entry = ErrorEntry(message="Wallet not found", description="WalletException")
        directive = classify_poll_failure(_failure(400, entry))

        assert directive.action == DirectiveAction.NOTIFY
        assert directive.message == "Wallet not found"
        assert directive.category == ErrorCategory.DESCRIBED_APPLICATION
        assert directive.cancel_polls is False

    def test_only_first_entry_is_considered(self):
        first = ErrorEntry(message="stale")
        second = ErrorEntry(message="ignored", description="has one")
        directive = classify_poll_failure(_failure(400, first, second))

        assert directive.action == DirectiveAction.RESTART_ALL

    def test_undescribed_entry_restarts_silently(self):
        """
        Behavior to watch: any application error that happens to omit a
        description is retried silently, which can hide genuine errors.
        """
        directive = classify_poll_failure(_failure(500, ErrorEntry(message="session expired")))

        assert directive.action == DirectiveAction.RESTART_ALL
        assert directive.category == ErrorCategory.UNDESCRIBED_APPLICATION
        assert directive.notifies_user is False

    def test_empty_description_counts_as_missing(self):
        directive = classify_poll_failure(_failure(404, ErrorEntry(message="x", description="")))

        assert directive.action == DirectiveAction.RESTART_ALL

    @pytest.mark.parametrize("status_code", [301, 304, 399])
    def test_other_statuses_are_logged(self, status_code):
        directive = classify_poll_failure(_failure(status_code, ErrorEntry(message="x", description="y")))

        assert directive.action == DirectiveAction.LOG_ONLY
        assert directive.category == ErrorCategory.UNEXPECTED_STATUS


# =============================================================================
# Staking Classification
# =============================================================================

class TestStakingClassification:
    """Staking action failures never restart or cancel the status polls."""

    def test_no_connectivity_notifies_but_keeps_polls(self):
        directive = classify_staking_failure(_failure(0))

        assert directive.action == DirectiveAction.NOTIFY
        assert directive.message is None
        assert directive.cancel_polls is False

    def test_described_entry_notifies(self):
        entry = ErrorEntry(message="Invalid password", description="SecurityException")
        directive = classify_staking_failure(_failure(403, entry))

        assert directive.action == DirectiveAction.NOTIFY
        assert directive.message == "Invalid password"

    def test_undescribed_entry_degrades_to_log(self):
        directive = classify_staking_failure(_failure(500, ErrorEntry(message="stale")))

        assert directive.action == DirectiveAction.LOG_ONLY
        assert directive.category == ErrorCategory.UNDESCRIBED_APPLICATION

    def test_missing_entries_are_logged(self):
        directive = classify_staking_failure(_failure(500))

        assert directive.action == DirectiveAction.LOG_ONLY
        assert directive.category == ErrorCategory.MALFORMED_PAYLOAD


class TestErrorEntry:
    def test_from_payload_reads_node_error_shape(self):
        entry = ErrorEntry.from_payload(
            {"status": 400, "message": "Wallet is locked", "description": "System.Security.SecurityException"}
        )

        assert entry.status == 400
        assert entry.message == "Wallet is locked"
        assert entry.has_description is True

    def test_failure_exposes_first_error(self):
        failure = NodeApiFailure(400, [ErrorEntry(message="a"), ErrorEntry(message="b")])

        assert failure.first_error.message == "a"
        assert failure.to_dict()["errors"][1]["message"] == "b"
