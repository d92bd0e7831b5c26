"""
Failure Classification

Turns a NodeApiFailure into a directive describing how the caller reacts:
notify the user, log and move on, or silently restart every status poll.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .errors import ErrorCategory, NodeApiFailure


class DirectiveAction(str, Enum):
    """What the caller does with a failure."""

    NOTIFY = "notify"
    LOG_ONLY = "log_only"
    RESTART_ALL = "restart_all"


@dataclass(frozen=True)
class ErrorDirective:
    """Decision produced by the classifier."""

    action: DirectiveAction
    category: ErrorCategory
    message: Optional[str] = None

    # Connectivity loss on the poll path also stops the current batch
    cancel_polls: bool = False

    @property
    def notifies_user(self) -> bool:
        return self.action == DirectiveAction.NOTIFY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "category": self.category.value,
            "message": self.message,
            "cancelPolls": self.cancel_polls,
        }


def classify_poll_failure(failure: NodeApiFailure) -> ErrorDirective:
    """
    Classify a failed balance, history or staking-status fetch.

    Application errors split three ways on the first error entry: no entry
    is logged, a described entry is shown to the user, and an undescribed
    entry restarts all three polls without telling anyone.
    """
    if failure.is_connectivity_failure:
        return ErrorDirective(
            action=DirectiveAction.NOTIFY,
            category=ErrorCategory.CONNECTIVITY,
            cancel_polls=True,
        )

    if not failure.is_application_error:
        return ErrorDirective(
            action=DirectiveAction.LOG_ONLY,
            category=ErrorCategory.UNEXPECTED_STATUS,
        )

    entry = failure.first_error
    if entry is None:
        return ErrorDirective(
            action=DirectiveAction.LOG_ONLY,
            category=ErrorCategory.MALFORMED_PAYLOAD,
        )

    if entry.has_description:
        return ErrorDirective(
            action=DirectiveAction.NOTIFY,
            category=ErrorCategory.DESCRIBED_APPLICATION,
            message=entry.message,
        )

    return ErrorDirective(
        action=DirectiveAction.RESTART_ALL,
        category=ErrorCategory.UNDESCRIBED_APPLICATION,
    )


def classify_staking_failure(failure: NodeApiFailure) -> ErrorDirective:
    """
    Classify a failed start or stop staking request.

    Same split as the poll path, except that nothing here restarts the
    status polls or cancels them: an undescribed error is only logged.
    """
    directive = classify_poll_failure(failure)

    if directive.action == DirectiveAction.RESTART_ALL:
        return ErrorDirective(
            action=DirectiveAction.LOG_ONLY,
            category=directive.category,
        )

    if directive.cancel_polls:
        return ErrorDirective(
            action=directive.action,
            category=directive.category,
            message=directive.message,
        )

    return directive
