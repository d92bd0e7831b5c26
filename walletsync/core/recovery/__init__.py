"""
Error Recovery Module

Failure types raised by the node API transport and the classifier that
decides whether a failure is shown to the user, logged, or self-healed.
"""

from .classifier import (
    DirectiveAction,
    ErrorDirective,
    classify_poll_failure,
    classify_staking_failure,
)
from .errors import (
    NO_CONNECTIVITY_STATUS,
    ErrorCategory,
    ErrorEntry,
    MalformedResponseError,
    NodeApiFailure,
)

__all__ = [
    # Errors
    "NO_CONNECTIVITY_STATUS",
    "ErrorCategory",
    "ErrorEntry",
    "MalformedResponseError",
    "NodeApiFailure",
    # Classifier
    "DirectiveAction",
    "ErrorDirective",
    "classify_poll_failure",
    "classify_staking_failure",
]
