"""
Failure Types

Defines the failures raised by the node API transport and the categories
the classifier sorts them into.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


# Status code reported when the node could not be reached at all
NO_CONNECTIVITY_STATUS = 0


class ErrorCategory(str, Enum):
    """Categories of node API failures."""

    CONNECTIVITY = "connectivity"                        # No route to the node
    DESCRIBED_APPLICATION = "described_application"      # User-actionable, carries a message
    UNDESCRIBED_APPLICATION = "undescribed_application"  # Transient, e.g. stale session
    MALFORMED_PAYLOAD = "malformed_payload"              # Error body missing or empty
    UNEXPECTED_STATUS = "unexpected_status"              # Neither 0 nor 4xx/5xx


@dataclass(frozen=True)
class ErrorEntry:
    """One entry of the node's structured error list."""

    message: Optional[str] = None
    description: Optional[str] = None
    status: Optional[int] = None

    @property
    def has_description(self) -> bool:
        return bool(self.description)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ErrorEntry":
        status = payload.get("status")
        return cls(
            message=payload.get("message"),
            description=payload.get("description"),
            status=status if isinstance(status, int) else None,
        )


class NodeApiFailure(Exception):
    """
    A failed exchange with the node API.

    `status_code` is the HTTP status, or 0 when the request never reached
    the node. `errors` is the parsed error list, or None when the response
    carried no usable error body.
    """

    def __init__(
        self,
        status_code: int,
        errors: Optional[List[ErrorEntry]] = None,
        message: Optional[str] = None,
    ):
        self.status_code = status_code
        self.errors = errors
        self.message = message or f"Node API request failed with status {status_code}"
        super().__init__(self.message)

    @property
    def first_error(self) -> Optional[ErrorEntry]:
        if not self.errors:
            return None
        return self.errors[0]

    @property
    def is_connectivity_failure(self) -> bool:
        return self.status_code == NO_CONNECTIVITY_STATUS

    @property
    def is_application_error(self) -> bool:
        return self.status_code >= 400

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "errors": [
                {"message": e.message, "description": e.description, "status": e.status}
                for e in self.errors or []
            ],
        }


class MalformedResponseError(Exception):
    """Raised when a successful node response does not have the expected shape."""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.payload = payload
