"""
scrim_manager.errors — Custom exception classes
================================================

Defines the rejection hierarchy for scrim actions.
Each exception carries a machine-checkable ``code``, a user-facing
message, and the request context needed for structured logging.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class ScrimError(Exception):
    """Base exception for all scrim action rejections."""

    code = "SCRIM_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[List[str]] = None,
        scrim_id: Optional[str] = None,
        action: Optional[str] = None,
        actor_email: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details or []
        self.scrim_id = scrim_id
        self.action = action
        self.actor_email = actor_email
        self.payload = payload
        super().__init__(message)

    def with_context(
        self,
        scrim_id: Optional[str] = None,
        action: Optional[str] = None,
        actor_email: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> "ScrimError":
        """Attach request context, keeping anything already set."""
        self.scrim_id = self.scrim_id or scrim_id
        self.action = self.action or action
        self.actor_email = self.actor_email or actor_email
        if self.payload is None:
            self.payload = payload
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": list(self.details)}

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.code,
            message=self.message,
            scrim_id=self.scrim_id,
            action=self.action,
            actor_email=self.actor_email,
            payload=self.payload,
            details=self.details,
        )


class CapacityExceededError(ScrimError):
    """Raised when the applicant pool, waitlist or a team is already full."""

    code = "CAPACITY_EXCEEDED"


class DuplicateRegistrationError(ScrimError):
    """Raised when a player has already applied or is already waitlisted."""

    code = "DUPLICATE_REGISTRATION"


class PermissionDeniedError(ScrimError):
    """Raised when the actor is neither an admin nor the scrim creator."""

    code = "PERMISSION_DENIED"


class InvalidStateForActionError(ScrimError):
    """Raised when an action is not legal in the scrim's current status."""

    code = "INVALID_STATE_FOR_ACTION"

    def __init__(self, action: str, status: str, message: Optional[str] = None):
        super().__init__(
            message or f"Action '{action}' is not allowed while the scrim is {status}",
            action=action,
        )
        self.status = status


class InvalidChampionSelectionError(ScrimError):
    """Raised when a champion pick is unknown or collides with another pick."""

    code = "INVALID_CHAMPION_SELECTION"


class NotFoundError(ScrimError):
    """Raised when a scrim, match or referenced member does not exist."""

    code = "NOT_FOUND"


class MalformedPayloadError(ScrimError):
    """Raised when an action payload is missing fields or fails validation."""

    code = "MALFORMED_PAYLOAD"


class InvariantViolationError(ScrimError):
    """Raised when a computed state would break a roster invariant."""

    code = "INVARIANT_VIOLATION"


class TransientStoreError(ScrimError):
    """Raised when the store keeps conflicting past the retry budget."""

    code = "TRANSIENT_FAILURE"


class TransactionConflictError(Exception):
    """A concurrent commit changed a document this transaction read.

    Internal to the store: the transaction is re-run with fresh reads.
    """

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"Concurrent modification of {collection}/{doc_id}")


def _format_error_block(
    error_type: str,
    message: str,
    scrim_id: Optional[str],
    action: Optional[str],
    actor_email: Optional[str],
    payload: Optional[Dict[str, Any]],
    details: Optional[List[str]],
) -> str:
    """Format a structured rejection block for the log file."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " SCRIM ACTION REJECTED",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if scrim_id is not None:
        lines.append(f" Scrim:        {scrim_id}")
    if action is not None:
        lines.append(f" Action:       {action}")
    if actor_email is not None:
        lines.append(f" Actor:        {actor_email}")

    if payload is not None:
        lines.append("")
        lines.append(" ── PAYLOAD " + "─" * 52)
        lines.append(_indent_json(payload))

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        for detail in details:
            lines.append(f" • {detail}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str, ensure_ascii=False)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
