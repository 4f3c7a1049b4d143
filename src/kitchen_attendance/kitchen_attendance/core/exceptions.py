from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..attendance.model import ShiftVerdict


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class PreconditionError(DomainError):
    """Raised when an attendance action is attempted before the kiosk is ready."""


class PolicyRejectionError(DomainError):
    """Raised when the shift policy refuses a check-in (e.g. too early)."""

    def __init__(self, verdict: "ShiftVerdict"):
        super().__init__(verdict.message)
        self.verdict = verdict


class WorkflowStateError(DomainError):
    """Raised when an action is not allowed in the current workflow state."""


class ExternalServiceError(DomainError):
    """Raised when an external collaborator (AI service) fails or answers garbage."""


class DeviceUnavailableError(DomainError):
    """Raised when the camera or geolocation cannot be acquired."""
