"""Registration error taxonomy.

Each error carries the HTTP status it maps to, a machine-readable reason
and a message that is safe to return to the caller.
"""

from typing import Optional

from rgbreg.registry.validation import ValidationReason, ValidationResult


class RegistrationError(Exception):
    """Base class for errors raised by the registration service."""

    status_code: int = 500
    reason: str = "internal_error"

    def __init__(self, message: str, reason: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason
        if status_code is not None:
            self.status_code = status_code


class RegistrationValidationError(RegistrationError):
    """Submission rejected by the validator. Never reaches the store."""

    status_code = 400

    @classmethod
    def from_result(cls, result: ValidationResult) -> "RegistrationValidationError":
        status_code = 401 if result.reason == ValidationReason.SIGNATURE_VERIFICATION_FAILED else 400
        return cls(result.message, reason=result.reason.value, status_code=status_code)


class RegistrationConflictError(RegistrationError):
    """A registration already exists for this address pair."""

    status_code = 409
    reason = "conflict"

    def __init__(self, status_code: Optional[int] = None):
        super().__init__(
            "Registration already exists for this address combination",
            status_code=status_code,
        )


class RegistrationStoreError(RegistrationError):
    """Unexpected storage failure. The message never includes the cause."""

    status_code = 500
    reason = "store_failure"
