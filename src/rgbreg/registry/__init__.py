"""Registration module: validation, storage and intake of address bindings."""

from rgbreg.registry.contracts import (
    RegistrationListResponse,
    RegistrationRecord,
    RegistrationRequest,
    SubmitResponse,
)
from rgbreg.registry.errors import (
    RegistrationConflictError,
    RegistrationError,
    RegistrationStoreError,
    RegistrationValidationError,
)
from rgbreg.registry.service import RegistrationService
from rgbreg.registry.store import InsertOutcome, InsertResult, RegistrationStore
from rgbreg.registry.validation import (
    LengthHeuristicVerifier,
    SignatureVerifier,
    ValidationReason,
    ValidationResult,
    validate,
    validate_payload,
)

__all__ = [
    # Contracts
    "RegistrationRecord",
    "RegistrationRequest",
    "RegistrationListResponse",
    "SubmitResponse",
    # Errors
    "RegistrationError",
    "RegistrationValidationError",
    "RegistrationConflictError",
    "RegistrationStoreError",
    # Validation
    "validate",
    "validate_payload",
    "ValidationReason",
    "ValidationResult",
    "SignatureVerifier",
    "LengthHeuristicVerifier",
    # Store
    "RegistrationStore",
    "InsertOutcome",
    "InsertResult",
    # Service
    "RegistrationService",
]
