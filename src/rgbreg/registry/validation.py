"""Validation of registration submissions.

Checks run in a fixed order and the first failure is reported:

1. all four fields present and non-empty
2. ``ethAddress`` is ``0x`` followed by 40 hex digits
3. ``rgbAddress`` starts with ``bc1``
4. the signature passes the configured ``SignatureVerifier``

Nothing here touches storage or any shared state.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

ETH_ADDRESS_PATTERN = re.compile(r"0x[a-fA-F0-9]{40}")
RGB_ADDRESS_PREFIX = "bc1"
MIN_SIGNATURE_LENGTH = 100


class ValidationReason(str, Enum):
    """Why a submission was rejected."""

    MISSING_FIELDS = "MissingFields"
    INVALID_ETH_ADDRESS = "InvalidEthAddress"
    INVALID_RGB_ADDRESS = "InvalidRgbAddress"
    SIGNATURE_VERIFICATION_FAILED = "SignatureVerificationFailed"


REASON_MESSAGES = {
    ValidationReason.MISSING_FIELDS: "Missing required fields",
    ValidationReason.INVALID_ETH_ADDRESS: "Invalid ETH address format",
    ValidationReason.INVALID_RGB_ADDRESS: (
        "Invalid RGB address format - must be a Taproot address starting with bc1"
    ),
    ValidationReason.SIGNATURE_VERIFICATION_FAILED: "Signature verification failed",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a submission.

    Attributes:
        is_valid: Whether every check passed
        reason: First violated rule, None when valid
    """

    is_valid: bool
    reason: Optional[ValidationReason] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, reason: ValidationReason) -> "ValidationResult":
        return cls(is_valid=False, reason=reason)

    @property
    def message(self) -> str:
        if self.reason is None:
            return "Valid"
        return REASON_MESSAGES[self.reason]


class Candidate(Protocol):
    """Anything exposing the four submission fields."""

    ethAddress: Optional[str]
    rgbAddress: Optional[str]
    signature: Optional[str]
    message: Optional[str]


class SignatureVerifier(ABC):
    """Capability that decides whether a signature authenticates a message.

    Implementations must be pure: no I/O and no shared mutable state.
    """

    @abstractmethod
    def verify(self, message: str, signature: str, claimed_address: str) -> bool:
        """Return True if ``signature`` over ``message`` is accepted for ``claimed_address``."""
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class LengthHeuristicVerifier(SignatureVerifier):
    """Accepts any signature of at least ``min_length`` characters.

    This is not cryptographic verification. The signer is never recovered
    from the signature, so nothing ties the signature to ``claimed_address``.
    """

    def __init__(self, min_length: int = MIN_SIGNATURE_LENGTH):
        self.min_length = min_length

    def verify(self, message: str, signature: str, claimed_address: str) -> bool:
        return len(signature) >= self.min_length

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(min_length={self.min_length})"


DEFAULT_VERIFIER = LengthHeuristicVerifier()


def is_valid_eth_address(address) -> bool:
    return isinstance(address, str) and ETH_ADDRESS_PATTERN.fullmatch(address) is not None


def is_valid_rgb_address(address) -> bool:
    return isinstance(address, str) and address.startswith(RGB_ADDRESS_PREFIX)


def _check(eth_address, rgb_address, signature, message, verifier: Optional[SignatureVerifier]) -> ValidationResult:
    if not eth_address or not rgb_address or not signature or not message:
        return ValidationResult.invalid(ValidationReason.MISSING_FIELDS)

    # message is opaque; its only rule is being text
    if not isinstance(message, str):
        return ValidationResult.invalid(ValidationReason.MISSING_FIELDS)

    if not is_valid_eth_address(eth_address):
        return ValidationResult.invalid(ValidationReason.INVALID_ETH_ADDRESS)

    if not is_valid_rgb_address(rgb_address):
        return ValidationResult.invalid(ValidationReason.INVALID_RGB_ADDRESS)

    if not isinstance(signature, str):
        return ValidationResult.invalid(ValidationReason.SIGNATURE_VERIFICATION_FAILED)

    verifier = verifier or DEFAULT_VERIFIER
    if not verifier.verify(message, signature, eth_address):
        return ValidationResult.invalid(ValidationReason.SIGNATURE_VERIFICATION_FAILED)

    return ValidationResult.ok()


def validate(candidate: Candidate, verifier: Optional[SignatureVerifier] = None) -> ValidationResult:
    """Validate a registration submission.

    Args:
        candidate: Submission carrying ethAddress, rgbAddress, signature, message
        verifier: Signature capability, defaults to the length heuristic

    Returns:
        ValidationResult describing the first violated rule, or ok
    """
    return _check(
        candidate.ethAddress,
        candidate.rgbAddress,
        candidate.signature,
        candidate.message,
        verifier,
    )


def validate_payload(payload: Any, verifier: Optional[SignatureVerifier] = None) -> ValidationResult:
    """Validate a raw decoded JSON body with the same rules and order as validate.

    Used for bodies that request parsing rejected: a missing or non-object
    body has no fields at all, and a field of the wrong type fails the rule
    for that field.
    """
    if not isinstance(payload, Mapping):
        return ValidationResult.invalid(ValidationReason.MISSING_FIELDS)

    return _check(
        payload.get("ethAddress"),
        payload.get("rgbAddress"),
        payload.get("signature"),
        payload.get("message"),
        verifier,
    )
