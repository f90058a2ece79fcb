"""Registration intake: validate a submission, then store it."""

import logging
from typing import Optional

from rgbreg.registry.contracts import RegistrationRecord, RegistrationRequest, SubmitResponse
from rgbreg.registry.errors import (
    RegistrationConflictError,
    RegistrationStoreError,
    RegistrationValidationError,
)
from rgbreg.registry.store import InsertOutcome, RegistrationStore
from rgbreg.registry.validation import SignatureVerifier, validate

logger = logging.getLogger(__name__)


def _preview(signature: Optional[str]) -> str:
    return f"{signature[:10]}..." if signature else "none"


class RegistrationService:
    """Intake pipeline over a single RegistrationStore."""

    def __init__(
        self,
        store: RegistrationStore,
        verifier: Optional[SignatureVerifier] = None,
        conflict_status_code: int = 409,
    ):
        self.store = store
        self.verifier = verifier
        self.conflict_status_code = conflict_status_code

    async def submit(self, request: RegistrationRequest) -> SubmitResponse:
        """Validate and persist a registration.

        Raises:
            RegistrationValidationError: A check failed; the store is not touched
            RegistrationConflictError: The address pair is already registered
            RegistrationStoreError: The store failed to write
        """
        logger.info(
            "Registration request received: eth=%s rgb=%s signature=%s message_length=%d",
            request.ethAddress,
            request.rgbAddress,
            _preview(request.signature),
            len(request.message or ""),
        )

        result = validate(request, self.verifier)
        if not result.is_valid:
            logger.info("Registration rejected: %s", result.reason.value)
            raise RegistrationValidationError.from_result(result)

        outcome = await self.store.insert(
            eth_address=request.ethAddress,
            rgb_address=request.rgbAddress,
            signature=request.signature,
            message=request.message,
        )

        if outcome.outcome == InsertOutcome.CONFLICT:
            raise RegistrationConflictError(status_code=self.conflict_status_code)
        if outcome.outcome == InsertOutcome.STORE_FAILURE:
            logger.error("Registration not saved: %s", outcome.cause)
            raise RegistrationStoreError("Internal server error")

        return SubmitResponse(
            ethAddress=request.ethAddress,
            rgbAddress=request.rgbAddress,
            timestamp=outcome.created_at,
        )

    async def list_registrations(self) -> list[RegistrationRecord]:
        return await self.store.list_all()
