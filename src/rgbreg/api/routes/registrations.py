"""Registration submission and read-back endpoints."""

from fastapi import APIRouter, Depends, Request

from rgbreg.registry.contracts import (
    ErrorResponse,
    RegistrationListResponse,
    RegistrationRequest,
    SubmitResponse,
)
from rgbreg.registry.service import RegistrationService

router = APIRouter()


def get_registration_service(request: Request) -> RegistrationService:
    """Return the service built for this app instance."""
    return request.app.state.registration_service


@router.get(
    "/registrations",
    response_model=RegistrationListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_registrations(
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationListResponse:
    """Return every registration in insertion order."""
    records = await service.list_registrations()
    return RegistrationListResponse(data=records)


@router.post(
    "/submit",
    response_model=SubmitResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields or bad address format"},
        401: {"model": ErrorResponse, "description": "Signature verification failed"},
        409: {"model": ErrorResponse, "description": "Address pair already registered"},
        500: {"model": ErrorResponse},
    },
)
async def submit_registration(
    request: RegistrationRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> SubmitResponse:
    """Register a binding between an EVM address and a Taproot address."""
    return await service.submit(request)
