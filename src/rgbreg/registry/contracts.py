"""Request and response contracts for registrations.

Field names on the wire are camelCase, matching the clients that submit
registrations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RegistrationRequest(BaseModel):
    """Body of POST /submit.

    Every field is optional here so that absence is reported by the
    validator as MissingFields rather than by request parsing.
    """

    ethAddress: Optional[str] = Field(None, description="EVM address, 0x + 40 hex digits")
    rgbAddress: Optional[str] = Field(None, description="Taproot address starting with bc1")
    signature: Optional[str] = Field(None, description="Signature over message")
    message: Optional[str] = Field(None, description="Signed payload")


class RegistrationRecord(BaseModel):
    """Immutable snapshot of a stored registration."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    eth_address: str
    rgb_address: str
    signature: str
    message: str
    created_at: datetime
    updated_at: datetime


class SubmitResponse(BaseModel):
    """Response for a successful submission."""

    success: bool = True
    message: str = "Registration successful"
    ethAddress: str
    rgbAddress: str
    timestamp: datetime


class RegistrationListResponse(BaseModel):
    """Response for GET /registrations."""

    success: bool = True
    data: list[RegistrationRecord] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Body returned for every rejected request."""

    success: bool = False
    error: str
    reason: Optional[str] = None
