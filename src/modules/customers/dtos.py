"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateCustomerDTO``: already-validated input for customer creation.
- ``CustomerOutputDTO``: public list-view projection of a customer.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

from modules.customers.constants import VAT_NUMBER_PATTERN

if TYPE_CHECKING:
    from modules.customers.models import Customer

_VAT_RE = re.compile(VAT_NUMBER_PATTERN)


# ---------------------------------------------------------------------------
# Input DTO
# ---------------------------------------------------------------------------


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer creation requests.

    Validates:
    - ``name`` is present and not blank.
    - ``email`` is a well-formed address (Pydantic ``EmailStr``); also
      accepted under the ``emailAddress`` key.
    - ``vat_number`` is empty or exactly nine digits; also accepted
      under the ``vatNumber`` key.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(validation_alias=AliasChoices("email", "emailAddress"))
    address: str = ""
    vat_number: str = Field(
        default="",
        validation_alias=AliasChoices("vat_number", "vatNumber"),
    )

    @field_validator("address", "vat_number", mode="before")
    @classmethod
    def none_as_empty(cls, v: str | None) -> str:
        """JSON ``null`` for an optional field means "not provided"."""
        return "" if v is None else v

    @field_validator("vat_number")
    @classmethod
    def validate_vat_number(cls, v: str) -> str:
        if v and not _VAT_RE.match(v):
            raise ValueError("VAT number must have exactly 9 digits.")
        return v


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


class CustomerOutputDTO(BaseModel):
    """Immutable DTO for customer list responses.

    Exposes only the public identity of a customer; address and VAT
    number are available through the single-customer endpoint.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    email: str

    @classmethod
    def from_entity(cls, customer: Customer) -> CustomerOutputDTO:
        """Build an output DTO from a Customer model instance."""
        return cls(
            id=customer.id,
            name=customer.name,
            email=customer.email,
        )
