"""Projection from the creation DTO to the persisted entity.

This is the single place where a customer identifier is minted.
"""

from __future__ import annotations

import uuid6

from modules.customers.dtos import CreateCustomerDTO
from modules.customers.models import Customer, normalize_email_key


def customer_from_dto(dto: CreateCustomerDTO) -> Customer:
    """Build an unsaved ``Customer`` with a freshly minted UUIDv7 id."""
    return Customer(
        id=uuid6.uuid7(),
        name=dto.name,
        email=str(dto.email),
        email_key=normalize_email_key(str(dto.email)),
        address=dto.address,
        vat_number=dto.vat_number,
    )
