"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer aggregate, delegating
persistence to the injected ``ICustomerRepository`` and address
geolocation to the injected ``IGeolocationService``.

Every operation returns a ``Result``: business-rule violations come back
as ``Failure`` with an ``ErrorCode`` and are never raised.  Exceptions are
reserved for contract violations (``TypeError``), cancellation
(``OperationCancelled``) and store faults (``StoreUnavailable``).

Business rules enforced here:
- Email is unique, compared case-insensitively.  The pre-check is a fast
  path; the repository's atomic insert is the authority.
- A customer must exist to be read, deleted or geolocated.
- Geolocation requires a non-blank address.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.core.exceptions import OperationCancelled
from modules.core.result import Failure, Result, Success
from modules.customers.constants import ErrorCode
from modules.customers.dtos import CustomerOutputDTO
from modules.customers.mappers import customer_from_dto
from modules.customers.models import normalize_email_key

if TYPE_CHECKING:
    from modules.customers.dtos import CreateCustomerDTO
    from modules.customers.models import Customer
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.geolocation.dtos import GeolocationData
    from modules.geolocation.services import IGeolocationService

logger = structlog.get_logger(__name__)


def _check_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelled("Customer operation cancelled.")


def _not_found(customer_id: str) -> Failure:
    return Failure(
        ErrorCode.CUSTOMER_DOES_NOT_EXIST,
        f"Customer with id '{customer_id}' not found.",
    )


class CustomerManager:
    """Application service for Customer use-cases.

    Receives its collaborators via constructor injection (DIP).  Holds no
    customer state between calls.
    """

    def __init__(
        self,
        repository: ICustomerRepository,
        geolocation_service: IGeolocationService,
    ) -> None:
        self._repo = repository
        self._geolocation = geolocation_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_customer(
        self, dto: CreateCustomerDTO, cancel: Optional[threading.Event] = None
    ) -> Result[UUID]:
        """Create a customer and return its new identifier.

        Fails with ``CUSTOMER_ALREADY_EXISTS`` when the e-mail is taken,
        including when a concurrent create wins the race.  A failed create
        leaves the store untouched.

        Raises:
            TypeError: if ``dto`` is ``None``.
        """
        if dto is None:
            raise TypeError("dto must not be None.")

        log = logger.bind(email=str(dto.email))

        _check_cancelled(cancel)
        if self._repo.get_by_email(str(dto.email)) is not None:
            log.warning("customer.duplicate_email")
            return self._already_exists(str(dto.email))

        entity = customer_from_dto(dto)

        _check_cancelled(cancel)
        if self._repo.add(entity) is None:
            log.warning("customer.duplicate_email", race=True)
            return self._already_exists(str(dto.email))

        log.info("customer.created", customer_id=str(entity.id))
        return Success(entity.id)

    def delete_customer(
        self, customer_id: str, cancel: Optional[threading.Event] = None
    ) -> Result[bool]:
        """Delete a customer.

        Fails with ``CUSTOMER_DOES_NOT_EXIST`` when there is nothing to delete.
        """
        log = logger.bind(customer_id=str(customer_id))

        _check_cancelled(cancel)
        if not self._repo.delete(customer_id):
            log.warning("customer.not_found")
            return _not_found(customer_id)

        log.info("customer.deleted")
        return Success(True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_customer(
        self, customer_id: str, cancel: Optional[threading.Event] = None
    ) -> Result[Customer]:
        """Retrieve a single customer by ID."""
        _check_cancelled(cancel)
        customer = self._repo.get_by_id(customer_id)
        if customer is None:
            logger.warning("customer.not_found", customer_id=str(customer_id))
            return _not_found(customer_id)

        logger.info("customer.retrieved", customer_id=str(customer_id))
        return Success(customer)

    def list_customers(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Result[List[CustomerOutputDTO]]:
        """List customers, optionally filtered by exact name and/or e-mail.

        Both filters are case-insensitive exact matches (not substring
        searches) and are combined with AND.
        """
        _check_cancelled(cancel)
        customers = self._repo.list()

        if email:
            wanted_email = normalize_email_key(email)
            customers = [c for c in customers if normalize_email_key(c.email) == wanted_email]

        if name:
            wanted_name = name.casefold()
            customers = [c for c in customers if c.name.casefold() == wanted_name]

        return Success([CustomerOutputDTO.from_entity(c) for c in customers])

    def get_customer_geolocation(
        self, customer_id: str, cancel: Optional[threading.Event] = None
    ) -> Result[GeolocationData]:
        """Resolve the customer's address to coordinates.

        Fails with ``CUSTOMER_DOES_NOT_EXIST``,
        ``CUSTOMER_DOES_NOT_HAVE_AN_ADDRESS`` (the lookup is not called) or
        ``COULD_NOT_GET_GEOLOCATION`` (the lookup reported nothing).
        """
        log = logger.bind(customer_id=str(customer_id))

        _check_cancelled(cancel)
        customer = self._repo.get_by_id(customer_id)
        if customer is None:
            log.warning("customer.not_found")
            return _not_found(customer_id)

        if not customer.has_address:
            log.warning("customer.missing_address")
            return Failure(
                ErrorCode.CUSTOMER_DOES_NOT_HAVE_AN_ADDRESS,
                f"Customer with id '{customer_id}' does not have an address.",
            )

        geolocation = self._geolocation.resolve(customer.address, cancel=cancel)
        if geolocation is None:
            log.warning("customer.geolocation_failed")
            return Failure(
                ErrorCode.COULD_NOT_GET_GEOLOCATION,
                f"Could not get geolocation data for address '{customer.address}'.",
            )

        log.info("customer.geolocated", results=len(geolocation.data))
        return Success(geolocation)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _already_exists(email: str) -> Failure:
        return Failure(
            ErrorCode.CUSTOMER_ALREADY_EXISTS,
            f"A customer with email '{email}' already exists.",
        )
