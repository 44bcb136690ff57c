"""Django ORM implementation of the Customer repository.

Satisfies ``ICustomerRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising, and ``add`` returns ``None`` when the unique e-mail
constraint rejects the row; the Service Layer decides how to translate
either into a business failure.

Connection-level database errors are a different matter: they are
re-raised as ``StoreUnavailable`` so they can never be mistaken for a
missing customer.
"""

from __future__ import annotations

import functools
from typing import Callable, List, Optional, TypeVar

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, InterfaceError, OperationalError, transaction

from modules.core.exceptions import StoreUnavailable
from modules.customers.models import Customer, normalize_email_key
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable)


def _store_errors(func: F) -> F:
    """Re-raise connection-level ORM errors as ``StoreUnavailable``."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            logger.error("customer.store_unavailable", operation=func.__name__, error=str(exc))
            raise StoreUnavailable(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    @_store_errors
    def get_by_id(self, id: str) -> Optional[Customer]:
        """Retrieve a customer by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            return Customer.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @_store_errors
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address, ignoring case."""
        return Customer.objects.filter(email_key=normalize_email_key(email)).first()

    @_store_errors
    def list(self) -> List[Customer]:
        return list(Customer.objects.all())

    @_store_errors
    def add(self, entity: Customer) -> Optional[Customer]:
        """Insert a new customer.

        The insert runs in its own savepoint: when the case-insensitive
        e-mail constraint fires (a concurrent create won the race) only
        the savepoint is rolled back and ``None`` is returned.
        """
        try:
            with transaction.atomic():
                entity.save(force_insert=True)
        except IntegrityError:
            logger.warning("customer.unique_email_violation", customer_id=str(entity.id))
            return None
        logger.info("customer.saved", customer_id=str(entity.id))
        return entity

    @_store_errors
    def delete(self, id: str) -> bool:
        """Physically delete a customer by ID.

        Returns ``True`` if the customer existed and was removed,
        ``False`` if no customer exists with the given ID.
        """
        try:
            deleted, _ = Customer.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info("customer.deleted", customer_id=str(id))
        return bool(deleted)
