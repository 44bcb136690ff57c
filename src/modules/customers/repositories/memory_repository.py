"""In-process implementation of the Customer repository.

Keeps customers in a dict guarded by a single lock.  ``add`` checks the
case-folded e-mail index and inserts under the same lock, which makes it
the atomic compare-and-insert the service layer relies on.  Useful for
tests and for embedding the customer service without a database.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional
from uuid import UUID

import structlog

from modules.customers.models import Customer, normalize_email_key
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


def _key(id: str | UUID) -> Optional[UUID]:
    if isinstance(id, UUID):
        return id
    try:
        return UUID(str(id))
    except ValueError:
        return None


class CustomerMemoryRepository(ICustomerRepository):
    """Thread-safe in-memory Customer repository."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: Dict[UUID, Customer] = {}
        self._ids_by_email: Dict[str, UUID] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)

    def get_by_id(self, id: str) -> Optional[Customer]:
        key = _key(id)
        if key is None:
            return None
        with self._lock:
            return self._by_id.get(key)

    def get_by_email(self, email: str) -> Optional[Customer]:
        with self._lock:
            key = self._ids_by_email.get(normalize_email_key(email))
            return self._by_id.get(key) if key is not None else None

    def list(self) -> List[Customer]:
        with self._lock:
            return list(self._by_id.values())

    def add(self, entity: Customer) -> Optional[Customer]:
        email_key = normalize_email_key(entity.email)
        with self._lock:
            if email_key in self._ids_by_email or entity.id in self._by_id:
                logger.warning("customer.unique_email_violation", customer_id=str(entity.id))
                return None
            self._by_id[entity.id] = entity
            self._ids_by_email[email_key] = entity.id
        logger.info("customer.saved", customer_id=str(entity.id))
        return entity

    def delete(self, id: str) -> bool:
        key = _key(id)
        if key is None:
            return False
        with self._lock:
            entity = self._by_id.pop(key, None)
            if entity is None:
                return False
            self._ids_by_email.pop(normalize_email_key(entity.email), None)
        logger.info("customer.deleted", customer_id=str(key))
        return True
