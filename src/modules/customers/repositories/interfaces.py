"""Customer repository interface.

Extends ``IRepository[Customer]`` with the e-mail look-up required by
the unique-email business rule.  Implementations must make ``add`` an
atomic compare-and-insert on the case-insensitive e-mail: two
concurrent inserts of the same address can never both succeed.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address (case-insensitive)."""
