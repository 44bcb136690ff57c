"""Customer repositories package."""

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.repositories.interfaces import ICustomerRepository
from modules.customers.repositories.memory_repository import CustomerMemoryRepository

__all__ = ["CustomerDjangoRepository", "CustomerMemoryRepository", "ICustomerRepository"]
