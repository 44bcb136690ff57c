from unittest.mock import MagicMock

import pytest

from rest_framework.test import APIClient

from modules.customers.repositories.memory_repository import CustomerMemoryRepository
from modules.customers.services import CustomerManager
from modules.geolocation.dtos import GeolocationData, GeolocationDTO
from modules.geolocation.services import IGeolocationService


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def porto_geolocation():
    """A single-row lookup result for a Porto address."""
    return GeolocationData(
        data=[
            GeolocationDTO(
                address="Rua do Ouro, Porto, Portugal",
                latitude=41.144,
                longitude=-8.641,
                type="street",
                locality="Porto",
                region="Porto",
                country="Portugal",
            )
        ]
    )


@pytest.fixture()
def geolocation_service():
    """Mocked lookup collaborator honouring the ``IGeolocationService`` interface."""
    service = MagicMock(spec=IGeolocationService)
    service.resolve.return_value = None
    return service


@pytest.fixture()
def memory_repo():
    return CustomerMemoryRepository()


@pytest.fixture()
def manager(memory_repo, geolocation_service):
    """CustomerManager wired to the in-memory store and a mocked lookup."""
    return CustomerManager(repository=memory_repo, geolocation_service=geolocation_service)
