"""Integration tests for Customer API endpoints.

Covers:
- CRUD operations via /api/customers/.
- Result failure mapping (404, 409, 400).
- Address geolocation via /api/customers/{id}/geolocation/.
"""

from __future__ import annotations

import uuid
from unittest.mock import patch

import pytest

from modules.customers.models import Customer
from modules.geolocation.services import PositionStackGeolocationService

pytestmark = pytest.mark.integration

URL = "/api/customers/"


def _detail_url(customer_id) -> str:
    return f"{URL}{customer_id}/"


def _geolocation_url(customer_id) -> str:
    return f"{URL}{customer_id}/geolocation/"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_customer():
    """A persisted Customer with an address."""
    customer = Customer(
        name="João Silva",
        email="joao@example.com",
        address="Rua do Ouro, Porto, Portugal",
        vat_number="123456789",
    )
    customer.save()
    return customer


@pytest.fixture()
def customer_without_address():
    customer = Customer(name="Ana Costa", email="ana@example.com")
    customer.save()
    return customer


# ===========================================================================
# LIST
# ===========================================================================


class TestCustomerList:
    def test_list_empty(self, api_client):
        response = api_client.get(URL)
        assert response.status_code == 200
        assert response.json() == []

    def test_list_returns_customers(self, api_client, sample_customer):
        response = api_client.get(URL)
        assert response.status_code == 200
        assert response.json() == [
            {
                "id": str(sample_customer.id),
                "name": "João Silva",
                "email": "joao@example.com",
            }
        ]

    def test_filter_by_name_ignores_case(self, api_client, sample_customer, customer_without_address):
        response = api_client.get(URL, {"name": "joão silva"})
        assert [c["email"] for c in response.json()] == ["joao@example.com"]

    def test_filter_by_email(self, api_client, sample_customer, customer_without_address):
        response = api_client.get(URL, {"email": "ANA@example.com"})
        assert [c["name"] for c in response.json()] == ["Ana Costa"]

    def test_filter_is_not_a_substring_search(self, api_client, sample_customer):
        response = api_client.get(URL, {"name": "João"})
        assert response.json() == []


# ===========================================================================
# CREATE
# ===========================================================================


class TestCustomerCreate:
    def test_create_returns_id_and_location(self, api_client):
        payload = {
            "name": "Maria Santos",
            "email": "maria@example.com",
            "address": "Avenida da Liberdade, Lisboa",
            "vatNumber": "987654321",
        }
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 201
        customer_id = uuid.UUID(response.json())
        assert response["Location"].endswith(_detail_url(customer_id))
        stored = Customer.objects.get(pk=customer_id)
        assert stored.vat_number == "987654321"
        assert stored.address == "Avenida da Liberdade, Lisboa"

    def test_create_with_required_fields_only(self, api_client):
        response = api_client.post(
            URL, {"name": "Rui", "email": "rui@example.com"}, format="json"
        )
        assert response.status_code == 201
        assert Customer.objects.get(pk=response.json()).address == ""

    def test_duplicate_email_returns_409(self, api_client, sample_customer):
        payload = {"name": "Other", "email": "JOAO@example.com"}
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 409
        data = response.json()
        assert data["status"] == 409
        assert data["code"] == "CUSTOMER_ALREADY_EXISTS"
        assert data["title"] == "Customer Already Exists"
        assert "JOAO@example.com" in data["detail"]
        assert Customer.objects.count() == 1

    def test_invalid_email_returns_400(self, api_client):
        response = api_client.post(
            URL, {"name": "Bad", "email": "not-an-email"}, format="json"
        )
        assert response.status_code == 400
        errors = response.json()["errors"]
        assert any(e.get("attr") == "email" for e in errors)

    def test_missing_name_returns_400(self, api_client):
        response = api_client.post(URL, {"email": "x@example.com"}, format="json")
        assert response.status_code == 400
        assert Customer.objects.count() == 0

    def test_invalid_vat_number_returns_400(self, api_client):
        payload = {"name": "Bad VAT", "email": "vat@example.com", "vat_number": "12AB"}
        response = api_client.post(URL, payload, format="json")
        assert response.status_code == 400


# ===========================================================================
# RETRIEVE
# ===========================================================================


class TestCustomerRetrieve:
    def test_retrieve_existing(self, api_client, sample_customer):
        response = api_client.get(_detail_url(sample_customer.id))
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(sample_customer.id)
        assert data["address"] == "Rua do Ouro, Porto, Portugal"
        assert data["vat_number"] == "123456789"

    def test_retrieve_unknown_returns_404(self, api_client):
        response = api_client.get(_detail_url(uuid.uuid4()))
        assert response.status_code == 404
        assert response.json()["code"] == "CUSTOMER_DOES_NOT_EXIST"

    def test_retrieve_malformed_id_returns_404(self, api_client):
        response = api_client.get(_detail_url("not-a-uuid"))
        assert response.status_code == 404


# ===========================================================================
# DELETE
# ===========================================================================


class TestCustomerDelete:
    def test_delete_then_delete_again(self, api_client, sample_customer):
        first = api_client.delete(_detail_url(sample_customer.id))
        second = api_client.delete(_detail_url(sample_customer.id))

        assert first.status_code == 204
        assert second.status_code == 404
        assert second.json()["code"] == "CUSTOMER_DOES_NOT_EXIST"

    def test_deleted_email_can_be_reused(self, api_client, sample_customer):
        api_client.delete(_detail_url(sample_customer.id))

        response = api_client.post(
            URL, {"name": "New João", "email": "joao@example.com"}, format="json"
        )
        assert response.status_code == 201


# ===========================================================================
# GEOLOCATION
# ===========================================================================


class TestCustomerGeolocation:
    def test_success(self, api_client, sample_customer, porto_geolocation):
        with patch.object(
            PositionStackGeolocationService, "resolve", return_value=porto_geolocation
        ) as resolve:
            response = api_client.get(_geolocation_url(sample_customer.id))

        assert response.status_code == 200
        row = response.json()["data"][0]
        assert row["address"] == "Rua do Ouro, Porto, Portugal"
        assert row["latitude"] == pytest.approx(41.144)
        assert row["longitude"] == pytest.approx(-8.641)
        assert resolve.call_args.args[0] == "Rua do Ouro, Porto, Portugal"

    def test_unknown_customer_returns_404(self, api_client):
        with patch.object(PositionStackGeolocationService, "resolve") as resolve:
            response = api_client.get(_geolocation_url(uuid.uuid4()))

        assert response.status_code == 404
        assert response.json()["code"] == "CUSTOMER_DOES_NOT_EXIST"
        resolve.assert_not_called()

    def test_customer_without_address_returns_404(self, api_client, customer_without_address):
        with patch.object(PositionStackGeolocationService, "resolve") as resolve:
            response = api_client.get(_geolocation_url(customer_without_address.id))

        assert response.status_code == 404
        assert response.json()["code"] == "CUSTOMER_DOES_NOT_HAVE_AN_ADDRESS"
        resolve.assert_not_called()

    def test_lookup_failure_returns_400(self, api_client, sample_customer):
        with patch.object(PositionStackGeolocationService, "resolve", return_value=None):
            response = api_client.get(_geolocation_url(sample_customer.id))

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "COULD_NOT_GET_GEOLOCATION"
        assert data["title"] == "Could Not Get Geolocation from Customer's Address"

    def test_missing_api_key_degrades_to_400(self, api_client, sample_customer, settings):
        settings.POSITIONSTACK_API_KEY = ""
        response = api_client.get(_geolocation_url(sample_customer.id))
        assert response.status_code == 400
