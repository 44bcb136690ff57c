"""Unit tests for the Customer DRF serializer.

Covers:
- Field presence and read-only constraints.
- Serialization of a stored Customer.
"""

from __future__ import annotations

import uuid

import pytest

from modules.customers.models import Customer
from modules.customers.serializers import CustomerSerializer

pytestmark = pytest.mark.unit


def _make_customer(**overrides) -> Customer:
    defaults = {
        "name": "João Silva",
        "email": f"{uuid.uuid4().hex[:8]}@example.com",
        "address": "Rua do Ouro, Porto, Portugal",
        "vat_number": "123456789",
    }
    defaults.update(overrides)
    customer = Customer(**defaults)
    customer.save()
    return customer


class TestSerializerFields:
    def test_expected_fields(self):
        serializer = CustomerSerializer()
        assert set(serializer.fields.keys()) == {
            "id",
            "name",
            "email",
            "address",
            "vat_number",
            "created_at",
            "updated_at",
        }

    def test_all_fields_read_only(self):
        serializer = CustomerSerializer()
        assert all(field.read_only for field in serializer.fields.values())


class TestSerialization:
    def test_serializes_stored_customer(self):
        customer = _make_customer()

        data = CustomerSerializer(customer).data

        assert data["id"] == str(customer.id)
        assert data["name"] == "João Silva"
        assert data["email"] == customer.email
        assert data["address"] == "Rua do Ouro, Porto, Portugal"
        assert data["vat_number"] == "123456789"
        assert data["created_at"] is not None

    def test_optional_fields_render_as_empty_strings(self):
        customer = _make_customer(address="", vat_number="")

        data = CustomerSerializer(customer).data

        assert data["address"] == ""
        assert data["vat_number"] == ""


class TestAppConfig:
    def test_primary_key_comes_from_base_model(self):
        from modules.customers.apps import CustomersConfig

        assert "default_auto_field" not in CustomersConfig.__dict__
        assert Customer._meta.pk.get_internal_type() == "UUIDField"
