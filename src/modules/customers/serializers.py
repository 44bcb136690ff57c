"""Customer DRF serializers for API output.

Input is validated by ``CreateCustomerDTO`` (Pydantic) before it reaches
the Service Layer; this serializer only renders a stored customer for
the single-customer endpoint.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    """Read-only serializer for the Customer resource."""

    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "email",
            "address",
            "vat_number",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
