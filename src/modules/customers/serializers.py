"""Customer DRF serializers for API output.

Input is parsed into ``CreateCustomerDTO`` (Pydantic); this serializer
renders the persisted entity.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    """Read serializer for the Customer resource."""

    class Meta:
        model = Customer
        fields = ["id", "name", "email", "created_at", "updated_at"]
        read_only_fields = fields
