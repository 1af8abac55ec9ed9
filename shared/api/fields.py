"""Serializer fields shared by the API layer."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.domain.value_objects import Money


class MoneySerializerField(serializers.Field):
    """Money in and out of the API as an integer count of minor units."""

    default_error_messages = {
        "invalid": "Amount must be a whole number of minor currency units.",
        "negative": "Amount cannot be negative.",
    }

    def __init__(self, *args, currency: str = "INR", **kwargs):
        self.currency = currency
        super().__init__(*args, **kwargs)

    def to_representation(self, value: Money) -> int:
        return value.minor_units

    def to_internal_value(self, data) -> Money:
        if isinstance(data, bool):
            self.fail("invalid")
        try:
            minor = int(str(data))
        except (TypeError, ValueError):
            self.fail("invalid")
        if minor < 0:
            self.fail("negative")
        return Money(minor, self.currency)


class MoneyDisplayField(serializers.Field):
    """Read-only human readable rendering, e.g. ``₹3,000.00``."""

    def __init__(self, **kwargs):
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def to_representation(self, value: Money) -> str:
        return value.format()
