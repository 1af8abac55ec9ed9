"""
Custom Django model fields for monetary data.

Provides MoneyField that stores a Money value object as an integer count
of minor currency units and hands Money back when loading, so that no
code path ever sees a bare number it could mis-scale.
"""

from decimal import Decimal

from django import forms
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models.query_utils import DeferredAttribute
from django.utils.functional import cached_property

from shared.domain.value_objects import Money


class MoneyAttribute(DeferredAttribute):
    """Coerces every assignment through ``MoneyField.to_python``."""

    def __set__(self, instance, value):
        instance.__dict__[self.field.attname] = self.field.to_python(value)


class MoneyFormField(forms.IntegerField):
    """Admin/form representation: the raw minor-unit integer."""

    def __init__(self, *args, currency: str = 'INR', **kwargs):
        self.currency = currency
        kwargs.pop('min_value', None)
        kwargs.pop('max_value', None)
        super().__init__(*args, **kwargs)

    def prepare_value(self, value):
        if isinstance(value, Money):
            return value.minor_units
        return value

    def to_python(self, value):
        value = super().to_python(value)
        if value is None:
            return None
        try:
            return Money(value, self.currency)
        except ValueError as exc:
            raise ValidationError(str(exc), code='invalid')


class MoneyField(models.BigIntegerField):
    """
    Integer column of minor units, exposed as Money.

    Stores data as BIGINT in database.
    """

    description = "Monetary amount in minor currency units"
    descriptor_class = MoneyAttribute

    def __init__(self, *args, currency: str = 'INR', **kwargs):
        self.currency = currency
        super().__init__(*args, **kwargs)

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        if self.currency != 'INR':
            kwargs['currency'] = self.currency
        return name, path, args, kwargs

    @cached_property
    def validators(self):
        # The integer range validators of BigIntegerField compare against
        # plain ints, which Money deliberately does not support.
        return [*self.default_validators, *self._validators]

    def from_db_value(self, value, expression, connection):
        """Wrap the stored integer when loading from database."""
        if value is None:
            return value
        return Money(int(value), self.currency)

    def to_python(self, value):
        if value is None or isinstance(value, Money):
            if isinstance(value, Money) and value.currency != self.currency:
                raise ValidationError(
                    f"Expected {self.currency} amount, got {value.currency}", code='invalid'
                )
            return value
        if isinstance(value, bool):
            raise ValidationError("Boolean is not a monetary amount", code='invalid')
        try:
            if isinstance(value, (float, Decimal)):
                if value != int(value):
                    raise ValidationError(
                        "Amounts are whole minor units", code='invalid'
                    )
            return Money(int(value), self.currency)
        except (TypeError, ValueError) as exc:
            raise ValidationError(str(exc), code='invalid')

    def get_prep_value(self, value):
        """Unwrap Money before saving or filtering."""
        if value is None:
            return None
        if isinstance(value, Money):
            if value.currency != self.currency:
                raise ValueError(f"Expected {self.currency} amount, got {value.currency}")
            return value.minor_units
        return super().get_prep_value(int(value))

    def value_to_string(self, obj):
        value = self.value_from_object(obj)
        return '' if value is None else str(value.minor_units)

    def formfield(self, **kwargs):
        return super().formfield(**{
            'form_class': MoneyFormField,
            'currency': self.currency,
            **kwargs,
        })
