"""Tests for Money and DateRange."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from shared.domain.value_objects import DateRange, Money
from shared.infrastructure.fields import MoneyField


class MoneyTests(SimpleTestCase):
    def test_whole_minor_units_only(self) -> None:
        with self.assertRaises(TypeError):
            Money(10.5)
        with self.assertRaises(ValueError):
            Money(-1)
        with self.assertRaises(ValueError):
            Money(100, "XYZ")

    def test_arithmetic(self) -> None:
        rate = Money(100000)
        self.assertEqual(rate * 3, Money(300000))
        self.assertEqual(3 * rate, Money(300000))
        self.assertEqual(rate + Money(50), Money(100050))
        with self.assertRaises(ValueError):
            rate + Money(100, "USD")

    def test_from_major_and_format(self) -> None:
        self.assertEqual(Money.from_major(Decimal("1500.50")), Money(150050))
        with self.assertRaises(ValueError):
            Money.from_major("1.234")
        self.assertEqual(Money(300000).format(), "₹3,000.00")
        self.assertEqual(Money(300000).to_major(), Decimal("3000.00"))


class DateRangeTests(SimpleTestCase):
    def test_single_day_counts_as_one(self) -> None:
        self.assertEqual(DateRange(date(2025, 6, 10), date(2025, 6, 10)).day_count, 1)
        self.assertEqual(len(DateRange(date(2025, 6, 10), date(2025, 6, 12))), 3)

    def test_reversed_range_rejected(self) -> None:
        with self.assertRaises(ValueError):
            DateRange(date(2025, 6, 12), date(2025, 6, 10))

    def test_inclusive_overlap(self) -> None:
        base = DateRange(date(2025, 6, 10), date(2025, 6, 12))
        self.assertTrue(base.overlaps_with(DateRange(date(2025, 6, 12), date(2025, 6, 14))))
        self.assertTrue(base.overlaps_with(DateRange(date(2025, 6, 11), date(2025, 6, 11))))
        self.assertFalse(base.overlaps_with(DateRange(date(2025, 6, 13), date(2025, 6, 14))))
        self.assertTrue(base.contains(date(2025, 6, 12)))


class MoneyFieldTests(SimpleTestCase):
    def setUp(self) -> None:
        self.field = MoneyField()

    def test_to_python(self) -> None:
        self.assertEqual(self.field.to_python(1500), Money(1500))
        self.assertEqual(self.field.to_python("1500"), Money(1500))
        with self.assertRaises(ValidationError):
            self.field.to_python(Decimal("15.5"))
        with self.assertRaises(ValidationError):
            self.field.to_python(True)

    def test_prep_value_unwraps_money(self) -> None:
        self.assertEqual(self.field.get_prep_value(Money(2500)), 2500)
        with self.assertRaises(ValueError):
            self.field.get_prep_value(Money(2500, "USD"))
