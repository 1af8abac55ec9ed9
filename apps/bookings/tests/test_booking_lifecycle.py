"""Service-level tests for the booking lifecycle."""

from __future__ import annotations

import hashlib
import hmac
from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone

from apps.bookings import services, tasks
from apps.bookings.exceptions import (
    BookingValidationError,
    InvalidSignatureError,
    InvalidTransitionError,
    NotFoundError,
    PaymentSessionError,
    UnavailableError,
)
from apps.bookings.models import Booking
from apps.equipment.models import Equipment
from apps.payments.gateway import PaymentGatewayError
from apps.payments.models import Receipt
from apps.users.models import User
from shared.domain.value_objects import Money

CREATE_ORDER = "apps.payments.gateway.create_order"
FETCH_PAYMENTS = "apps.payments.gateway.fetch_order_payments"


def fake_order(order_id: str = "order_test_1"):
    return {"id": order_id, "amount": 0, "currency": "INR", "status": "created"}


class DayCountTests(TestCase):
    def test_same_day_is_one_day(self) -> None:
        day = timezone.localdate()
        self.assertEqual(services.inclusive_day_count(day, day), 1)

    def test_range_counts_both_ends(self) -> None:
        day = timezone.localdate()
        self.assertEqual(services.inclusive_day_count(day, day + timedelta(days=2)), 3)

    def test_total_price_uses_inclusive_days(self) -> None:
        day = timezone.localdate()
        total = services.calculate_total_price(Money(100000), day, day + timedelta(days=2))
        self.assertEqual(total, Money(300000))

    def test_reversed_range_is_invalid(self) -> None:
        day = timezone.localdate()
        with self.assertRaises(BookingValidationError):
            services.inclusive_day_count(day, day - timedelta(days=1))


class BookingLifecycleTests(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.renter = User.objects.create_user(email="renter@example.com", password="RenterPass123")
        self.other_renter = User.objects.create_user(email="second@example.com", password="SecondPass123")
        self.equipment = Equipment.objects.create(
            owner=self.owner,
            name="Combine X",
            category=Equipment.Category.COMBINE_HARVESTERS,
            daily_rate=Money(100000),
            location="Ludhiana",
        )
        self.start = timezone.localdate() + timedelta(days=10)
        self.end = self.start + timedelta(days=2)

    def _create(self, renter=None, start=None, end=None, order_id="order_test_1") -> Booking:
        with patch(CREATE_ORDER, return_value=fake_order(order_id)):
            return services.create_booking(
                renter or self.renter, self.equipment.id, start or self.start, end or self.end
            )

    def _sign(self, order_id: str, payment_id: str) -> str:
        return hmac.new(b"test_key_secret", f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()

    def test_create_holds_equipment_and_awaits_payment(self) -> None:
        with patch(CREATE_ORDER, return_value=fake_order()) as create_order:
            booking = services.create_booking(self.renter, self.equipment.id, self.start, self.end)

        self.assertEqual(booking.status, Booking.Status.AWAITING_PAYMENT)
        self.assertEqual(booking.gateway_order_id, "order_test_1")
        self.assertEqual(booking.total_days, 3)
        self.assertEqual(booking.total_price, Money(300000))
        create_order.assert_called_once_with(
            booking.pk, 300000, currency="INR", description="Rental of Combine X"
        )
        self.equipment.refresh_from_db()
        self.assertFalse(self.equipment.availability)

    def test_unknown_equipment(self) -> None:
        with self.assertRaises(NotFoundError):
            services.create_booking(self.renter, 999999, self.start, self.end)

    def test_past_start_rejected(self) -> None:
        yesterday = timezone.localdate() - timedelta(days=1)
        with self.assertRaises(BookingValidationError):
            services.create_booking(self.renter, self.equipment.id, yesterday, self.end)

    def test_overlapping_request_rejected(self) -> None:
        self._create()
        with self.assertRaises(UnavailableError):
            self._create(renter=self.other_renter, start=self.start + timedelta(days=1), end=self.start + timedelta(days=1))
        self.assertEqual(Booking.objects.count(), 1)

    def test_taken_flag_leaves_no_booking_behind(self) -> None:
        Equipment.objects.filter(pk=self.equipment.pk).update(availability=False)
        with self.assertRaises(UnavailableError):
            self._create()
        self.assertFalse(Booking.objects.exists())

    def test_lost_race_leaves_no_booking_behind(self) -> None:
        with patch("apps.bookings.services._take_equipment", return_value=False):
            with self.assertRaises(UnavailableError):
                self._create()
        self.assertFalse(Booking.objects.exists())

    def test_gateway_failure_rolls_back(self) -> None:
        with patch(CREATE_ORDER, side_effect=PaymentGatewayError("boom")):
            with self.assertRaises(PaymentSessionError) as ctx:
                services.create_booking(self.renter, self.equipment.id, self.start, self.end)

        booking = Booking.objects.get()
        self.assertEqual(ctx.exception.context["booking_id"], booking.pk)
        self.assertEqual(booking.status, Booking.Status.PAYMENT_FAILED)
        self.equipment.refresh_from_db()
        self.assertTrue(self.equipment.availability)
        self.assertTrue(services.is_available(self.equipment, self.start, self.end))

    def test_unexpected_error_rolls_back_and_propagates(self) -> None:
        with patch(CREATE_ORDER, side_effect=RuntimeError("bug")):
            with self.assertRaises(RuntimeError):
                services.create_booking(self.renter, self.equipment.id, self.start, self.end)

        self.assertEqual(Booking.objects.get().status, Booking.Status.PAYMENT_FAILED)
        self.equipment.refresh_from_db()
        self.assertTrue(self.equipment.availability)

    def test_is_available_inclusive_overlap(self) -> None:
        self._create()
        self.assertFalse(services.is_available(self.equipment, self.end, self.end + timedelta(days=3)))
        self.assertFalse(services.is_available(self.equipment.id, self.start - timedelta(days=3), self.start))
        self.assertTrue(services.is_available(self.equipment, self.end + timedelta(days=1), self.end + timedelta(days=3)))

    def test_failed_bookings_do_not_hold_dates(self) -> None:
        booking = self._create()
        services.fail_payment(booking, "card declined")
        self.assertTrue(services.is_available(self.equipment, self.start, self.end))

    def test_confirm_is_idempotent(self) -> None:
        booking = self._create()
        services.confirm_payment(booking, "pay_1")
        services.confirm_payment(booking, "pay_1")

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PAID)
        self.assertIsNotNone(booking.paid_at)
        self.assertEqual(Receipt.objects.count(), 1)
        receipt = Receipt.objects.get()
        self.assertEqual(receipt.amount, booking.total_price)
        self.assertEqual(receipt.metadata["equipment_name"], "Combine X")
        self.equipment.refresh_from_db()
        self.assertFalse(self.equipment.availability)

    def test_confirm_failed_booking_is_rejected(self) -> None:
        booking = self._create()
        services.fail_payment(booking)
        with self.assertRaises(InvalidTransitionError):
            services.confirm_payment(booking, "pay_late")
        self.assertFalse(Receipt.objects.exists())

    def test_verify_and_confirm_with_valid_proof(self) -> None:
        booking = self._create()
        confirmed = services.verify_and_confirm(
            booking.pk, "order_test_1", "pay_1", self._sign("order_test_1", "pay_1"), user=self.renter
        )
        self.assertEqual(confirmed.status, Booking.Status.PAID)
        self.assertEqual(confirmed.gateway_payment_id, "pay_1")

    def test_invalid_signature_leaves_state_unchanged(self) -> None:
        booking = self._create()
        with self.assertRaises(InvalidSignatureError):
            services.verify_and_confirm(booking.pk, "order_test_1", "pay_1", "forged", user=self.renter)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.AWAITING_PAYMENT)
        self.equipment.refresh_from_db()
        self.assertFalse(self.equipment.availability)

    def test_proof_for_another_order_is_rejected(self) -> None:
        booking = self._create()
        with self.assertRaises(InvalidSignatureError):
            services.verify_and_confirm(
                booking.pk, "order_other", "pay_1", self._sign("order_other", "pay_1"), user=self.renter
            )

    def test_other_renters_cannot_confirm(self) -> None:
        booking = self._create()
        with self.assertRaises(NotFoundError):
            services.verify_and_confirm(
                booking.pk, "order_test_1", "pay_1", self._sign("order_test_1", "pay_1"), user=self.other_renter
            )

    def test_fail_payment_releases_equipment(self) -> None:
        booking = self._create()
        services.fail_payment(booking, "card declined")
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PAYMENT_FAILED)
        self.assertEqual(booking.failure_reason, "card declined")
        self.equipment.refresh_from_db()
        self.assertTrue(self.equipment.availability)

    def test_fail_payment_ignores_paid_booking(self) -> None:
        booking = self._create()
        services.confirm_payment(booking, "pay_1")
        services.fail_payment(booking)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PAID)
        self.equipment.refresh_from_db()
        self.assertFalse(self.equipment.availability)

    def test_end_to_end_no_double_booking(self) -> None:
        booking = self._create()
        self.assertEqual(booking.total_price, Money(300000))
        with self.assertRaises(UnavailableError):
            self._create(renter=self.other_renter, start=self.start + timedelta(days=1), end=self.start + timedelta(days=1))

        services.confirm_payment(booking, "pay_1")
        services.confirm_payment(booking, "pay_1")
        receipt = Receipt.objects.get(booking=booking)
        self.assertEqual(receipt.amount, Money(300000))
        self.assertEqual(Receipt.objects.count(), 1)


class ReconciliationTests(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.renter = User.objects.create_user(email="renter@example.com", password="RenterPass123")
        self.start = timezone.localdate() + timedelta(days=3)

    def _stale_booking(self, order_id: str, *, minutes_old: int = 45, status=Booking.Status.AWAITING_PAYMENT) -> Booking:
        equipment = Equipment.objects.create(
            owner=self.owner,
            name=f"Tiller {order_id}",
            category=Equipment.Category.PLOUGHS,
            daily_rate=Money(40000),
            location="Indore",
            availability=False,
        )
        booking = Booking.objects.create(
            renter=self.renter,
            equipment=equipment,
            start_date=self.start,
            end_date=self.start,
            status=status,
            daily_rate=equipment.daily_rate,
            total_price=equipment.daily_rate,
            gateway_order_id=order_id,
        )
        Booking.objects.filter(pk=booking.pk).update(
            created_at=timezone.now() - timedelta(minutes=minutes_old)
        )
        return booking

    def test_captured_payment_confirms(self) -> None:
        booking = self._stale_booking("order_captured")
        with patch(FETCH_PAYMENTS, return_value=[{"id": "pay_9", "status": "captured"}]):
            summary = tasks.reconcile_stale_payments()

        self.assertEqual(summary, {"confirmed": 1, "failed": 0, "skipped": 0})
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PAID)
        self.assertTrue(Receipt.objects.filter(booking=booking).exists())

    def test_no_payment_times_out(self) -> None:
        booking = self._stale_booking("order_abandoned")
        with patch(FETCH_PAYMENTS, return_value=[{"id": "pay_x", "status": "failed"}]):
            tasks.reconcile_stale_payments()

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PAYMENT_FAILED)
        self.assertTrue(Equipment.objects.get(pk=booking.equipment_id).availability)

    def test_stuck_pending_times_out_without_gateway_call(self) -> None:
        booking = self._stale_booking("", status=Booking.Status.PENDING)
        with patch(FETCH_PAYMENTS) as fetch:
            tasks.reconcile_stale_payments()
        fetch.assert_not_called()
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PAYMENT_FAILED)

    def test_gateway_error_leaves_booking_for_next_run(self) -> None:
        booking = self._stale_booking("order_flaky")
        with patch(FETCH_PAYMENTS, side_effect=PaymentGatewayError("timeout")):
            summary = tasks.reconcile_stale_payments()

        self.assertEqual(summary["skipped"], 1)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.AWAITING_PAYMENT)

    def test_recent_sessions_are_left_alone(self) -> None:
        booking = self._stale_booking("order_fresh", minutes_old=5)
        with patch(FETCH_PAYMENTS) as fetch:
            summary = tasks.reconcile_stale_payments()
        fetch.assert_not_called()
        self.assertEqual(summary, {"confirmed": 0, "failed": 0, "skipped": 0})
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.AWAITING_PAYMENT)
