"""Domain services for the booking lifecycle.

pending → awaiting_payment → paid | payment_failed

Booking creation takes the equipment's ``availability`` flag with a single
conditional UPDATE, so two renters racing for the same listing cannot both
get past it. Client-submitted payment proofs, gateway webhooks and the
reconciliation task all end in :func:`confirm_payment` or
:func:`fail_payment`.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.equipment.models import Equipment
from apps.payments import gateway
from apps.payments.gateway import PaymentGatewayError
from shared.domain.value_objects import DateRange, Money

from .exceptions import (
    BookingValidationError,
    InvalidSignatureError,
    InvalidTransitionError,
    NotFoundError,
    PaymentSessionError,
    UnavailableError,
)
from .models import Booking

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def _date_range(start_date: date, end_date: date) -> DateRange:
    try:
        return DateRange(start_date, end_date)
    except ValueError as exc:
        raise BookingValidationError(
            str(exc),
            field_errors={"end_date": ["End date must not precede start date."]},
        ) from exc


def inclusive_day_count(start_date: date, end_date: date) -> int:
    """Rental days counting both the first and the last day."""
    return _date_range(start_date, end_date).day_count


def calculate_total_price(daily_rate: Money, start_date: date, end_date: date) -> Money:
    return daily_rate * inclusive_day_count(start_date, end_date)


# --- Availability ----------------------------------------------------------


def is_available(
    equipment: Equipment | int,
    start_date: date,
    end_date: date,
) -> bool:
    """True when no holding booking intersects ``[start_date, end_date]``.

    Both ends are inclusive. The caller clamps ``start_date`` to today.
    """

    _date_range(start_date, end_date)
    equipment_id = equipment.pk if isinstance(equipment, Equipment) else equipment

    overlapping = Q(start_date__lte=end_date) & Q(end_date__gte=start_date)
    bookings_qs = Booking.objects.filter(
        equipment_id=equipment_id,
        status__in=Booking.HOLDING_STATUSES,
    ).filter(overlapping)

    bookings_qs = _lock_queryset_if_possible(bookings_qs)
    return not bookings_qs.exists()


def has_active_hold(equipment: Equipment, *, today: date | None = None) -> bool:
    """An in-flight booking, or a paid rental that has not ended yet."""

    today = today or timezone.localdate()
    return Booking.objects.filter(equipment=equipment).filter(
        Q(status__in=Booking.IN_FLIGHT_STATUSES)
        | Q(status=Booking.Status.PAID, end_date__gte=today)
    ).exists()


@transaction.atomic
def set_equipment_availability(equipment: Equipment, available: bool) -> Equipment:
    """Owner toggle of the availability flag."""

    equipment = _lock_queryset_if_possible(Equipment.objects.filter(pk=equipment.pk)).get()
    if available and not equipment.availability and has_active_hold(equipment):
        raise UnavailableError(
            "Equipment cannot be reopened while a booking holds it.",
            equipment_id=equipment.pk,
        )
    Equipment.objects.filter(pk=equipment.pk).update(availability=available)
    equipment.availability = available
    logger.info("Equipment %s availability set to %s by owner", equipment.pk, available)
    return equipment


def _take_equipment(equipment_id: int) -> bool:
    """Atomically flip availability true → false. False when already taken."""
    return bool(Equipment.objects.filter(pk=equipment_id, availability=True).update(availability=False))


def _release_equipment(equipment_id: int) -> None:
    Equipment.objects.filter(pk=equipment_id).update(availability=True)


# --- Lifecycle ---------------------------------------------------------------


def create_booking(renter: "CustomUser", equipment_id: int, start_date: date, end_date: date) -> Booking:
    """Create a booking, hold the equipment and open a payment session.

    Returns the booking in ``awaiting_payment``. On any failure after the
    hold was taken the booking ends in ``payment_failed`` and the equipment
    is released before the error propagates.
    """

    date_range = _date_range(start_date, end_date)
    if date_range.start_date < timezone.localdate():
        raise BookingValidationError(
            "Start date cannot be in the past.",
            field_errors={"start_date": ["Start date cannot be in the past."]},
        )
    if date_range.day_count > settings.BOOKING_MAX_RENTAL_DAYS:
        raise BookingValidationError(
            f"Rentals are limited to {settings.BOOKING_MAX_RENTAL_DAYS} days.",
            field_errors={"end_date": [f"Rentals are limited to {settings.BOOKING_MAX_RENTAL_DAYS} days."]},
        )

    with transaction.atomic():
        equipment = _lock_queryset_if_possible(Equipment.objects.filter(pk=equipment_id)).first()
        if equipment is None:
            raise NotFoundError("Equipment not found.", equipment_id=equipment_id)

        if not equipment.availability or not is_available(equipment, start_date, end_date):
            logger.info(
                "Booking rejected: equipment %s unavailable for %s", equipment.pk, date_range
            )
            raise UnavailableError(equipment_id=equipment.pk)

        booking = Booking.objects.create(
            renter=renter,
            equipment=equipment,
            start_date=start_date,
            end_date=end_date,
            status=Booking.Status.PENDING,
            daily_rate=equipment.daily_rate,
            total_days=date_range.day_count,
            total_price=calculate_total_price(equipment.daily_rate, start_date, end_date),
        )

        if not _take_equipment(equipment.pk):
            # Lost the race to a concurrent booking; the atomic block drops ours.
            logger.info("Booking rejected: equipment %s was taken concurrently", equipment.pk)
            raise UnavailableError(equipment_id=equipment.pk)

    logger.info(
        "Booking %s created for equipment %s, total %s",
        booking.pk,
        equipment.pk,
        booking.total_price,
    )

    try:
        order = gateway.create_order(
            booking.pk,
            booking.total_price.minor_units,
            currency=booking.total_price.currency,
            description=f"Rental of {equipment.name}",
        )
        booking.status = Booking.Status.AWAITING_PAYMENT
        booking.gateway_order_id = order["id"]
        booking.save(update_fields=["status", "gateway_order_id", "updated_at"])
    except PaymentGatewayError as exc:
        _roll_back_hold(booking, f"Payment session failed: {exc}")
        raise PaymentSessionError(booking_id=booking.pk, equipment_id=equipment.pk) from exc
    except Exception:
        logger.exception(
            "Unexpected error opening payment session for booking %s (equipment %s)",
            booking.pk,
            equipment.pk,
        )
        _roll_back_hold(booking, "Internal error while opening payment session")
        raise

    logger.info("Booking %s awaiting payment, order %s", booking.pk, booking.gateway_order_id)
    return booking


@transaction.atomic
def _roll_back_hold(booking: Booking, reason: str) -> None:
    Booking.objects.filter(pk=booking.pk).update(
        status=Booking.Status.PAYMENT_FAILED,
        failure_reason=reason[:255],
        updated_at=timezone.now(),
    )
    _release_equipment(booking.equipment_id)
    booking.status = Booking.Status.PAYMENT_FAILED
    booking.failure_reason = reason[:255]
    logger.warning(
        "Booking %s rolled back, equipment %s released: %s",
        booking.pk,
        booking.equipment_id,
        reason,
    )


def confirm_payment(booking: Booking, payment_id: str) -> Booking:
    """Mark a booking paid and issue its receipt.

    Trusted transition: callers verify the payment first. Confirming an
    already paid booking changes nothing.
    """

    from apps.payments.services import generate_receipt

    with transaction.atomic():
        booking = _lock_queryset_if_possible(
            Booking.objects.select_related("equipment", "renter").filter(pk=booking.pk)
        ).get()

        if booking.status == Booking.Status.PAID:
            if payment_id and payment_id != booking.gateway_payment_id:
                logger.warning(
                    "Booking %s already paid with %s, ignoring payment %s",
                    booking.pk,
                    booking.gateway_payment_id,
                    payment_id,
                )
            else:
                logger.info("Booking %s already paid, confirm is a no-op", booking.pk)
            generate_receipt(booking)
            return booking

        if booking.status != Booking.Status.AWAITING_PAYMENT:
            logger.error(
                "Refusing to confirm booking %s in status %s (equipment %s, payment %s)",
                booking.pk,
                booking.status,
                booking.equipment_id,
                payment_id,
            )
            raise InvalidTransitionError(
                f"Booking in status '{booking.status}' cannot be confirmed.",
                booking_id=booking.pk,
                status=booking.status,
            )

        booking.status = Booking.Status.PAID
        booking.gateway_payment_id = payment_id
        booking.paid_at = timezone.now()
        booking.save(update_fields=["status", "gateway_payment_id", "paid_at", "updated_at"])
        # A paid rental keeps the listing off the marketplace.
        Equipment.objects.filter(pk=booking.equipment_id).update(availability=False)
        generate_receipt(booking)

    logger.info(
        "Booking %s paid (payment %s, equipment %s)",
        booking.pk,
        payment_id,
        booking.equipment_id,
    )
    return booking


def get_booking_for_user(booking_id, user) -> Booking:
    """Booking visible to ``user``; other renters' bookings look missing."""

    booking = Booking.objects.select_related("equipment", "renter").filter(pk=booking_id).first()
    if booking is None:
        raise NotFoundError("Booking not found.", booking_id=booking_id)
    if user is not None and booking.renter_id != user.pk and not user.is_platform_admin():
        raise NotFoundError("Booking not found.", booking_id=booking_id)
    return booking


def verify_and_confirm(booking_id, order_id: str, payment_id: str, signature: str, *, user=None) -> Booking:
    """Check a client-submitted payment proof, then confirm the booking."""

    booking = get_booking_for_user(booking_id, user)

    if not booking.gateway_order_id or order_id != booking.gateway_order_id:
        logger.warning(
            "Payment proof for booking %s names order %s, expected %s",
            booking.pk,
            order_id,
            booking.gateway_order_id,
        )
        raise InvalidSignatureError(booking_id=booking.pk)

    if not gateway.verify_payment_signature(order_id, payment_id, signature):
        logger.warning("Invalid payment signature for booking %s (order %s)", booking.pk, order_id)
        raise InvalidSignatureError(booking_id=booking.pk)

    return confirm_payment(booking, payment_id)


def fail_payment(booking: Booking, reason: str = "Payment failed") -> Booking:
    """Move an unpaid booking to ``payment_failed`` and release the equipment."""

    with transaction.atomic():
        booking = _lock_queryset_if_possible(Booking.objects.filter(pk=booking.pk)).get()
        if booking.status not in Booking.IN_FLIGHT_STATUSES:
            logger.info(
                "Ignoring payment failure for booking %s in status %s", booking.pk, booking.status
            )
            return booking
        _roll_back_hold(booking, reason)
    return booking


def payment_config(booking: Booking) -> dict:
    """Client checkout configuration for the booking's payment session."""

    if booking.status != Booking.Status.AWAITING_PAYMENT:
        raise InvalidTransitionError(
            "Payment is not expected for this booking.",
            booking_id=booking.pk,
            status=booking.status,
        )

    renter = booking.renter
    return {
        "key": settings.PAYMENT_GATEWAY_KEY_ID,
        "amount": booking.total_price.minor_units,
        "currency": booking.total_price.currency,
        "name": settings.PAYMENT_GATEWAY_MERCHANT_NAME,
        "description": f"Rental of {booking.equipment.name}",
        "order_id": booking.gateway_order_id,
        "prefill": {
            "name": renter.get_full_name() or renter.username,
            "email": renter.email,
            "contact": renter.phone or "",
        },
    }


def reconcile_stale_payments(now=None) -> dict[str, int]:
    """Settle bookings whose payment session never reported back.

    A captured payment on the gateway confirms the booking; anything else
    past ``PAYMENT_SESSION_TIMEOUT_MINUTES`` times out to ``payment_failed``.
    Bookings whose gateway lookup fails wait for the next run.
    """

    now = now or timezone.now()
    cutoff = now - timedelta(minutes=settings.PAYMENT_SESSION_TIMEOUT_MINUTES)
    stale = Booking.objects.filter(
        status__in=Booking.IN_FLIGHT_STATUSES,
        created_at__lt=cutoff,
    ).order_by("created_at")

    summary = {"confirmed": 0, "failed": 0, "skipped": 0}
    for booking in stale:
        if booking.status == Booking.Status.AWAITING_PAYMENT and booking.gateway_order_id:
            try:
                payments = gateway.fetch_order_payments(booking.gateway_order_id)
            except PaymentGatewayError as exc:
                logger.warning("Reconciliation skipped booking %s: %s", booking.pk, exc)
                summary["skipped"] += 1
                continue

            captured = next((p for p in payments if p.get("status") == "captured"), None)
            if captured is not None:
                logger.info(
                    "Reconciliation found captured payment %s for booking %s",
                    captured.get("id"),
                    booking.pk,
                )
                confirm_payment(booking, captured.get("id", ""))
                summary["confirmed"] += 1
                continue

        logger.info(
            "Reconciliation timing out booking %s (equipment %s)", booking.pk, booking.equipment_id
        )
        fail_payment(booking, "Payment session timed out")
        summary["failed"] += 1

    return summary
