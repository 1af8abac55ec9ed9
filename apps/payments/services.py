"""Receipt generation and gateway webhook handling."""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction  # type: ignore

from apps.bookings.exceptions import BookingError, InvalidTransitionError
from apps.bookings.models import Booking

from .models import PaymentEvent, Receipt

logger = logging.getLogger(__name__)

CONFIRM_EVENTS = {"payment.captured", "order.paid"}
FAIL_EVENTS = {"payment.failed"}


def generate_receipt(booking: Booking) -> Receipt:
    """Return the booking's receipt, creating it on first call.

    Only paid bookings get receipts; the amount is the booking total.
    """

    if booking.status != Booking.Status.PAID:
        raise InvalidTransitionError(
            "Receipts are issued for paid bookings only.",
            booking_id=booking.pk,
            status=booking.status,
        )

    defaults = {
        "renter_id": booking.renter_id,
        "amount": booking.total_price,
        "status": booking.status,
        "gateway_payment_id": booking.gateway_payment_id,
        "metadata": {
            "equipment_name": booking.equipment.name,
            "start_date": booking.start_date.isoformat(),
            "end_date": booking.end_date.isoformat(),
            "total_days": booking.total_days,
            "payment_method": Receipt.Method.GATEWAY,
            "order_id": booking.gateway_order_id,
        },
    }
    try:
        with transaction.atomic():
            receipt, created = Receipt.objects.get_or_create(booking=booking, defaults=defaults)
    except IntegrityError:
        # Concurrent first call won the insert.
        receipt, created = Receipt.objects.get(booking=booking), False

    if created:
        logger.info("Receipt %s issued for booking %s, amount %s", receipt.pk, booking.pk, receipt.amount)
    return receipt


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _as_str(value) -> str:
    return value if isinstance(value, str) else ""


def _extract_entities(payload: dict) -> tuple[str, str]:
    entities = _as_dict(payload.get("payload"))
    payment = _as_dict(_as_dict(entities.get("payment")).get("entity"))
    order = _as_dict(_as_dict(entities.get("order")).get("entity"))
    order_id = _as_str(payment.get("order_id")) or _as_str(order.get("id"))
    return order_id, _as_str(payment.get("id"))


def handle_webhook_event(payload: dict) -> PaymentEvent:
    """Apply a signature-verified webhook payload to its booking.

    Unknown events and unknown orders are recorded and acknowledged.
    """

    from apps.bookings import services as booking_services

    event_name = _as_str(payload.get("event"))
    order_id, payment_id = _extract_entities(payload)
    booking = Booking.objects.filter(gateway_order_id=order_id).first() if order_id else None

    event = PaymentEvent.objects.create(
        event=event_name[:64],
        booking=booking,
        gateway_order_id=order_id[:64],
        gateway_payment_id=payment_id[:64],
        payload=payload,
    )

    if booking is None:
        event.outcome = "ignored_unknown_order" if order_id else "ignored_no_order"
        logger.warning("Webhook %s for unknown order %r ignored", event_name, order_id)
    elif event_name in CONFIRM_EVENTS:
        try:
            booking_services.confirm_payment(booking, payment_id)
            event.outcome = "confirmed"
        except BookingError as exc:
            # A late success for a failed booking needs a manual refund.
            event.outcome = exc.code
            logger.error(
                "Webhook %s could not confirm booking %s (equipment %s, payment %s): %s",
                event_name,
                booking.pk,
                booking.equipment_id,
                payment_id,
                exc,
            )
    elif event_name in FAIL_EVENTS:
        booking_services.fail_payment(booking, "Payment failed at gateway")
        event.outcome = "failed"
    else:
        event.outcome = "ignored_event"
        logger.info("Webhook event %s acknowledged without action", event_name)

    event.save(update_fields=["outcome"])
    return event
