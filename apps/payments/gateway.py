"""
Payment gateway adapter (Razorpay orders API).

Amounts cross this boundary in paise, the same minor unit the rest of the
system stores, so no conversion happens here. When
``PAYMENT_GATEWAY_EMULATE`` is set the adapter fabricates order ids
instead of calling the gateway, for offline development.
"""

import hashlib
import hmac
import logging
import uuid

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Transport or API failure talking to the payment gateway."""

    pass


def _config(name: str, default=None):
    return getattr(settings, name, default)


def _emulated() -> bool:
    return bool(_config("PAYMENT_GATEWAY_EMULATE", False))


def _auth() -> tuple:
    return (_config("PAYMENT_GATEWAY_KEY_ID", ""), _config("PAYMENT_GATEWAY_KEY_SECRET", ""))


def _url(path: str) -> str:
    return f"{_config('PAYMENT_GATEWAY_API_BASE_URL', 'https://api.razorpay.com/v1/')}{path}"


def _hmac_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def create_order(booking_id: int, amount: int, currency: str = "INR", description: str = "") -> dict:
    """
    Creates a payment order for a booking.

    Args:
        booking_id: ID бронирования в нашей системе
        amount: Amount in minor units (paise)
        currency: Currency code
        description: Free-form description stored in order notes

    Returns:
        dict: the gateway order, at least ``id``, ``amount``, ``currency``
    """
    logger.info("Creating gateway order for booking %s, amount %s %s", booking_id, amount, currency)

    if _emulated():
        logger.warning("Payment gateway emulation is enabled, no request sent")
        return {
            "id": f"order_emu_{uuid.uuid4().hex[:14]}",
            "amount": amount,
            "currency": currency,
            "receipt": f"booking_{booking_id}",
            "status": "created",
        }

    payload = {
        "amount": amount,
        "currency": currency,
        "receipt": f"booking_{booking_id}",
        "notes": {"booking_id": str(booking_id), "description": description},
    }

    try:
        response = requests.post(
            _url("orders"),
            json=payload,
            auth=_auth(),
            timeout=_config("PAYMENT_GATEWAY_TIMEOUT", 30),
        )
        response.raise_for_status()
        order = response.json()
    except requests.exceptions.RequestException as e:
        logger.error("Gateway order request failed for booking %s: %s", booking_id, e)
        raise PaymentGatewayError(f"Gateway connection error: {e}") from e
    except ValueError as e:
        logger.error("Gateway returned a non-JSON order response for booking %s", booking_id)
        raise PaymentGatewayError("Malformed gateway response") from e

    if not order.get("id"):
        error = order.get("error", {}).get("description", "Unknown error")
        logger.error("Gateway refused order for booking %s: %s", booking_id, error)
        raise PaymentGatewayError(f"Gateway error: {error}")

    logger.info("Gateway order %s created for booking %s", order["id"], booking_id)
    return order


def fetch_order_payments(order_id: str) -> list:
    """Returns the payments the gateway recorded against an order."""
    logger.info("Fetching payments for gateway order %s", order_id)

    if _emulated():
        return []

    try:
        response = requests.get(
            _url(f"orders/{order_id}/payments"),
            auth=_auth(),
            timeout=_config("PAYMENT_GATEWAY_TIMEOUT", 30),
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        logger.error("Gateway payments lookup failed for order %s: %s", order_id, e)
        raise PaymentGatewayError(f"Gateway connection error: {e}") from e
    except ValueError as e:
        raise PaymentGatewayError("Malformed gateway response") from e

    return data.get("items", [])


def verify_payment_signature(order_id: str, payment_id: str, signature: str) -> bool:
    """Checks the client-side checkout signature: HMAC-SHA256 of ``order_id|payment_id``."""
    secret = _config("PAYMENT_GATEWAY_KEY_SECRET", "")
    if not secret or not signature:
        return False
    expected = _hmac_hex(secret, f"{order_id}|{payment_id}".encode("utf-8"))
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


def verify_webhook_signature(raw_body: bytes, signature: str) -> bool:
    """Checks the webhook signature header: HMAC-SHA256 of the raw body."""
    secret = _config("PAYMENT_GATEWAY_WEBHOOK_SECRET", "")
    if not secret or not signature:
        return False
    expected = _hmac_hex(secret, raw_body)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
