"""Receipt API and the payment gateway webhook."""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse  # type: ignore
from django.views.decorators.csrf import csrf_exempt  # type: ignore
from django.views.decorators.http import require_POST  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore

from . import gateway
from .models import Receipt
from .serializers import ReceiptSerializer
from .services import handle_webhook_event

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Razorpay-Signature"


class ReceiptViewSet(viewsets.ReadOnlyModelViewSet):
    """Квитанции текущего пользователя."""

    serializer_class = ReceiptSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return Receipt.objects.select_related("booking", "booking__equipment").filter(
            renter=self.request.user
        )


@csrf_exempt
@require_POST
def payment_gateway_webhook(request):
    """
    Asynchronous payment notifications from the gateway.

    The raw body must carry a valid HMAC signature header before any of
    it is trusted.
    """
    signature = request.headers.get(SIGNATURE_HEADER, "")
    if not gateway.verify_webhook_signature(request.body, signature):
        logger.error("Payment webhook rejected: invalid signature")
        return JsonResponse({"status": "error", "message": "Invalid signature"}, status=400)

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError:
        logger.error("Payment webhook: invalid JSON")
        return JsonResponse({"status": "error", "message": "Invalid JSON"}, status=400)

    if not isinstance(data, dict):
        return JsonResponse({"status": "error", "message": "Invalid payload"}, status=400)

    event = handle_webhook_event(data)
    logger.info("Payment webhook %s processed: %s", event.event, event.outcome)
    return JsonResponse({"status": "ok", "outcome": event.outcome})
