"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import reconcile_stale_payments as reconcile

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (запускаются автоматически через Celery Beat)
# ============================================================================

@shared_task(name="bookings.reconcile_stale_payments")
def reconcile_stale_payments() -> dict[str, int]:
    """
    Сверка зависших оплат с платёжным шлюзом.

    Bookings left in ``pending``/``awaiting_payment`` past the payment
    session timeout are either confirmed (captured payment found) or
    failed and their equipment released.

    Returns:
        dict: {"confirmed": ..., "failed": ..., "skipped": ...}
    """
    summary = reconcile()
    if any(summary.values()):
        logger.info("Stale payment reconciliation: %s", summary)
    return summary
