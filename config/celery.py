import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("agrirent")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Payment sessions that never got a callback: ask the gateway or time out
    "reconcile-stale-payments": {
        "task": "bookings.reconcile_stale_payments",
        "schedule": 300.0,
        "options": {"expires": 240},
    },
}

app.conf.timezone = "Asia/Kolkata"
