"""Celery application for background maintenance tasks."""
from celery import Celery

from app.core.config import settings

celery_app = Celery(
    "entreefox",
    broker=settings.CELERY_BROKER_URL,
    include=["app.workers.maintenance"],
)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "reconcile-post-counters": {
            "task": "app.workers.maintenance.reconcile_counters",
            "schedule": float(settings.COUNTER_RECONCILE_INTERVAL_SECONDS),
        },
    },
)
