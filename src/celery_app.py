"""Celery application configuration."""

from celery import Celery
from celery.schedules import crontab

from src.config import get_settings

settings = get_settings()

app = Celery(
    "pantrypal",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["src.tasks.expiry_check", "src.tasks.item_scan", "src.tasks.mail_delivery"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.app_timezone,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,  # 4 minutes soft limit
)

# Daily expiry check, run by celery-beat in the app timezone
app.conf.beat_schedule = {
    "daily-expiry-check": {
        "task": "tasks.daily_expiry_check",
        "schedule": crontab(
            hour=settings.expiry_check_hour,
            minute=settings.expiry_check_minute,
        ),
    },
}
