"""Celery configuration."""
import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "config.settings.prod"),
)

app = Celery("portal")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

# Beat schedule
app.conf.beat_schedule = {
    "expire-overdue-proposals": {
        "task": "proposals.tasks.expire_overdue_proposals",
        "schedule": crontab(minute=5, hour=0),  # Daily just after midnight
    },
    "expire-overdue-agreements": {
        "task": "agreements.tasks.expire_overdue_agreements",
        "schedule": crontab(minute=10, hour=0),  # Daily just after midnight
    },
}
