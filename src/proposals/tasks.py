"""Celery tasks for proposals."""
from celery import shared_task


@shared_task(name="proposals.tasks.expire_overdue_proposals")
def expire_overdue_proposals():
    from proposals.services import expire_overdue_proposals as _expire

    return _expire()
