"""Celery tasks for outgoing email."""
import logging

from celery import shared_task

logger = logging.getLogger("portal")


@shared_task(name="notifications.tasks.send_email_task")
def send_email_task(*, to, subject, template_name, context, template_key, company_id=None):
    """Best-effort send; failures are logged and never retried."""
    from companies.models import Company
    from notifications.services import send_email

    company = Company.objects.filter(pk=company_id).first() if company_id else None
    try:
        log = send_email(
            to=to,
            subject=subject,
            template_name=template_name,
            context=context,
            template_key=template_key,
            company=company,
        )
    except Exception:
        logger.exception("send_email_task failed for %s (%s)", to, template_key)
        return None
    return log.pk
