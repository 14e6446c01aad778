"""Outgoing email through Resend, with delivery tracking in EmailLog."""
from __future__ import annotations

import logging

from django.core.exceptions import ImproperlyConfigured
from django.db import transaction

from core.email import render_branded_email
from integrations import resend
from integrations.exceptions import IntegrationError
from notifications.models import EmailLog

logger = logging.getLogger("portal")

RESEND_EVENT_STATUS = {
    "email.delivered": EmailLog.Status.DELIVERED,
    "email.bounced": EmailLog.Status.BOUNCED,
    "email.complained": EmailLog.Status.BOUNCED,
    "email.delivery_delayed": EmailLog.Status.SENT,
}


def log_email(*, to, subject, template, resend_id="", status=EmailLog.Status.SENT, company=None, metadata=None):
    return EmailLog.objects.create(
        to_email=to,
        subject=subject,
        template=template,
        status=status,
        resend_id=resend_id or "",
        company=company,
        metadata=metadata or {},
    )


def send_email(*, to, subject, template_name, context, template_key, company=None) -> EmailLog:
    """Render ``template_name`` and send it through Resend.

    Failures are logged as a ``failed`` EmailLog row and re-raised; callers
    treating the mail as best effort catch them.
    """
    text, html = render_branded_email(template_name, context)
    try:
        resend_id = resend.send(to=to, subject=subject, html=html, text=text)
    except (IntegrationError, ImproperlyConfigured) as exc:
        log_email(
            to=to,
            subject=subject,
            template=template_key,
            status=EmailLog.Status.FAILED,
            company=company,
            metadata={"error": str(exc)},
        )
        raise
    logger.info("Email %s sent to %s (resend id %s)", template_key, to, resend_id)
    return log_email(to=to, subject=subject, template=template_key, resend_id=resend_id, company=company)


def queue_email(*, to, subject, template_name, context, template_key, company=None) -> None:
    """Send through Celery once the current transaction commits."""
    company_id = str(company.pk) if company is not None else None
    context = {key: str(value) if value is not None else "" for key, value in context.items()}

    def _dispatch() -> None:
        try:
            from notifications.tasks import send_email_task

            send_email_task.delay(
                to=to,
                subject=subject,
                template_name=template_name,
                context=context,
                template_key=template_key,
                company_id=company_id,
            )
        except Exception as exc:
            logger.warning("Email dispatch failed for %s (%s): %s", to, template_key, exc, exc_info=True)

    transaction.on_commit(_dispatch)


def apply_resend_event(payload: dict) -> int:
    """Update EmailLog rows from a Resend webhook payload; returns rows updated."""
    event_type = (payload or {}).get("type")
    data = (payload or {}).get("data") or {}
    status = RESEND_EVENT_STATUS.get(event_type)
    email_id = data.get("email_id") if isinstance(data, dict) else None
    if status is None or not email_id:
        return 0
    updated = EmailLog.objects.filter(resend_id=email_id).update(
        status=status,
        metadata={"resend_event": event_type, "timestamp": data.get("created_at")},
    )
    logger.info("Resend event %s for %s updated %d email log(s)", event_type, email_id, updated)
    return updated
