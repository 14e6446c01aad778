"""Email utilities for rendering branded HTML emails with plain-text fallback."""

from __future__ import annotations

import logging
from typing import Sequence

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger("portal")


def render_branded_email(template_name: str, context: dict) -> tuple[str, str]:
    """Render ``{template_name}.txt`` and ``.html`` and return ``(text, html)``."""
    context = {"agency_name": settings.AGENCY_NAME, **context}
    text_body = render_to_string(f"{template_name}.txt", context).strip()
    html_body = render_to_string(f"{template_name}.html", context)
    return text_body, html_body


def send_branded_email(
    *,
    subject: str,
    template_name: str,
    context: dict,
    recipient_list: Sequence[str],
    from_email: str | None = None,
    fail_silently: bool = False,
) -> int:
    """Render and send an HTML email through Django's mail backend.

    Used for account mail (password reset). Client-facing mail goes through
    :func:`notifications.services.send_email` so delivery events are tracked.
    """
    sender = from_email or getattr(settings, "DEFAULT_FROM_EMAIL", None)
    text_body, html_body = render_branded_email(template_name, context)

    msg = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=sender,
        to=list(recipient_list),
    )
    msg.attach_alternative(html_body, "text/html")
    return msg.send(fail_silently=fail_silently)
