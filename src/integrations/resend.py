"""Resend transactional email API."""
from django.conf import settings

from integrations.http import request_json, require_setting

EMAILS_URL = "https://api.resend.com/emails"


def send(*, to, subject: str, html: str, text: str = "", from_email: str | None = None) -> str:
    """Send one email and return the Resend message id."""
    payload = {
        "from": from_email or settings.RESEND_FROM_EMAIL,
        "to": [to] if isinstance(to, str) else list(to),
        "subject": subject,
        "html": html,
    }
    if text:
        payload["text"] = text
    data = request_json(
        "POST",
        EMAILS_URL,
        service="Resend",
        headers={"Authorization": f"Bearer {require_setting('RESEND_API_KEY')}"},
        json=payload,
    )
    return data.get("id", "")
