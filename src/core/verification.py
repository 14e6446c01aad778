"""Public document tokens and validity windows."""
import uuid
from datetime import date, datetime, time

from django.utils import timezone


def generate_document_token() -> str:
    """Random uuid4 used as the only public lookup key of a document."""
    return str(uuid.uuid4())


def validity_cutoff(valid_until: date) -> datetime:
    """Last instant of ``valid_until`` in the current timezone."""
    return timezone.make_aware(
        datetime.combine(valid_until, time.max),
        timezone.get_current_timezone(),
    )


def is_past_validity(valid_until: date | None, now: datetime | None = None) -> bool:
    """True once ``now`` is later than the end of the ``valid_until`` day."""
    if valid_until is None:
        return False
    now = now or timezone.now()
    return now > validity_cutoff(valid_until)


def build_public_url(kind: str, token: str) -> str:
    """Build the public share link for a proposal or agreement."""
    from django.conf import settings

    base = getattr(settings, "SITE_URL", "http://localhost:8000").rstrip("/")
    return f"{base}/{kind}/{token}/"


SIGNER_EMAIL_MAX_LENGTH = 254


def validate_signer_email(email: str) -> None:
    """Reject an email that would not fit or is not an address. Raises ValueError."""
    from django.core.exceptions import ValidationError
    from django.core.validators import validate_email

    if len(email) > SIGNER_EMAIL_MAX_LENGTH:
        raise ValueError("Email address is too long")
    try:
        validate_email(email)
    except ValidationError:
        raise ValueError("Enter a valid email address")
