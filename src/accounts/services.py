"""Account services: invitations and login tracking."""

from __future__ import annotations

import logging
import ipaddress

from django.conf import settings
from django.contrib.auth.tokens import default_token_generator
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode

from accounts.models import User
from core.services import create_audit_log

logger = logging.getLogger("portal")

INVITE_ROLES = {
    "admin": User.Role.ADMIN,
    "client": User.Role.CLIENT,
}


def build_password_set_url(user: User) -> str:
    """Link used by invited users and password resets to choose a password."""
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    token = default_token_generator.make_token(user)
    base = (getattr(settings, "FRONTEND_URL", "") or "http://localhost:8000").rstrip("/")
    return f"{base}/accounts/reset-password/?uid={uid}&token={token}"


def _split_name(full_name: str) -> tuple[str, str]:
    parts = (full_name or "").strip().split(" ", 1)
    first = parts[0] if parts else ""
    last = parts[1] if len(parts) > 1 else ""
    return first, last


@transaction.atomic
def _create_invited_user(actor, email, full_name, role, company):
    from companies.models import CompanyUser

    first_name, last_name = _split_name(full_name)
    user = User.objects.create_user(
        email=email,
        password=None,
        first_name=first_name,
        last_name=last_name,
        role=role,
        client=company,
        invited_by=actor,
        invited_at=timezone.now(),
    )
    if company is not None:
        CompanyUser.objects.get_or_create(company=company, user=user)

    create_audit_log(
        actor=actor,
        company=company,
        action="USER_INVITED",
        entity_type="User",
        entity_id=str(user.pk),
        after={"email": user.email, "role": user.role},
    )
    return user


def invite_user(
    actor,
    email: str,
    full_name: str = "",
    role: str = "client",
    client_id=None,
) -> User:
    """Create an account for ``email`` and send the invitation email.

    The invitation email is best effort: the account exists even when
    delivery fails.
    """
    from companies.models import Company
    from notifications.services import send_email

    email = (email or "").strip().lower()
    if not email:
        raise ValueError("Email is required")
    role_value = INVITE_ROLES.get((role or "client").lower())
    if role_value is None:
        raise ValueError("Invalid role")
    if User.objects.filter(email__iexact=email).exists():
        raise ValueError("A user with this email already exists")

    company = None
    if client_id:
        company = Company.objects.filter(pk=client_id).first()
        if company is None:
            raise ValueError("Company not found")

    user = _create_invited_user(actor, email, full_name, role_value, company)

    inviter = actor.get_full_name() if actor is not None else ""
    try:
        send_email(
            to=user.email,
            subject=f"You've been invited to the {settings.AGENCY_NAME} client portal",
            template_name="emails/invite",
            context={
                "full_name": full_name or user.email,
                "inviter_name": inviter or settings.AGENCY_NAME,
                "invite_url": build_password_set_url(user),
            },
            template_key="invite",
            company=company,
        )
    except Exception:
        logger.exception("Invite email failed for %s", user.email)

    logger.info("User %s invited as %s by %s", user.email, user.role, actor)
    return user


def record_login(user: User, ip: str | None) -> None:
    """Update login tracking fields after a successful login."""
    try:
        ipaddress.ip_address(ip or "")
    except ValueError:
        ip = None
    User.objects.filter(pk=user.pk).update(
        last_login=timezone.now(),
        last_login_ip=ip,
        login_count=F("login_count") + 1,
    )
