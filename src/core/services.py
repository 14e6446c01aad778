"""Audit trail helpers shared by every domain service."""
from __future__ import annotations

import ipaddress
import logging
from typing import Any

from core.models import AuditLog

logger = logging.getLogger("portal")


def _valid_ip(ip: str | None) -> str | None:
    if not ip:
        return None
    try:
        ipaddress.ip_address(ip)
    except ValueError:
        return None
    return ip


def create_audit_log(
    actor,
    company,
    action: str,
    entity_type: str,
    entity_id: str,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
    ip: str | None = None,
) -> AuditLog:
    """Create and return a new :class:`~core.models.AuditLog` entry."""
    if actor is not None and not getattr(actor, "is_authenticated", False):
        actor = None
    return AuditLog.objects.create(
        actor=actor,
        company=company,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        before_json=before,
        after_json=after,
        ip_address=_valid_ip(ip),
    )
