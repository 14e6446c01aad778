"""Shared ``requests`` helpers for third-party REST APIs."""
import logging

import requests
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from integrations.exceptions import IntegrationError

logger = logging.getLogger("portal")


def require_setting(name: str) -> str:
    value = getattr(settings, name, "")
    if not value:
        raise ImproperlyConfigured(f"{name} is not set")
    return value


def request_json(method: str, url: str, *, service: str, timeout=None, **kwargs):
    """Perform an HTTP call and return the decoded JSON body.

    Non-2xx responses raise :class:`IntegrationError` carrying the
    response body so callers can surface the provider's message.
    """
    timeout = timeout or settings.INTEGRATION_TIMEOUT
    try:
        resp = requests.request(method, url, timeout=timeout, **kwargs)
    except requests.RequestException as exc:
        logger.warning("%s request failed: %s %s (%s)", service, method, url, exc)
        raise IntegrationError(f"{service} request failed: {exc}") from exc

    if not resp.ok:
        logger.warning("%s API error %s on %s %s", service, resp.status_code, method, url)
        raise IntegrationError(
            f"{service} API error {resp.status_code}: {resp.text}",
            status_code=resp.status_code,
        )
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError as exc:
        raise IntegrationError(f"{service} returned invalid JSON") from exc
