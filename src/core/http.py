"""Request metadata captured for e-signature audit trails."""
import ipaddress

UNKNOWN = "unknown"


def _valid_ip(value: str) -> str | None:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return str(ipaddress.ip_address(value))
    except ValueError:
        return None


def client_ip(request) -> str:
    """Return the caller's IP as reported by the proxy chain.

    Order: first ``X-Forwarded-For`` entry, ``X-Real-IP``, then the socket
    address. Values that are not IP addresses are skipped. Falls back to
    ``"unknown"``.
    """
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    candidates = (
        forwarded.split(",")[0] if forwarded else "",
        request.META.get("HTTP_X_REAL_IP", ""),
        request.META.get("REMOTE_ADDR", ""),
    )
    for candidate in candidates:
        ip = _valid_ip(candidate)
        if ip:
            return ip
    return UNKNOWN


def user_agent(request) -> str:
    return request.META.get("HTTP_USER_AGENT") or UNKNOWN
