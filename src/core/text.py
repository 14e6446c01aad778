"""Slug and money formatting helpers."""
import re

_STRIP_RE = re.compile(r"[^a-z0-9\s-]")
_SPACE_RE = re.compile(r"\s+")
_DASH_RE = re.compile(r"-+")


def to_slug(text: str) -> str:
    slug = _STRIP_RE.sub("", (text or "").lower())
    slug = _SPACE_RE.sub("-", slug)
    slug = _DASH_RE.sub("-", slug)
    return slug.strip("-")


def unique_slug(model, text: str, field: str = "slug", exclude_pk=None) -> str:
    """Return ``to_slug(text)`` suffixed with ``-2``, ``-3``... until unused."""
    base = to_slug(text) or "item"
    candidate = base
    index = 2
    qs = model.objects.all()
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    while qs.filter(**{field: candidate}).exists():
        candidate = f"{base}-{index}"
        index += 1
    return candidate


def format_cents(cents) -> str:
    """Format integer cents as dollars, e.g. ``123456`` -> ``$1,234.56``."""
    value = (cents or 0) / 100
    return f"${value:,.2f}"
