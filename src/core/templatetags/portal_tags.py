"""Custom template tags."""
from django import template

from core.text import format_cents

register = template.Library()


@register.filter
def cents(value):
    """Format integer cents as dollars."""
    try:
        return format_cents(int(value))
    except (ValueError, TypeError):
        return format_cents(0)


@register.filter
def percentage(value):
    """Format as percentage."""
    try:
        return f"{float(value):.0f}%"
    except (ValueError, TypeError):
        return "0%"


@register.filter
def status_badge(status):
    """Return CSS classes for status badges."""
    badges = {
        "draft": "bg-gray-100 text-gray-800",
        "sent": "bg-blue-100 text-blue-800",
        "viewed": "bg-indigo-100 text-indigo-800",
        "accepted": "bg-green-100 text-green-800",
        "signed": "bg-green-100 text-green-800",
        "declined": "bg-red-100 text-red-800",
        "expired": "bg-orange-100 text-orange-800",
        "open": "bg-yellow-100 text-yellow-800",
        "paid": "bg-green-100 text-green-800",
        "void": "bg-gray-100 text-gray-800",
        "active": "bg-green-100 text-green-800",
        "not_started": "bg-gray-100 text-gray-800",
        "on_hold": "bg-orange-100 text-orange-800",
        "completed": "bg-blue-100 text-blue-800",
    }
    return badges.get(status, "bg-gray-100 text-gray-800")
