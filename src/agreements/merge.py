"""Merge-tag substitution for agreement templates."""
from __future__ import annotations

from dataclasses import dataclass, field

from django.conf import settings
from django.utils import timezone

from core.text import format_cents


@dataclass
class MergeItem:
    name: str
    description: str
    quantity: int
    unit_price_cents: int
    billing_frequency: str = ""

    @property
    def subtotal_cents(self) -> int:
        return self.quantity * self.unit_price_cents

    @property
    def is_monthly(self) -> bool:
        return self.billing_frequency == "monthly"


@dataclass
class MergeData:
    client_name: str
    client_address: str = ""
    client_contact_name: str = ""
    client_contact_email: str = ""
    client_phone: str = ""
    total_amount_cents: int = 0
    items: list[MergeItem] = field(default_factory=list)
    effective_date: str = ""

    @classmethod
    def for_proposal(cls, company, proposal, effective_date=None) -> "MergeData":
        items = [
            MergeItem(
                name=item.name,
                description=item.description,
                quantity=item.quantity,
                unit_price_cents=item.unit_price_cents,
                billing_frequency=item.service.billing_frequency if item.service_id else "",
            )
            for item in proposal.items.select_related("service").order_by("sort_order")
        ]
        return cls(
            client_name=company.name,
            client_address=company.address,
            client_contact_name=company.contact_name,
            client_contact_email=company.contact_email,
            client_phone=company.phone,
            total_amount_cents=proposal.total_amount_cents,
            items=items,
            effective_date=format_effective_date(effective_date or timezone.localdate()),
        )


def format_effective_date(value) -> str:
    """``2026-01-05`` -> ``January 5, 2026``."""
    return f"{value:%B} {value.day}, {value.year}"


def _totals(items) -> tuple[int, int]:
    monthly = sum(i.subtotal_cents for i in items if i.is_monthly)
    onetime = sum(i.subtotal_cents for i in items if not i.is_monthly)
    return monthly, onetime


def build_services_table(items) -> str:
    lines = [
        "| Service | Description | Qty | Unit Price | Subtotal |",
        "|---------|-------------|-----|------------|----------|",
    ]
    for item in items:
        suffix = "/mo" if item.is_monthly else ""
        lines.append(
            f"| {item.name} | {item.description or '-'} | {item.quantity} "
            f"| {format_cents(item.unit_price_cents)}{suffix} | {format_cents(item.subtotal_cents)}{suffix} |"
        )
    table = "\n".join(lines)

    monthly, onetime = _totals(items)
    if monthly > 0:
        table += f"\n\n**Monthly Total:** {format_cents(monthly)}/mo"
    if onetime > 0:
        table += f"\n\n**One-Time Total:** {format_cents(onetime)}"
    return table


def merge_template(content: str, data: MergeData) -> str:
    monthly, onetime = _totals(data.items)
    replacements = {
        "{{client_name}}": data.client_name or "",
        "{{client_address}}": data.client_address or "Address on file",
        "{{client_contact_name}}": data.client_contact_name or "",
        "{{client_contact_email}}": data.client_contact_email or "",
        "{{client_phone}}": data.client_phone or "",
        "{{effective_date}}": data.effective_date,
        "{{services_table}}": build_services_table(data.items),
        "{{monthly_total}}": f"{format_cents(monthly)}/mo",
        "{{onetime_total}}": format_cents(onetime),
        "{{total_amount}}": format_cents(data.total_amount_cents),
        "{{company_name}}": settings.AGENCY_LEGAL_NAME,
    }
    merged = content
    for tag, value in replacements.items():
        merged = merged.replace(tag, value)
    return merged
