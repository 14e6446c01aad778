"""Score to tier conversion and the item -> report -> report set cascade."""
from __future__ import annotations

import logging

from django.db import transaction

from reports.models import Report, ReportSet, Tier

logger = logging.getLogger("portal")

PASS_THRESHOLD = 0.7
FAIR_THRESHOLD = 0.4


def calculate_tier(score, max_score) -> str:
    if not max_score or max_score <= 0:
        return Tier.FAIL
    pct = (score or 0) / max_score
    if pct >= PASS_THRESHOLD:
        return Tier.PASS
    if pct >= FAIR_THRESHOLD:
        return Tier.FAIR
    return Tier.FAIL


def calculate_percentage(score, max_score) -> int:
    if not max_score or max_score <= 0:
        return 0
    return round((score or 0) / max_score * 100)


def tier_label(tier: str) -> str:
    return Tier(tier).label if tier else ""


@transaction.atomic
def recalculate_report_score(report: Report) -> Report:
    """Recompute ``score``, ``max_score`` and ``tier`` from the report's items.

    An item's max comes from its ``metadata.maxScore``, falling back to the
    category max of the report type.
    """
    from reports.config import get_report_config

    report = Report.objects.select_for_update().select_related("report_set__company").get(pk=report.pk)
    config = get_report_config(report.report_type, report.report_set.company.industry_key)
    items = list(report.items.all())

    scored = [item.score for item in items if item.score is not None]
    score = sum(scored) if scored else None

    max_score = 0
    for item in items:
        item_max = item.max_score
        if item_max is None and config is not None:
            item_max = config.category_max(item.category)
        max_score += item_max or 0

    report.score = score
    report.max_score = max_score
    report.tier = calculate_tier(score, max_score) if score is not None else ""
    report.save(update_fields=["score", "max_score", "tier", "updated_at"])
    return report


@transaction.atomic
def recalculate_report_set_score(report_set: ReportSet) -> ReportSet:
    """Roll completed reports up into the set's overall score and status."""
    report_set = ReportSet.objects.select_for_update().get(pk=report_set.pk)
    reports = list(report_set.reports.all())
    completed = [r for r in reports if r.status == Report.Status.COMPLETED]
    any_draft = any(r.status == Report.Status.DRAFT for r in reports)
    all_draft = bool(reports) and all(r.status == Report.Status.DRAFT for r in reports)

    if completed:
        overall = sum(r.score or 0 for r in completed)
        overall_max = sum(r.max_score or 0 for r in completed)
        report_set.overall_score = overall
        report_set.overall_max_score = overall_max
        report_set.overall_tier = calculate_tier(overall, overall_max)
        report_set.status = ReportSet.Status.NEEDS_REVIEW if any_draft else ReportSet.Status.COMPLETED
    elif all_draft:
        report_set.overall_score = None
        report_set.overall_max_score = None
        report_set.overall_tier = ""
        report_set.status = ReportSet.Status.NEEDS_REVIEW

    report_set.save(update_fields=[
        "overall_score", "overall_max_score", "overall_tier", "status", "updated_at",
    ])
    logger.info(
        "Report set %s recalculated: %s/%s (%s)",
        report_set.pk, report_set.overall_score, report_set.overall_max_score, report_set.status,
    )
    return report_set
