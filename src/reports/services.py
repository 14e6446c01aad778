"""Report set seeding, re-analysis and manual item edits."""
from __future__ import annotations

import logging

from django.db import transaction

from core.services import create_audit_log
from reports.analysis import generate_opportunities, item_fields, run_analyzer
from reports.analyzers import ANALYZABLE_TYPES
from reports.config import get_report_config, get_report_configs
from reports.models import Report, ReportItem, ReportSet
from reports.scoring import calculate_tier, recalculate_report_score, recalculate_report_set_score

logger = logging.getLogger("portal")

EDITABLE_ITEM_FIELDS = ("status", "score", "rating", "total_reviews", "feedback_summary", "notes", "metadata")


class ReportSetExists(ValueError):
    def __init__(self, report_set_id):
        super().__init__("Report set already exists for this client")
        self.report_set_id = report_set_id


class AnalysisFailed(Exception):
    pass


def _report_status(results) -> str:
    if results is None:
        return Report.Status.DRAFT
    if any(not r.is_scored for r in results):
        return Report.Status.IN_PROGRESS
    return Report.Status.COMPLETED


def _seed_items(report: Report, config, results) -> list[ReportItem]:
    by_category = {r.category: r for r in results or []}
    rows = []
    for index, template in enumerate(config.categories):
        result = by_category.get(template.category)
        if result is not None:
            fields = item_fields(result, template.max_score)
        elif results is not None:
            fields = {"status": ReportItem.Status.NEUTRAL, "metadata": {"maxScore": template.max_score}}
        else:
            fields = {
                "status": ReportItem.Status.NEUTRAL,
                "metadata": {"maxScore": template.max_score, **template.default_metadata},
            }
        rows.append(ReportItem(report=report, category=template.category, sort_order=index, **fields))
    return ReportItem.objects.bulk_create(rows)


def seed_report_set(company, actor=None) -> dict:
    """Create the company's report set and pre-fill what the analyzers can.

    Analyzer calls happen outside any transaction; a failing analyzer leaves
    its report as a draft.
    """
    existing = ReportSet.objects.filter(company=company).values_list("pk", flat=True).first()
    if existing:
        raise ReportSetExists(existing)

    configs = get_report_configs(company.industry_key)
    analyzed = []
    for config in configs:
        try:
            results = run_analyzer(config.type, company, [c.category for c in config.categories])
        except Exception:
            logger.exception("%s analysis failed for %s; report left as draft", config.type, company.slug)
            results = None
        analyzed.append((config, results))

    items_created = 0
    with transaction.atomic():
        report_set = ReportSet.objects.create(company=company, status=ReportSet.Status.IN_PROGRESS)
        for config, results in analyzed:
            scored = [r.score for r in results or [] if r.is_scored]
            score = sum(scored) if scored else None
            report = Report.objects.create(
                report_set=report_set,
                report_type=config.type,
                status=_report_status(results),
                score=score,
                max_score=config.max_score,
                tier=calculate_tier(score, config.max_score) if score is not None else "",
                opportunities_text=generate_opportunities(results) if results is not None else "",
            )
            items_created += len(_seed_items(report, config, results))

        create_audit_log(
            actor=actor,
            company=company,
            action="REPORT_SET_CREATED",
            entity_type="ReportSet",
            entity_id=str(report_set.pk),
            after={"reports": len(analyzed), "items": items_created},
        )

    recalculate_report_set_score(report_set)
    logger.info("Report set %s seeded for %s (%d reports)", report_set.pk, company.slug, len(analyzed))
    return {
        "report_set_id": report_set.pk,
        "slug": company.slug,
        "reports_created": len(analyzed),
        "items_created": items_created,
    }


def analyze_report(report: Report, report_type: str, actor=None) -> dict:
    """Re-run the analyzer of ``report`` and overwrite items that got a score."""
    if report_type not in ANALYZABLE_TYPES:
        raise ValueError(f'Report type "{report_type}" does not support auto-analysis')
    company = report.report_set.company
    if report_type in ("website", "brand_logo") and not company.website_url:
        raise ValueError("Client has no website URL")

    items = list(report.items.order_by("sort_order"))
    try:
        results = run_analyzer(report_type, company, [item.category for item in items])
    except Exception as exc:
        logger.exception("Analysis of report %s failed", report.pk)
        raise AnalysisFailed(str(exc)) from exc

    config = get_report_config(report_type, company.industry_key)
    by_category = {r.category: r for r in results or []}
    updated = 0
    with transaction.atomic():
        for item in items:
            result = by_category.get(item.category)
            if result is None or not result.is_scored:
                continue
            max_score = (config.category_max(item.category) if config else None) or item.max_score or 5
            for field, value in item_fields(result, max_score).items():
                setattr(item, field, value)
            item.save()
            updated += 1
        create_audit_log(
            actor=actor,
            company=company,
            action="REPORT_ANALYZED",
            entity_type="Report",
            entity_id=str(report.pk),
            after={"report_type": report_type, "updated": updated},
        )

    recalculate_report_score(report)
    recalculate_report_set_score(report.report_set)
    return {"updated": updated, "total": len(items)}


def update_report_item(item: ReportItem, actor=None, **changes) -> ReportItem:
    """Apply an admin edit to an item and cascade the score recalculation."""
    with transaction.atomic():
        before = {field: getattr(item, field) for field in EDITABLE_ITEM_FIELDS if field in changes}
        for field, value in changes.items():
            if field not in EDITABLE_ITEM_FIELDS:
                continue
            if field == "metadata":
                value = {**(item.metadata or {}), **(value or {})}
            setattr(item, field, value)
        item.save()
        create_audit_log(
            actor=actor,
            company=item.report.report_set.company,
            action="REPORT_ITEM_UPDATED",
            entity_type="ReportItem",
            entity_id=str(item.pk),
            before=before,
            after={field: getattr(item, field) for field in before},
        )
    recalculate_report_score(item.report)
    recalculate_report_set_score(item.report.report_set)
    return item
