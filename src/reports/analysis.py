"""Analyzer dispatch and the opportunities summary written on each report."""
from __future__ import annotations

from reports.analyzers import CheckResult
from reports.analyzers.brand import analyze_brand
from reports.analyzers.competitors import analyze_competitors
from reports.analyzers.reviews import analyze_reviews
from reports.analyzers.website import analyze_website

DEFAULT_OPPORTUNITIES = (
    "Auto-analyzed categories look strong. "
    "Complete manual review for remaining categories to finalize the report."
)


def run_analyzer(report_type: str, company, categories) -> list[CheckResult] | None:
    """Results for ``report_type``, or None when the type cannot run for ``company``."""
    if report_type in ("website", "brand_logo"):
        if not company.website_url:
            return None
        analyzer = analyze_website if report_type == "website" else analyze_brand
        return analyzer(company.website_url)
    if report_type == "online_reviews":
        if not company.name:
            return None
        return analyze_reviews(company.name, company.full_address, list(categories))
    if report_type == "competitors":
        return analyze_competitors(company.name, company.full_address, company.industry_key)
    return None


def generate_opportunities(results: list[CheckResult]) -> str:
    lines = [
        f"**{r.category}:** {r.feedback_summary}"
        for r in results
        if r.is_scored and r.score <= 2 and r.feedback_summary
    ]
    manual = [r.category for r in results if not r.is_scored]
    if manual:
        lines.append(
            f"**Manual review needed:** {', '.join(manual)}. "
            "These categories require manual assessment."
        )
    if not lines:
        return DEFAULT_OPPORTUNITIES
    return "\n\n".join(lines)


def item_fields(result: CheckResult, max_score) -> dict:
    """ReportItem field values for an analyzer result."""
    metadata = result.metadata or {}
    return {
        "status": result.status,
        "score": result.score,
        "rating": metadata.get("rating"),
        "total_reviews": metadata.get("total_reviews"),
        "feedback_summary": result.feedback_summary or "",
        "notes": result.notes or "",
        "metadata": {"maxScore": max_score, **metadata},
    }
