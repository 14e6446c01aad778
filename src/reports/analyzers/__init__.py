"""Automated analyzers producing one :class:`CheckResult` per report category."""
from reports.analyzers.base import CheckResult

ANALYZABLE_TYPES = ("website", "brand_logo", "online_reviews", "competitors")

__all__ = ["ANALYZABLE_TYPES", "CheckResult"]
