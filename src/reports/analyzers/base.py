from __future__ import annotations

import re
from dataclasses import dataclass, field

PHONE_RE = re.compile(r"(\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4})")
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
IMG_RE = re.compile(r"<img\s", re.IGNORECASE)
ALT_RE = re.compile(r"""alt=["'][^"']+["']""", re.IGNORECASE)


@dataclass
class CheckResult:
    category: str
    status: str = "neutral"
    score: float | None = None
    feedback_summary: str = ""
    notes: str = ""
    metadata: dict = field(default_factory=dict)

    @property
    def is_scored(self) -> bool:
        return self.score is not None


def tier_from_score(score) -> str:
    """Item status for a 1-5 score."""
    if score >= 4:
        return "pass"
    if score >= 3:
        return "warning"
    return "error"


def unreachable(category: str, error: str) -> CheckResult:
    return CheckResult(
        category=category,
        feedback_summary="Could not analyze: website was unreachable.",
        notes=error,
        metadata={"automatable": True, "fetchFailed": True},
    )


def manual(category: str, note: str, fetch_error: str | None = None) -> CheckResult:
    return CheckResult(
        category=category,
        notes=f"Could not fetch website: {fetch_error}" if fetch_error else note,
        metadata={"automatable": False},
    )


def image_stats(html: str) -> dict:
    lower = html.lower()
    image_count = len(IMG_RE.findall(html))
    alt_count = len(ALT_RE.findall(html))
    return {
        "imageCount": image_count,
        "hasAltTags": alt_count,
        "altRatio": alt_count / image_count if image_count else 0,
        "hasLazyLoad": 'loading="lazy"' in lower or "loading='lazy'" in lower,
    }


def image_feedback(stats: dict) -> str:
    count = stats["imageCount"]
    if count >= 5:
        lazy = ", lazy loading enabled" if stats["hasLazyLoad"] else ""
        return f"{count} images found. {round(stats['altRatio'] * 100)}% have alt text{lazy}."
    if count > 0:
        return f"Only {count} image(s) found. Consider adding more visual content."
    return "No images found on the page."
