"""Heuristic website audit across the ten Website Report categories.

Overall Design, Content Clarity and Branding Consistency need a human eye
and are returned unscored.
"""
from __future__ import annotations

import logging
import re

from integrations.exceptions import IntegrationError
from integrations.web import fetch_page
from reports.analyzers.base import (
    EMAIL_RE,
    PHONE_RE,
    CheckResult,
    image_feedback,
    image_stats,
    manual,
    tier_from_score,
    unreachable,
)

logger = logging.getLogger("portal")

TITLE_RE = re.compile(r"<title[^>]*>([^<]*)</title>", re.IGNORECASE)
DESC_RES = (
    re.compile(r"""<meta[^>]*name=["']description["'][^>]*content=["']([^"']*)["']""", re.IGNORECASE),
    re.compile(r"""<meta[^>]*content=["']([^"']*)["'][^>]*name=["']description["']""", re.IGNORECASE),
)
LINK_RE = re.compile(r"<a\s", re.IGNORECASE)
SCRIPT_RE = re.compile(r"<script", re.IGNORECASE)
SOCIAL_DOMAINS = (
    "facebook.com",
    "instagram.com",
    "twitter.com",
    "x.com",
    "linkedin.com",
    "youtube.com",
    "tiktok.com",
)


def check_mobile(html: str) -> CheckResult:
    lower = html.lower()
    has_viewport = 'name="viewport"' in lower or "name='viewport'" in lower
    has_media = "@media" in lower and ("max-width" in lower or "min-width" in lower)
    score = (4 if has_media else 3) if has_viewport else 1
    if not has_viewport:
        feedback = "No viewport meta tag found. Site may not display correctly on mobile devices."
    elif has_media:
        feedback = "Viewport meta tag and responsive media queries detected."
    else:
        feedback = "Viewport meta tag found, but limited responsive CSS detected."
    return CheckResult(
        "Mobile Responsiveness", tier_from_score(score), score, feedback,
        metadata={"hasViewport": has_viewport, "hasMediaQueries": has_media},
    )


def check_navigation(html: str) -> CheckResult:
    lower = html.lower()
    has_nav = "<nav" in lower or 'role="navigation"' in lower
    link_count = len(LINK_RE.findall(html))
    has_footer = "<footer" in lower
    score = (4 if link_count > 5 and has_footer else 3) if has_nav else 2
    if has_nav:
        footer = " and footer navigation" if has_footer else ""
        feedback = f"Navigation element found with {link_count} links{footer}."
    else:
        feedback = "No semantic <nav> element found. Navigation structure may need improvement."
    return CheckResult(
        "Navigation", tier_from_score(score), score, feedback,
        metadata={"hasNav": has_nav, "linkCount": link_count, "hasFooter": has_footer},
    )


def check_booking(html: str) -> CheckResult:
    lower = html.lower()
    has_form = "<form" in lower
    has_booking = any(word in lower for word in ("book", "schedule", "appointment"))
    has_phone = bool(PHONE_RE.search(html))
    if has_form:
        score = 4 if has_booking else 3
        feedback = (
            "Contact/booking form detected with appointment-related content."
            if has_booking
            else "Contact form found, but no booking-specific functionality detected."
        )
    elif has_phone:
        score = 2
        feedback = "Phone number found but no online booking/inquiry form."
    else:
        score = 1
        feedback = "No contact form or booking system detected."
    return CheckResult(
        "Booking/Inquiries", tier_from_score(score), score, feedback,
        metadata={"hasForm": has_form, "hasBooking": has_booking, "hasPhone": has_phone},
    )


def check_photos(html: str) -> CheckResult:
    stats = image_stats(html)
    count = stats["imageCount"]
    if count >= 5:
        score = 4 if stats["altRatio"] > 0.7 else 3
    else:
        score = 2 if count > 0 else 1
    return CheckResult("Photos & Media", tier_from_score(score), score, image_feedback(stats), metadata=stats)


def check_seo(html: str) -> CheckResult:
    lower = html.lower()
    title_match = TITLE_RE.search(html)
    title = title_match.group(1).strip() if title_match else ""
    desc_match = next((m for m in (r.search(html) for r in DESC_RES) if m), None)
    has_desc = bool(desc_match and desc_match.group(1).strip())
    has_h1 = "<h1" in lower
    has_structured = "application/ld+json" in lower or "itemtype=" in lower
    has_canonical = 'rel="canonical"' in lower or "rel='canonical'" in lower

    score = 1 + sum((bool(title), has_desc, has_h1, has_structured or has_canonical))
    feedback = ", ".join([
        "Page title present" if title else "Missing page title",
        "meta description present" if has_desc else "missing meta description",
        "H1 heading found" if has_h1 else "no H1 heading",
        "structured data found" if has_structured else "no structured data",
    ]) + "."
    return CheckResult(
        "SEO Optimization", tier_from_score(score), score, feedback,
        notes=f'Title: "{title[:80]}"' if title else "",
        metadata={
            "hasTitle": bool(title),
            "hasDesc": has_desc,
            "hasH1": has_h1,
            "hasStructured": has_structured,
            "hasCanonical": has_canonical,
            "title": title or None,
        },
    )


def check_speed(html: str, response_time_ms: int) -> CheckResult:
    page_kb = round(len(html) / 1024)
    script_count = len(SCRIPT_RE.findall(html))
    if response_time_ms < 1000:
        score = 5
    elif response_time_ms < 2000:
        score = 4
    elif response_time_ms < 3000:
        score = 3
    elif response_time_ms < 5000:
        score = 2
    else:
        score = 1
    if script_count > 20:
        score = max(1, score - 1)
    if page_kb > 500:
        score = max(1, score - 1)
    return CheckResult(
        "Speed & Performance", tier_from_score(score), score,
        f"Response time: {response_time_ms}ms. Page size: {page_kb}KB. {script_count} script tags.",
        metadata={"responseTimeMs": response_time_ms, "pageSizeKB": page_kb, "scriptCount": script_count},
    )


def check_trust(html: str, is_https: bool) -> CheckResult:
    lower = html.lower()
    has_phone = bool(PHONE_RE.search(html))
    has_email = bool(EMAIL_RE.search(html))
    socials = [domain for domain in SOCIAL_DOMAINS if domain in lower]
    has_og_image = 'property="og:image"' in lower or "property='og:image'" in lower

    score = 1 + sum((is_https, has_phone or has_email, len(socials) >= 2, has_og_image))
    feedback = ", ".join([
        "SSL active" if is_https else "No SSL",
        "phone visible" if has_phone else "no phone",
        "email visible" if has_email else "no email",
        f"{len(socials)} social links" if socials else "no social links",
    ]) + "."
    return CheckResult(
        "Trust Signals", tier_from_score(score), score, feedback,
        metadata={
            "isHttps": is_https,
            "hasPhone": has_phone,
            "hasEmail": has_email,
            "foundSocials": socials,
            "hasOgImage": has_og_image,
        },
    )


def analyze_html(html: str, response_time_ms: int, is_https: bool) -> list[CheckResult]:
    return [
        manual("Overall Design", "Requires manual visual assessment."),
        check_mobile(html),
        check_navigation(html),
        manual("Content Clarity", "Requires manual content review."),
        check_booking(html),
        check_photos(html),
        check_seo(html),
        check_speed(html, response_time_ms),
        manual("Branding Consistency", "Requires visual comparison across multiple pages."),
        check_trust(html, is_https),
    ]


def analyze_website(url: str) -> list[CheckResult]:
    """Fetch ``url`` and score it; an unreachable site yields unscored placeholders."""
    try:
        page = fetch_page(url)
    except IntegrationError as exc:
        error = str(exc) or "Failed to fetch"
        logger.warning("Website analysis could not fetch %s: %s", url, error)
        return [
            manual("Overall Design", "", error),
            unreachable("Mobile Responsiveness", error),
            unreachable("Navigation", error),
            manual("Content Clarity", "", error),
            unreachable("Booking/Inquiries", error),
            unreachable("Photos & Media", error),
            unreachable("SEO Optimization", error),
            unreachable("Speed & Performance", error),
            manual("Branding Consistency", "", error),
            unreachable("Trust Signals", error),
        ]
    return analyze_html(page.html, page.response_time_ms, page.is_https)
