"""Heuristic brand audit across the ten Brand/Logo Report categories."""
from __future__ import annotations

import logging
import re

from integrations.exceptions import IntegrationError
from integrations.web import fetch_page
from reports.analyzers.base import (
    CheckResult,
    image_feedback,
    image_stats,
    manual,
    tier_from_score,
    unreachable,
)

logger = logging.getLogger("portal")

LOGO_IMG_RE = re.compile(r"<img[^>]*(logo|brand)[^>]*>", re.IGNORECASE)
SVG_RE = re.compile(r"<svg[^>]*>[\s\S]*?</svg>", re.IGNORECASE)
HEX_RE = re.compile(r"#[0-9a-fA-F]{3,8}\b")
RGB_RE = re.compile(r"rgba?\([^)]+\)", re.IGNORECASE)
CSS_PROP_RE = re.compile(r"--[\w-]+")
FONT_RE = re.compile(r"font-family\s*:\s*([^;}]+)", re.IGNORECASE)

SOCIAL_PLATFORMS = (
    ("Facebook", re.compile(r"facebook\.com")),
    ("Instagram", re.compile(r"instagram\.com")),
    ("Twitter/X", re.compile(r"(?:twitter\.com|x\.com)")),
    ("LinkedIn", re.compile(r"linkedin\.com")),
    ("YouTube", re.compile(r"youtube\.com")),
    ("TikTok", re.compile(r"tiktok\.com")),
)

MANUAL_NOTES = {
    "Logo Consistency": "Requires visual comparison of logo usage across multiple pages.",
    "Logo Legibility": "Requires visual assessment of logo clarity at different sizes.",
    "Brand Voice & Messaging": "Requires manual assessment of tone, messaging consistency, and brand personality.",
    "Signage & Onsite Branding": "Requires physical assessment of signage and in-office branding.",
    "Overall Brand Cohesion": "Subjective assessment of overall brand consistency across all touchpoints.",
}

CATEGORY_ORDER = (
    "Logo Usage",
    "Logo Consistency",
    "Logo Legibility",
    "Color Palette",
    "Typography",
    "Photography & Imagery",
    "Brand Voice & Messaging",
    "Social Media Branding",
    "Signage & Onsite Branding",
    "Overall Brand Cohesion",
)


def check_logo(html: str) -> CheckResult:
    lower = html.lower()
    logo_imgs = len(LOGO_IMG_RE.findall(html))
    has_svg_logo = bool(SVG_RE.search(html)) and ("logo" in lower or "brand" in lower)
    has_favicon = 'rel="icon"' in lower or "rel='icon'" in lower or 'rel="shortcut icon"' in lower
    has_touch_icon = 'rel="apple-touch-icon"' in lower
    has_logo = logo_imgs > 0 or has_svg_logo

    score = 1
    if has_logo:
        score = 3
        if has_favicon:
            score = 5 if has_touch_icon else 4

    if logo_imgs:
        logo_text = f"{logo_imgs} logo image(s) found"
    elif has_svg_logo:
        logo_text = "SVG logo detected"
    else:
        logo_text = "No logo image detected"
    parts = [logo_text, "favicon present" if has_favicon else "no favicon"]
    if has_touch_icon:
        parts.append("Apple touch icon present")
    return CheckResult(
        "Logo Usage", tier_from_score(score), score, ", ".join(parts) + ".",
        metadata={
            "logoImgs": logo_imgs,
            "hasSvgLogo": has_svg_logo,
            "hasFavicon": has_favicon,
            "hasAppleTouchIcon": has_touch_icon,
        },
    )


def check_colors(html: str) -> CheckResult:
    hex_colors = {h.lower() for h in HEX_RE.findall(html)}
    rgb_colors = {r.lower() for r in RGB_RE.findall(html)}
    custom_props = set(CSS_PROP_RE.findall(html))
    total = len(hex_colors) + len(rgb_colors)
    has_props = len(custom_props) > 5

    if has_props:
        score = 5 if total < 15 else 4
    elif total < 10:
        score = 3
    elif total < 20:
        score = 2
    else:
        score = 1

    if has_props:
        props_text = f"{len(custom_props)} CSS custom properties found (signals systematic design)."
    else:
        props_text = "No CSS custom properties; colors may be hardcoded."
    return CheckResult(
        "Color Palette", tier_from_score(score), score,
        f"{total} unique colors detected. {props_text}",
        metadata={
            "hexColorCount": len(hex_colors),
            "rgbColorCount": len(rgb_colors),
            "cssCustomPropCount": len(custom_props),
            "totalUniqueColors": total,
        },
    )


def check_typography(html: str) -> CheckResult:
    lower = html.lower()
    families = []
    for value in FONT_RE.findall(html):
        primary = value.split(",")[0].replace('"', "").replace("'", "").strip().lower()
        if primary and primary not in ("inherit", "initial", "unset") and primary not in families:
            families.append(primary)

    has_google = "fonts.googleapis.com" in lower
    has_adobe = "use.typekit.net" in lower or "fonts.adobe.com" in lower
    has_font_face = "@font-face" in lower
    has_web_font = has_google or has_adobe or has_font_face
    count = len(families)

    if count <= 2 and has_web_font:
        score = 5
    elif count <= 3 and has_web_font:
        score = 4
    elif count <= 3:
        score = 3
    elif count <= 5:
        score = 2
    else:
        score = 1

    noun = "family" if count == 1 else "families"
    loading = " with web font loading" if has_web_font else " (no web fonts)"
    advice = "Consider reducing for consistency." if count > 3 else "Good typographic discipline."
    return CheckResult(
        "Typography", tier_from_score(score), score,
        f"{count} font {noun} detected{loading}. {advice}",
        notes=f"Fonts: {', '.join(families)}" if families else "",
        metadata={
            "fontFamilies": families,
            "hasGoogleFonts": has_google,
            "hasAdobeFonts": has_adobe,
            "hasFontFace": has_font_face,
        },
    )


def check_imagery(html: str) -> CheckResult:
    stats = image_stats(html)
    count = stats["imageCount"]
    ratio = stats["altRatio"]
    if count >= 5:
        score = 4 if ratio > 0.7 else 3
    else:
        score = 2 if count > 0 else 1
    if count >= 10 and ratio > 0.8 and stats["hasLazyLoad"]:
        score = 5
    return CheckResult(
        "Photography & Imagery", tier_from_score(score), score, image_feedback(stats), metadata=stats,
    )


def check_social(html: str) -> CheckResult:
    lower = html.lower()
    found = [name for name, pattern in SOCIAL_PLATFORMS if pattern.search(lower)]
    count = len(found)
    if count >= 4:
        score = 5
    elif count >= 3:
        score = 4
    elif count >= 2:
        score = 3
    elif count >= 1:
        score = 2
    else:
        score = 1
    feedback = (
        f"{count} social platform links found: {', '.join(found)}."
        if found
        else "No social media links detected on the website."
    )
    return CheckResult(
        "Social Media Branding", tier_from_score(score), score, feedback,
        metadata={"foundPlatforms": found, "totalFound": count},
    )


AUTO_CHECKS = {
    "Logo Usage": check_logo,
    "Color Palette": check_colors,
    "Typography": check_typography,
    "Photography & Imagery": check_imagery,
    "Social Media Branding": check_social,
}


def analyze_brand_html(html: str) -> list[CheckResult]:
    results = []
    for category in CATEGORY_ORDER:
        check = AUTO_CHECKS.get(category)
        results.append(check(html) if check else manual(category, MANUAL_NOTES[category]))
    return results


def analyze_brand(url: str) -> list[CheckResult]:
    try:
        page = fetch_page(url)
    except IntegrationError as exc:
        error = str(exc) or "Failed to fetch"
        logger.warning("Brand analysis could not fetch %s: %s", url, error)
        return [
            unreachable(category, error) if category in AUTO_CHECKS else manual(category, "", error)
            for category in CATEGORY_ORDER
        ]
    return analyze_brand_html(page.html)
