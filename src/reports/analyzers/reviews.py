"""Listing presence per review platform.

Google and Yelp are looked up through their APIs when keys are configured.
Every other platform gets a search URL for manual verification.
"""
from __future__ import annotations

import logging
from urllib.parse import quote, quote_plus

from django.conf import settings

from integrations import places
from integrations.exceptions import IntegrationError
from reports.analyzers.base import CheckResult

logger = logging.getLogger("portal")


def build_search_url(platform: str, name: str, address: str = "") -> str:
    query = quote(f"{name} {address}" if address else name)
    encoded = quote(name)
    urls = {
        "Healthgrades": f"https://www.healthgrades.com/search?query={encoded}",
        "WebMD": f"https://doctor.webmd.com/results?query={encoded}",
        "Vitals": f"https://www.vitals.com/search?q={encoded}",
        "Facebook": f"https://www.facebook.com/search/pages/?q={encoded}",
        "Apple Maps": f"https://maps.apple.com/?q={query}",
        "Zillow": f"https://www.zillow.com/professionals/{quote('-'.join(name.lower().split()))}",
        "Realtor.com": f"https://www.realtor.com/realestateagents/{encoded}",
        "TripAdvisor": f"https://www.tripadvisor.com/Search?q={encoded}",
        "Airbnb": f"https://www.airbnb.com/s/{encoded}/homes",
        "Vrbo": f"https://www.vrbo.com/search?q={encoded}",
        "Booking.com": f"https://www.booking.com/searchresults.html?ss={encoded}",
    }
    return urls.get(platform) or f"https://www.google.com/search?q={quote(f'{name} {platform}')}"


def _yelp_search_url(name: str, address: str) -> str:
    return f"https://www.yelp.com/search?find_desc={quote_plus(name)}&find_loc={quote_plus(address or '')}"


def analyze_google(name: str, address: str = "") -> CheckResult:
    query = f"{name} {address}" if address else name
    if not settings.GOOGLE_PLACES_API_KEY:
        return CheckResult(
            "Google",
            notes="Google Places API key not configured. Add GOOGLE_PLACES_API_KEY to env.",
            metadata={"searchUrl": places.google_maps_search_url(query), "apiKeyMissing": True},
        )
    try:
        place = places.text_search(query)
    except IntegrationError as exc:
        return CheckResult(
            "Google",
            feedback_summary="Google Places API request failed.",
            notes=str(exc),
            metadata={"searchUrl": places.google_maps_search_url(query)},
        )
    if place is None:
        return CheckResult(
            "Google", "error", 0, "Not found on Google Maps.",
            metadata={"searchUrl": places.google_maps_search_url(query)},
        )
    rating = place.get("rating")
    total = place.get("user_ratings_total")
    return CheckResult(
        "Google", "pass", 1,
        f"Listed on Google Maps. Rating: {rating if rating is not None else 'N/A'}, Reviews: {total or 0}.",
        metadata={
            "name_on_listing": place.get("name", ""),
            "phone_listed": "",
            "address_listed": place.get("formatted_address", ""),
            "rating": rating,
            "total_reviews": total,
            "place_id": place.get("place_id"),
            "searchUrl": f"https://www.google.com/maps/place/?q=place_id:{place.get('place_id')}",
        },
    )


def analyze_yelp(name: str, address: str = "") -> CheckResult:
    if not settings.YELP_FUSION_API_KEY:
        return CheckResult(
            "Yelp",
            notes="Yelp Fusion API key not configured. Add YELP_FUSION_API_KEY to env.",
            metadata={"searchUrl": _yelp_search_url(name, address), "apiKeyMissing": True},
        )
    try:
        business = places.yelp_search(name, address)
    except IntegrationError as exc:
        return CheckResult(
            "Yelp",
            feedback_summary="Yelp API request failed.",
            notes=str(exc),
            metadata={"searchUrl": _yelp_search_url(name, "")},
        )
    if business is None:
        return CheckResult(
            "Yelp", "error", 0, "Not found on Yelp.",
            metadata={"searchUrl": _yelp_search_url(name, address)},
        )
    rating = business.get("rating")
    return CheckResult(
        "Yelp", "pass", 1,
        f"Listed on Yelp. Rating: {rating if rating is not None else 'N/A'}, Reviews: {business.get('review_count') or 0}.",
        metadata={
            "name_on_listing": business.get("name", ""),
            "phone_listed": business.get("phone", ""),
            "address_listed": ", ".join((business.get("location") or {}).get("display_address") or []),
            "rating": rating,
            "total_reviews": business.get("review_count"),
            "yelp_id": business.get("id"),
            "url": business.get("url", ""),
            "searchUrl": business.get("url", ""),
        },
    )


def manual_check(platform: str, name: str, address: str = "") -> CheckResult:
    return CheckResult(
        platform,
        notes="Manual verification required. Use the search URL in metadata to check this platform.",
        metadata={
            "searchUrl": build_search_url(platform, name, address),
            "manualCheck": True,
            "name_on_listing": "",
            "phone_listed": "",
            "address_listed": "",
        },
    )


def analyze_reviews(name: str, address: str, platforms) -> list[CheckResult]:
    address = address or ""
    results = []
    for platform in platforms:
        if platform == "Google":
            results.append(analyze_google(name, address))
        elif platform == "Yelp":
            results.append(analyze_yelp(name, address))
        else:
            results.append(manual_check(platform, name, address))
    return results
