"""Nearby competitor discovery and website scoring through Google Places."""
from __future__ import annotations

import logging
import math
import re

from django.conf import settings

from integrations import places
from integrations.exceptions import IntegrationError
from reports.analyzers.base import CheckResult
from reports.analyzers.website import analyze_website

logger = logging.getLogger("portal")

SLOTS = 3
SEARCH_RADIUS_METERS = 16093
EARTH_RADIUS_METERS = 6371000
METERS_PER_MILE = 1609.34

PLACE_TYPES = {
    "dental": "dentist",
    "real-estate": "real_estate_agency",
}

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def empty_metadata() -> dict:
    return {
        "competitor_name": "",
        "distance": "",
        "services_offered": "",
        "website_score": None,
        "website_score_explanation": "",
        "listings_reviews_score": None,
        "listings_review_score_explanation": "",
    }


def haversine_distance(lat1, lng1, lat2, lng2) -> float:
    """Great-circle distance in meters."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _normalize(name: str) -> str:
    return _NON_ALNUM.sub("", (name or "").lower())


def is_same_business(client_name: str, place_name: str) -> bool:
    client, place = _normalize(client_name), _normalize(place_name)
    return client in place or place in client


def find_nearby_competitors(lat, lng, place_type, client_name) -> list[dict]:
    results = places.nearby_search(lat, lng, SEARCH_RADIUS_METERS, place_type)
    candidates = []
    for place in results:
        if is_same_business(client_name, place.get("name", "")):
            continue
        location = (place.get("geometry") or {}).get("location") or {}
        distance = None
        if location.get("lat") is not None and location.get("lng") is not None:
            distance = haversine_distance(lat, lng, location["lat"], location["lng"])
        candidates.append({
            "place_id": place.get("place_id"),
            "name": place.get("name", ""),
            "rating": place.get("rating"),
            "total_reviews": place.get("user_ratings_total"),
            "distance_meters": distance,
        })
        if len(candidates) == 5:
            break
    candidates.sort(key=lambda c: c["distance_meters"] if c["distance_meters"] is not None else float("inf"))
    return candidates[:SLOTS]


def _placeholder_slots(reason: str) -> list[CheckResult]:
    return [
        CheckResult(f"Competitor {n}", notes=reason, metadata=empty_metadata())
        for n in range(1, SLOTS + 1)
    ]


def score_competitor_website(url: str) -> tuple[float | None, str]:
    if not url:
        return None, "No website found."
    results = analyze_website(url)
    scored = [r for r in results if r.is_scored]
    weak = [r.category for r in scored if r.score <= 2]
    if weak:
        explanation = f"Weak areas: {', '.join(weak)}."
    else:
        explanation = f"Strong across {len(scored)} categories."
    return sum(r.score for r in scored), explanation


def analyze_competitors(client_name: str, address: str, industry: str | None) -> list[CheckResult]:
    if not settings.GOOGLE_PLACES_API_KEY:
        return _placeholder_slots("Google Places API key not configured. Add GOOGLE_PLACES_API_KEY to env.")
    if not address:
        return _placeholder_slots("Client address required for competitor search.")

    try:
        coords = places.geocode(address)
    except IntegrationError as exc:
        logger.warning("Geocoding failed for %r: %s", address, exc)
        coords = None
    if not coords:
        return _placeholder_slots("Could not geocode client address.")

    try:
        competitors = find_nearby_competitors(
            coords["lat"], coords["lng"], PLACE_TYPES.get(industry, "establishment"), client_name,
        )
    except IntegrationError as exc:
        logger.warning("Nearby search failed for %r: %s", client_name, exc)
        competitors = []

    results = []
    for index in range(SLOTS):
        slot = f"Competitor {index + 1}"
        if index >= len(competitors):
            results.append(CheckResult(
                slot,
                notes="No competitors found nearby." if index == 0 else "",
                metadata=empty_metadata(),
            ))
            continue

        competitor = competitors[index]
        try:
            details = places.place_details(competitor["place_id"])
        except IntegrationError as exc:
            logger.warning("Place details failed for %s: %s", competitor["place_id"], exc)
            details = {}

        website = details.get("website") or ""
        website_score, explanation = score_competitor_website(website)
        distance = competitor["distance_meters"]
        rating = competitor["rating"]
        listings_score = 1
        results.append(CheckResult(
            slot,
            "pass" if website_score is not None else "neutral",
            1 if website_score is not None else None,
            f"{competitor['name']}: Website {website_score if website_score is not None else '?'}/50, "
            f"Listings {listings_score}/7.",
            metadata={
                "competitor_name": competitor["name"],
                "distance": f"{distance / METERS_PER_MILE:.1f} mi" if distance else "",
                "services_offered": ", ".join(details.get("types") or []),
                "website_score": website_score,
                "website_score_explanation": explanation,
                "listings_reviews_score": listings_score,
                "listings_review_score_explanation": (
                    f"Confirmed on Google Maps ({rating if rating is not None else 'N/A'} rating, "
                    f"{competitor['total_reviews'] or 0} reviews)."
                ),
                "website_url": website,
                "google_place_id": competitor["place_id"],
                "google_rating": rating,
                "google_reviews": competitor["total_reviews"],
            },
        ))
    return results
