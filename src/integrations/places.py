"""Google Places and Yelp Fusion lookups used by the marketing reports."""
from urllib.parse import quote_plus

from django.conf import settings

from integrations.http import request_json

PLACES_BASE = "https://maps.googleapis.com/maps/api"
YELP_SEARCH_URL = "https://api.yelp.com/v3/businesses/search"
PLACES_TIMEOUT = 10


def google_maps_search_url(query: str) -> str:
    return f"https://www.google.com/maps/search/{quote_plus(query)}"


def text_search(query: str) -> dict | None:
    """First Places text-search result for ``query``, or None."""
    data = request_json(
        "GET",
        f"{PLACES_BASE}/place/textsearch/json",
        service="Google Places",
        params={"query": query, "key": settings.GOOGLE_PLACES_API_KEY},
        timeout=PLACES_TIMEOUT,
    )
    results = data.get("results") or []
    return results[0] if results else None


def geocode(address: str) -> dict | None:
    """``{lat, lng}`` for ``address``, or None when it cannot be geocoded."""
    data = request_json(
        "GET",
        f"{PLACES_BASE}/geocode/json",
        service="Google Geocoding",
        params={"address": address, "key": settings.GOOGLE_PLACES_API_KEY},
        timeout=PLACES_TIMEOUT,
    )
    results = data.get("results") or []
    if data.get("status") != "OK" or not results:
        return None
    return results[0]["geometry"]["location"]


def nearby_search(lat: float, lng: float, radius: int, place_type: str) -> list[dict]:
    data = request_json(
        "GET",
        f"{PLACES_BASE}/place/nearbysearch/json",
        service="Google Places",
        params={
            "location": f"{lat},{lng}",
            "radius": radius,
            "type": place_type,
            "key": settings.GOOGLE_PLACES_API_KEY,
        },
        timeout=PLACES_TIMEOUT,
    )
    return data.get("results") or []


def place_details(place_id: str, fields=("website", "types", "formatted_phone_number")) -> dict:
    data = request_json(
        "GET",
        f"{PLACES_BASE}/place/details/json",
        service="Google Places",
        params={"place_id": place_id, "fields": ",".join(fields), "key": settings.GOOGLE_PLACES_API_KEY},
        timeout=PLACES_TIMEOUT,
    )
    return data.get("result") or {}


def yelp_search(term: str, location: str = "") -> dict | None:
    params = {"term": term, "limit": 1}
    if location:
        params["location"] = location
    data = request_json(
        "GET",
        YELP_SEARCH_URL,
        service="Yelp",
        headers={"Authorization": f"Bearer {settings.YELP_FUSION_API_KEY}"},
        params=params,
        timeout=PLACES_TIMEOUT,
    )
    businesses = data.get("businesses") or []
    return businesses[0] if businesses else None
