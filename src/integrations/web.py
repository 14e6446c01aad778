"""Fetch a public web page for heuristic analysis."""
import time
from dataclasses import dataclass

import requests

from integrations.exceptions import IntegrationError

USER_AGENT = "Mozilla/5.0 (compatible; ClientPortal/1.0; Marketing Analysis)"
FETCH_TIMEOUT = 10


@dataclass
class FetchedPage:
    url: str
    html: str
    response_time_ms: int
    is_https: bool


def normalize_url(url: str) -> str:
    url = (url or "").strip()
    if not url.startswith("http"):
        url = f"https://{url}"
    return url


def fetch_page(url: str) -> FetchedPage:
    url = normalize_url(url)
    start = time.monotonic()
    try:
        resp = requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=FETCH_TIMEOUT,
            allow_redirects=True,
        )
    except requests.RequestException as exc:
        raise IntegrationError(str(exc)) from exc
    elapsed = int((time.monotonic() - start) * 1000)
    if not resp.ok:
        raise IntegrationError(f"HTTP {resp.status_code}", status_code=resp.status_code)
    return FetchedPage(
        url=resp.url,
        html=resp.text,
        response_time_ms=elapsed,
        is_https=resp.url.startswith("https://"),
    )
