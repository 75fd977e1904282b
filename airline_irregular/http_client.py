from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0

# Airline sites reject bare clients, so look like a desktop Chrome.
BROWSER_HEADERS = {
    "accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "accept-language": "ja,en-US;q=0.9,en;q=0.8",
    "cache-control": "no-cache",
    "pragma": "no-cache",
    "priority": "u=0, i",
    "sec-ch-ua": '"Not:A-Brand";v="24", "Chromium";v="134"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"macOS"',
    "sec-fetch-dest": "document",
    "sec-fetch-mode": "navigate",
    "sec-fetch-site": "none",
    "sec-fetch-user": "?1",
    "upgrade-insecure-requests": "1",
}


class FetchError(RuntimeError):
    """Page could not be downloaded."""


def fetch_html(url: str, *, timeout: float = DEFAULT_TIMEOUT_S) -> str:
    """Download *url* and return its body as text."""
    logger.info("Fetching %s", url)
    try:
        resp = requests.get(url, headers=BROWSER_HEADERS, timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(f"Failed to fetch {url}: {exc}") from exc

    if not resp.ok:
        raise FetchError(
            f"Failed to fetch {url}: {resp.status_code} {resp.reason}"
        )

    if "charset" not in resp.headers.get("content-type", "").lower():
        resp.encoding = resp.apparent_encoding
    return resp.text


__all__ = ["BROWSER_HEADERS", "DEFAULT_TIMEOUT_S", "FetchError", "fetch_html"]
