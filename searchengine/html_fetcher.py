"""
Fetches HTML pages over HTTP(S), following a limited number of redirects.
"""

import logging
from urllib.parse import urljoin

import requests

from .config import DEFAULT_REDIRECTS, FETCH_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

HEADERS = {"User-Agent": USER_AGENT}


def is_html(response: requests.Response) -> bool:
    return response.headers.get("Content-Type", "").lower().startswith("text/html")


def is_redirect(response: requests.Response) -> bool:
    return 300 <= response.status_code < 400 and "Location" in response.headers


def fetch_html(url: str, redirects: int = DEFAULT_REDIRECTS, timeout: float = FETCH_TIMEOUT) -> str | None:
    """
    Return the body of url if it is an HTML page served with status 200.
    Redirects are followed while redirects > 0. Returns None for any other
    response, or if the request fails.
    """
    while True:
        try:
            response = requests.get(
                url, headers=HEADERS, timeout=timeout, allow_redirects=False
            )
        except requests.RequestException as e:
            logger.warning("Failed to fetch %s: %s", url, e)
            return None

        if is_redirect(response):
            if redirects <= 0:
                logger.debug("Too many redirects at %s", url)
                return None
            url = urljoin(url, response.headers["Location"])
            redirects -= 1
            continue

        if response.status_code == 200 and is_html(response):
            return response.text

        logger.debug("Skipping %s (status %d, type %r)", url, response.status_code,
                     response.headers.get("Content-Type"))
        return None
