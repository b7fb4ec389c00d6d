"""HTTP fetcher for recipe pages."""

from __future__ import annotations

import httpx
import requests
from typing import Optional, Tuple
import logging

from recipe_harvest.ingest.errors import NetworkFailure
from recipe_harvest.settings import settings


logger = logging.getLogger(__name__)


def browser_headers() -> dict[str, str]:
    return {
        "User-Agent": settings.USER_AGENT,
        "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


def fetch_url(url: str, timeout: Optional[float] = None) -> Tuple[str, str]:
    """GET the url with a browser-like UA header and a timeout. Returns (html, final_url).

    Raises NetworkFailure on transport errors and non-2xx responses.
    """
    timeout = settings.FETCH_TIMEOUT if timeout is None else timeout
    logger.debug("Fetching URL: %s", url)
    try:
        resp = requests.get(url, headers=browser_headers(), timeout=timeout, allow_redirects=True)
        resp.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise NetworkFailure(url, f"HTTP {status}", status_code=status) from e
    except requests.RequestException as e:
        raise NetworkFailure(url, type(e).__name__) from e
    logger.info("Fetched %s -> status %s", url, resp.status_code)
    return resp.text, resp.url


def build_async_client(timeout: Optional[float] = None, **kwargs) -> httpx.AsyncClient:
    """AsyncClient with the same headers/timeout policy as fetch_url."""
    timeout = settings.FETCH_TIMEOUT if timeout is None else timeout
    return httpx.AsyncClient(
        headers=browser_headers(), timeout=timeout, follow_redirects=True, **kwargs
    )


async def fetch_url_async(client: httpx.AsyncClient, url: str) -> Tuple[str, str]:
    """Async counterpart of fetch_url on a shared client."""
    logger.debug("Fetching URL: %s", url)
    try:
        resp = await client.get(url)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise NetworkFailure(url, f"HTTP {status}", status_code=status) from e
    except httpx.HTTPError as e:
        raise NetworkFailure(url, type(e).__name__) from e
    logger.info("Fetched %s -> status %s", url, resp.status_code)
    return resp.text, str(resp.url)
