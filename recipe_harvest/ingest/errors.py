"""
Failure types raised by the extraction pipeline.

Every error carries a machine-readable ``reason`` code alongside a message
that is safe to show to a user.
"""

from __future__ import annotations

from typing import Optional


class ExtractionError(Exception):
    """Base exception for recipe extraction"""

    reason = "extraction_failed"

    def __init__(self, message: str, url: Optional[str] = None, reason: Optional[str] = None):
        self.url = url
        if reason is not None:
            self.reason = reason
        super().__init__(message)


class InvalidUrl(ExtractionError):
    """Raised when a URL is empty or cannot be parsed"""

    reason = "url_invalid"


class UnsupportedSource(ExtractionError):
    """Raised when no strategy recognizes any recipe markup in the document"""

    reason = "no_match"

    def __init__(self, url: Optional[str] = None):
        super().__init__(
            "No recipe markup found on this page. Try adding this recipe manually instead.",
            url=url,
        )


class IncompleteExtraction(ExtractionError):
    """Raised when recipe markup was found but the recipe name could not be determined"""

    reason = "name_missing"

    def __init__(self, url: Optional[str] = None, strategy: Optional[str] = None):
        self.strategy = strategy
        super().__init__("Failed to parse recipe from this URL", url=url)


class NetworkFailure(ExtractionError):
    """Raised when the page cannot be fetched"""

    reason = "network_error"

    def __init__(self, url: str, error: str, status_code: Optional[int] = None):
        self.error = error
        self.status_code = status_code
        super().__init__(
            f"Failed to fetch recipe. The page may be unavailable or require login. ({error})",
            url=url,
        )


class MalformedStructuredData(ExtractionError):
    """Raised for a JSON-LD block that cannot be decoded; callers skip the block"""

    reason = "malformed_structured_data"


class EmptyListing(ExtractionError):
    """Raised when listing pages yield no candidate recipe links"""

    reason = "no_recipe_links"

    def __init__(self, listing_urls: list[str]):
        self.listing_urls = listing_urls
        super().__init__(f"No recipe links found on: {', '.join(listing_urls)}")
