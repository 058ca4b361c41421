from __future__ import annotations

from typing import Optional


class PictureServiceError(Exception):
    """Base class for failures surfaced by the picture service."""


class ValidationError(PictureServiceError):
    """Rover or date query parameter missing or malformed (HTTP 400, never retried)."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class UpstreamError(PictureServiceError):
    """
    The upstream photo-metadata call failed (HTTP 500, not retried, not cached).

    Attributes:
        url: request URL with the api_key value masked
        status_code: upstream HTTP status when a response was received
    """

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    def to_detail(self) -> dict:
        detail = {"message": str(self)}
        if self.url is not None:
            detail["url"] = self.url
        if self.status_code is not None:
            detail["status_code"] = self.status_code
        return detail


class ImageFetchError(UpstreamError):
    """One of the per-photo image fetches failed; the whole batch is discarded."""
