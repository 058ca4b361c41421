"""
Mars Rover Photos API adapter.

Usage:
    async with httpx.AsyncClient() as client:
        api = MarsPhotosApi(api_key="DEMO_KEY", client=client)
        photos = await api.get_photos_at(api.urls("curiosity", "2015-12-30"))
        # photos -> [{"img_src": "https://mars.nasa.gov/...jpg", ...}, ...]
        body = await api.get_image(photos[0]["img_src"])   # raw JPEG bytes
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

import httpx

from common.logging_setup import get_logger
from picture_service.errors import ImageFetchError, UpstreamError

log = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.nasa.gov/mars-photos/api/v1"

PhotoReference = Dict[str, Any]

_KEY_PARAM = re.compile(r"(api_key=)[^&]*")


def redact(url: str) -> str:
    """Mask the api_key query value so URLs are safe to log or return to callers."""
    return _KEY_PARAM.sub(r"\1***", url)


class UrlBuilder:
    """Builds upstream photo-listing URLs; no request is performed and nothing is validated."""

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def __call__(self, rover: str, date: str) -> str:
        return self.build_url(rover, date)

    def build_url(self, rover: str, date: str) -> str:
        # date and key are embedded verbatim
        return f"{self.base_url}/rovers/{rover.lower()}/photos?earth_date={date}&api_key={self.api_key}"


class MarsPhotosApi:
    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
    ):
        """
        Params:
            api_key: NASA API key, already resolved by Settings
            client: shared httpx.AsyncClient, owned and closed by the caller
            base_url: API root, overridable for mirrors and tests
            timeout: per-request timeout in seconds; None waits indefinitely
        """
        self.urls = UrlBuilder(api_key=api_key, base_url=base_url)
        self.client = client
        self.timeout = timeout

    # ----------------------------
    # Public API
    # ----------------------------
    async def get_photos_at(self, url: str) -> List[PhotoReference]:
        """
        GET a photo-listing URL (following redirects) and return its `photos` array.

        Raises:
            UpstreamError: transport failure, non-2xx status, or a body without `photos`
        """
        safe_url = redact(url)
        try:
            r = await self.client.get(url, timeout=self.timeout, follow_redirects=True)
            r.raise_for_status()
            payload = r.json()
        except httpx.HTTPStatusError as e:
            log.warning("Photo listing failed: %s %s", e.response.status_code, e.response.text[:200])
            raise UpstreamError(
                f"upstream returned {e.response.status_code}", url=safe_url, status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            log.warning("Photo listing request error: %s", e)
            raise UpstreamError(f"upstream request failed: {e}", url=safe_url) from e
        except ValueError as e:
            raise UpstreamError("upstream returned a non-JSON body", url=safe_url, status_code=r.status_code) from e

        photos = payload.get("photos") if isinstance(payload, dict) else None
        if not isinstance(photos, list):
            raise UpstreamError("upstream response has no 'photos' list", url=safe_url, status_code=r.status_code)
        return photos

    async def get_image(self, url: str) -> bytes:
        """
        Fetch one image in binary mode.

        Raises:
            ImageFetchError: transport failure or non-2xx status
        """
        try:
            r = await self.client.get(url, timeout=self.timeout, follow_redirects=True)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ImageFetchError(
                f"image fetch returned {e.response.status_code}", url=url, status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ImageFetchError(f"image fetch failed: {e}", url=url) from e
        return r.content
