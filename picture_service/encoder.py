from __future__ import annotations

import asyncio
import base64
from typing import Awaitable, Callable, List, Sequence

from common.logging_setup import get_logger
from picture_service.errors import ImageFetchError
from picture_service.picture_cache import EncodedImage
from picture_service.upstream import PhotoReference

log = get_logger(__name__)

DATA_URI_PREFIX = "data:image/jpeg;base64,"

ImageFetcher = Callable[[str], Awaitable[bytes]]


def to_data_uri(body: bytes) -> EncodedImage:
    return DATA_URI_PREFIX + base64.b64encode(body).decode("ascii")


class ImageEncoder:
    """
    Fetches every photo's `img_src` concurrently and returns JPEG data URIs.

    Results are appended as fetches complete, so output order is completion
    order rather than input order. A single failed fetch fails the whole call;
    sibling fetches still run to completion.
    """

    def __init__(self, fetch: ImageFetcher):
        self.fetch = fetch

    async def __call__(self, photos: Sequence[PhotoReference]) -> List[EncodedImage]:
        return await self.encode(photos)

    async def encode(self, photos: Sequence[PhotoReference]) -> List[EncodedImage]:
        images: List[EncodedImage] = []

        async def _one(photo: PhotoReference) -> None:
            url = photo.get("img_src")
            if not url:
                raise ImageFetchError("photo record has no img_src")
            body = await self.fetch(url)
            images.append(to_data_uri(body))

        results = await asyncio.gather(*(_one(p) for p in photos), return_exceptions=True)
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            log.warning("%d of %d image fetches failed", len(failures), len(results))
            first = failures[0]
            if isinstance(first, ImageFetchError):
                raise first
            raise ImageFetchError(f"image fetch failed: {first}") from first
        return images
