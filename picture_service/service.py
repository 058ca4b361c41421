from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from common.logging_setup import get_logger
from picture_service.errors import UpstreamError, ValidationError
from picture_service.picture_cache import EncodedImage, PictureCache
from picture_service.upstream import PhotoReference
from picture_service.validation import ValidationResult, validate

log = get_logger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

Validator = Callable[[Optional[str], Optional[str]], ValidationResult]
UrlBuilderFn = Callable[[str, str], str]
PhotoLister = Callable[[str], Awaitable[List[PhotoReference]]]
Encoder = Callable[[Sequence[PhotoReference]], Awaitable[List[EncodedImage]]]


@dataclass
class PictureResponse:
    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=lambda: dict(CORS_HEADERS))


class PictureService:
    """
    Per-request handler for /pictures.

    Every collaborator is injected so tests can swap any of them:
        validator(rover, date)  -> ValidationResult
        build_url(rover, date)  -> upstream URL
        list_photos(url)        -> awaitable list of photo records
        encode(photos)          -> awaitable list of data URIs
        cache                   -> PictureCache shared with the preloader
    """

    def __init__(
        self,
        *,
        cache: PictureCache,
        build_url: UrlBuilderFn,
        list_photos: PhotoLister,
        encode: Encoder,
        validator: Validator = validate,
    ):
        self.cache = cache
        self.build_url = build_url
        self.list_photos = list_photos
        self.encode = encode
        self.validator = validator

    async def fetch_and_store(self, rover: str, date: str) -> List[EncodedImage]:
        """
        Upstream round trip for one (rover, date): list photos, encode them, cache them.
        Nothing is stored unless every step succeeds. Shared with the preloader.
        """
        photos = await self.list_photos(self.build_url(rover, date))
        images = await self.encode(photos)
        self.cache.store(rover, date, images)
        log.info("Cached %d images", len(images), extra={"extra": {"rover": rover, "date": date}})
        return images

    async def get_pictures(self, rover: Optional[str], date: Optional[str]) -> PictureResponse:
        try:
            self.validator(rover, date).raise_if_invalid()
        except ValidationError as e:
            return PictureResponse(400, {"Error": e.reason})

        rover = rover.lower()  # type: ignore[union-attr]
        cached = self.cache.lookup(rover, date)  # type: ignore[arg-type]
        if cached is not None:
            log.debug("Cache hit", extra={"extra": {"rover": rover, "date": date}})
            return PictureResponse(200, {"images": cached})

        log.debug("Cache miss", extra={"extra": {"rover": rover, "date": date}})
        try:
            images = await self.fetch_and_store(rover, date)  # type: ignore[arg-type]
        except UpstreamError as e:
            log.warning("Upstream failure for %s/%s: %s", rover, date, e)
            return PictureResponse(500, {"Error": e.to_detail()})
        return PictureResponse(200, {"images": images})
