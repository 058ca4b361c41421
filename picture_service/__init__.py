"""
Rover Pictures: caching proxy for the Mars Rover Photos API

- GET /pictures?rover=<name>&date=YYYY-MM-DD returns every photo as a JPEG data URI
- Results are cached in memory per (rover, date) for the process lifetime
- At startup the cache is warmed from config/dates.txt for the default rover

Entry point:
    python -m picture_service.server
"""
from .picture_cache import PictureCache
from .service import PictureResponse, PictureService
from .validation import ValidationResult, validate

__all__ = ["PictureCache", "PictureResponse", "PictureService", "ValidationResult", "validate"]
