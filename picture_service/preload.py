from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from common.dates import DateFormatError, normalize_date
from common.logging_setup import get_logger
from picture_service.errors import PictureServiceError

log = get_logger(__name__)

DEFAULT_ROVER = "curiosity"

FetchAndStore = Callable[[str, str], Awaitable[list]]


@dataclass
class PreloadOutcome:
    raw: str
    date: Optional[str] = None
    ok: bool = False
    images: int = 0
    error: Optional[str] = None


@dataclass
class PreloadReport:
    rover: str
    outcomes: List[PreloadOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.ok)

    def to_dict(self) -> Dict:
        return {
            "rover": self.rover,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "outcomes": [asdict(o) for o in self.outcomes],
        }


def read_dates_file(path: str) -> List[str]:
    """Newline-delimited date strings; blank lines dropped. Missing file -> FileNotFoundError."""
    text = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


class Preloader:
    """
    Warms the picture cache at startup for one rover.

    Each input string is normalized (see common.dates.normalize_date) and then
    fetched as its own task; a bad string or a failed fetch is recorded in the
    report and never stops the other dates.
    """

    def __init__(self, fetch_and_store: FetchAndStore, rover: str = DEFAULT_ROVER):
        self.fetch_and_store = fetch_and_store
        self.rover = rover.lower()

    async def _one(self, raw: str) -> PreloadOutcome:
        outcome = PreloadOutcome(raw=raw)
        try:
            outcome.date = normalize_date(raw)
            images = await self.fetch_and_store(self.rover, outcome.date)
        except (DateFormatError, PictureServiceError) as e:
            outcome.error = str(e)
            log.warning("Preload failed for %r: %s", raw, e)
            return outcome
        except Exception as e:
            # isolate unexpected errors so one date cannot crash startup
            outcome.error = f"{type(e).__name__}: {e}"
            log.exception("Unexpected preload error for %r", raw)
            return outcome
        outcome.ok = True
        outcome.images = len(images)
        return outcome

    async def preload(self, date_strings: Iterable[str]) -> PreloadReport:
        raws = [s.strip() for s in date_strings if s and s.strip()]
        report = PreloadReport(rover=self.rover)
        report.outcomes = list(await asyncio.gather(*(self._one(raw) for raw in raws)))
        log.info(
            "Preload finished: %d ok, %d failed",
            report.succeeded,
            report.failed,
            extra={"extra": report.to_dict()},
        )
        return report
