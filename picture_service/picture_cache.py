from __future__ import annotations

from typing import Dict, List, Optional, Sequence

EncodedImage = str


class PictureCache:
    """
    In-memory store of encoded images keyed by rover, then canonical date.

        {
          "curiosity": { "2015-12-30": ["data:image/jpeg;base64,...", ...] },
          "spirit":    { "2004-01-05": [...] },
        }

    Lives for the process lifetime; nothing is evicted or expired. Callers
    receive the stored list itself and must not mutate it.

    Note: `store` replaces the rover's whole date map, so caching a new date for
    a rover drops every other date cached for that rover. This matches the
    behavior clients already depend on; see DESIGN.md before changing it.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, List[EncodedImage]]] = {}

    # -------- public API --------

    def lookup(self, rover: str, date: str) -> Optional[List[EncodedImage]]:
        """Return the cached images for (rover, date), or None when either key is absent."""
        return self._entries.get(rover, {}).get(date)

    def store(self, rover: str, date: str, images: Sequence[EncodedImage]) -> None:
        self._entries[rover] = {date: list(images)}

    def stats(self) -> Dict[str, int]:
        return {
            "rovers": len(self._entries),
            "dates": sum(len(v) for v in self._entries.values()),
            "images": sum(len(imgs) for v in self._entries.values() for imgs in v.values()),
        }

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return self.lookup(*key) is not None
