"""In-memory caches for TMDB lookups.

Nothing here touches the disk: a cache lives exactly as long as the
object that owns it.
"""
import logging
from typing import Any, Callable

from .models import Episode

log = logging.getLogger(__name__)


class RequestCache:
    """Cache of successful TMDB responses keyed by request signature."""

    def __init__(self):
        self._entries: dict[tuple, Any] = {}

    @staticmethod
    def make_key(method: str, url: str, params: dict | None) -> tuple:
        """
        Build the cache key for a request.

        Args:
            method: HTTP method
            url: Full request URL
            params: Query parameters or body

        Returns:
            Hashable key; parameter order does not matter
        """
        items = tuple(sorted((str(k), str(v)) for k, v in (params or {}).items()))
        return (method.upper(), url, items)

    def __contains__(self, key: tuple) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: tuple) -> Any:
        return self._entries.get(key)

    def set(self, key: tuple, value: Any) -> None:
        """Store a response. Existing entries are never overwritten."""
        self._entries.setdefault(key, value)

    def clear(self) -> None:
        """Clear all cached data."""
        self._entries.clear()


class EpisodeCache:
    """
    Per-season memo of episode lookups keyed by (season, episode).

    Misses are remembered as well, so each pair is fetched at most once.
    """

    def __init__(self, fetch: Callable[[int, int], Episode | None]):
        self._fetch = fetch
        self._entries: dict[tuple[int, int], Episode | None] = {}

    def __contains__(self, key: tuple[int, int]) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, season: int, episode: int) -> Episode | None:
        key = (season, episode)
        if key not in self._entries:
            log.debug(f"Episode cache miss for S{season:02d}E{episode:02d}")
            self._entries[key] = self._fetch(season, episode)
        return self._entries[key]
