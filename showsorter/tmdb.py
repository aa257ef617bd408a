"""TMDB API client module."""
import logging
import time
from typing import Any

import requests

from .cache import RequestCache


TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
DEFAULT_TIMEOUT = 10
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 5.0
MAX_RETRY_AFTER = 60.0
DEFAULT_LANGUAGE = "en-US"

log = logging.getLogger(__name__)


class TMDBError(Exception):
    """Exception raised for TMDB API errors."""
    pass


class TMDBClient:
    """Client for TMDB API with a per-client response cache."""

    def __init__(
        self,
        api_key: str | None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        language: str | None = None,
        cache: RequestCache | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize TMDB client.

        Args:
            api_key: TMDB API key.
            max_retries: Total attempts per request, shared by network
                         errors, error statuses and rate limiting.
            retry_delay: Seconds to sleep between attempts.
            language: TMDB API language tag (e.g. "en-US").
            cache: Response cache; a fresh one is created when omitted.
            timeout: Per-request timeout in seconds.

        Raises:
            TMDBError: If API key is not found
        """
        if not api_key:
            raise TMDBError(
                "TMDB API key not found.\n"
                "Set it using one of these methods:\n"
                "  1. Environment variable: export TMDB_API_KEY=your_key\n"
                "  2. Create a .env file with: TMDB_API_KEY=your_key\n"
                "  3. Pass --api-key on the command line\n"
                "Get your free API key at: https://www.themoviedb.org/settings/api"
            )
        self.api_key = api_key
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.language = language or DEFAULT_LANGUAGE
        self.cache = cache if cache is not None else RequestCache()
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> "TMDBClient":
        return cls(
            api_key=config.tmdb_api_key,
            max_retries=config.max_api_retries,
            retry_delay=config.retry_delay,
            language=config.language,
        )

    def _params(self, extra: dict | None = None) -> dict:
        return {"api_key": self.api_key, "language": self.language, **(extra or {})}

    def _send(self, method: str, url: str, params: dict | None) -> requests.Response:
        if method == "GET":
            return requests.get(url, params=params, timeout=self.timeout)
        return requests.post(url, json=params, timeout=self.timeout)

    def request(self, method: str, url: str, params: dict | None = None) -> Any:
        """
        Make a request to the TMDB API.

        Successful responses are cached; a cache hit skips the network
        entirely. Failures are retried up to ``max_retries`` attempts in
        total with ``retry_delay`` seconds between them.

        Args:
            method: "GET" or "POST"
            url: Absolute URL
            params: Query parameters (GET) or JSON body (POST)

        Returns:
            Decoded JSON response or None on error

        Raises:
            ValueError: For an unsupported HTTP method
        """
        method = method.upper()
        if method not in ("GET", "POST"):
            raise ValueError(f"Unsupported HTTP method: {method}")

        cache_key = RequestCache.make_key(method, url, params)
        if cache_key in self.cache:
            log.debug(f"Cache hit for {method} {url}")
            return self.cache.get(cache_key)

        if not url or not url.startswith(("http://", "https://")):
            log.error(f"Invalid URL: {url!r}")
            return None

        for attempt in range(1, self.max_retries + 1):
            log.debug(f"HTTP {method} => {url} (attempt {attempt}/{self.max_retries})")
            delay = self.retry_delay

            try:
                response = self._send(method, url, params)
            except requests.exceptions.RequestException as e:
                log.error(f"Error fetching {url}: {e}")
            else:
                if response.status_code == 429:
                    log.warning(f"HTTP 429: Too Many Requests (attempt {attempt}/{self.max_retries})")
                    delay = max(delay, min(_retry_after(response), MAX_RETRY_AFTER))
                elif not response.ok:
                    log.error(f"Failed {method} {url}, code={response.status_code}")
                else:
                    try:
                        data = response.json()
                    except ValueError as e:
                        log.error(f"Invalid JSON from {url}: {e}")
                    else:
                        self.cache.set(cache_key, data)
                        return data

            if attempt < self.max_retries:
                log.warning(f"Retrying in {delay:g}s... ({attempt}/{self.max_retries})")
                time.sleep(delay)

        log.error(f"Max retries reached for {url}")
        return None

    def search_tv(self, query: str) -> dict | None:
        """Search TMDB for TV series by name."""
        return self.request(
            "GET",
            f"{TMDB_BASE_URL}/search/tv",
            self._params({"query": query, "include_adult": "false"}),
        )

    def fetch_series_details(self, series_id: int | None) -> dict | None:
        if not series_id:
            return None
        return self.request("GET", f"{TMDB_BASE_URL}/tv/{series_id}", self._params())

    def fetch_season_details(self, series_id: int | None, season: int) -> dict | None:
        if not series_id:
            return None
        return self.request(
            "GET", f"{TMDB_BASE_URL}/tv/{series_id}/season/{season}", self._params()
        )

    def fetch_episode_details(
        self, series_id: int | None, season: int, episode: int
    ) -> dict | None:
        if not series_id:
            return None
        return self.request(
            "GET",
            f"{TMDB_BASE_URL}/tv/{series_id}/season/{season}/episode/{episode}",
            self._params(),
        )

    def fetch_series_images(self, series_id: int | None) -> dict | None:
        if not series_id:
            return None
        # Image lists are language-filtered; don't restrict them
        return self.request(
            "GET", f"{TMDB_BASE_URL}/tv/{series_id}/images", {"api_key": self.api_key}
        )

    def fetch_season_images(self, series_id: int | None, season: int) -> dict | None:
        if not series_id:
            return None
        return self.request(
            "GET",
            f"{TMDB_BASE_URL}/tv/{series_id}/season/{season}/images",
            {"api_key": self.api_key},
        )

    @staticmethod
    def image_url(path: str | None, size: str = "original") -> str | None:
        """
        Build a download URL for a TMDB image path.

        Args:
            path: Image path from TMDB (e.g. "/abc.jpg")
            size: TMDB size token

        Returns:
            Absolute URL, or None for an empty path
        """
        if not path:
            return None
        return f"{TMDB_IMAGE_BASE_URL}/{size}{path}"


def _retry_after(response: requests.Response) -> float:
    """Seconds requested by a Retry-After header, 0 when absent or unusable."""
    value = response.headers.get("Retry-After")
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        return 0.0
