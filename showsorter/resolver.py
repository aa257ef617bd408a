"""Series search: query normalisation, ranking and detail lookup."""
import logging
import re

from .models import Series
from .tmdb import TMDBClient

log = logging.getLogger(__name__)

# "Show Name (2005)"
PAREN_YEAR_PATTERN = re.compile(r'^(.+?)\s*\((\d{4})\)$')
# "Show Name 2005"
TRAILING_YEAR_PATTERN = re.compile(r'^(.+?)\s+(\d{4})$')


def extract_name_and_year(query: str) -> tuple[str, str | None]:
    """
    Split a trailing year off a search query.

    Args:
        query: User-supplied search string

    Returns:
        (base_name, year) where *year* is None when none was found
    """
    query = query.strip()
    for pattern in (PAREN_YEAR_PATTERN, TRAILING_YEAR_PATTERN):
        match = pattern.match(query)
        if match:
            return match.group(1).strip(), match.group(2)
    return query, None


def result_year(result: dict) -> str | None:
    """First-air year of a search result, if it has one."""
    date = result.get("first_air_date") or ""
    return date[:4] if len(date) >= 4 else None


def _by_popularity(results: list[dict]) -> list[dict]:
    return sorted(results, key=lambda r: -(r.get("popularity") or 0))


def rank_results(results: list[dict], year: str | None = None) -> list[dict]:
    """
    Rank search results by popularity, preferring an exact year match.

    When *year* is given and at least one result first aired that year,
    only those results are returned. Otherwise every result is returned.
    Either way the list is sorted by descending popularity; ties keep
    TMDB's order.
    """
    if year:
        year_matches = [r for r in results if result_year(r) == year]
        if year_matches:
            log.debug(f"Found {len(year_matches)} matches with exact year {year}")
            return _by_popularity(year_matches)
        log.debug("No exact year matches, sorting all results by popularity")
    return _by_popularity(results)


class SeriesResolver:
    """Finds the TMDB series a user means."""

    def __init__(self, client: TMDBClient):
        self.client = client

    def search(self, query: str) -> list[dict]:
        """
        Search TMDB for a series.

        Args:
            query: "Name", "Name (Year)" or "Name Year"

        Returns:
            Ranked raw result dicts; empty when nothing was found
        """
        log.debug(f"Original search query: {query}")
        base_name, year = extract_name_and_year(query)
        log.debug(f"Normalized search query - Name: '{base_name}', Year: {year or 'none'}")

        if not base_name:
            return []

        data = self.client.search_tv(base_name)
        if not data or not data.get("results"):
            log.info(f"No TMDB results for '{base_name}'")
            return []

        results = data["results"]
        log.debug(f"Found {len(results)} initial results")
        return rank_results(results, year)

    def fetch_series(self, candidate: dict) -> Series:
        """
        Get full details for a chosen search result.

        Falls back to the search result's own fields when the detail
        request fails.
        """
        details = self.client.fetch_series_details(candidate.get("id"))
        if not details:
            log.warning(
                f"Failed to get details for series {candidate.get('id')}; using search result"
            )
            return Series.from_tmdb(candidate)
        return Series.from_tmdb(details)
