"""Formatter module for generating canonical file and folder names."""
import re

from .models import Episode, Season, Series


GENERIC_SEASON_PATTERN = re.compile(r'^Season\s+\d+$', re.IGNORECASE)
INVALID_FOLDER_CHARS = r'[<>:"/\\|?*]'


def sanitize_filename(name: str | None) -> str | None:
    """
    Make a title safe for use inside a file name.

    Invalid characters and whitespace become underscores; runs of
    underscores are collapsed and trimmed.

    Args:
        name: The name to sanitize

    Returns:
        Sanitized name, or None when *name* is None
    """
    if name is None:
        return None
    sanitized = re.sub(r'[/\\:*?"<>|]', '_', name)
    sanitized = re.sub(r'\s+', '_', sanitized)
    sanitized = re.sub(r'_+', '_', sanitized)
    return sanitized.strip('_')


def format_episode_code(season: int, episode: int) -> str:
    """Format season and episode numbers as 'S01E04'."""
    return f"S{season:02d}E{episode:02d}"


def _with_suffix(base: str, extension: str) -> str:
    extension = extension.lstrip('.')
    return f"{base}.{extension}" if extension else base


def format_basic_filename(season: int, episode: int, extension: str) -> str:
    """Canonical name used when no TMDB episode data is available."""
    return _with_suffix(format_episode_code(season, episode), extension)


def format_episode_filename(episode: Episode, extension: str) -> str:
    """
    Format an episode file name.

    Format: S{season:02}E{episode:02}_{Episode_Name}.ext
    """
    base = format_episode_code(episode.season_number, episode.episode_number)
    title = sanitize_filename(episode.name)
    if title:
        base = f"{base}_{title}"
    return _with_suffix(base, extension)


def is_generic_season_name(name: str | None) -> bool:
    """True for names like "Season 3" that add nothing to the number."""
    return not name or GENERIC_SEASON_PATTERN.match(name.strip()) is not None


def format_season_folder_name(season: Season) -> str:
    """'S01', or 'S01_Season_Title' when TMDB names the season."""
    base = f"S{season.season_number:02d}"
    if is_generic_season_name(season.name):
        return base
    title = sanitize_filename(season.name)
    return f"{base}_{title}" if title else base


def format_series_folder_name(series: Series, fallback: str = "") -> str:
    """
    'Name (Year)', or just 'Name' when the year is unknown.

    *fallback* (usually the current folder name) is returned unchanged when
    nothing usable is left of the series name.
    """
    name = re.sub(INVALID_FOLDER_CHARS, '', series.name).strip()
    if not name:
        return fallback
    if series.year:
        return f"{name} ({series.year})"
    return name
