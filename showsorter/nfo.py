"""Kodi/Jellyfin ``.nfo`` sidecar files for shows, seasons and episodes."""
import logging
from pathlib import Path

from .config import Config
from .formatter import is_generic_season_name
from .models import Episode, Season, Series

XML_HEADER = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

SERIES_NFO = "tvshow.nfo"
SEASON_NFO = "season.nfo"

log = logging.getLogger(__name__)


def escape_xml(text) -> str:
    """Escape XML special characters."""
    if text is None:
        return ""
    return (
        str(text)
        .replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
        .replace('"', '&quot;')
    )


def _tag(name: str, value, indent: int = 2) -> str:
    return f"{' ' * indent}<{name}>{escape_xml(value)}</{name}>"


def series_nfo(series: Series) -> str:
    lines = [XML_HEADER, "<tvshow>", _tag("title", series.name)]
    if series.original_name and series.original_name != series.name:
        lines.append(_tag("originaltitle", series.original_name))
    lines += [
        _tag("year", series.year),
        _tag("rating", series.vote_average),
        _tag("plot", series.overview),
        _tag("status", series.status),
    ]
    if series.networks:
        lines.append(_tag("network", series.networks[0]))
    lines += [_tag("genre", genre) for genre in series.genres]
    lines += [_tag("poster", "poster.jpg"), _tag("fanart", "fanart.jpg"), "</tvshow>"]
    return "\n".join(lines) + "\n"


def season_nfo(season: Season, series: Series | None) -> str:
    lines = [XML_HEADER, "<season>", _tag("number", season.season_number)]
    if series:
        lines.append(_tag("showtitle", series.name))
    if not is_generic_season_name(season.name):
        lines.append(_tag("title", season.name))
    lines += [
        _tag("plot", season.overview),
        _tag("premiered", season.air_date),
        _tag("episode_count", season.episode_count),
        _tag("poster", "season.jpg"),
        "</season>",
    ]
    return "\n".join(lines) + "\n"


def thumb_path_for(episode_path: Path) -> Path:
    """Where an episode's thumbnail lives: ``<basename>-thumb.jpg``."""
    return episode_path.with_name(f"{episode_path.stem}-thumb.jpg")


def episode_nfo(episode: Episode, episode_path: Path, series: Series | None) -> str:
    lines = [
        XML_HEADER,
        "<episodedetails>",
        _tag("title", episode.name),
        _tag("showtitle", series.name if series else ""),
        _tag("season", episode.season_number),
        _tag("episode", episode.episode_number),
        _tag("aired", episode.air_date),
        _tag("plot", episode.overview),
        _tag("rating", episode.vote_average),
    ]
    thumb = thumb_path_for(episode_path)
    if episode.still_path or thumb.exists():
        lines.append(_tag("thumb", thumb.name))
    lines += [_tag("director", director) for director in episode.directors]
    for actor in episode.guest_stars:
        lines += [
            "  <actor>",
            _tag("name", actor.name, indent=4),
            _tag("role", actor.character, indent=4),
            "  </actor>",
        ]
    lines.append("</episodedetails>")
    return "\n".join(lines) + "\n"


class MetadataWriter:
    """Writes .nfo files next to the media they describe."""

    def __init__(self, config: Config):
        self.config = config

    def write_series(self, series: Series, series_folder: Path) -> bool:
        path = Path(series_folder) / SERIES_NFO
        return self._write(path, series_nfo(series), "series")

    def write_season(self, season: Season, season_folder: Path, series: Series | None) -> bool:
        path = Path(season_folder) / SEASON_NFO
        return self._write(path, season_nfo(season, series), "season")

    def write_episode(self, episode: Episode, episode_path: Path, series: Series | None) -> bool:
        episode_path = Path(episode_path)
        path = episode_path.with_suffix(".nfo")
        return self._write(path, episode_nfo(episode, episode_path, series), "episode")

    def _write(self, path: Path, content: str, kind: str) -> bool:
        if self.config.dry_run:
            log.info(f"[DRY RUN] Would write {kind} NFO: {path}")
            return True
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            log.error(f"Failed to create NFO file {path}: {e}")
            return False
        log.info(f"Created {kind} NFO: {path}")
        return True
