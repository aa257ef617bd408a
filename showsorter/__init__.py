"""
showsorter - TV Series Organizer

A CLI tool for organizing TV series folders using TMDB metadata.
"""
__version__ = "1.0.0"

from .models import (
    BatchStats,
    Episode,
    EpisodeInfo,
    GuestStar,
    RenameOutcome,
    RenameStatus,
    Season,
    Series,
)
from .parser import (
    parse_episode_info,
    sanitize_folder_name,
    suggest_series_name,
    detect_season_number,
    is_video_file,
)
from .cache import EpisodeCache, RequestCache
from .config import Config, load_config
from .tmdb import TMDBClient, TMDBError
from .resolver import SeriesResolver, extract_name_and_year, rank_results
from .renamer import RenameEngine
from .processor import SeriesProcessor

__all__ = [
    "BatchStats",
    "Episode",
    "EpisodeInfo",
    "GuestStar",
    "RenameOutcome",
    "RenameStatus",
    "Season",
    "Series",
    "parse_episode_info",
    "sanitize_folder_name",
    "suggest_series_name",
    "detect_season_number",
    "is_video_file",
    "EpisodeCache",
    "RequestCache",
    "Config",
    "load_config",
    "TMDBClient",
    "TMDBError",
    "SeriesResolver",
    "extract_name_and_year",
    "rank_results",
    "RenameEngine",
    "SeriesProcessor",
]
