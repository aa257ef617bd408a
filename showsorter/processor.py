"""
Series, season and episode processing.

The processors walk a show folder top-down: identify the series, rename
the show folder, then handle loose episode files and every season
folder. Each processor receives its collaborators explicitly; none of
them holds a reference back to the one that created it.
"""
import logging
from pathlib import Path

from .cache import EpisodeCache
from .config import Config
from .downloader import ArtworkDownloader
from .formatter import (
    format_basic_filename,
    format_episode_filename,
    format_season_folder_name,
    format_series_folder_name,
)
from .models import BatchStats, Episode, EpisodeInfo, Season, Series
from .nfo import MetadataWriter, thumb_path_for
from .parser import (
    detect_season_number,
    find_season_folders,
    find_video_files,
    guess_episode_number,
    parse_episode_info,
    suggest_series_name,
)
from .renamer import RenameEngine
from .resolver import SeriesResolver
from .tmdb import TMDBClient
from .ui import (
    Prompter,
    format_search_result,
    format_series_info,
    print_progress_bar,
    show_header,
    success,
    warning,
)

MAX_CHOICES = 5
DEFAULT_SEASON = 1

log = logging.getLogger(__name__)


def best_image_path(images: dict | None, kind: str) -> str | None:
    """file_path of the highest-voted entry of *kind* ("posters", "backdrops")."""
    candidates = (images or {}).get(kind) or []
    if not candidates:
        return None
    return max(candidates, key=lambda image: image.get("vote_average") or 0).get("file_path")


class EpisodeProcessor:
    """Renames the video files of one folder and writes their metadata."""

    def __init__(
        self,
        config: Config,
        client: TMDBClient,
        engine: RenameEngine,
        writer: MetadataWriter,
        downloader: ArtworkDownloader,
        prompter: Prompter,
    ):
        self.config = config
        self.client = client
        self.engine = engine
        self.writer = writer
        self.downloader = downloader
        self.prompter = prompter

    def episode_cache(self, series: Series | None) -> EpisodeCache:
        """New cache of episode lookups for *series*."""
        series_id = series.id if series else None

        def fetch(season: int, episode: int) -> Episode | None:
            data = self.client.fetch_episode_details(series_id, season, episode)
            if not data:
                return None
            return Episode.from_tmdb(data, season, episode)

        return EpisodeCache(fetch)

    def process_files(
        self,
        folder: Path,
        series: Series | None,
        default_season: int,
    ) -> BatchStats:
        """
        Process every video file directly inside *folder*.

        Args:
            folder: Folder holding the episode files
            series: Resolved series, or None to skip TMDB lookups
            default_season: Season assumed for files that do not say

        Returns:
            Counts of renamed and failed files
        """
        stats = BatchStats()
        video_files = find_video_files(folder)
        if not video_files:
            self.prompter.say(warning("No video files found in this folder."))
            return stats

        self.prompter.say(f"Found {len(video_files)} video files.")
        stats.total = len(video_files)
        cache = self.episode_cache(series)

        for index, path in enumerate(video_files, 1):
            print_progress_bar(index, len(video_files), out=self.prompter.out)
            stats.record(path.name, self.process_file(path, series, default_season, cache))

        self.prompter.say(f"\nRenamed {stats.renamed} of {stats.total} episode files.")
        if stats.failed:
            self.prompter.say(warning(f"Failed to rename {stats.failed} files."))
            log.warning(f"Failed files in {folder}: {', '.join(stats.failures)}")
        return stats

    def process_file(
        self,
        path: Path,
        series: Series | None,
        default_season: int,
        cache: EpisodeCache,
    ) -> bool:
        """Rename one episode file; False when it could not be handled."""
        info = self.get_episode_info(path.name, default_season)
        if info is None:
            log.warning(f"Skipping {path.name}: no season/episode")
            return False

        episode = cache.get(info.season, info.episode) if series and series.id else None
        if episode is None:
            new_path = path.with_name(format_basic_filename(info.season, info.episode, path.suffix))
            return self.engine.rename_file(path, new_path)

        new_path = path.with_name(format_episode_filename(episode, path.suffix))
        if not self.engine.rename_file(path, new_path):
            return False

        self.writer.write_episode(episode, new_path, series)
        if not self.config.skip_images:
            self.download_thumbnail(episode, new_path)
        return True

    def get_episode_info(self, filename: str, default_season: int) -> EpisodeInfo | None:
        """
        Parse season/episode from *filename*, asking the user if that fails.

        Returns:
            EpisodeInfo, or None when the user gave something unusable
        """
        info = parse_episode_info(filename)
        if info:
            return info

        self.prompter.say("\n" + warning(f"Could not determine season/episode for: {filename}"))
        season = self.prompter.prompt_int("Enter season number", default_season)
        if season is None:
            return None
        episode = self.prompter.prompt_int(
            "Enter episode number", guess_episode_number(filename) or 1
        )
        if episode is None:
            return None
        if season < 0 or episode < 0:
            self.prompter.say(warning("Season and episode numbers cannot be negative."))
            return None
        return EpisodeInfo(season=season, episode=episode)

    def download_thumbnail(self, episode: Episode, episode_path: Path) -> bool:
        url = self.client.image_url(episode.still_path)
        if not url:
            return False
        if self.downloader.download(url, thumb_path_for(episode_path)):
            log.debug(
                f"Downloaded thumbnail for episode S{episode.season_number}E{episode.episode_number}"
            )
            return True
        return False


class SeasonProcessor:
    """Handles one season folder: rename, artwork, metadata, episodes."""

    def __init__(
        self,
        config: Config,
        client: TMDBClient,
        engine: RenameEngine,
        writer: MetadataWriter,
        downloader: ArtworkDownloader,
        prompter: Prompter,
        episodes: EpisodeProcessor,
    ):
        self.config = config
        self.client = client
        self.engine = engine
        self.writer = writer
        self.downloader = downloader
        self.prompter = prompter
        self.episodes = episodes

    def process(self, season_folder: Path, series: Series) -> BatchStats | None:
        """
        Process a season folder.

        Returns:
            Episode counts, or None if the season number was unusable
        """
        season_number = self.get_season_number(season_folder.name)
        if season_number is None:
            self.prompter.say(warning(f"Skipping folder {season_folder.name}."))
            return None

        self.prompter.say(f"\nProcessing Season {season_number} ({season_folder.name})...")
        season = self.load_season(series, season_number)

        new_folder = self.engine.rename_folder(season_folder, format_season_folder_name(season))
        if new_folder != season_folder:
            self.prompter.say(success(f"Renamed season folder to: {new_folder.name}"))
            season_folder = new_folder

        if not self.config.skip_images:
            self.download_artwork(series, season, season_folder)
        self.writer.write_season(season, season_folder, series)

        return self.episodes.process_files(season_folder, series, season.season_number)

    def get_season_number(self, folder_name: str) -> int | None:
        season_number = detect_season_number(folder_name)
        if season_number is not None:
            return season_number

        self.prompter.say(
            warning(f"\nCould not automatically determine season number for folder: {folder_name}")
        )
        season_number = self.prompter.prompt_int("Enter season number", DEFAULT_SEASON)
        if season_number is not None and season_number < 0:
            return None
        return season_number

    def load_season(self, series: Series, season_number: int) -> Season:
        data = self.client.fetch_season_details(series.id, season_number)
        if not data:
            log.info(f"No TMDB details for season {season_number}; using placeholder")
            return Season.placeholder(season_number)
        return Season.from_tmdb(data, season_number)

    def download_artwork(self, series: Series, season: Season, season_folder: Path) -> bool:
        poster_path = season_folder / "season.jpg"

        if season.poster_path:
            if self.downloader.download(self.client.image_url(season.poster_path), poster_path):
                self.prompter.say(success("Downloaded season poster."))
                return True

        images = self.client.fetch_season_images(series.id, season.season_number)
        best = best_image_path(images, "posters")
        if best and self.downloader.download(self.client.image_url(best), poster_path):
            self.prompter.say(success("Downloaded season poster."))
            return True

        self.prompter.say(warning("No season poster available from TMDB."))
        return False


class SeriesProcessor:
    """Entry point for organizing one show folder."""

    def __init__(
        self,
        config: Config,
        client: TMDBClient,
        resolver: SeriesResolver,
        engine: RenameEngine,
        writer: MetadataWriter,
        downloader: ArtworkDownloader,
        prompter: Prompter,
    ):
        self.config = config
        self.client = client
        self.resolver = resolver
        self.engine = engine
        self.writer = writer
        self.downloader = downloader
        self.prompter = prompter
        self.episodes = EpisodeProcessor(config, client, engine, writer, downloader, prompter)
        self.seasons = SeasonProcessor(
            config, client, engine, writer, downloader, prompter, self.episodes
        )

    @classmethod
    def from_config(
        cls,
        config: Config,
        client: TMDBClient | None = None,
        prompter: Prompter | None = None,
    ) -> "SeriesProcessor":
        """Wire up the default collaborators for *config*."""
        client = client or TMDBClient.from_config(config)
        return cls(
            config=config,
            client=client,
            resolver=SeriesResolver(client),
            engine=RenameEngine(config),
            writer=MetadataWriter(config),
            downloader=ArtworkDownloader(config),
            prompter=prompter or Prompter(config),
        )

    def process(self, series_folder: Path) -> bool:
        """
        Organize a show folder.

        Returns:
            True when the folder was processed, False when the user or a
            failed lookup stopped it
        """
        series_folder = Path(series_folder)
        if not series_folder.is_dir():
            log.error(f"Cannot process: not a directory: {series_folder}")
            self.prompter.say(warning(f"Not a directory: {series_folder}"))
            return False

        show_header(f"Processing Series Folder: {series_folder.name}", out=self.prompter.out)

        series = self.identify_series(series_folder.name)
        if series is None:
            return False

        self.prompter.say(format_series_info(series))
        if not self.confirm_continue():
            self.prompter.say(warning("Skipping this series."))
            return False

        series_folder = self.rename_series_folder(series_folder, series)
        self.writer.write_series(series, series_folder)
        if not self.config.skip_images:
            self.download_artwork(series, series_folder)

        totals = self.process_seasons_and_episodes(series_folder, series)
        log.info(
            f"{series.name}: renamed {totals.renamed} of {totals.total} files, "
            f"{totals.failed} failed"
        )
        self.prompter.say(success(f"\nCompleted processing {series.name}."))
        return True

    def identify_series(self, folder_name: str) -> Series | None:
        self.prompter.say("\nPlease enter the series name in 'Name (Year)' format:")
        series_name = self.prompter.prompt("Series name", suggest_series_name(folder_name))
        if not series_name:
            return None

        self.prompter.say(f"\nSearching for series '{series_name}'...")
        results = self.resolver.search(series_name)
        if not results:
            self.prompter.say(
                warning(f"No results found for '{series_name}'. Please try again with a different name.")
            )
            return None

        selected = self.select_result(results)
        if selected is None:
            return None
        return self.resolver.fetch_series(selected)

    def select_result(self, results: list[dict]) -> dict | None:
        """Let the user pick one of the top candidates (1-based)."""
        top_results = results[:MAX_CHOICES]
        self.prompter.say(
            f"\nFound {len(results)} potential matches. Please select the correct series:"
        )
        for index, result in enumerate(top_results, 1):
            self.prompter.say(format_search_result(index, result))

        choice = self.prompter.prompt_int(
            f"Select the correct series (1-{len(top_results)})", 1
        )
        if choice is None or not 1 <= choice <= len(top_results):
            self.prompter.say(warning("Invalid selection."))
            return None

        selected = top_results[choice - 1]
        date = selected.get("first_air_date") or ""
        self.prompter.say(success(f"\nSelected: {selected.get('name')} ({date[:4] or 'N/A'})"))
        return selected

    def confirm_continue(self) -> bool:
        return self.config.no_prompt or self.prompter.prompt_yes_no(
            "Continue processing this series?"
        )

    def rename_series_folder(self, series_folder: Path, series: Series) -> Path:
        new_name = format_series_folder_name(series, fallback=series_folder.name)
        new_folder = self.engine.rename_folder(series_folder, new_name)
        if new_folder != series_folder:
            self.prompter.say(success(f"Renamed series folder to: {new_folder.name}"))
        return new_folder

    def download_artwork(self, series: Series, series_folder: Path) -> bool:
        self.prompter.say("\nDownloading series artwork...")
        downloaded = False

        poster_url = self.client.image_url(
            series.poster_path or self.best_series_image(series, "posters")
        )
        if poster_url and self.downloader.download(poster_url, series_folder / "poster.jpg"):
            self.prompter.say(success("Downloaded series poster."))
            downloaded = True

        fanart_url = self.client.image_url(
            series.backdrop_path or self.best_series_image(series, "backdrops")
        )
        if fanart_url and self.downloader.download(fanart_url, series_folder / "fanart.jpg"):
            self.prompter.say(success("Downloaded series fanart."))
            downloaded = True
        else:
            self.prompter.say(warning("No backdrop available for this series."))

        return downloaded

    def best_series_image(self, series: Series, kind: str) -> str | None:
        """Fallback artwork from the series image list when details have none."""
        return best_image_path(self.client.fetch_series_images(series.id), kind)

    def process_seasons_and_episodes(self, series_folder: Path, series: Series) -> BatchStats:
        totals = BatchStats()
        self._add(totals, self.episodes.process_files(series_folder, series, DEFAULT_SEASON))

        season_folders = find_season_folders(series_folder)
        if not season_folders:
            self.prompter.say(warning("No season folders found."))
            return totals

        self.prompter.say(f"\nFound {len(season_folders)} season folders.")
        for season_folder in season_folders:
            stats = self.seasons.process(season_folder, series)
            if stats:
                self._add(totals, stats)
        return totals

    @staticmethod
    def _add(totals: BatchStats, stats: BatchStats) -> None:
        totals.total += stats.total
        totals.renamed += stats.renamed
        totals.failed += stats.failed
        totals.failures.extend(stats.failures)
