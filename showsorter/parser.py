"""Parser module for extracting episode information from file and folder names."""
import re
from pathlib import Path

from .models import EpisodeInfo


# Episode patterns (order matters - the first match wins)
EPISODE_PATTERNS = (
    # S01E04 / s1e4
    ("standard", re.compile(r'S(\d+)E(\d+)', re.IGNORECASE)),
    # 1x04, 01x05
    ("numeric", re.compile(r'(\d+)x(\d+)', re.IGNORECASE)),
    # 104 -> season 1, episode 04
    ("compact", re.compile(r'\b(\d)(\d{2})\b')),
)

# "E07" with no season attached
EPISODE_ONLY_PATTERN = re.compile(r'\bE(\d{1,3})\b', re.IGNORECASE)

# Release tags stripped when guessing a series name
NOISE_PATTERN = re.compile(
    r'\b(720p|1080p|2160p|x264|x265|HEVC|BluRay|WEB-DL|COMPLETE)\b',
    re.IGNORECASE,
)
EPISODE_TAG_PATTERN = re.compile(r'\bS\d+E\d+\b|\bSeason\s*\d+\b', re.IGNORECASE)
SEASON_TAG_PATTERN = re.compile(r'\bS\d+\b', re.IGNORECASE)
GROUP_PATTERN = re.compile(r'\[.*?\]|\(.*?\)')
PAREN_YEAR_PATTERN = re.compile(r'[\(\[]((?:19|20)\d{2})[\)\]]')

# Year pattern, only honoured after a cleaned name
NAME_YEAR_PATTERN = re.compile(r'(.+?)\s+((?:19|20)\d{2})\b')

SEASON_FOLDER_PATTERN = re.compile(r'(?<![a-z0-9])(?:S\d+|Season\s*\d+)', re.IGNORECASE)
SEASON_NUMBER_PATTERN = re.compile(r'(?<![a-z0-9])S(?:eason)?\s*(\d+)(?!\d)', re.IGNORECASE)
MAX_BARE_SEASON = 50

VIDEO_EXTENSIONS = {'.mkv', '.mp4', '.avi', '.m4v'}


def parse_episode_info(filename: str) -> EpisodeInfo | None:
    """
    Extract season and episode numbers from a file name.

    Heuristics are tried in priority order and the first one that matches
    decides the result.

    Args:
        filename: File name (with or without extension)

    Returns:
        EpisodeInfo, or None when no heuristic matches
    """
    for source, pattern in EPISODE_PATTERNS:
        match = pattern.search(filename)
        if match:
            return EpisodeInfo(
                season=int(match.group(1)),
                episode=int(match.group(2)),
                source=source,
            )
    return None


def guess_episode_number(filename: str) -> int | None:
    """
    Find a lone episode marker such as "E07" in an otherwise unparseable name.

    Only used to pre-fill the episode prompt; the season is never guessed.
    """
    match = EPISODE_ONLY_PATTERN.search(filename)
    if match:
        return int(match.group(1))
    return None


def sanitize_folder_name(folder_name: str) -> str:
    """
    Remove quality tags, season/episode markers and bracketed groups.

    A year in parentheses is kept as a bare year so that an already
    organized "Name (Year)" folder suggests itself again.
    """
    name = PAREN_YEAR_PATTERN.sub(r' \1 ', folder_name)
    name = GROUP_PATTERN.sub(' ', name)
    name = re.sub(r'[._]', ' ', name)
    name = NOISE_PATTERN.sub('', name)
    name = EPISODE_TAG_PATTERN.sub('', name)
    name = SEASON_TAG_PATTERN.sub('', name)
    name = re.sub(r'\s+', ' ', name)
    return name.strip(' -')


def suggest_series_name(folder_name: str) -> str:
    """
    Turn a folder name into an editable search suggestion.

    "Supernatural_2005_S01" -> "Supernatural (2005)"
    """
    clean_name = sanitize_folder_name(folder_name)
    match = NAME_YEAR_PATTERN.match(clean_name)
    if match:
        return f"{match.group(1).strip()} ({match.group(2)})"
    return clean_name


def detect_season_number(folder_name: str) -> int | None:
    """
    Detect a season number from a folder name.

    Understands "Season 1", "S01", "S1" and a bare number below 50.
    """
    match = SEASON_NUMBER_PATTERN.search(folder_name)
    if match:
        return int(match.group(1))

    stripped = folder_name.strip()
    if stripped.isdigit() and int(stripped) < MAX_BARE_SEASON:
        return int(stripped)

    return None


def is_season_folder(path: Path) -> bool:
    """Check if a directory looks like a season folder."""
    return path.is_dir() and SEASON_FOLDER_PATTERN.search(path.name) is not None


def is_video_file(filepath: Path) -> bool:
    """Check if file is a video file based on extension."""
    return filepath.suffix.lower() in VIDEO_EXTENSIONS


def find_video_files(folder: Path) -> list[Path]:
    """Return the video files directly inside *folder*, in processing order."""
    if not folder.is_dir():
        return []
    files = [
        item for item in folder.iterdir()
        if item.is_file() and is_video_file(item)
    ]
    return sort_video_files(files)


def find_season_folders(series_folder: Path) -> list[Path]:
    """Return the season sub-directories of a series folder, sorted by name."""
    if not series_folder.is_dir():
        return []
    return sorted(
        (item for item in series_folder.iterdir() if is_season_folder(item)),
        key=lambda p: p.name,
    )


def sort_video_files(files: list[Path]) -> list[Path]:
    """
    Order files by parsed (season, episode), falling back to file name.

    Files that cannot be parsed come after the parseable ones.
    """
    def sort_key(path: Path) -> tuple:
        info = parse_episode_info(path.name)
        if info:
            return (0, info.season, info.episode, path.name)
        return (1, 0, 0, path.name)

    return sorted(files, key=sort_key)
