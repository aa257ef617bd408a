"""Data models for the showsorter package."""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


def _names(items: list[Any] | None) -> tuple[str, ...]:
    """Reduce a TMDB list of ``{"name": ...}`` dicts to a tuple of names."""
    names = []
    for item in items or []:
        if isinstance(item, dict):
            name = item.get("name")
        else:
            name = item
        if name:
            names.append(str(name))
    return tuple(names)


@dataclass(frozen=True)
class EpisodeInfo:
    """Season/episode numbers recovered from a file name."""
    season: int
    episode: int
    source: str = "prompt"


@dataclass(frozen=True)
class GuestStar:
    """A guest actor credited on an episode."""
    name: str
    character: str = ""


@dataclass(frozen=True)
class Series:
    """Represents a TV series from TMDB."""
    id: int | None
    name: str
    original_name: str = ""
    first_air_date: str | None = None
    status: str | None = None
    overview: str = ""
    genres: tuple[str, ...] = ()
    networks: tuple[str, ...] = ()
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_average: float | None = None
    popularity: float | None = None

    @property
    def year(self) -> str | None:
        if self.first_air_date and len(self.first_air_date) >= 4:
            return self.first_air_date[:4]
        return None

    @classmethod
    def from_tmdb(cls, data: dict) -> "Series":
        """Build a Series from a search result or a detail response."""
        return cls(
            id=data.get("id"),
            name=data.get("name") or "",
            original_name=data.get("original_name") or "",
            first_air_date=data.get("first_air_date") or None,
            status=data.get("status"),
            overview=data.get("overview") or "",
            genres=_names(data.get("genres")),
            networks=_names(data.get("networks")),
            poster_path=data.get("poster_path"),
            backdrop_path=data.get("backdrop_path"),
            vote_average=data.get("vote_average"),
            popularity=data.get("popularity"),
        )


@dataclass(frozen=True)
class Season:
    """Represents a TV season from TMDB."""
    season_number: int
    name: str
    overview: str = ""
    air_date: str | None = None
    episode_count: int | None = None
    poster_path: str | None = None

    @classmethod
    def from_tmdb(cls, data: dict, season_number: int) -> "Season":
        """Build a Season from a detail response.

        *season_number* is the number that was requested; it is used when
        the response omits the field.
        """
        number = data.get("season_number")
        if number is None:
            number = season_number
        episodes = data.get("episodes")
        episode_count = data.get("episode_count")
        if episode_count is None and isinstance(episodes, list):
            episode_count = len(episodes)
        return cls(
            season_number=number,
            name=data.get("name") or f"Season {number}",
            overview=data.get("overview") or "",
            air_date=data.get("air_date"),
            episode_count=episode_count,
            poster_path=data.get("poster_path"),
        )

    @classmethod
    def placeholder(cls, season_number: int) -> "Season":
        """Minimal season used when TMDB has nothing for it."""
        return cls(season_number=season_number, name=f"Season {season_number}")


@dataclass(frozen=True)
class Episode:
    """Represents an episode from TMDB."""
    id: int | None
    name: str
    season_number: int
    episode_number: int
    overview: str = ""
    air_date: str | None = None
    vote_average: float | None = None
    still_path: str | None = None
    directors: tuple[str, ...] = ()
    guest_stars: tuple[GuestStar, ...] = ()

    @classmethod
    def from_tmdb(cls, data: dict, season: int, episode: int) -> "Episode":
        """Build an Episode from a detail response.

        The requested *season* and *episode* numbers fill in for fields the
        response leaves out.
        """
        directors = tuple(
            member["name"]
            for member in data.get("crew") or []
            if member.get("job") == "Director" and member.get("name")
        )
        guest_stars = tuple(
            GuestStar(name=actor["name"], character=actor.get("character") or "")
            for actor in data.get("guest_stars") or []
            if actor.get("name")
        )
        season_number = data.get("season_number")
        episode_number = data.get("episode_number")
        return cls(
            id=data.get("id"),
            name=data.get("name") or "",
            season_number=season if season_number is None else season_number,
            episode_number=episode if episode_number is None else episode_number,
            overview=data.get("overview") or "",
            air_date=data.get("air_date"),
            vote_average=data.get("vote_average"),
            still_path=data.get("still_path"),
            directors=directors,
            guest_stars=guest_stars,
        )


class RenameStatus(Enum):
    PERFORMED = "performed"
    ALREADY_CORRECT = "already_correct"
    SKIPPED_DRY_RUN = "skipped_dry_run"
    SKIPPED_CONFLICT = "skipped_conflict"
    FAILED = "failed"


@dataclass(frozen=True)
class RenameOutcome:
    """Represents a rename operation result."""
    status: RenameStatus
    path: Path
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not RenameStatus.FAILED


@dataclass
class BatchStats:
    """Counters for one folder's worth of episode files."""
    total: int = 0
    renamed: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list)

    def record(self, filename: str, success: bool) -> None:
        if success:
            self.renamed += 1
        else:
            self.failed += 1
            self.failures.append(filename)
