"""Shared test fixtures for showsorter."""
import io
from pathlib import Path

import pytest

from showsorter.config import Config
from showsorter.tmdb import TMDB_BASE_URL, TMDBClient
from showsorter.ui import Prompter


class StubTMDBClient(TMDBClient):
    """TMDBClient that answers from a dict of URL paths instead of the network."""

    def __init__(self, routes: dict | None = None):
        super().__init__(api_key="test-key", retry_delay=0)
        self.routes = routes or {}
        self.calls: list[str] = []

    def request(self, method, url, params=None):
        path = url.replace(TMDB_BASE_URL, "")
        self.calls.append(path)
        return self.routes.get(path)


class ScriptedInput:
    """Replays canned answers to input() and records the questions."""

    def __init__(self, answers: list[str] | None = None):
        self.answers = list(answers or [])
        self.questions: list[str] = []

    def __call__(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def config() -> Config:
    """Config for a real (non dry-run) run without images or prompts."""
    return Config(tmdb_api_key="test-key", skip_images=True, no_prompt=True, retry_delay=0)


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_prompter(output):
    def factory(config: Config, answers: list[str] | None = None) -> Prompter:
        return Prompter(config, input_func=ScriptedInput(answers), out=output)
    return factory


@pytest.fixture
def supernatural_routes() -> dict:
    """TMDB answers for Supernatural with two season 1 episodes."""
    return {
        "/search/tv": {
            "results": [
                {"id": 200, "name": "Supernatural", "first_air_date": "2020-02-01", "popularity": 90.0},
                {"id": 100, "name": "Supernatural", "first_air_date": "2005-09-13", "popularity": 50.0},
            ]
        },
        "/tv/100": {
            "id": 100,
            "name": "Supernatural",
            "original_name": "Supernatural",
            "first_air_date": "2005-09-13",
            "status": "Ended",
            "overview": "Two brothers hunt monsters.",
            "genres": [{"id": 1, "name": "Drama"}, {"id": 2, "name": "Mystery"}],
            "networks": [{"name": "The CW"}],
            "poster_path": "/poster.jpg",
            "backdrop_path": "/backdrop.jpg",
        },
        "/tv/100/season/1/episode/1": {
            "id": 1001,
            "name": "Pilot",
            "season_number": 1,
            "episode_number": 1,
            "air_date": "2005-09-13",
            "crew": [{"job": "Director", "name": "David Nutter"}],
            "guest_stars": [{"name": "Sarah Shahi", "character": "Constance Welch"}],
            "still_path": "/pilot.jpg",
        },
        "/tv/100/season/1/episode/2": {
            "id": 1002,
            "name": "Wendigo",
            "season_number": 1,
            "episode_number": 2,
        },
    }


@pytest.fixture
def make_files():
    def factory(folder: Path, *names: str) -> list[Path]:
        folder.mkdir(parents=True, exist_ok=True)
        paths = []
        for name in names:
            path = folder / name
            path.write_text(name)
            paths.append(path)
        return paths
    return factory


@pytest.fixture
def make_client():
    def factory(routes: dict | None = None) -> StubTMDBClient:
        return StubTMDBClient(routes)
    return factory

