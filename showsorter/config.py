"""Configuration for a showsorter run.

Values are resolved once, in this order (later wins):

1. built-in defaults
2. the user's JSON config file
3. environment variables (``.env`` files are loaded first)
4. explicit overrides, usually from the command line
"""
import json
import logging
import os
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

log = logging.getLogger(__name__)

APP_NAME = "showsorter"
CONFIG_FILENAME = "config.json"

BOOLEAN_ENV_VARS = {
    "SHOWSORTER_DRY_RUN": "dry_run",
    "SHOWSORTER_VERBOSE": "verbose",
    "SHOWSORTER_SKIP_IMAGES": "skip_images",
    "SHOWSORTER_FORCE": "force",
    "SHOWSORTER_NO_PROMPT": "no_prompt",
}


@dataclass(frozen=True)
class Config:
    """Immutable settings shared by every component of one run."""
    tmdb_api_key: str | None = None
    language: str = "en-US"
    dry_run: bool = False
    verbose: bool = False
    skip_images: bool = False
    force: bool = False
    no_prompt: bool = False
    max_api_retries: int = 3
    retry_delay: float = 5.0

    def with_options(self, **options: Any) -> "Config":
        """Return a copy with *options* applied; unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in options.items() if k in known})


def string_to_bool(value: str | None) -> bool:
    """Convert "true", "yes", "1" and "on" (any case) to True."""
    return str(value).strip().lower() in ("true", "yes", "1", "on")


def config_dir() -> Path:
    """Return the platform settings directory (not created)."""
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home()))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / APP_NAME


def load_env_files() -> None:
    """Load ``.env`` from the current directory, then the home directory.

    Variables already present in the environment are left alone.
    """
    for env_path in (Path.cwd() / ".env", Path.home() / ".env"):
        if env_path.exists():
            load_dotenv(env_path, override=False)


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Read the JSON config file.

    Returns:
        Known settings found in the file; empty if it is missing or broken
    """
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.warning(f"Could not load config file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        log.warning(f"Ignoring config file {path}: expected a JSON object")
        return {}
    known = {f.name for f in fields(Config)}
    return {k: v for k, v in data.items() if k in known}


def load_environment() -> dict[str, Any]:
    """Collect settings from environment variables."""
    values: dict[str, Any] = {}

    api_key = os.environ.get("TMDB_API_KEY")
    if api_key:
        values["tmdb_api_key"] = api_key.strip()

    for env_var, option in BOOLEAN_ENV_VARS.items():
        if env_var in os.environ:
            values[option] = string_to_bool(os.environ[env_var])

    retries = os.environ.get("SHOWSORTER_MAX_API_RETRIES")
    if retries:
        try:
            values["max_api_retries"] = int(retries)
        except ValueError:
            log.warning(f"Ignoring SHOWSORTER_MAX_API_RETRIES={retries!r}: not an integer")

    return values


def load_config(
    overrides: dict[str, Any] | None = None,
    config_file: Path | None = None,
) -> Config:
    """
    Build the Config for this run.

    Args:
        overrides: Highest-priority values; None entries are skipped
        config_file: JSON file to read instead of the default location

    Returns:
        Resolved Config
    """
    load_env_files()

    path = config_file or (config_dir() / CONFIG_FILENAME)
    config = Config().with_options(**load_config_file(path))
    config = config.with_options(**load_environment())

    if overrides:
        config = config.with_options(
            **{k: v for k, v in overrides.items() if v is not None}
        )

    if config.max_api_retries < 1:
        log.warning("max_api_retries must be at least 1; using 1")
        config = config.with_options(max_api_retries=1)

    return config
