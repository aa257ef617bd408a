#!/usr/bin/env python3
"""
showsorter - TV Series Organizer

A CLI tool that renames TV series folders and episode files using TMDB
metadata and writes .nfo sidecars and artwork for media centers.
"""
import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .config import Config, load_config
from .processor import SeriesProcessor
from .tmdb import TMDBClient, TMDBError
from .ui import Prompter, error, info, show_header, success, warning

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILE = "showsorter.log"

log = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """
    Send log records to a file and warnings to stderr.

    Args:
        verbose: Log DEBUG records everywhere
        log_file: Log file path; defaults to showsorter.log in the cwd
    """
    debug = verbose or bool(os.environ.get("SHOWSORTER_DEBUG"))
    root = logging.getLogger("showsorter")
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.handlers.clear()
    root.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    try:
        file_handler = logging.FileHandler(log_file or DEFAULT_LOG_FILE, encoding="utf-8")
    except OSError as e:
        print(warning(f"Cannot open log file: {e}"), file=sys.stderr)
    else:
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root.addHandler(console)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="showsorter",
        description="Organize TV series folders with metadata for media centers.",
        epilog=(
            "Examples:\n"
            "  showsorter ~/TV/Supernatural\n"
            "  showsorter --dry-run \"Breaking Bad S01-S05 1080p\"\n"
            "  showsorter --skip-images --no-prompt /media/shows/GameOfThrones"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=None,
        help="Series folder to process (default: current directory)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulate operations without making changes"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output"
    )
    parser.add_argument(
        "--skip-images",
        action="store_true",
        help="Skip downloading images"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Override existing files"
    )
    parser.add_argument(
        "--no-prompt",
        action="store_true",
        help="Use defaults without prompting"
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        metavar="N",
        help="Attempts per TMDB request (default: 3)"
    )
    parser.add_argument(
        "--language",
        type=str,
        default=None,
        help="Language for TMDB results (default: en-US)"
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="TMDB API key (default: TMDB_API_KEY from the environment or .env)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="FILE",
        help="JSON config file to use instead of the default location"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="FILE",
        help=f"Where to write the log (default: ./{DEFAULT_LOG_FILE})"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"showsorter {__version__}",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> dict:
    """Config overrides from the command line; unset flags stay None."""
    return {
        "dry_run": True if args.dry_run else None,
        "verbose": True if args.verbose else None,
        "skip_images": True if args.skip_images else None,
        "force": True if args.force else None,
        "no_prompt": True if args.no_prompt else None,
        "max_api_retries": args.max_retries,
        "language": args.language,
        "tmdb_api_key": args.api_key,
    }


def log_applied_options(config: Config) -> None:
    enabled = [
        name for name in ("dry_run", "verbose", "skip_images", "force", "no_prompt")
        if getattr(config, name)
    ]
    log.info(f"Options: {', '.join(enabled) or 'none'}")


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed_args = build_parser().parse_args(args)

    config = load_config(options_from_args(parsed_args), parsed_args.config)
    setup_logging(config.verbose, parsed_args.log_file)
    log_applied_options(config)

    series_path = (parsed_args.path or Path.cwd()).expanduser().resolve()
    if not series_path.is_dir():
        print(error(f"Error: '{series_path}' is not a valid directory."))
        return 1

    try:
        client = TMDBClient.from_config(config)
        processor = SeriesProcessor.from_config(config, client=client, prompter=Prompter(config))

        show_header(f"showsorter v{__version__} - TV Series Organizer")
        if processor.process(series_path):
            print(success("\nProcessing complete! Your media is now organized for Jellyfin/Kodi/Plex."))
            if config.dry_run:
                print(info("This was a dry run. No actual changes were made."))
                print(info("Run again without --dry-run to apply the changes."))
        else:
            print(warning("\nSeries processing was not completed."))
        return 0

    except KeyboardInterrupt:
        print("\nProcess interrupted. Exiting gracefully.")
        return 130
    except TMDBError as e:
        print(error(f"Error: {e}"))
        return 1
    except Exception as e:
        log.exception(f"CLI Error: {e}")
        print(error(f"\nError: {e}"))
        print("Check the log file for details.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
