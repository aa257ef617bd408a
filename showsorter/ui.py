"""Terminal output and interactive prompts."""
import logging
import os
import re
import sys
from typing import Callable, TextIO

from .config import Config
from .models import Series

OVERVIEW_LIMIT = 200
HEADER_WIDTH = 80
ANSI_PATTERN = re.compile(r"\033\[[0-9;]*m")

log = logging.getLogger(__name__)


def _color_enabled(stream: TextIO | None = None) -> bool:
    isatty = getattr(stream or sys.stdout, "isatty", None)
    return bool(isatty and isatty()) and "NO_COLOR" not in os.environ


def strip_colors(text: str) -> str:
    return ANSI_PATTERN.sub("", text)


def colorize(text: str, color_code: int, stream: TextIO | None = None) -> str:
    if not _color_enabled(stream):
        return text
    return f"\033[{color_code}m{text}\033[0m"


def success(text: str) -> str:
    return colorize(text, 32)


def info(text: str) -> str:
    return colorize(text, 36)


def warning(text: str) -> str:
    return colorize(text, 33)


def error(text: str) -> str:
    return colorize(text, 31)


def show_header(text: str, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    print("=" * HEADER_WIDTH, file=out)
    print(text.center(HEADER_WIDTH), file=out)
    print("=" * HEADER_WIDTH, file=out)
    print(file=out)


def print_progress_bar(current: int, total: int, bar_width: int = 40, out: TextIO | None = None) -> None:
    """Redraw a one-line progress bar in place."""
    out = out or sys.stdout
    if total <= 0:
        return
    percent = int(current / total * 100)
    complete = int(current / total * bar_width)
    bar = ("█" * complete).ljust(bar_width, "░")
    out.write(f"\r[{bar}] {current}/{total} ({percent}%)")
    if current >= total:
        out.write("\n")
    out.flush()


def format_series_info(series: Series) -> str:
    """Multi-line summary of a series for confirmation."""
    lines = ["", "Series Information:", f"  Title: {info(series.name)}"]
    if series.original_name and series.original_name != series.name:
        lines.append(f"  Original Title: {series.original_name}")
    lines.append(f"  Year: {series.year or 'Unknown'}")
    if series.status:
        lines.append(f"  Status: {series.status}")
    if series.overview:
        overview = series.overview
        if len(overview) > OVERVIEW_LIMIT:
            overview = overview[:OVERVIEW_LIMIT] + "..."
        lines.append(f"  Overview: {overview}")
    if series.genres:
        lines.append(f"  Genres: {', '.join(series.genres)}")
    return "\n".join(lines)


def format_search_result(index: int, result: dict) -> str:
    """One line of the numbered candidate list."""
    date = result.get("first_air_date") or ""
    year = date[:4] if date else "N/A"
    popularity = result.get("popularity")
    popularity = f"{popularity:.1f}" if isinstance(popularity, (int, float)) else "N/A"
    return f"{index}. {result.get('name', 'Unknown')} ({year}) - Popularity: {popularity}"


class Prompter:
    """
    Asks the user questions, or answers them with defaults under no_prompt.

    Input and output are injectable so the processors can be driven
    without a terminal.
    """

    def __init__(
        self,
        config: Config,
        input_func: Callable[[str], str] = input,
        out: TextIO | None = None,
    ):
        self.config = config
        self.input_func = input_func
        self.out = out

    def say(self, message: str = "") -> None:
        out = self.out or sys.stdout
        if not _color_enabled(out):
            message = strip_colors(message)
        print(message, file=out)

    def prompt(self, message: str, default: str | None = None) -> str:
        """
        Ask for a value.

        Returns:
            The user's answer, or *default* ("" when None) for an empty
            answer, end of input, or when prompting is disabled
        """
        if self.config.no_prompt:
            log.info(f"[NO PROMPT] Using default value: {default}")
            return default or ""

        suffix = f" [{default}]" if default else ""
        try:
            response = self.input_func(f"{message}{suffix}: ").strip()
        except EOFError:
            response = ""
        return response or (default or "")

    def prompt_int(self, message: str, default: int | None = None) -> int | None:
        """Ask for a number; None when the answer is not a whole number."""
        answer = self.prompt(message, None if default is None else str(default))
        try:
            return int(answer)
        except ValueError:
            self.say(warning(f"'{answer}' is not a number."))
            return None

    def prompt_yes_no(self, message: str, default: bool = True) -> bool:
        if self.config.no_prompt:
            log.info(f"[NO PROMPT] Using default value for yes/no: {default}")
            return default

        choices = "Y/n" if default else "y/N"
        try:
            response = self.input_func(f"{message} [{choices}]: ").strip().lower()
        except EOFError:
            response = ""
        if not response:
            return default
        return response.startswith("y")
