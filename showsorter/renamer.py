"""Safe, repeatable renaming of episode files and show folders."""
import logging
import shutil
from pathlib import Path

from .config import Config
from .models import RenameOutcome, RenameStatus

log = logging.getLogger(__name__)


def paths_are_equivalent(path1: Path, path2: Path) -> bool:
    """
    Check if two existing paths are the same directory entry.

    Catches case-only renames on case-insensitive filesystems.
    """
    try:
        return path1.exists() and path2.exists() and path1.samefile(path2)
    except OSError:
        return False


def is_single_name(name: str | None) -> bool:
    """True for a non-empty name that stays inside its parent directory."""
    if not name or name.strip() in ("", ".", ".."):
        return False
    return "/" not in name and "\\" not in name


class RenameEngine:
    """
    Renames files and folders according to the run's Config.

    Every method is safe to call repeatedly with the same arguments and
    reports problems through its return value instead of raising.
    """

    def __init__(self, config: Config):
        self.config = config

    # -- folders ---------------------------------------------------------

    def rename_folder(self, original: Path, new_name: str) -> Path:
        """
        Rename a folder within its parent directory.

        Returns:
            The folder's path after the call: the new path on success or
            when an existing folder is reused, otherwise *original*
        """
        return self.rename_folder_outcome(Path(original), new_name).path

    def rename_folder_outcome(self, original: Path, new_name: str) -> RenameOutcome:
        original = Path(original)

        if not is_single_name(new_name):
            log.error(f"Refusing to rename folder {original.name}: invalid name {new_name!r}")
            return RenameOutcome(RenameStatus.FAILED, original, "invalid folder name")

        new_path = original.parent / new_name

        if new_path == original:
            return RenameOutcome(RenameStatus.ALREADY_CORRECT, original)

        if self.config.dry_run:
            log.info(f"[DRY RUN] Would rename folder: {original.name} -> {new_name}")
            return RenameOutcome(RenameStatus.SKIPPED_DRY_RUN, original)

        log.info(f"Renaming folder: {original.name} -> {new_name}")

        if new_path.exists() and not paths_are_equivalent(original, new_path):
            log.warning(f"Destination already exists: {new_path}")
            if new_path.is_dir():
                log.info(f"Using existing directory: {new_path}")
                return RenameOutcome(RenameStatus.SKIPPED_CONFLICT, new_path)
            log.error("Destination exists but is not a directory")
            return RenameOutcome(
                RenameStatus.FAILED, original, "destination exists and is not a directory"
            )

        if not original.is_dir():
            log.error(f"Cannot rename folder: source is not a directory: {original}")
            return RenameOutcome(RenameStatus.FAILED, original, "source is not a directory")

        try:
            new_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(original), str(new_path))
        except OSError as e:
            log.error(f"Failed to rename {original}: {e}")
            return RenameOutcome(RenameStatus.FAILED, original, str(e))

        log.info(f"Successfully renamed folder to: {new_path}")
        return RenameOutcome(RenameStatus.PERFORMED, new_path)

    # -- files -----------------------------------------------------------

    def rename_file(self, original: Path, new_path: Path) -> bool:
        """
        Move a file to *new_path*.

        An existing destination is replaced only when ``force`` is set;
        otherwise the source is left where it is and the call still counts
        as handled.

        Returns:
            False only when the rename was attempted and failed
        """
        return self.rename_file_outcome(Path(original), Path(new_path)).ok

    def rename_file_outcome(self, original: Path, new_path: Path) -> RenameOutcome:
        original = Path(original)
        new_path = Path(new_path)

        if new_path == original:
            return RenameOutcome(RenameStatus.ALREADY_CORRECT, original)

        if self.config.dry_run:
            log.info(f"[DRY RUN] Would rename file: {original.name} -> {new_path.name}")
            return RenameOutcome(RenameStatus.SKIPPED_DRY_RUN, original)

        log.info(f"Renaming file: {original.name} -> {new_path.name}")

        try:
            if new_path.exists() and not paths_are_equivalent(original, new_path):
                if not self.config.force or not original.is_file():
                    log.warning(f"Target file already exists: {new_path}")
                    return RenameOutcome(
                        RenameStatus.SKIPPED_CONFLICT, new_path, "target file already exists"
                    )
                log.warning(f"Overwriting existing file: {new_path}")
                new_path.unlink()

            if not original.is_file():
                log.error(f"Cannot rename file: source is not a file: {original}")
                return RenameOutcome(RenameStatus.FAILED, original, "source is not a file")

            new_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(original), str(new_path))
        except OSError as e:
            log.error(f"Failed to rename {original}: {e}")
            return RenameOutcome(RenameStatus.FAILED, original, str(e))

        log.info(f"Successfully renamed file to: {new_path}")
        return RenameOutcome(RenameStatus.PERFORMED, new_path)
