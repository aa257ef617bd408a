"""Artwork downloads (posters, fanart, episode thumbnails)."""
import logging
from pathlib import Path

import requests

from .config import Config

DOWNLOAD_TIMEOUT = 30
CHUNK_SIZE = 64 * 1024

log = logging.getLogger(__name__)


class ArtworkDownloader:
    """Fetches image files to disk, honouring dry_run and force."""

    def __init__(self, config: Config, timeout: float = DOWNLOAD_TIMEOUT):
        self.config = config
        self.timeout = timeout

    def download(self, url: str | None, save_path: Path) -> bool:
        """
        Download *url* to *save_path*.

        Returns:
            True when the file is in place (or would be, in a dry run)
        """
        save_path = Path(save_path)

        if self.config.dry_run:
            log.info(f"[DRY RUN] Would download {url} -> {save_path}")
            return True

        if save_path.exists() and not self.config.force:
            log.debug(f"Image already exists and force not enabled: {save_path}")
            return True

        if not url or not url.startswith(("http://", "https://")):
            log.error(f"Invalid download URL: {url!r}")
            return False

        log.debug(f"Downloading image from {url} => {save_path}")
        partial = save_path.with_name(save_path.name + ".part")
        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)
            with requests.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with open(partial, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
            partial.replace(save_path)
        except (requests.exceptions.RequestException, OSError) as e:
            log.error(f"Failed to download image from {url}: {e}")
            partial.unlink(missing_ok=True)
            return False

        log.info(f"Successfully downloaded to: {save_path}")
        return True
