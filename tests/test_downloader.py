"""Tests for artwork downloads."""
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from showsorter.config import Config
from showsorter.downloader import ArtworkDownloader

URL = "https://image.tmdb.org/t/p/original/poster.jpg"


def streaming_response(chunks: list[bytes]) -> MagicMock:
    response = MagicMock()
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    response.iter_content.return_value = chunks
    return response


@pytest.fixture
def mock_get():
    with patch("showsorter.downloader.requests.get") as mock:
        yield mock


class TestArtworkDownloader:

    def test_downloads(self, tmp_path: Path, mock_get):
        mock_get.return_value = streaming_response([b"abc", b"", b"def"])
        target = tmp_path / "poster.jpg"

        assert ArtworkDownloader(Config()).download(URL, target) is True

        assert target.read_bytes() == b"abcdef"
        assert not (tmp_path / "poster.jpg.part").exists()
        mock_get.assert_called_once_with(URL, stream=True, timeout=30)

    def test_dry_run(self, tmp_path: Path, mock_get):
        target = tmp_path / "poster.jpg"
        assert ArtworkDownloader(Config(dry_run=True)).download(URL, target) is True
        assert not target.exists()
        mock_get.assert_not_called()

    def test_existing_file_is_kept(self, tmp_path: Path, mock_get):
        target = tmp_path / "poster.jpg"
        target.write_bytes(b"old")
        assert ArtworkDownloader(Config()).download(URL, target) is True
        assert target.read_bytes() == b"old"
        mock_get.assert_not_called()

    def test_force_replaces_existing_file(self, tmp_path: Path, mock_get):
        mock_get.return_value = streaming_response([b"new"])
        target = tmp_path / "poster.jpg"
        target.write_bytes(b"old")
        assert ArtworkDownloader(Config(force=True)).download(URL, target) is True
        assert target.read_bytes() == b"new"

    @pytest.mark.parametrize("url", [None, "", "ftp://host/x.jpg"])
    def test_invalid_url(self, tmp_path: Path, mock_get, url):
        assert ArtworkDownloader(Config()).download(url, tmp_path / "x.jpg") is False
        mock_get.assert_not_called()

    def test_http_error(self, tmp_path: Path, mock_get):
        response = streaming_response([])
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
        mock_get.return_value = response
        target = tmp_path / "poster.jpg"

        assert ArtworkDownloader(Config()).download(URL, target) is False
        assert not target.exists()

    def test_connection_error_leaves_no_partial_file(self, tmp_path: Path, mock_get):
        response = streaming_response([])
        response.iter_content.side_effect = requests.exceptions.ConnectionError("reset")
        mock_get.return_value = response

        assert ArtworkDownloader(Config()).download(URL, tmp_path / "poster.jpg") is False
        assert list(tmp_path.iterdir()) == []
