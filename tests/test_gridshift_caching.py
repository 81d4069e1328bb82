"""Tests for grid-shift file caching and download functionality."""

from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from projax.gridshift import GridShiftSet, download_grid_file, load_cached_grid

GRID_URL = "https://cdn.proj.org/test.gsb"

# ---------------------------------------------------------------------------
# download_grid_file tests
# ---------------------------------------------------------------------------


class TestDownloadGridFile:
    """Tests for download_grid_file."""

    @pytest.mark.ci
    def test_download_success(self, tmp_path: Path) -> None:
        """Actual download from the PROJ CDN produces a non-empty file."""
        dest = tmp_path / "files.geojson"
        result = download_grid_file("https://cdn.proj.org/files.geojson", dest)
        assert result.exists()
        assert result.stat().st_size > 0

    def test_download_bad_url_raises(self, tmp_path: Path) -> None:
        """A bad URL raises an httpx error."""
        import httpx

        dest = tmp_path / "bad.gsb"
        with pytest.raises((httpx.HTTPStatusError, httpx.TransportError)):
            download_grid_file(
                "https://cdn.proj.org/nonexistent_projax_grid.gsb",
                dest,
                timeout=10.0,
            )

    def test_download_creates_parent_dirs(self, tmp_path: Path) -> None:
        """Parent directories are created and the body is written as bytes."""
        dest = tmp_path / "deep" / "nested" / "dir" / "grid.gsb"
        assert not dest.parent.exists()

        with patch("projax.gridshift._download.httpx.Client") as mock_client_cls:
            mock_response = mock_client_cls.return_value.__enter__.return_value.get.return_value
            mock_response.content = b"\x00\x01binary grid"
            mock_response.raise_for_status.return_value = None

            result = download_grid_file(GRID_URL, dest)

        assert dest.parent.exists()
        assert dest.read_bytes() == b"\x00\x01binary grid"
        assert result == dest.resolve()


# ---------------------------------------------------------------------------
# load_cached_grid tests
# ---------------------------------------------------------------------------


class TestLoadCachedGrid:
    """Tests for load_cached_grid."""

    def test_fresh_file_reused(self, ntv2_file: Path) -> None:
        """A fresh cached file is loaded without downloading."""
        with patch("projax.gridshift._providers.download_grid_file") as mock_dl:
            grids = load_cached_grid(GRID_URL, ntv2_file, max_age_days=7.0)
            mock_dl.assert_not_called()

        assert isinstance(grids, GridShiftSet)
        assert grids.names == ("test.gsb:SUBGRID1",)

    def test_stale_file_triggers_download(self, ntv2_file: Path) -> None:
        """A stale file triggers a download attempt."""
        old_time = ntv2_file.stat().st_mtime - 30 * 86400
        os.utime(ntv2_file, (old_time, old_time))

        with patch("projax.gridshift._providers.download_grid_file") as mock_dl:
            mock_dl.return_value = ntv2_file
            grids = load_cached_grid(GRID_URL, ntv2_file, max_age_days=7.0)
            mock_dl.assert_called_once_with(GRID_URL, ntv2_file)

        assert isinstance(grids, GridShiftSet)

    def test_missing_file_triggers_download(self, ntv2_file: Path, tmp_path: Path) -> None:
        """A missing file is downloaded before loading."""
        dest = tmp_path / "cache" / "test.gsb"
        contents = ntv2_file.read_bytes()

        def fake_download(url: str, fp: Path) -> Path:
            fp.parent.mkdir(parents=True, exist_ok=True)
            fp.write_bytes(contents)
            return fp

        with patch(
            "projax.gridshift._providers.download_grid_file", side_effect=fake_download
        ) as mock_dl:
            grids = load_cached_grid(GRID_URL, dest)
            mock_dl.assert_called_once()

        assert grids.grids[0].shape == (3, 3)

    def test_download_logs_digest(
        self, ntv2_file: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A fresh download is logged with the SHA-256 of the written file."""
        dest = tmp_path / "cache" / "test.gsb"
        contents = ntv2_file.read_bytes()

        def fake_download(url: str, fp: Path) -> Path:
            fp.parent.mkdir(parents=True, exist_ok=True)
            fp.write_bytes(contents)
            return fp

        with (
            patch("projax.gridshift._providers.download_grid_file", side_effect=fake_download),
            caplog.at_level(logging.INFO, logger="projax.gridshift._providers"),
        ):
            load_cached_grid(GRID_URL, dest)

        assert hashlib.sha256(contents).hexdigest() in caplog.text

    def test_fresh_file_not_hashed(self, ntv2_file: Path) -> None:
        """Reusing a fresh cached copy does not hash it."""
        with (
            patch("projax.gridshift._providers.download_grid_file"),
            patch("projax.gridshift._providers.file_hash") as mock_hash,
        ):
            load_cached_grid(GRID_URL, ntv2_file, max_age_days=7.0)
            mock_hash.assert_not_called()

    def test_download_failure_uses_stale_copy(
        self, ntv2_file: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """If the refresh fails, the stale cached copy is used with a warning."""
        old_time = ntv2_file.stat().st_mtime - 30 * 86400
        os.utime(ntv2_file, (old_time, old_time))

        with (
            patch(
                "projax.gridshift._providers.download_grid_file",
                side_effect=RuntimeError("network error"),
            ),
            caplog.at_level(logging.WARNING, logger="projax.gridshift._providers"),
        ):
            grids = load_cached_grid(GRID_URL, ntv2_file, max_age_days=7.0)

        assert isinstance(grids, GridShiftSet)
        assert "stale cached copy" in caplog.text

    def test_download_failure_without_copy_raises(self, tmp_path: Path) -> None:
        """With no cached copy the download error propagates."""
        dest = tmp_path / "missing.gsb"
        with (
            patch(
                "projax.gridshift._providers.download_grid_file",
                side_effect=RuntimeError("network error"),
            ),
            pytest.raises(RuntimeError, match="network error"),
        ):
            load_cached_grid(GRID_URL, dest)

    def test_default_filepath(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """When filepath is None, the file lands in <cache>/grids/<url name>."""
        monkeypatch.setenv("PROJAX_CACHE", str(tmp_path))
        expected_file = tmp_path / "grids" / "test.gsb"

        with (
            patch("projax.gridshift._providers.is_file_stale", return_value=False) as mock_stale,
            patch("projax.gridshift._providers.load_grid_from_file") as mock_load,
        ):
            load_cached_grid(GRID_URL)

            mock_stale.assert_called_once()
            assert Path(mock_stale.call_args[0][0]) == expected_file
            mock_load.assert_called_once_with(expected_file)
