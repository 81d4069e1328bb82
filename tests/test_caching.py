"""Tests for projax.utils.caching module."""

import hashlib
import os
import time
from pathlib import Path

import pytest

from projax.utils.caching import (
    cache_filename_for_url,
    file_age_seconds,
    file_hash,
    get_cache_dir,
    get_grid_cache_dir,
    is_file_stale,
)

# ---------------------------------------------------------------------------
# get_cache_dir
# ---------------------------------------------------------------------------


class TestGetCacheDir:
    """Tests for get_cache_dir()."""

    def test_default_path(self, monkeypatch, tmp_path):
        """Default cache lives under ~/.cache/projax."""
        monkeypatch.delenv("PROJAX_CACHE", raising=False)
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))
        result = get_cache_dir()
        assert result == tmp_path / ".cache" / "projax"
        assert result.is_dir()

    def test_env_override(self, monkeypatch, tmp_path):
        """PROJAX_CACHE env var overrides the default."""
        custom = tmp_path / "custom_cache"
        monkeypatch.setenv("PROJAX_CACHE", str(custom))
        result = get_cache_dir()
        assert result == custom
        assert result.is_dir()

    def test_subdirectory_creation(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PROJAX_CACHE", str(tmp_path / "cache"))
        result = get_cache_dir("my_sub")
        assert result == tmp_path / "cache" / "my_sub"
        assert result.is_dir()

    def test_idempotent(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PROJAX_CACHE", str(tmp_path / "cache"))
        assert get_cache_dir("sub") == get_cache_dir("sub")

    def test_grid_cache_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PROJAX_CACHE", str(tmp_path))
        result = get_grid_cache_dir()
        assert result == tmp_path / "grids"
        assert result.is_dir()


# ---------------------------------------------------------------------------
# cache_filename_for_url
# ---------------------------------------------------------------------------


class TestCacheFilenameForUrl:
    def test_last_path_component(self):
        url = "https://cdn.proj.org/ca_nrc_ntv2_0.gsb"
        assert cache_filename_for_url(url) == "ca_nrc_ntv2_0.gsb"

    def test_query_string_ignored(self):
        url = "https://example.com/grids/ntv2_0.gsb?version=2"
        assert cache_filename_for_url(url) == "ntv2_0.gsb"

    def test_no_filename_raises(self):
        with pytest.raises(ValueError, match="Cannot derive"):
            cache_filename_for_url("https://example.com/")


# ---------------------------------------------------------------------------
# file_age_seconds
# ---------------------------------------------------------------------------


class TestFileAge:
    """Tests for file_age_seconds."""

    def test_recent_file(self, tmp_path):
        f = tmp_path / "recent.gsb"
        f.write_bytes(b"hello")
        age = file_age_seconds(f)
        assert 0 <= age < 5

    def test_old_file(self, tmp_path):
        """Backdating mtime makes the file appear old."""
        f = tmp_path / "old.gsb"
        f.write_bytes(b"hello")
        old_time = time.time() - 3600
        os.utime(f, (old_time, old_time))
        assert 3590 < file_age_seconds(f) < 3700

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            file_age_seconds(tmp_path / "nope.gsb")

    def test_string_path(self, tmp_path):
        f = tmp_path / "str_path.gsb"
        f.write_bytes(b"hello")
        assert file_age_seconds(str(f)) >= 0


# ---------------------------------------------------------------------------
# is_file_stale
# ---------------------------------------------------------------------------


class TestIsFileStale:
    """Tests for is_file_stale."""

    def test_missing_file_is_stale(self, tmp_path):
        assert is_file_stale(tmp_path / "missing.gsb", max_age_seconds=9999) is True

    def test_old_file_is_stale(self, tmp_path):
        f = tmp_path / "old.gsb"
        f.write_bytes(b"data")
        old_time = time.time() - 7200
        os.utime(f, (old_time, old_time))
        assert is_file_stale(f, max_age_seconds=3600) is True

    def test_fresh_file_not_stale(self, tmp_path):
        f = tmp_path / "fresh.gsb"
        f.write_bytes(b"data")
        assert is_file_stale(f, max_age_seconds=3600) is False


# ---------------------------------------------------------------------------
# file_hash
# ---------------------------------------------------------------------------


class TestFileHash:
    """Tests for file_hash."""

    def test_sha256_known_digest(self, tmp_path):
        f = tmp_path / "known.bin"
        f.write_bytes(b"hello world")
        assert file_hash(f) == hashlib.sha256(b"hello world").hexdigest()

    def test_md5_known_digest(self, tmp_path):
        f = tmp_path / "known_md5.bin"
        f.write_bytes(b"test data")
        assert file_hash(f, algorithm="md5") == hashlib.md5(b"test data").hexdigest()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            file_hash(tmp_path / "nope.bin")

    def test_unsupported_algorithm_raises(self, tmp_path):
        f = tmp_path / "algo.bin"
        f.write_bytes(b"data")
        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            file_hash(f, algorithm="not_a_real_algo")

    def test_chunk_size_invariance(self, tmp_path):
        """Hash is the same regardless of chunk size."""
        f = tmp_path / "chunks.bin"
        f.write_bytes(os.urandom(1024 * 100))
        assert file_hash(f, chunk_size=128) == file_hash(f, chunk_size=65536)
