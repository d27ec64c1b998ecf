"""Tests for configuration and the raw/cache/generated layout."""

from pathlib import Path

import pytest

from census_cache.config import CacheConfig, ProjectLayout


class TestCacheConfig:

    def test_defaults(self, tmp_path):
        config = CacheConfig(cache_root=str(tmp_path))
        assert config.cache_root == Path(tmp_path)
        assert config.serializer == "json"
        assert config.on_corrupt == "raise"

    def test_invalid_options(self, tmp_path):
        with pytest.raises(ValueError):
            CacheConfig(cache_root=tmp_path, serializer="pickle")
        with pytest.raises(ValueError):
            CacheConfig(cache_root=tmp_path, on_corrupt="ignore")


class TestProjectLayout:

    def test_paths(self, tmp_path):
        layout = ProjectLayout(tmp_path)
        assert layout.raw == tmp_path / "raw"
        assert layout.cache == tmp_path / "cache"
        assert layout.generated == tmp_path / "generated"

    def test_ensure_is_idempotent(self, tmp_path):
        layout = ProjectLayout(tmp_path / "project")
        (layout.ensure().raw / "survey.csv").write_text("keep me")
        layout.ensure()
        assert layout.cache.is_dir()
        assert layout.generated.is_dir()
        assert (layout.raw / "survey.csv").read_text() == "keep me"

    def test_cache_config(self, tmp_path):
        config = ProjectLayout(tmp_path).cache_config(serializer="csv")
        assert config.cache_root == tmp_path / "cache"
        assert config.serializer == "csv"
