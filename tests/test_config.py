"""Tests for pipeline configuration."""

from pathlib import Path

import pytest

from seo_intelligence.config import (
    DEFAULT_APP_PREFIX,
    DEFAULT_FAST_MODEL,
    DEFAULT_SMART_MODEL,
    PipelineConfig,
)


class TestPipelineConfig:
    """Tests for PipelineConfig defaults and validation."""

    def test_defaults(self):
        """Test default values."""
        config = PipelineConfig()

        assert config.api_key is None
        assert not config.has_api_key
        assert config.app_prefix == DEFAULT_APP_PREFIX
        assert config.model_for("fast") == DEFAULT_FAST_MODEL
        assert config.model_for("smart") == DEFAULT_SMART_MODEL

    def test_store_dir_is_expanded(self):
        """Test that '~' in the store directory is expanded."""
        config = PipelineConfig(store_dir="~/seo-data")
        assert config.store_dir == Path.home() / "seo-data"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"keyword_max_tokens": 0},
            {"request_timeout": 0},
            {"connect_timeout": -1},
            {"app_prefix": "bad prefix"},
            {"fast_model": ""},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Test that invalid values raise ValueError."""
        with pytest.raises(ValueError):
            PipelineConfig(**kwargs)


class TestFromEnv:
    """Tests for PipelineConfig.from_env."""

    def test_reads_environment(self, monkeypatch, tmp_path: Path):
        """Test that every supported variable is read."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        monkeypatch.setenv("SEO_INTEL_FAST_MODEL", "fast-x")
        monkeypatch.setenv("SEO_INTEL_SMART_MODEL", "smart-x")
        monkeypatch.setenv("SEO_INTEL_STORE_DIR", str(tmp_path))
        monkeypatch.setenv("SEO_INTEL_APP_PREFIX", "banana_seo")
        monkeypatch.setenv("SEO_INTEL_TIMEOUT", "45")

        config = PipelineConfig.from_env()

        assert config.api_key == "sk-test"
        assert config.fast_model == "fast-x"
        assert config.smart_model == "smart-x"
        assert config.store_dir == tmp_path
        assert config.app_prefix == "banana_seo"
        assert config.request_timeout == 45.0

    def test_overrides_win_and_none_is_ignored(self, monkeypatch):
        """Test explicit overrides."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")

        config = PipelineConfig.from_env(api_key=None, smart_model="override")

        assert config.api_key == "sk-env"
        assert config.smart_model == "override"

    def test_empty_key_is_not_configured(self, monkeypatch):
        """Test that an empty API key counts as missing."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "")
        assert not PipelineConfig.from_env().has_api_key

    def test_bad_timeout(self, monkeypatch):
        """Test that a non-numeric timeout is rejected."""
        monkeypatch.setenv("SEO_INTEL_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="SEO_INTEL_TIMEOUT"):
            PipelineConfig.from_env()
