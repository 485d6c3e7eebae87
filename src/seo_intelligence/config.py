# -*- coding: utf-8 -*-
"""
Centralized configuration for the content intelligence pipeline.

This module provides a single configuration dataclass that controls which
models serve each generation profile, output token limits, request timeouts,
and where the local project/user store lives.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional


# Type alias for generation profiles
# - "fast": Cheaper, lower-latency model. Used for keyword research.
# - "smart": Stronger model. Used for content analysis and strategy plans.
GenerationProfile = Literal["fast", "smart"]

DEFAULT_FAST_MODEL = "claude-3-5-haiku-20241022"
DEFAULT_SMART_MODEL = "claude-sonnet-4-20250514"
DEFAULT_APP_PREFIX = "seo_intelligence"
DEFAULT_STORE_DIR = Path.home() / ".seo_intelligence"


@dataclass
class PipelineConfig:
    """
    Central configuration for generation and storage behavior.

    Attributes:
        api_key: Anthropic API key. None means "not configured"; the
            generation backend refuses to start without one.
        fast_model: Model used for the "fast" profile (keyword research).
        smart_model: Model used for the "smart" profile (analysis, strategy).

        keyword_max_tokens: Output token limit for keyword research.
        analysis_max_tokens: Output token limit for content analysis. The
            rewritten article is returned in full, so this is generous.
        strategy_max_tokens: Output token limit for strategy plans.

        request_timeout: Read timeout in seconds for one generation call.
        connect_timeout: Connect timeout in seconds.

        store_dir: Directory holding the persisted key-value blobs.
        app_prefix: Prefix for store keys ("<app>_user", "<app>_projects").
    """

    api_key: Optional[str] = None
    fast_model: str = DEFAULT_FAST_MODEL
    smart_model: str = DEFAULT_SMART_MODEL

    # Token limits
    keyword_max_tokens: int = 2048
    analysis_max_tokens: int = 8192
    strategy_max_tokens: int = 4096

    # Timeouts (seconds)
    request_timeout: float = 120.0
    connect_timeout: float = 30.0

    # Storage
    store_dir: Path = field(default=DEFAULT_STORE_DIR)
    app_prefix: str = DEFAULT_APP_PREFIX

    @property
    def has_api_key(self) -> bool:
        """Check if a provider credential is configured."""
        return bool(self.api_key)

    def model_for(self, profile: GenerationProfile) -> str:
        """Resolve the model name serving a generation profile."""
        return self.fast_model if profile == "fast" else self.smart_model

    def __post_init__(self):
        """Validate configuration values."""
        self.store_dir = Path(self.store_dir).expanduser()
        if not self.fast_model or not self.smart_model:
            raise ValueError("fast_model and smart_model must be non-empty")
        for name in ("keyword_max_tokens", "analysis_max_tokens", "strategy_max_tokens"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be > 0, got {self.request_timeout}")
        if self.connect_timeout <= 0:
            raise ValueError(f"connect_timeout must be > 0, got {self.connect_timeout}")
        if not self.app_prefix or not self.app_prefix.replace("_", "").isalnum():
            raise ValueError(
                f"app_prefix must be alphanumeric/underscore, got '{self.app_prefix}'"
            )

    @classmethod
    def from_env(cls, **overrides) -> "PipelineConfig":
        """Create config from environment variables.

        Reads ANTHROPIC_API_KEY, SEO_INTEL_FAST_MODEL, SEO_INTEL_SMART_MODEL,
        SEO_INTEL_STORE_DIR, SEO_INTEL_APP_PREFIX and SEO_INTEL_TIMEOUT.
        Unset variables keep their defaults.

        Args:
            **overrides: Override any config values (None values are ignored).

        Returns:
            PipelineConfig populated from the environment.
        """
        values: dict = {"api_key": os.environ.get("ANTHROPIC_API_KEY") or None}

        env_map = {
            "SEO_INTEL_FAST_MODEL": "fast_model",
            "SEO_INTEL_SMART_MODEL": "smart_model",
            "SEO_INTEL_STORE_DIR": "store_dir",
            "SEO_INTEL_APP_PREFIX": "app_prefix",
        }
        for env_name, attr in env_map.items():
            raw = os.environ.get(env_name)
            if raw:
                values[attr] = raw

        timeout = os.environ.get("SEO_INTEL_TIMEOUT")
        if timeout:
            try:
                values["request_timeout"] = float(timeout)
            except ValueError:
                raise ValueError(f"SEO_INTEL_TIMEOUT must be a number, got '{timeout}'")

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
