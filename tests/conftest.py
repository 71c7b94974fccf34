"""
Test Configuration
==================

Pytest configuration with settings, template and asset fixtures.
No fixture launches a real browser or connects to Redis.
"""

import os

# Must be set before socialcards builds its global settings
os.environ.setdefault("SOCIAL_CARDS_ENVIRONMENT", "testing")
os.environ.setdefault("SOCIAL_CARDS_CACHE_BACKEND", "memory")
os.environ.setdefault("SOCIAL_CARDS_LOG_LEVEL", "DEBUG")

import pytest
from pathlib import Path
from typing import Any

from socialcards.config.settings import Settings
from socialcards.core.cache.store import MemoryCacheStore
from socialcards.models.schemas import Card

from tests.utils.images import noisy_png


class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    cache_backend: str = "memory"
    log_level: str = "DEBUG"
    capture_timeout: float = 5.0
    blank_retry_delay: float = 0.0
    settle_delay_ms: int = 0


def make_settings(**overrides: Any) -> TestSettings:
    return TestSettings(**overrides)


@pytest.fixture
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return make_settings()


@pytest.fixture
def memory_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def png_bytes() -> bytes:
    """A PNG comfortably above the blank-frame threshold."""
    return noisy_png()


@pytest.fixture
def sample_card() -> Card:
    return Card(
        kind="ArticleCard",
        assigns={"title": "Test Article", "description": "An article for social cards"},
    )


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Template search path with an article card and the namespace layout."""
    root = tmp_path / "templates"
    (root / "social_cards").mkdir(parents=True)
    (root / "layouts").mkdir()
    (root / "social_cards" / "article_card.html").write_text(
        '<h1 class="title">{{ title }}</h1><p>{{ description }}</p>', encoding="utf-8"
    )
    (root / "layouts" / "social_cards.html").write_text(
        "<html><body data-size=\"{{ card_width }}x{{ card_height }}\">{{ content }}</body></html>",
        encoding="utf-8",
    )
    return root
