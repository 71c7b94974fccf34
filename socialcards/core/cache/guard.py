"""
Cache Guard
===========

Fetch-or-compute wrapper around the render and capture pipeline.
Successful captures are cached; any failure is logged and answered with
the placeholder image without touching the cache.
"""

from typing import Any, Optional
from datetime import timedelta

from socialcards.config.logging import get_logger
from socialcards.config.settings import Settings, get_settings
from socialcards.core.cache.placeholder import PLACEHOLDER_PNG
from socialcards.core.cache.store import CacheStore, MemoryCacheStore
from socialcards.core.rendering.capture import CaptureSession
from socialcards.core.rendering.card_renderer import CardRenderer
from socialcards.models.schemas import CacheOptions, CardLike

logger = get_logger(__name__)


class CacheGuard:
    """Produce PNG bytes for cards, never raising to the caller."""

    def __init__(
        self,
        renderer: Optional[CardRenderer] = None,
        capture_session: Optional[CaptureSession] = None,
        store: Optional[CacheStore] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.renderer = renderer or CardRenderer(settings=self.settings)
        self.capture_session = capture_session or CaptureSession(self.settings)
        self.store: CacheStore = store if store is not None else MemoryCacheStore()
        self.default_ttl = timedelta(seconds=self.settings.default_cache_ttl)
        self.logger: Any = logger.bind(component="cache_guard")  # structlog.BoundLoggerBase

    def caching_enabled(self, options: CacheOptions) -> bool:
        """Whether a result for these options goes through the cache."""
        if options.resolved_key is None:
            return False
        return not self.settings.is_development or options.cache_in_development

    async def produce(self, card: Optional[CardLike], options: Optional[CacheOptions] = None) -> bytes:
        """
        Produce PNG bytes for a card.

        Args:
            card: Card to render
            options: Cache key, TTL and development caching switch

        Returns:
            The captured PNG, the cached PNG for the key, or the
            ``PLACEHOLDER_PNG`` object itself when anything in the pipeline
            fails, so callers can tell a failure apart with ``is``
        """
        options = options or CacheOptions()
        key = options.resolved_key

        try:
            if self.caching_enabled(options):
                ttl = options.ttl or self.default_ttl
                return await self.store.fetch(key, ttl, lambda: self._render_and_capture(card))  # type: ignore[arg-type]
            return await self._render_and_capture(card)
        except Exception as e:
            self.logger.error(
                "Social card generation failed",
                cache_key=key,
                card=getattr(card, "template_name", None),
                error_type=type(e).__name__,
                error=str(e),
            )
            return PLACEHOLDER_PNG

    async def _render_and_capture(self, card: Optional[CardLike]) -> bytes:
        if card is None:
            raise ValueError("No card to render")

        markup = await self.renderer.render(card)
        result = await self.capture_session.capture(markup, card.width, card.height)
        return result.png_data
