"""
Card Renderer
=============

Turn a card into markup through the template engine, wrapping it in the
namespace layout when one is registered.
"""

from typing import Any, Dict, Optional

from socialcards.config.logging import get_logger
from socialcards.config.settings import Settings, get_settings
from socialcards.core.rendering.templates import Jinja2TemplateEngine
from socialcards.models.schemas import CardLike

logger = get_logger(__name__)


class CardRenderer:
    """Resolve template and layout names for a card and render it."""

    def __init__(
        self,
        engine: Optional[Jinja2TemplateEngine] = None,
        settings: Optional[Settings] = None,
        template_namespace: Optional[str] = None,
    ):
        self.settings = settings or get_settings()
        self.engine = engine or Jinja2TemplateEngine(settings=self.settings)
        self.template_namespace = template_namespace or self.settings.template_namespace
        self.logger: Any = logger.bind(component="card_renderer")  # structlog.BoundLoggerBase

    def template_name(self, card: CardLike) -> str:
        return f"{self.template_namespace}/{card.template_name}.html"

    def layout_name(self) -> Optional[str]:
        layout = f"layouts/{self.template_namespace}.html"
        return layout if self.engine.has_template(layout) else None

    def template_assigns(self, card: CardLike) -> Dict[str, Any]:
        return {**card.assigns, "card_width": card.width, "card_height": card.height}

    async def render(self, card: CardLike) -> str:
        """
        Render the card's template to markup.

        Template errors propagate to the caller unchanged.
        """
        template_name = self.template_name(card)
        html = await self.engine.render(
            template_name, self.layout_name(), self.template_assigns(card)
        )
        self.logger.info("Card rendered", template=template_name, html_length=len(html))
        return html


async def render_card(card: CardLike, settings: Optional[Settings] = None) -> str:
    """Render a card with a default renderer."""
    return await CardRenderer(settings=settings).render(card)
