"""
Template Engine
===============

Jinja2 environment for card templates. Layouts are ordinary templates
that receive the rendered card as ``content``.
"""

from typing import Dict, List, Any, Optional
from pathlib import Path
import jinja2
from markupsafe import Markup

from socialcards.config.logging import get_logger
from socialcards.config.settings import Settings, get_settings
from socialcards.core.rendering.assets import AssetInliner

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent.parent / "templates"


class TemplateRenderError(Exception):
    """Exception raised when a card template cannot be rendered."""

    pass


class Jinja2TemplateEngine:
    """Jinja2-based template engine with asset helpers."""

    def __init__(
        self,
        search_paths: Optional[List[Path]] = None,
        inliner: Optional[AssetInliner] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.inliner = inliner or AssetInliner(self.settings)
        self.logger: Any = logger.bind(engine="jinja2")  # structlog.BoundLoggerBase

        if search_paths is None:
            search_paths = [TEMPLATE_DIR, *self.settings.template_dirs]
        self.search_paths = list(search_paths)
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 template environment."""
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader([str(path) for path in self.search_paths]),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
            enable_async=True,
        )
        self._register_template_functions()

    def _register_template_functions(self) -> None:
        """Register asset helpers available to every card template."""

        def font_face(
            family: str,
            path: str,
            weight: str = "normal",
            style: str = "normal",
            display: str = "swap",
        ) -> Markup:
            return Markup(self.inliner.font_face(family, path, weight, style, display))

        def inline_asset(path: str) -> str:
            return self.inliner.inline_file(path) or ""

        def px(value: float) -> str:
            """Convert numeric value to CSS pixels."""
            return f"{value}px"

        self.env.globals["font_face"] = font_face
        self.env.globals["inline_asset"] = inline_asset
        self.env.globals["logo_data_url"] = self.inliner.logo_data_url
        self.env.globals["base_url"] = self.settings.base_url
        self.env.filters["px"] = px

    def has_template(self, name: str) -> bool:
        """Check whether a template exists on the search path."""
        try:
            self.env.get_template(name)
        except jinja2.TemplateNotFound:
            return False
        except jinja2.TemplateError as e:
            # Present but broken: let render() report it
            self.logger.warning("Template failed to load", template=name, error=str(e))
            return True
        return True

    async def render(
        self, template_name: str, layout_name: Optional[str], assigns: Dict[str, Any]
    ) -> str:
        """
        Render a template, optionally wrapped in a layout.

        Args:
            template_name: Template path relative to the search path
            layout_name: Layout template or None
            assigns: Template variables

        Returns:
            Rendered markup

        Raises:
            TemplateRenderError: If the template is missing or fails to evaluate
        """
        try:
            template = self.env.get_template(template_name)
            html = await template.render_async(**assigns)

            if layout_name:
                layout = self.env.get_template(layout_name)
                html = await layout.render_async({**assigns, "content": Markup(html)})

            self.logger.debug(
                "Template rendered", template=template_name, layout=layout_name, html_length=len(html)
            )
            return html

        except jinja2.TemplateNotFound as e:
            error_msg = f"Template not found: {e.name}"
            self.logger.error("Template rendering failed", error=error_msg)
            raise TemplateRenderError(error_msg) from e
        except jinja2.TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            self.logger.error("Template rendering failed", error=error_msg)
            raise TemplateRenderError(error_msg) from e
        except Exception as e:
            error_msg = f"Unexpected template error: {e}"
            self.logger.error("Template rendering failed", error=error_msg)
            raise TemplateRenderError(error_msg) from e
