"""
Example Cards
=============

Factories for the bundled example cards and their preview registrations.
"""

from typing import Optional

from socialcards.config.settings import get_settings
from socialcards.core.previews import preview_registry
from socialcards.models.schemas import Card


def example_social_card(
    title: str = "Hello World",
    subtitle: Optional[str] = None,
    background_color: str = "#1a1a1a",
) -> Card:
    settings = get_settings()
    return Card(
        kind="ExampleSocialCard",
        width=settings.card_width,
        height=settings.card_height,
        assigns={"title": title, "subtitle": subtitle, "background_color": background_color},
    )


def image_example_card(image_path: str = "wavy_circles.png", title: str = "Image Example") -> Card:
    """
    Card showing a locally stored image.

    No image ships with the package: ``image_path`` is resolved against
    ``images_path`` and the card shows "No image available" until the file
    is found there.
    """
    settings = get_settings()
    return Card(
        kind="ImageExampleCard",
        width=settings.card_width,
        height=settings.card_height,
        assigns={"title": title, "image_path": image_path},
    )


def local_fonts_card(
    font_path: str = "Recursive_VF_1.085--subset-GF_latin_basic.woff2",
    family: str = "Recursive",
    weight: str = "300 1000",
    title: str = "Local Fonts",
) -> Card:
    """
    Card set in a locally stored font embedded through ``@font-face``.

    No font ships with the package: ``font_path`` is resolved against
    ``fonts_path`` and the card falls back to the system sans-serif until the
    file is found there.
    """
    settings = get_settings()
    return Card(
        kind="LocalFontsCard",
        width=settings.card_width,
        height=settings.card_height,
        assigns={"title": title, "font_path": font_path, "font_family": family, "font_weight": weight},
    )


@preview_registry.preview("example_social_card")
def default() -> Card:
    return example_social_card(
        title="Welcome to Social Cards",
        subtitle="Open Graph images rendered by a real browser",
    )


@preview_registry.preview("example_social_card")
def dark_theme() -> Card:
    return example_social_card(
        title="Dark Theme Example",
        subtitle="Perfect for modern applications",
        background_color="#0a0a0a",
    )


@preview_registry.preview("example_social_card")
def colorful() -> Card:
    return example_social_card(
        title="Colorful Background",
        subtitle="Make your cards stand out",
        background_color="#6366f1",
    )


@preview_registry.preview("example_social_card")
def long_title() -> Card:
    return example_social_card(
        title="This is a very long title that demonstrates how text wrapping works in social cards",
        subtitle="Subtitle remains readable",
    )


@preview_registry.preview("example_social_card")
def no_subtitle() -> Card:
    return example_social_card(title="Simple and Clean")


@preview_registry.preview("image_example_card")
def image_example() -> Card:
    return image_example_card()


@preview_registry.preview("local_fonts_card")
def local_fonts_example() -> Card:
    return local_fonts_card()
