"""
Card Responses
==============

HTTP response contract for card images: inline PNG with a derived
filename, publicly cacheable outside development. The placeholder served
for a failed card is never publicly cacheable.
"""

from typing import Optional

from fastapi import Response

from socialcards.config.settings import Settings, get_settings
from socialcards.core.cache.guard import CacheGuard
from socialcards.core.cache.placeholder import PLACEHOLDER_PNG
from socialcards.models.schemas import CacheOptions, CardLike

PNG_MEDIA_TYPE = "image/png"
NO_STORE = "no-store"


def card_filename(card: Optional[CardLike]) -> str:
    """Filename for a card download, e.g. ``article-social-card.png``."""
    name = getattr(card, "template_name", None) or "card"
    for suffix in ("_social_card", "_card"):
        if name.endswith(suffix) and name != suffix.lstrip("_"):
            name = name[: -len(suffix)]
            break
    return f"{name.replace('_', '-')}-social-card.png"


def social_card_response(
    data: bytes, filename: Optional[str] = None, settings: Optional[Settings] = None
) -> Response:
    """Wrap PNG bytes in a response with inline disposition and cache headers."""
    settings = settings or get_settings()

    disposition = "inline"
    if filename:
        disposition = f'inline; filename="{filename}"'

    headers = {"Content-Disposition": disposition}
    if not settings.is_development:
        headers["Cache-Control"] = f"public, max-age={settings.response_max_age}"

    return Response(content=data, media_type=PNG_MEDIA_TYPE, headers=headers)


def placeholder_response() -> Response:
    """The placeholder PNG, inline without a filename and never stored by caches."""
    return Response(
        content=PLACEHOLDER_PNG,
        media_type=PNG_MEDIA_TYPE,
        headers={"Content-Disposition": "inline", "Cache-Control": NO_STORE},
    )


async def send_social_card(
    guard: CacheGuard,
    card: Optional[CardLike],
    options: Optional[CacheOptions] = None,
    filename: Optional[str] = None,
) -> Response:
    """
    Produce a card through the cache guard and respond with it.

    The guard never raises, so this always answers with a PNG. Public cache
    headers are only sent for a successfully produced card.
    """
    data = await guard.produce(card, options)
    if data is PLACEHOLDER_PNG:
        return placeholder_response()
    return social_card_response(data, filename or card_filename(card), guard.settings)
