"""
Preview Routes
==============

Developer endpoints listing registered example cards and rendering them
as markup or PNG. Disabled unless ``show_previews`` is set.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import HTMLResponse

from socialcards.api.responses import send_social_card
from socialcards.config.settings import get_settings
from socialcards.core.cache.guard import CacheGuard
from socialcards.core.previews import PreviewNotFound, PreviewRegistry, preview_registry
from socialcards.models.schemas import Card, PreviewSummary


def ensure_previews_enabled() -> None:
    if not get_settings().show_previews:
        raise HTTPException(status_code=404, detail="Social card previews are disabled")


router = APIRouter(
    prefix="/previews", tags=["Previews"], dependencies=[Depends(ensure_previews_enabled)]
)


def get_registry() -> PreviewRegistry:
    return preview_registry


def get_guard(request: Request) -> CacheGuard:
    return request.app.state.card_guard  # type: ignore[no-any-return]


def _build(registry: PreviewRegistry, name: str, example_name: str) -> Card:
    try:
        return registry.build(name, example_name)
    except PreviewNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("")
async def list_previews(registry: PreviewRegistry = Depends(get_registry)) -> List[PreviewSummary]:
    """List preview groups and their examples."""
    return [PreviewSummary(name=name, examples=registry.examples(name)) for name in registry.names()]


@router.get("/{name}")
async def show_preview(name: str, registry: PreviewRegistry = Depends(get_registry)) -> PreviewSummary:
    """List the examples of one preview group."""
    try:
        return PreviewSummary(name=name, examples=registry.examples(name))
    except PreviewNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{name}/{example_name}.png")
async def preview_png(
    name: str,
    example_name: str,
    registry: PreviewRegistry = Depends(get_registry),
    guard: CacheGuard = Depends(get_guard),
) -> Response:
    """Capture an example card, uncached."""
    card = _build(registry, name, example_name)
    return await send_social_card(guard, card)


@router.get("/{name}/{example_name}", response_class=HTMLResponse)
async def preview_html(
    name: str,
    example_name: str,
    registry: PreviewRegistry = Depends(get_registry),
    guard: CacheGuard = Depends(get_guard),
) -> HTMLResponse:
    """Render an example card's markup without capturing it."""
    card = _build(registry, name, example_name)
    return HTMLResponse(await guard.renderer.render(card))
