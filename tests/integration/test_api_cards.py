"""
Integration Tests for Card API
==============================

Preview and health endpoints over the real renderer, with the browser
capture mocked out.
"""

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from socialcards.api.main import create_app
from socialcards.api.responses import send_social_card
from socialcards.core.cache.guard import CacheGuard
from socialcards.core.cache.placeholder import PLACEHOLDER_PNG
from socialcards.core.cache.store import MemoryCacheStore
from socialcards.core.rendering.capture import CaptureError
from socialcards.core.rendering.card_renderer import CardRenderer
from socialcards.models.schemas import CacheOptions, Card

from tests.conftest import make_settings
from tests.utils.mocks import capture_result, mock_capture_session

pytestmark = pytest.mark.integration


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def capture_session(png_bytes):
    return mock_capture_session(png_bytes)


@pytest.fixture
def guard(settings, capture_session):
    return CacheGuard(
        renderer=CardRenderer(settings=settings),
        capture_session=capture_session,
        store=MemoryCacheStore(),
        settings=settings,
    )


@pytest.fixture
def client(guard):
    app = create_app()
    with TestClient(app) as client:
        app.state.card_guard = guard
        yield client


class TestServiceEndpoints:
    """Test root and health endpoints."""

    def test_root_endpoint(self, client):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["health_check"] == "/health"
        assert data["previews"] == "/previews"
        assert "X-Request-ID" in response.headers

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"] == {"cache": "healthy"}
        assert data["environment"] == "testing"


class TestPreviewEndpoints:
    """Test preview listing and rendering."""

    def test_list_previews(self, client):
        response = client.get("/previews")

        assert response.status_code == status.HTTP_200_OK
        groups = {item["name"]: item["examples"] for item in response.json()}
        assert groups["example_social_card"] == [
            "colorful",
            "dark_theme",
            "default",
            "long_title",
            "no_subtitle",
        ]
        assert groups["image_example_card"] == ["image_example"]
        assert groups["local_fonts_card"] == ["local_fonts_example"]

    def test_show_preview(self, client):
        response = client.get("/previews/example_social_card")

        assert response.status_code == status.HTTP_200_OK
        assert "dark_theme" in response.json()["examples"]

    def test_unknown_preview_is_404(self, client):
        response = client.get("/previews/nope")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error_code"] == "404"

    def test_unknown_example_is_404(self, client, capture_session):
        response = client.get("/previews/example_social_card/nope.png")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        capture_session.capture.assert_not_awaited()

    def test_preview_html(self, client, capture_session):
        response = client.get("/previews/example_social_card/default")

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/html")
        assert "Welcome to Social Cards" in response.text
        capture_session.capture.assert_not_awaited()

    def test_preview_png(self, client, capture_session, png_bytes):
        response = client.get("/previews/example_social_card/dark_theme.png")

        assert response.status_code == status.HTTP_200_OK
        assert response.content == png_bytes
        assert response.headers["content-type"] == "image/png"
        assert response.headers["content-disposition"] == (
            'inline; filename="example-social-card.png"'
        )
        assert response.headers["cache-control"] == "public, max-age=86400"

        markup, width, height = capture_session.capture.call_args.args
        assert "Dark Theme Example" in markup
        assert (width, height) == (1200, 630)

    def test_preview_png_is_not_cached(self, client, capture_session):
        client.get("/previews/example_social_card/default.png")
        client.get("/previews/example_social_card/default.png")

        assert capture_session.capture.await_count == 2

    def test_capture_failure_serves_placeholder(self, client, capture_session):
        capture_session.capture.side_effect = CaptureError("Browser launch failed")

        response = client.get("/previews/example_social_card/default.png")

        assert response.status_code == status.HTTP_200_OK
        assert response.content == PLACEHOLDER_PNG
        assert response.headers["content-type"] == "image/png"
        assert response.headers["cache-control"] == "no-store"
        assert response.headers["content-disposition"] == "inline"

    def test_previews_disabled(self, client, monkeypatch):
        monkeypatch.setattr(
            "socialcards.api.routes.previews.get_settings",
            lambda: make_settings(show_previews=False),
        )

        assert client.get("/previews").status_code == status.HTTP_404_NOT_FOUND
        assert client.get("/previews/example_social_card/default.png").status_code == 404


class TestHostRoute:
    """Test serving cards from a host application's own route."""

    @pytest.fixture
    def host_client(self, guard):
        app = FastAPI()

        @app.get("/articles/{article_id}/social_card.png")
        async def article_card(article_id: int):
            card = Card(kind="ExampleSocialCard", assigns={"title": f"Article {article_id}"})
            return await send_social_card(
                guard, card, CacheOptions(cache_key=["article", article_id])
            )

        return TestClient(app)

    def test_keyed_card_captured_once(self, host_client, guard, capture_session, png_bytes):
        first = host_client.get("/articles/42/social_card.png")
        second = host_client.get("/articles/42/social_card.png")

        assert first.content == second.content == png_bytes
        capture_session.capture.assert_awaited_once()
        assert guard.store._data.keys() == {"article-42"}

    def test_different_keys_capture_separately(self, host_client, capture_session):
        host_client.get("/articles/1/social_card.png")
        host_client.get("/articles/2/social_card.png")

        assert capture_session.capture.await_count == 2

    def test_failed_keyed_card_is_not_publicly_cached(self, host_client, guard, capture_session, png_bytes):
        capture_session.capture.side_effect = [
            CaptureError("net::ERR_FAILED"),
            capture_result(png_bytes),
        ]

        failed = host_client.get("/articles/7/social_card.png")
        recovered = host_client.get("/articles/7/social_card.png")

        assert failed.status_code == status.HTTP_200_OK
        assert failed.content == PLACEHOLDER_PNG
        assert failed.headers["cache-control"] == "no-store"
        assert "filename" not in failed.headers["content-disposition"]
        assert recovered.content == png_bytes
        assert recovered.headers["cache-control"] == "public, max-age=86400"
        assert guard.store._data.keys() == {"article-7"}
