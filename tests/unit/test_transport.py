"""
Unit Tests for Markup Transport
===============================

Data URI versus temporary file selection and cleanup.
"""

from pathlib import Path
from urllib.parse import unquote

import pytest

from socialcards.core.rendering.transport import MarkupTransport, data_uri_for

PREFIX = "data:text/html;charset=utf-8,"


class TestDataUri:
    """Test data URI encoding."""

    def test_markup_is_percent_encoded(self):
        uri = data_uri_for("<h1 class=\"title\">Café & co</h1>")

        assert uri.startswith(PREFIX)
        body = uri[len(PREFIX):]
        assert "<" not in body and " " not in body and "&" not in body
        assert "%C3%A9" in body
        assert unquote(body) == "<h1 class=\"title\">Café & co</h1>"

    def test_small_markup_uses_data_uri(self):
        transport = MarkupTransport(threshold=100)

        with transport.prepare("<p>small</p>") as target:
            assert target.mode == "data_uri"
            assert target.path is None
            assert unquote(target.url[len(PREFIX):]) == "<p>small</p>"


class TestFileTransport:
    """Test temporary file transport."""

    def test_markup_at_threshold_uses_file(self, tmp_path):
        transport = MarkupTransport(threshold=10, temp_dir=tmp_path)
        markup = "x" * 10

        with transport.prepare(markup) as target:
            assert target.mode == "file"
            assert target.url.startswith("file://")
            assert target.path.parent == tmp_path
            assert target.path.read_text(encoding="utf-8") == markup

        assert not target.path.exists()

    def test_markup_below_threshold_uses_data_uri(self):
        transport = MarkupTransport(threshold=10)
        assert not transport.uses_file("x" * 9)
        assert transport.uses_file("x" * 10)

    def test_default_threshold_is_one_million_characters(self):
        transport = MarkupTransport()
        assert not transport.uses_file("a" * 999_999)
        assert transport.uses_file("a" * 1_000_000)

    def test_file_removed_when_navigation_raises(self, tmp_path):
        transport = MarkupTransport(threshold=1, temp_dir=tmp_path)
        seen = []

        with pytest.raises(RuntimeError, match="navigation failed"):
            with transport.prepare("<p>boom</p>") as target:
                seen.append(target.path)
                assert target.path.exists()
                raise RuntimeError("navigation failed")

        assert seen and not seen[0].exists()
        assert list(tmp_path.iterdir()) == []

    def test_files_are_uniquely_named(self, tmp_path):
        transport = MarkupTransport(threshold=1, temp_dir=tmp_path)

        with transport.prepare("<p>a</p>") as first, transport.prepare("<p>b</p>") as second:
            assert first.path != second.path
            assert Path(first.path).name.startswith("social_card_")
            assert first.path.suffix == ".html"

    def test_unicode_markup_written_as_utf8(self, tmp_path):
        transport = MarkupTransport(threshold=1, temp_dir=tmp_path)

        with transport.prepare("<p>日本</p>") as target:
            assert target.path.read_bytes() == "<p>日本</p>".encode("utf-8")
