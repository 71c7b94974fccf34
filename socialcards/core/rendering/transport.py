"""
Markup Transport
================

Hand rendered markup to the browser either as a self-contained data URI
or, for very large documents, through a short-lived temporary file.
"""

from typing import Iterator, Optional
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import quote
import os
import tempfile

from socialcards.config.logging import get_logger
from socialcards.models.schemas import NavigationTarget

logger = get_logger(__name__)

DEFAULT_FILE_THRESHOLD = 1_000_000


def data_uri_for(markup: str) -> str:
    """Percent-encode markup into a ``data:text/html`` URI."""
    return "data:text/html;charset=utf-8," + quote(markup.encode("utf-8"), safe="")


class MarkupTransport:
    """Choose between data URI and file transport by markup length."""

    def __init__(
        self, threshold: int = DEFAULT_FILE_THRESHOLD, temp_dir: Optional[Path] = None
    ) -> None:
        self.threshold = threshold
        self.temp_dir = temp_dir
        self.logger = logger.bind(component="markup_transport")

    def uses_file(self, markup: str) -> bool:
        return len(markup) >= self.threshold

    @contextmanager
    def prepare(self, markup: str) -> Iterator[NavigationTarget]:
        """
        Yield a navigation target for the markup.

        Navigate inside the ``with`` block: a temporary file backing a
        ``file://`` target is removed when the block exits, whether the
        navigation succeeded or raised.
        """
        if not self.uses_file(markup):
            yield NavigationTarget(url=data_uri_for(markup), mode="data_uri")
            return

        if self.temp_dir is not None:
            self.temp_dir.mkdir(parents=True, exist_ok=True)

        fd, name = tempfile.mkstemp(
            prefix="social_card_",
            suffix=".html",
            dir=str(self.temp_dir) if self.temp_dir is not None else None,
        )
        path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(markup)

            self.logger.info(
                "Markup too large for data URI, using temporary file",
                markup_length=len(markup),
                path=str(path),
            )
            yield NavigationTarget(url=path.as_uri(), mode="file", path=path)
        finally:
            path.unlink(missing_ok=True)
