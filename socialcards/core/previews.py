"""
Preview Registry
================

Explicit registry of example cards for developer previews.
Groups and examples are registered in code at import time.
"""

from typing import Callable, Dict, List

from socialcards.config.logging import get_logger
from socialcards.models.schemas import Card

logger = get_logger(__name__)

CardFactory = Callable[[], Card]


class PreviewNotFound(LookupError):
    """Raised when a preview group or example is not registered."""

    pass


class PreviewRegistry:
    """Named groups of zero-argument card factories."""

    def __init__(self) -> None:
        self._previews: Dict[str, Dict[str, CardFactory]] = {}

    def register(self, name: str, example_name: str, factory: CardFactory) -> None:
        examples = self._previews.setdefault(name, {})
        if example_name in examples:
            raise ValueError(f"Preview {name}/{example_name} is already registered")
        examples[example_name] = factory
        logger.debug("Preview registered", preview=name, example=example_name)

    def preview(self, name: str) -> Callable[[CardFactory], CardFactory]:
        """Decorator registering a factory under its function name."""

        def decorator(factory: CardFactory) -> CardFactory:
            self.register(name, factory.__name__, factory)
            return factory

        return decorator

    def names(self) -> List[str]:
        return sorted(self._previews)

    def examples(self, name: str) -> List[str]:
        if name not in self._previews:
            raise PreviewNotFound(f"Preview not found: {name}")
        return sorted(self._previews[name])

    def build(self, name: str, example_name: str) -> Card:
        """Build the card for a registered example."""
        try:
            factory = self._previews[name][example_name]
        except KeyError:
            raise PreviewNotFound(f"Preview not found: {name}/{example_name}") from None
        return factory()

    def clear(self) -> None:
        self._previews.clear()


preview_registry = PreviewRegistry()
