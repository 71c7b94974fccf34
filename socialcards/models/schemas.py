"""
Pydantic Models and Schemas
===========================

Core data models for cards, capture results, cache options and the
preview API. Cards are plain immutable values; any object exposing the
same attributes satisfies ``CardLike``.
"""

from typing import Optional, List, Dict, Any, Union, Literal, Protocol, runtime_checkable
from datetime import timedelta
from pathlib import Path
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator


CacheKeyPart = Union[str, int, float, bool]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def underscore(name: str) -> str:
    """Convert a logical card type (``ArticleCard``) to ``article_card``."""
    name = name.rsplit(".", 1)[-1]
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


@runtime_checkable
class CardLike(Protocol):
    """Anything that supplies dimensions, a template reference and assigns."""

    width: int
    height: int

    @property
    def template_name(self) -> str: ...

    @property
    def assigns(self) -> Dict[str, Any]: ...


class Card(BaseModel):
    """One renderable card: dimensions, template reference and assign-map."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., min_length=1, description="Logical card type, e.g. ArticleCard")
    width: int = Field(1200, gt=0, le=4000, description="Card width in pixels")
    height: int = Field(630, gt=0, le=4000, description="Card height in pixels")
    assigns: Dict[str, Any] = Field(default_factory=dict, description="Template assigns")
    template: Optional[str] = Field(None, description="Explicit template name override")

    @property
    def template_name(self) -> str:
        return self.template or underscore(self.kind)


class InlinedAsset(BaseModel):
    """A binary asset embedded as a data URI."""

    source: str = Field(..., description="Source path or blob name hint")
    content_type: str = Field(..., description="Detected MIME type")
    original_size: int = Field(..., ge=0, description="Raw size in bytes")
    encoded_size: int = Field(..., ge=0, description="Data URI length")
    data_uri: str = Field(..., description="data:<mime>;base64,... URI")


class NavigationTarget(BaseModel):
    """Where the browser should navigate to load rendered markup."""

    url: str = Field(..., description="data: or file:// URI")
    mode: Literal["data_uri", "file"] = Field(..., description="Transport used")
    path: Optional[Path] = Field(None, description="Temporary file for file transport")


class CaptureResult(BaseModel):
    """Result of a browser capture."""

    png_data: bytes = Field(..., description="PNG binary data", exclude=True)
    file_size: int = Field(..., description="File size in bytes")
    width: int = Field(..., description="Viewport width")
    height: int = Field(..., description="Viewport height")
    transport: Literal["data_uri", "file"] = Field(..., description="Markup transport used")
    retried: bool = Field(False, description="Blank-frame retry happened")


class CacheOptions(BaseModel):
    """Caching options for producing a card."""

    cache_key: Optional[Union[str, List[CacheKeyPart]]] = Field(
        None, description="Cache key, list parts are joined with '-'"
    )
    ttl: Optional[timedelta] = Field(None, description="How long a result stays cached")
    cache_in_development: bool = Field(False, description="Cache in development too")

    @field_validator("ttl", mode="before")
    @classmethod
    def parse_ttl(cls, v: Any) -> Any:
        """Accept plain seconds for the TTL."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return timedelta(seconds=v)
        return v

    @property
    def resolved_key(self) -> Optional[str]:
        if self.cache_key is None:
            return None
        if isinstance(self.cache_key, list):
            return "-".join(str(part) for part in self.cache_key)
        return self.cache_key


# API Models
class PreviewSummary(BaseModel):
    """A registered preview group and its examples."""

    name: str
    examples: List[str] = Field(default_factory=list)


class HealthStatus(BaseModel):
    """Health check response."""

    status: str
    version: str
    environment: str
    components: Dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    error_code: str
    details: Optional[Dict[str, Any]] = None
    request_id: Optional[str] = None
