"""
Asset Inliner
=============

Embed local images, fonts and in-memory blobs into card markup as base64
data URIs so captures never depend on network fetches.
"""

from typing import Optional, Dict, Any, List, Tuple
from pathlib import Path
import base64
import io

from PIL import Image, UnidentifiedImageError  # type: ignore

from socialcards.config.logging import get_logger
from socialcards.config.settings import Settings, get_settings
from socialcards.models.schemas import InlinedAsset

logger = get_logger(__name__)


IMAGE_CONTENT_TYPES: Dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
}

FONT_CONTENT_TYPES: Dict[str, str] = {
    "woff2": "font/woff2",
    "woff": "font/woff",
    "ttf": "font/truetype",
    "otf": "font/opentype",
    "eot": "application/vnd.ms-fontobject",
}

DEFAULT_CONTENT_TYPES: Dict[str, str] = {
    "image": "image/png",
    "font": "font/truetype",
}

FONT_FORMATS: Dict[str, str] = {
    "woff2": "woff2",
    "woff": "woff",
    "ttf": "truetype",
    "otf": "opentype",
    "eot": "embedded-opentype",
}

# Pillow save formats for re-encoded variants
_VARIANT_FORMATS: Dict[str, Tuple[str, str]] = {
    "png": ("PNG", "png"),
    "jpg": ("JPEG", "jpg"),
    "jpeg": ("JPEG", "jpg"),
    "webp": ("WEBP", "webp"),
    "gif": ("PNG", "png"),
}


class InlineAssetError(Exception):
    """Raised when an asset cannot be inlined. Never leaves this module."""

    pass


def _extension(file_name: str) -> str:
    return Path(file_name).suffix.lower().lstrip(".")


def asset_kind(file_name: str) -> str:
    """Category of an asset by extension, ``image`` unless it is a known font."""
    return "font" if _extension(file_name) in FONT_CONTENT_TYPES else "image"


def content_type_for(file_name: str, kind: Optional[str] = None) -> str:
    """Look up the MIME type for a file name, falling back per category."""
    kind = kind or asset_kind(file_name)
    extension = _extension(file_name)
    table = FONT_CONTENT_TYPES if kind == "font" else IMAGE_CONTENT_TYPES
    if extension in table:
        return table[extension]
    return DEFAULT_CONTENT_TYPES.get(kind, DEFAULT_CONTENT_TYPES["image"])


class AssetInliner:
    """Convert image and font bytes into data URIs with size limits."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        debug: Optional[bool] = None,
        asset_paths: Optional[List[Path]] = None,
    ):
        self.settings = settings or get_settings()
        self.debug = self.settings.render_debug if debug is None else debug
        self.max_bytes = self.settings.max_inline_bytes
        self.warn_bytes = self.settings.warn_inline_bytes
        self.logger: Any = logger.bind(component="asset_inliner")  # structlog.BoundLoggerBase
        self._logo_data_url: Optional[str] = None
        self._logo_loaded = False

        if asset_paths is None:
            asset_paths = [
                path for path in (self.settings.images_path, self.settings.fonts_path) if path
            ]
        self.asset_paths = list(asset_paths)

    def describe(
        self, data: bytes, file_name_hint: str, kind: Optional[str] = None
    ) -> InlinedAsset:
        """
        Build the inlined representation of an asset.

        Args:
            data: Raw asset bytes
            file_name_hint: File name used for MIME detection
            kind: Asset category, ``image`` or ``font``, by extension when omitted

        Returns:
            InlinedAsset with the encoded data URI

        Raises:
            InlineAssetError: If the asset is missing or above the size ceiling
        """
        if data is None:
            raise InlineAssetError(f"No data for {file_name_hint}")

        size = len(data)
        if size > self.max_bytes:
            raise InlineAssetError(
                f"{file_name_hint} is {size} bytes, above the {self.max_bytes} byte limit"
            )

        if size > self.warn_bytes:
            self.logger.warning(
                "Large asset inlined, rendering may be slow",
                source=file_name_hint,
                size=size,
                warn_bytes=self.warn_bytes,
            )

        content_type = content_type_for(file_name_hint, kind)
        data_uri = f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"

        self._log_debug(
            "Asset inlined",
            source=file_name_hint,
            content_type=content_type,
            original_size=size,
            encoded_size=len(data_uri),
        )

        return InlinedAsset(
            source=file_name_hint,
            content_type=content_type,
            original_size=size,
            encoded_size=len(data_uri),
            data_uri=data_uri,
        )

    def inline(
        self, data: Optional[bytes], file_name_hint: str, kind: Optional[str] = None
    ) -> Optional[str]:
        """Return a data URI for the bytes, or None when they cannot be inlined."""
        try:
            return self.describe(data, file_name_hint, kind).data_uri  # type: ignore[arg-type]
        except InlineAssetError as e:
            self.logger.warning("Asset omitted", source=file_name_hint, reason=str(e))
            return None

    def inline_file(self, path: "str | Path", kind: Optional[str] = None) -> Optional[str]:
        """Read a local file and return its data URI, or None."""
        try:
            resolved = self.resolve(path)
            data = resolved.read_bytes()
        except (InlineAssetError, OSError) as e:
            self.logger.warning("Asset file unavailable", path=str(path), reason=str(e))
            return None

        return self.inline(data, resolved.name, kind)

    def resolve(self, path: "str | Path") -> Path:
        """Resolve a relative asset path against the configured asset directories."""
        candidate = Path(path)
        if candidate.is_absolute():
            if candidate.is_file():
                return candidate
            raise InlineAssetError(f"Asset not found: {candidate}")

        for directory in self.asset_paths:
            resolved = Path(directory) / candidate
            if resolved.is_file():
                return resolved

        if candidate.is_file():
            return candidate

        raise InlineAssetError(f"Asset not found: {path}")

    def font_face(
        self,
        family: str,
        path: "str | Path",
        weight: str = "normal",
        style: str = "normal",
        display: str = "swap",
    ) -> str:
        """
        Build an ``@font-face`` rule embedding the font as a data URI.

        Returns an empty string when the font cannot be inlined so templates
        can interpolate the result unconditionally.
        """
        data_uri = self.inline_file(path, kind="font")
        if not data_uri:
            return ""

        font_format = FONT_FORMATS.get(_extension(str(path)), "woff2")
        return (
            "@font-face {\n"
            f"  font-family: '{family}';\n"
            f"  src: url({data_uri}) format('{font_format}');\n"
            f"  font-weight: {weight};\n"
            f"  font-style: {style};\n"
            f"  font-display: {display};\n"
            "}"
        )

    def inline_image_variant(
        self,
        data: Optional[bytes],
        file_name_hint: str,
        max_size: Optional[Tuple[int, int]] = None,
        quality: int = 90,
    ) -> Optional[str]:
        """
        Re-encode an image blob before inlining it.

        Metadata is stripped, the image is optionally shrunk to fit
        ``max_size`` and saved at ``quality``. Undecodable input yields None.
        """
        if not data:
            return None

        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            self.logger.error("Failed to decode image variant", source=file_name_hint, error=str(e))
            return None

        save_format, extension = _VARIANT_FORMATS.get(_extension(file_name_hint), ("PNG", "png"))

        if max_size:
            image.thumbnail(max_size)

        if save_format == "JPEG" and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        output = io.BytesIO()
        save_kwargs: Dict[str, Any] = {"format": save_format, "optimize": True}
        if save_format in ("JPEG", "WEBP"):
            save_kwargs["quality"] = quality

        # A fresh save drops EXIF and other ancillary metadata
        image.save(output, **save_kwargs)
        variant = output.getvalue()

        self._log_debug(
            "Image variant processed",
            source=file_name_hint,
            original_size=len(data),
            variant_size=len(variant),
            dimensions=image.size,
        )

        return self.inline(variant, f"{Path(file_name_hint).stem}.{extension}", "image")

    def logo_data_url(self) -> Optional[str]:
        """Data URI of the configured logo, memoized per inliner."""
        if not self._logo_loaded:
            self._logo_loaded = True
            if self.settings.logo_path:
                self._logo_data_url = self.inline_file(self.settings.logo_path, kind="image")
        return self._logo_data_url

    def _log_debug(self, message: str, **kwargs: Any) -> None:
        if not self.debug:
            return
        self.logger.info(message, **kwargs)
