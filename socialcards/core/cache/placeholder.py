"""
Placeholder Image
=================

1x1 fully transparent PNG (8-bit grayscale with alpha, alpha 0) served
whenever a card cannot be produced.
"""

import base64

PLACEHOLDER_PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

PLACEHOLDER_PNG: bytes = base64.b64decode(PLACEHOLDER_PNG_BASE64)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
