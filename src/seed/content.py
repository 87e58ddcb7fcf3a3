"""Sample content bodies used by the fixture generator.

Each sample is keyed by its media type. Binary samples are base64
encoded before they land in an item's ``content`` field.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass

from core.constants import (
    ARTICLE_TYPE,
    AUDIO_TYPE,
    DOCUMENT_TYPE,
    IMAGE_TYPE,
    NOTE_TYPE,
    VIDEO_TYPE,
)

ARTICLE_MIN_LENGTH = 600

_PNG_PIXEL = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
)
_SVG_DOCUMENT = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16">'
    b'<circle cx="8" cy="8" r="6" fill="#36c"/></svg>'
)
_SHORT_TEXT = b"Storage conformance runs on plain notes. Nothing more is needed here."
_HTML_TEXT = b"<p>Federated posts travel between servers.</p><p>Each one has an owner.</p>"
_MARKDOWN_TEXT = (
    b"# Field notes\n\nCollections keep their members in order. "
    + b"Every page starts after the last member of the previous one. " * 12
)


@dataclass(frozen=True)
class ContentSample:
    """Raw content body with its media type."""

    media_type: str
    data: bytes

    @property
    def is_text(self) -> bool:
        return self.media_type.startswith("text") or self.media_type == "image/svg+xml"

    @property
    def object_type(self) -> str:
        """Vocabulary type matching the sample's media type."""
        return object_type_for(self.media_type, self.data)

    def encoded(self) -> str:
        """Return the body as text, base64 encoding binary samples."""
        if self.is_text:
            return self.data.decode("utf-8")
        return base64.b64encode(self.data).decode("ascii")

    def summary(self) -> str | None:
        """Return the first sentence of a text sample."""
        if not self.media_type.startswith("text"):
            return None
        text = self.data.decode("utf-8")
        return text.split(".", 1)[0]


CONTENT_SAMPLES = (
    ContentSample("text/plain", _SHORT_TEXT),
    ContentSample("text/html", _HTML_TEXT),
    ContentSample("text/markdown", _MARKDOWN_TEXT),
    ContentSample("image/svg+xml", _SVG_DOCUMENT),
    ContentSample("image/png", _PNG_PIXEL),
)


def object_type_for(media_type: str, data: bytes) -> str:
    """Map a media type and body to an object vocabulary type."""
    if media_type.startswith("text"):
        if b"<svg" in data:
            return DOCUMENT_TYPE
        return ARTICLE_TYPE if len(data) > ARTICLE_MIN_LENGTH else NOTE_TYPE
    if media_type == "image/svg+xml":
        return DOCUMENT_TYPE
    if media_type.startswith("video"):
        return VIDEO_TYPE
    if media_type.startswith("audio"):
        return AUDIO_TYPE
    if media_type.startswith("image"):
        return IMAGE_TYPE
    return NOTE_TYPE


def sample_for(media_type: str) -> ContentSample | None:
    """Return the first sample with a media type, if any."""
    for sample in CONTENT_SAMPLES:
        if sample.media_type == media_type:
            return sample
    return None
