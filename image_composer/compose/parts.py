"""Response parts as a closed set of variants and the rule that merges them."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Union

from image_composer.image.encoder import FALLBACK_MEDIA_TYPE, build_data_uri

from .interfaces import CompositionResult

__all__ = ["BinaryPart", "TextPart", "ResponsePart", "classify_part", "first_candidate_parts", "merge_parts"]


@dataclass(frozen=True)
class BinaryPart:
    data: bytes
    media_type: str

    def to_data_uri(self) -> str:
        return build_data_uri(self.media_type, base64.b64encode(self.data).decode("ascii"))


@dataclass(frozen=True)
class TextPart:
    text: str


ResponsePart = Union[BinaryPart, TextPart]


def _coerce_bytes(blob) -> bytes | None:
    if isinstance(blob, (bytes, bytearray)):
        return bytes(blob)
    if isinstance(blob, str):
        try:
            return base64.b64decode(blob, validate=True)
        except (ValueError, binascii.Error):
            return None
    return None


def classify_part(part: Any) -> Optional[ResponsePart]:
    """Map an SDK part onto a variant; ``None`` for parts that carry neither."""

    inline = getattr(part, "inline_data", None)
    if inline is not None:
        blob = _coerce_bytes(getattr(inline, "data", None))
        if blob is not None:
            media_type = getattr(inline, "mime_type", None) or FALLBACK_MEDIA_TYPE
            return BinaryPart(data=blob, media_type=media_type)
    text = getattr(part, "text", None)
    if isinstance(text, str) and text:
        return TextPart(text=text)
    return None


def first_candidate_parts(response: Any) -> Sequence[Any]:
    """Parts of the first candidate; later candidates are never consulted."""

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ()
    content = getattr(candidates[0], "content", None)
    return tuple(getattr(content, "parts", None) or ())


def merge_parts(parts: Iterable[ResponsePart]) -> CompositionResult:
    """Fold parts in order into a result.

    Last write wins: every image part replaces the previous image, every text
    part replaces the previous caption.
    """

    image: Optional[str] = None
    caption: Optional[str] = None
    for part in parts:
        if isinstance(part, BinaryPart):
            image = part.to_data_uri()
        elif isinstance(part, TextPart):
            caption = part.text
        else:
            raise TypeError(f"Unsupported response part: {type(part).__name__}")
    return CompositionResult(image=image, caption=caption)
