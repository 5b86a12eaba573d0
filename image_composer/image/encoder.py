"""Turn user-selected image files into base64 payloads ready for transport."""

from __future__ import annotations

import asyncio
import base64
import binascii
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from image_composer.errors import ImageReadError

__all__ = [
    "ACCEPTED_MEDIA_TYPES",
    "EncodedImage",
    "build_data_uri",
    "decode_data_uri",
    "encode_bytes",
    "encode_file",
    "split_data_uri",
]

ACCEPTED_MEDIA_TYPES = ("image/png", "image/jpeg", "image/webp")
FALLBACK_MEDIA_TYPE = "application/octet-stream"

_MEDIA_TYPE_RE = re.compile(r"^[\w.+-]+/[\w.+-]+$")

PathLike = Union[str, Path]


@dataclass(frozen=True)
class EncodedImage:
    """Base64 payload plus media type for one selected image."""

    source: str
    base64_payload: str
    media_type: str

    @property
    def data_uri(self) -> str:
        return build_data_uri(self.media_type, self.base64_payload)

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.base64_payload)


def build_data_uri(media_type: str, payload: str) -> str:
    return f"data:{media_type};base64,{payload}"


def split_data_uri(uri: str) -> tuple[str, str]:
    """Return ``(media_type, base64_payload)`` for a ``data:`` URI."""

    if not isinstance(uri, str) or not uri.startswith("data:"):
        raise ValueError("Not a data URI")
    header, sep, payload = uri.partition(",")
    if not sep:
        raise ValueError("Data URI has no payload separator")
    meta = header[len("data:"):]
    media_type, _, encoding = meta.partition(";")
    if encoding != "base64":
        raise ValueError("Only base64 data URIs are supported")
    return media_type or FALLBACK_MEDIA_TYPE, payload


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    media_type, payload = split_data_uri(uri)
    try:
        return media_type, base64.b64decode(payload, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise ValueError("Data URI payload is not valid base64") from exc


def _resolve_media_type(filename: Optional[str], declared: Optional[str]) -> str:
    if declared and _MEDIA_TYPE_RE.match(declared.strip()):
        return declared.strip().lower()
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return FALLBACK_MEDIA_TYPE


def _encode(data: bytes, source: str, media_type: str) -> EncodedImage:
    # Same split a browser performs on a FileReader data URL.
    uri = build_data_uri(media_type, base64.b64encode(data).decode("ascii"))
    resolved_type, payload = split_data_uri(uri)
    return EncodedImage(source=source, base64_payload=payload, media_type=resolved_type)


async def encode_bytes(
    data: bytes,
    filename: Optional[str] = None,
    media_type: Optional[str] = None,
) -> EncodedImage:
    """Encode an already-buffered upload."""

    resolved = _resolve_media_type(filename, media_type)
    return _encode(bytes(data), filename or "<memory>", resolved)


async def encode_file(
    path: Optional[PathLike],
    media_type: Optional[str] = None,
) -> Optional[EncodedImage]:
    """Read ``path`` fully and encode it.

    Returns ``None`` when no file was selected. The whole file is buffered in
    memory; there is no size limit. Read failures raise :class:`ImageReadError`
    and are not retried.
    """

    if path is None:
        return None
    file_path = Path(path)
    try:
        data = await asyncio.to_thread(file_path.read_bytes)
    except OSError as exc:
        raise ImageReadError(f"Could not read image {file_path}: {exc.strerror or exc}") from exc
    resolved = _resolve_media_type(file_path.name, media_type)
    return _encode(data, str(file_path), resolved)
