"""Compose a person photo and a product photo into one image with Gemini."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from .compose import CompositionResult, ImageComposer
    from .config import ComposerConfig, load_config
    from .factory import create_composer
    from .image import EncodedImage, encode_bytes, encode_file
    from .session import CompositionSession

__all__ = [
    "ComposerConfig",
    "CompositionResult",
    "CompositionSession",
    "EncodedImage",
    "ImageComposer",
    "create_composer",
    "encode_bytes",
    "encode_file",
    "load_config",
]

_EXPORTS = {
    "ComposerConfig": ".config",
    "load_config": ".config",
    "CompositionResult": ".compose",
    "ImageComposer": ".compose",
    "create_composer": ".factory",
    "EncodedImage": ".image",
    "encode_bytes": ".image",
    "encode_file": ".image",
    "CompositionSession": ".session",
}


def __getattr__(name: str) -> Any:  # pragma: no cover - dispatch helper
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(name)
    value = getattr(import_module(module_name, __name__), name)
    globals()[name] = value
    return value
