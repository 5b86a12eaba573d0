"""Multimodal composition against the generation endpoint."""

from .adapter import DEFAULT_MODEL, ImageComposer
from .interfaces import ComposeEngineProtocol, CompositionRequest, CompositionResult
from .parts import BinaryPart, TextPart

__all__ = [
    "BinaryPart",
    "ComposeEngineProtocol",
    "CompositionRequest",
    "CompositionResult",
    "DEFAULT_MODEL",
    "ImageComposer",
    "TextPart",
]
