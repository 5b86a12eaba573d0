from __future__ import annotations

from google import genai

from image_composer.compose.adapter import ImageComposer
from image_composer.config import ComposerConfig


def create_client(config: ComposerConfig) -> genai.Client:
    return genai.Client(api_key=config.api_key)


def create_composer(config: ComposerConfig, *, client: object | None = None) -> ImageComposer:
    """Wire a composer for ``config``; ``client`` overrides the Gemini client."""

    return ImageComposer(
        client=client if client is not None else create_client(config),
        model=config.model,
    )


__all__ = ["create_client", "create_composer"]
