from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from google.genai import types

from image_composer.errors import GenerationFailedError, MissingInputError, NoImageReturnedError
from image_composer.image.encoder import EncodedImage

from .interfaces import ComposeEngineProtocol, CompositionRequest, CompositionResult
from .parts import classify_part, first_candidate_parts, merge_parts

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-image-preview"
RESPONSE_MODALITIES = ("IMAGE", "TEXT")
NO_IMAGE_MESSAGE = (
    "The model did not return an image. Please try again with a different prompt or images."
)


def _image_part(image: EncodedImage) -> types.Part:
    return types.Part(inline_data=types.Blob(data=image.to_bytes(), mime_type=image.media_type))


def build_contents(request: CompositionRequest) -> list[types.Content]:
    """Person image, product image, then instruction; the model relies on this order."""

    parts = [
        _image_part(request.person_image),
        _image_part(request.product_image),
        types.Part.from_text(text=request.instruction),
    ]
    return [types.Content(role="user", parts=parts)]


def build_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(response_modalities=list(RESPONSE_MODALITIES))


@dataclass
class ImageComposer(ComposeEngineProtocol):
    """Single-round-trip composition against a Gemini image model."""

    client: object
    model: str = DEFAULT_MODEL

    async def compose(
        self,
        person_image: Optional[EncodedImage],
        product_image: Optional[EncodedImage],
        instruction: str,
    ) -> CompositionResult:
        if person_image is None or product_image is None:
            raise MissingInputError("Both a person image and a product image are required.")

        request = CompositionRequest(
            person_image=person_image,
            product_image=product_image,
            instruction=instruction or "",
        )
        logger.debug(
            "compose model=%s person=%s (%s) product=%s (%s) instruction_chars=%d",
            self.model,
            person_image.source,
            person_image.media_type,
            product_image.source,
            product_image.media_type,
            len(request.instruction),
        )

        try:
            response = await self.client.aio.models.generate_content(  # type: ignore[attr-defined]
                model=self.model,
                contents=build_contents(request),
                config=build_config(),
            )
            parts = [classify_part(part) for part in first_candidate_parts(response)]
            result = merge_parts(part for part in parts if part is not None)
        except Exception as exc:
            logger.debug("Error calling %s: %s", self.model, exc)
            raise GenerationFailedError(f"Failed to generate image: {exc}") from exc

        if not result.image:
            raise NoImageReturnedError(NO_IMAGE_MESSAGE)
        return result


__all__ = ["DEFAULT_MODEL", "ImageComposer", "build_config", "build_contents"]
