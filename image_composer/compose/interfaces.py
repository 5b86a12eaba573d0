from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from image_composer.image.encoder import EncodedImage


@dataclass(frozen=True)
class CompositionRequest:
    person_image: EncodedImage
    product_image: EncodedImage
    instruction: str


@dataclass(frozen=True)
class CompositionResult:
    image: Optional[str] = None
    caption: Optional[str] = None


class ComposeEngineProtocol(Protocol):
    async def compose(
        self,
        person_image: Optional[EncodedImage],
        product_image: Optional[EncodedImage],
        instruction: str,
    ) -> CompositionResult:
        """Send both images and the instruction, return the composited image."""
