"""Per-user submission state: two image slots, one instruction, one result."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from image_composer.compose.interfaces import ComposeEngineProtocol, CompositionResult
from image_composer.config import DEFAULT_INSTRUCTION
from image_composer.errors import ComposerError, ImageReadError, MissingInputError, ResultSaveError
from image_composer.image.encoder import EncodedImage, decode_data_uri, encode_file

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_NAME = "generated-image.png"
MISSING_INPUT_MESSAGE = "Please upload both a person image and a product image."


class ImageRole(str, Enum):
    PERSON = "person"
    PRODUCT = "product"


@dataclass
class CompositionSession:
    """Holds what the user has selected and the outcome of the last submission.

    ``submit`` is the error boundary: every :class:`ComposerError` becomes the
    single message in ``error`` and the result slot stays empty. Only one
    submission runs at a time; a submit issued while ``busy`` is ignored.
    """

    composer: ComposeEngineProtocol
    instruction: str = DEFAULT_INSTRUCTION
    person_image: Optional[EncodedImage] = None
    product_image: Optional[EncodedImage] = None
    result: Optional[CompositionResult] = None
    failure: Optional[ComposerError] = None
    busy: bool = field(default=False, init=False)

    @property
    def error(self) -> Optional[str]:
        return str(self.failure) if self.failure is not None else None

    @property
    def ready(self) -> bool:
        return not self.busy and self.person_image is not None and self.product_image is not None

    async def select_image(
        self,
        role: Union[ImageRole, str],
        path: Optional[Union[str, Path]],
        media_type: Optional[str] = None,
    ) -> Optional[EncodedImage]:
        """Encode ``path`` into the slot for ``role``.

        No file selected leaves the slot untouched. A read failure is reported
        through ``error`` and also leaves the slot untouched.
        """

        role = ImageRole(role)
        try:
            encoded = await encode_file(path, media_type)
        except ImageReadError as exc:
            logger.debug("Could not load %s image: %s", role.value, exc)
            self.failure = exc
            return None
        if encoded is None:
            return None
        if role is ImageRole.PERSON:
            self.person_image = encoded
        else:
            self.product_image = encoded
        if isinstance(self.failure, ImageReadError):
            self.failure = None
        logger.debug("Selected %s image %s (%s)", role.value, encoded.source, encoded.media_type)
        return encoded

    async def submit(self, instruction: Optional[str] = None) -> Optional[CompositionResult]:
        if self.busy:
            logger.warning("Submission ignored: a composition is already in flight")
            return self.result
        if instruction is not None:
            self.instruction = instruction
        if self.person_image is None or self.product_image is None:
            self.failure = MissingInputError(MISSING_INPUT_MESSAGE)
            return None

        self.failure = None
        self.result = None
        self.busy = True
        try:
            result = await self.composer.compose(self.person_image, self.product_image, self.instruction)
        except ComposerError as exc:
            logger.debug("Composition failed: %s", exc)
            self.failure = exc
            return None
        finally:
            self.busy = False

        self.result = result
        return result

    def save_result(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the generated image to ``path`` (the download action)."""

        if self.result is None or not self.result.image:
            raise RuntimeError("There is no generated image to save")
        _, payload = decode_data_uri(self.result.image)
        target = Path(path) if path is not None else Path(DEFAULT_DOWNLOAD_NAME)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as exc:
            raise ResultSaveError(f"Could not save image to {target}: {exc.strerror or exc}") from exc
        return target


__all__ = [
    "CompositionSession",
    "DEFAULT_DOWNLOAD_NAME",
    "ImageRole",
    "MISSING_INPUT_MESSAGE",
]
