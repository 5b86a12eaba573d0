from __future__ import annotations


class ComposerError(Exception):
    """Base class for every failure surfaced to the user."""


class MissingInputError(ComposerError):
    """Raised when a submission is attempted without both images."""


class ImageReadError(ComposerError, OSError):
    """Raised when a selected image file cannot be read."""


class ResultSaveError(ComposerError, OSError):
    """Raised when the generated image cannot be written to disk."""


class GenerationFailedError(ComposerError):
    """Raised when the generation endpoint call itself fails."""


class NoImageReturnedError(GenerationFailedError):
    """Raised when the first candidate carries no image part."""


class ConfigurationError(ComposerError):
    """Raised when the runtime configuration is invalid."""


class MissingCredentialError(ConfigurationError):
    """Raised when the API key is absent at startup."""


__all__ = [
    "ComposerError",
    "ConfigurationError",
    "GenerationFailedError",
    "ImageReadError",
    "MissingCredentialError",
    "MissingInputError",
    "NoImageReturnedError",
    "ResultSaveError",
]
