"""Image encoding helpers."""

from .encoder import (
    ACCEPTED_MEDIA_TYPES,
    EncodedImage,
    build_data_uri,
    decode_data_uri,
    encode_bytes,
    encode_file,
    split_data_uri,
)

__all__ = [
    "ACCEPTED_MEDIA_TYPES",
    "EncodedImage",
    "build_data_uri",
    "decode_data_uri",
    "encode_bytes",
    "encode_file",
    "split_data_uri",
]
