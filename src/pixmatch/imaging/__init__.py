"""Decoding, raw pixel buffers and thumbnail normalization."""

from .raw import RawImage, InvalidImageError, DecodeError, decode_image, load_image
from .thumbnail import (
    FitMode,
    Thumbnail,
    ThumbnailRequest,
    UnsupportedFormatError,
    make_thumbnail,
    normalize,
    save_thumbnail,
)

__all__ = [
    "RawImage",
    "InvalidImageError",
    "DecodeError",
    "decode_image",
    "load_image",
    "FitMode",
    "Thumbnail",
    "ThumbnailRequest",
    "UnsupportedFormatError",
    "make_thumbnail",
    "normalize",
    "save_thumbnail",
]
