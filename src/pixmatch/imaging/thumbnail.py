"""
Thumbnail normalization.

Brings an image to a requested size before comparison. Three geometries are
supported:

- cover (preserve aspect, fill and crop): scale until the target box is fully
  covered, then take the centered target-sized region
- contain (preserve aspect, no fill): scale until the image fits inside the box;
  output keeps the scaled size, no padding
- stretch (no aspect preservation): resample straight to the target size

Resampling is bicubic. Pillow widens the filter support when downscaling, so
reductions are antialiased.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Tuple

from PIL import Image

from .raw import RawImage, DecodeError, decode_image
from ..logging import get_logger

logger = get_logger(__name__)

RESAMPLE = Image.Resampling.BICUBIC

# Formats whose Pillow writer honours a ``quality`` option
_QUALITY_FORMATS = {"JPEG", "WEBP", "AVIF"}

_FORMAT_ALIASES = {"JPG": "JPEG", "TIF": "TIFF"}


class UnsupportedFormatError(Exception):
    """Raised when no encoder is available for the requested output format."""


class FitMode(Enum):
    COVER = "cover"
    CONTAIN = "contain"
    STRETCH = "stretch"


@dataclass(frozen=True)
class ThumbnailRequest:
    width: int = 0  # 0 keeps the source width
    height: int = 0  # 0 keeps the source height
    preserve_aspect_ratio: bool = True
    fill_and_crop: bool = False
    quality: int = 100
    format: str = "PNG"

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Target size must not be negative: {self.width}x{self.height}")
        if not 0 <= self.quality <= 100:
            raise ValueError(f"Quality must be within 0-100, got {self.quality}")

    @property
    def fit_mode(self) -> FitMode:
        if not self.preserve_aspect_ratio:
            return FitMode.STRETCH
        return FitMode.COVER if self.fill_and_crop else FitMode.CONTAIN

    def target_size(self, source_width: int, source_height: int) -> Tuple[int, int]:
        return (self.width or source_width, self.height or source_height)


@dataclass(frozen=True)
class Thumbnail:
    width: int
    height: int
    format: str
    data: bytes

    def decode(self) -> RawImage:
        return decode_image(self.data)


def resolve_format(name: str) -> str:
    """
    Map a user-supplied format tag onto a Pillow writer name.

    Raises:
        UnsupportedFormatError: If Pillow has no writer for the format
    """
    key = name.strip().lstrip(".").upper()
    key = _FORMAT_ALIASES.get(key, key)
    Image.init()
    if key not in Image.SAVE:
        raise UnsupportedFormatError(f"No encoder available for format {name!r}")
    return key


def resize_image(image: Image.Image, request: ThumbnailRequest) -> Image.Image:
    """Apply the request's geometry to a Pillow image. No encoding happens here."""
    source_width, source_height = image.size
    target_width, target_height = request.target_size(source_width, source_height)
    mode = request.fit_mode

    if mode is FitMode.STRETCH:
        return image.resize((target_width, target_height), RESAMPLE)

    if mode is FitMode.CONTAIN:
        scale = min(target_width / source_width, target_height / source_height)
        size = (
            max(1, round(source_width * scale)),
            max(1, round(source_height * scale)),
        )
        return image.resize(size, RESAMPLE)

    # Cover: the axis not bounded by the box overflows and is cropped evenly
    # on both sides. The crop is expressed in source coordinates so that the
    # image is resampled once, keeping sub-pixel offsets.
    scale = max(target_width / source_width, target_height / source_height)
    scaled_width = source_width * scale
    scaled_height = source_height * scale
    offset_x = max(0.0, (scaled_width - target_width) / 2)
    offset_y = max(0.0, (scaled_height - target_height) / 2)
    box = (
        offset_x / scale,
        offset_y / scale,
        min(source_width, (offset_x + target_width) / scale),
        min(source_height, (offset_y + target_height) / scale),
    )
    logger.debug(
        f"Cover {source_width}x{source_height} -> {target_width}x{target_height}: "
        f"scale={scale:.4f}, offset=({offset_x:.2f}, {offset_y:.2f})"
    )
    return image.resize((target_width, target_height), RESAMPLE, box=box)


def encode_image(image: Image.Image, format: str, quality: int = 100) -> bytes:
    """Encode a Pillow image, passing ``quality`` only to formats that use it."""
    writer = resolve_format(format)
    options = {"quality": quality} if writer in _QUALITY_FORMATS else {}
    if writer == "JPEG" and image.mode not in ("RGB", "L", "CMYK"):
        image = image.convert("RGB")

    output = io.BytesIO()
    try:
        image.save(output, format=writer, **options)
    except (KeyError, OSError, ValueError) as exc:
        raise UnsupportedFormatError(f"Failed to encode as {writer}: {exc}") from exc
    return output.getvalue()


def normalize(source: RawImage, request: ThumbnailRequest) -> Thumbnail:
    """
    Resize a decoded image per ``request`` and encode the result.

    Args:
        source: Decoded source pixels
        request: Target size, geometry flags, quality and output format

    Returns:
        Thumbnail with its final dimensions and encoded bytes

    Raises:
        InvalidImageError: If the source has zero area
        DecodeError: If the source buffer cannot be turned into an image
        UnsupportedFormatError: If the output format has no encoder
    """
    source.require_area()
    writer = resolve_format(request.format)

    try:
        image = source.to_pil()
    except (ValueError, TypeError) as exc:
        raise DecodeError(f"Source buffer is not a readable RGB image: {exc}") from exc

    resized = resize_image(image, request)
    data = encode_image(resized, writer, request.quality)
    width, height = resized.size

    logger.debug(
        f"Normalized {source.width}x{source.height} to {width}x{height} "
        f"({request.fit_mode.value}, {writer}, {len(data)} bytes)"
    )
    return Thumbnail(width=width, height=height, format=writer, data=data)


def make_thumbnail(image_bytes: bytes, request: ThumbnailRequest) -> bytes:
    """Decode encoded image bytes, normalize them and return the encoded thumbnail."""
    return normalize(decode_image(image_bytes), request).data


def save_thumbnail(source_path: Path, thumbnail_path: Path, request: ThumbnailRequest) -> Thumbnail:
    """Create a thumbnail of an image file and write it to ``thumbnail_path``."""
    thumbnail = normalize(decode_image(Path(source_path).read_bytes()), request)
    Path(thumbnail_path).write_bytes(thumbnail.data)
    logger.info(f"Wrote {thumbnail.width}x{thumbnail.height} thumbnail to {thumbnail_path}")
    return thumbnail
