"""
Raw RGB pixel buffers.

A RawImage is the decoded form every comparison works on: interleaved R,G,B
bytes, one row every ``stride`` bytes. Rows may carry trailing padding, which
readers must skip.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from ..logging import get_logger

logger = get_logger(__name__)

BYTES_PER_PIXEL = 3


class InvalidImageError(Exception):
    """Raised when an image has zero area or an inconsistent buffer layout."""


class DecodeError(Exception):
    """Raised when image bytes cannot be decoded into pixels."""


@dataclass(frozen=True)
class RawImage:
    width: int
    height: int
    buffer: bytes
    stride: int = 0  # 0 means tightly packed rows

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise InvalidImageError(f"Negative dimensions: {self.width}x{self.height}")
        if self.stride == 0:
            object.__setattr__(self, "stride", self.width * BYTES_PER_PIXEL)
        if self.stride < self.width * BYTES_PER_PIXEL:
            raise InvalidImageError(
                f"Stride {self.stride} is shorter than a row of {self.width} pixels"
            )
        if len(self.buffer) < self.stride * self.height:
            raise InvalidImageError(
                f"Buffer holds {len(self.buffer)} bytes, "
                f"need {self.stride * self.height} for {self.height} rows"
            )

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def require_area(self) -> None:
        """Raise InvalidImageError unless the image has at least one pixel."""
        if self.is_empty:
            raise InvalidImageError(f"Image has zero area: {self.width}x{self.height}")

    def pixels(self) -> np.ndarray:
        """Return a read-only (height, width, 3) uint8 view with row padding dropped."""
        rows = np.frombuffer(
            self.buffer, dtype=np.uint8, count=self.stride * self.height
        ).reshape(self.height, self.stride)
        pixels = rows[:, : self.width * BYTES_PER_PIXEL].reshape(
            self.height, self.width, BYTES_PER_PIXEL
        )
        # bytearray and memoryview buffers would otherwise yield a writable view
        pixels.setflags(write=False)
        return pixels

    def to_pil(self) -> Image.Image:
        self.require_area()
        return Image.fromarray(np.ascontiguousarray(self.pixels()))

    @classmethod
    def from_pil(cls, image: Image.Image) -> RawImage:
        if image.mode != "RGB":
            image = image.convert("RGB")
        width, height = image.size
        return cls(width=width, height=height, buffer=image.tobytes())


def decode_image(data: bytes) -> RawImage:
    """
    Decode an encoded image (PNG, JPEG, ...) into a packed RGB RawImage.

    Raises:
        DecodeError: If Pillow cannot identify or read the data
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            raw = RawImage.from_pil(img)
    except Exception as exc:
        raise DecodeError(f"Failed to decode image data: {exc}") from exc

    logger.debug(f"Decoded {len(data)} bytes into {raw.width}x{raw.height} RGB")
    return raw


def load_image(path: Path) -> RawImage:
    """Read and decode an image file. Missing files surface as OSError."""
    return decode_image(Path(path).read_bytes())
