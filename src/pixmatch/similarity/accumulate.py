"""Per-channel pixel sums over a raw RGB buffer."""

from dataclasses import dataclass

import numpy as np

from ..imaging.raw import RawImage
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChannelSums:
    """Unnormalized totals of every R, G and B byte in an image."""
    r: int
    g: int
    b: int


def accumulate(image: RawImage) -> ChannelSums:
    """
    Sum each colour channel across all pixels, row by row.

    Each row contributes its first ``width * 3`` bytes read as R,G,B triples;
    any stride padding after them is ignored.

    Raises:
        InvalidImageError: If the image has zero width or height
    """
    image.require_area()

    # uint64 cannot overflow below 2**56 pixels at 255 per channel
    totals = image.pixels().sum(axis=(0, 1), dtype=np.uint64)
    sums = ChannelSums(r=int(totals[0]), g=int(totals[1]), b=int(totals[2]))

    logger.debug(f"Accumulated {image.width}x{image.height}: {sums}")
    return sums
