"""
Dominant-channel similarity score.

The score compares one channel of two images: the channel that dominates
image A under a fixed, asymmetric rule. Averages are taken with integer
division over ``width * 3 * height`` (a third of the per-pixel mean) and the
difference is halved with truncation toward zero. Match thresholds in use
(0.75 after rounding to 3 places) were tuned against exactly this arithmetic,
so none of it is smoothed out here.

Identical inputs always score exactly 1.0. A brighter image B scores
``1 - d/100``; a brighter image A wraps around to roughly ``d/100``, where
``d`` is the halved difference of the truncated averages.
"""

from enum import Enum

from ..imaging.raw import decode_image
from ..logging import get_logger
from .accumulate import ChannelSums, accumulate

logger = get_logger(__name__)


class DivisionByZeroError(ZeroDivisionError):
    """Raised when an image has zero area and cannot be averaged."""


class DominantChannel(Enum):
    RED = "r"
    GREEN = "g"
    BLUE = "b"

    def of(self, sums: ChannelSums) -> int:
        return getattr(sums, self.value)


def dominant_channel(sums: ChannelSums) -> DominantChannel:
    """
    Pick the channel to compare on.

    Red beats blue first; only then is red checked against green. Blue wins
    every case where red does not exceed it, whatever green holds.
    """
    if sums.r > sums.b:
        return DominantChannel.RED if sums.r > sums.g else DominantChannel.GREEN
    return DominantChannel.BLUE


def _trunc_div(numerator: int, denominator: int) -> int:
    # Integer division rounding toward zero, unlike floor division
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def score(
    sums_a: ChannelSums,
    width_a: int,
    height_a: int,
    sums_b: ChannelSums,
    width_b: int,
    height_b: int,
) -> float:
    """
    Score how closely image B matches image A on A's dominant channel.

    Args:
        sums_a: Channel sums of image A
        width_a: Width of image A in pixels
        height_a: Height of image A in pixels
        sums_b: Channel sums of image B
        width_b: Width of image B in pixels
        height_b: Height of image B in pixels

    Returns:
        Similarity in [0, 1]; 1.0 for identical inputs

    Raises:
        DivisionByZeroError: If either image has zero area
    """
    max_a = width_a * 3 * height_a
    max_b = width_b * 3 * height_b
    if max_a == 0 or max_b == 0:
        raise DivisionByZeroError(
            f"Cannot average a zero-area image ({width_a}x{height_a} vs {width_b}x{height_b})"
        )

    channel = dominant_channel(sums_a)
    average_a = abs(_trunc_div(channel.of(sums_a), max_a))
    average_b = abs(_trunc_div(channel.of(sums_b), max_b))
    raw = _trunc_div(average_a - average_b, 2)

    result = abs((raw + 100) / 100)
    if result > 1.0:
        result -= 1.0

    logger.debug(
        f"Scored on {channel.name}: avg_a={average_a}, avg_b={average_b}, "
        f"raw={raw}, result={result}"
    )
    return result


def is_match(similarity: float, threshold: float = 0.75, precision: int = 3) -> bool:
    """Round the score to ``precision`` places and require it to exceed ``threshold``."""
    return round(similarity, precision) > threshold


def accumulate_and_score(image_a_bytes: bytes, image_b_bytes: bytes) -> float:
    """
    Decode two encoded images and score B against A.

    No resizing happens; callers wanting size-independent comparisons
    normalize B to A's dimensions first.
    """
    image_a = decode_image(image_a_bytes)
    image_b = decode_image(image_b_bytes)
    return score(
        accumulate(image_a), image_a.width, image_a.height,
        accumulate(image_b), image_b.width, image_b.height,
    )
