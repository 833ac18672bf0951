"""Size-independent comparison of two images on disk."""

from __future__ import annotations

from pathlib import Path

from ..config import Settings
from ..imaging.raw import RawImage, load_image
from ..imaging.thumbnail import ThumbnailRequest, normalize
from ..similarity.accumulate import accumulate
from ..similarity.score import score
from ..logging import get_logger

logger = get_logger(__name__)


def compare_images(reference: RawImage, candidate: RawImage, settings: Settings) -> float:
    """
    Score ``candidate`` against ``reference`` after fitting it to the reference size.

    The candidate is scaled to cover the reference dimensions and centre-cropped,
    round-tripped through the configured thumbnail codec, then both images are
    scored on the reference's dominant channel.
    """
    request = ThumbnailRequest(
        width=reference.width,
        height=reference.height,
        preserve_aspect_ratio=True,
        fill_and_crop=True,
        quality=settings.thumbnail_quality,
        format=settings.thumbnail_format,
    )
    fitted = normalize(candidate, request).decode()

    return score(
        accumulate(reference), reference.width, reference.height,
        accumulate(fitted), fitted.width, fitted.height,
    )


def compare_files(good_path: Path, bad_path: Path, settings: Settings) -> float:
    """Load two image files and score the bad copy against the good one."""
    similarity = compare_images(load_image(good_path), load_image(bad_path), settings)
    logger.debug(f"{Path(bad_path).name} vs {Path(good_path).name}: {similarity:.3f}")
    return similarity
