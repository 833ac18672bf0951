"""Channel-sum similarity scoring for near-duplicate images."""

from .accumulate import ChannelSums, accumulate
from .score import (
    DivisionByZeroError,
    DominantChannel,
    accumulate_and_score,
    dominant_channel,
    is_match,
    score,
)

__all__ = [
    "ChannelSums",
    "accumulate",
    "DivisionByZeroError",
    "DominantChannel",
    "accumulate_and_score",
    "dominant_channel",
    "is_match",
    "score",
]
