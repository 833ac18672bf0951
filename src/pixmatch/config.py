from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass
class Settings:
    match_threshold: float = 0.75
    score_precision: int = 3
    time_window: timedelta = timedelta(minutes=5)
    file_type: str = "jpg"
    processed_log_name: str = "processed.txt"
    thumbnail_format: str = "PNG"
    thumbnail_quality: int = 100
    cutoff: Optional[datetime] = None
    delete_replaced: bool = False
    delete_retries: int = 3
    retry_delay: timedelta = timedelta(seconds=10)

    def __post_init__(self) -> None:
        if not 0.0 <= self.match_threshold <= 1.0:
            raise ValueError(f"match_threshold must be within [0, 1], got {self.match_threshold}")
        if self.score_precision < 0:
            raise ValueError(f"score_precision must be non-negative, got {self.score_precision}")
        if self.time_window < timedelta(0):
            raise ValueError("time_window must not be negative")
        if not 0 <= self.thumbnail_quality <= 100:
            raise ValueError(f"thumbnail_quality must be within 0-100, got {self.thumbnail_quality}")
        if self.delete_retries < 1:
            raise ValueError(f"delete_retries must be at least 1, got {self.delete_retries}")
        self.file_type = self.file_type.lstrip(".")
        if not self.file_type:
            raise ValueError("file_type must not be empty")
