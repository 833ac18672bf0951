"""Public API for reconciling a directory of good images with a directory of bad copies."""

from __future__ import annotations

import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config import Settings
from ..imaging.raw import RawImage, DecodeError, InvalidImageError, load_image
from ..imaging.thumbnail import UnsupportedFormatError
from ..similarity.score import DivisionByZeroError, is_match
from .compare import compare_images
from .scan import file_timestamp, list_images, within_time_window
from ..logging import get_logger

logger = get_logger(__name__)

# Anything that makes a single comparison unusable; the pair counts as "no match"
COMPARISON_ERRORS = (
    DecodeError,
    InvalidImageError,
    DivisionByZeroError,
    UnsupportedFormatError,
    OSError,
)


@dataclass(frozen=True)
class Replacement:
    """A bad file whose content was restored under a good file's name."""
    bad_name: str
    good_name: str
    score: float


@dataclass(frozen=True)
class ComparisonFailure:
    good_name: str
    bad_name: Optional[str]
    reason: str


@dataclass
class ReconcileReport:
    replacements: List[Replacement] = field(default_factory=list)
    name_matches: List[str] = field(default_factory=list)
    unmatched: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failures: List[ComparisonFailure] = field(default_factory=list)
    failed_deletes: List[str] = field(default_factory=list)

    @property
    def processed(self) -> List[str]:
        return [replacement.bad_name for replacement in self.replacements]


def reconcile_directories(
    good_dir: Path,
    bad_dir: Path,
    settings: Optional[Settings] = None,
    dry_run: bool = False,
) -> ReconcileReport:
    """
    Find, for every good image, a near-duplicate bad copy and restore its name.

    Good files that already exist under the same name in ``bad_dir`` are left
    alone. For the rest, bad candidates stamped within the configured time
    window are compared one by one; the first whose rounded score exceeds the
    threshold is copied over ``bad_dir/<good name>`` and withdrawn from later
    searches.

    Args:
        good_dir: Directory holding correctly named images
        bad_dir: Directory holding misnamed or degraded copies
        settings: Thresholds, time window and file handling options
        dry_run: Decide matches without touching the file system

    Returns:
        ReconcileReport describing every decision

    Raises:
        DirectoryScanError: If either directory cannot be listed
    """
    settings = settings or Settings()
    good_dir = Path(good_dir)
    bad_dir = Path(bad_dir)

    good_names = list_images(good_dir, settings.file_type)
    candidates = list_images(bad_dir, settings.file_type)
    report = ReconcileReport()

    logger.info(
        f"Reconciling {len(good_names)} good images against {len(candidates)} candidates in {bad_dir}"
    )

    for good_name in good_names:
        if good_name in candidates:
            candidates.remove(good_name)
            report.name_matches.append(good_name)
            continue

        good_path = good_dir / good_name
        if settings.cutoff is not None and file_timestamp(good_path) > settings.cutoff:
            logger.debug(f"{good_name} is newer than the cutoff, skipping")
            report.skipped.append(good_name)
            continue

        try:
            reference = load_image(good_path)
        except COMPARISON_ERRORS as exc:
            logger.warning(f"Cannot read {good_name}, skipping: {exc}")
            report.failures.append(ComparisonFailure(good_name, None, str(exc)))
            continue

        replacement = _find_replacement(reference, good_path, bad_dir, candidates, settings, report, dry_run)
        if replacement is None:
            report.unmatched.append(good_name)
            continue

        candidates.remove(replacement.bad_name)
        report.replacements.append(replacement)
        logger.info(f"{replacement.bad_name} --> {replacement.good_name} (score {replacement.score:.3f})")

    if not dry_run:
        if settings.delete_replaced:
            for name in report.processed:
                if not _delete_with_retry(bad_dir / name, settings):
                    report.failed_deletes.append(name)
        if report.processed:
            write_processed_log(bad_dir / settings.processed_log_name, report.processed)

    logger.info(
        f"Reconcile complete: {len(report.replacements)} replaced, "
        f"{len(report.name_matches)} already named, {len(report.unmatched)} unmatched"
    )
    return report


def _find_replacement(
    reference: RawImage,
    good_path: Path,
    bad_dir: Path,
    candidates: List[str],
    settings: Settings,
    report: ReconcileReport,
    dry_run: bool,
) -> Optional[Replacement]:
    good_name = good_path.name

    for bad_name in candidates:
        bad_path = bad_dir / bad_name
        try:
            if not within_time_window(good_path, bad_path, settings.time_window):
                continue
            similarity = compare_images(reference, load_image(bad_path), settings)
        except COMPARISON_ERRORS as exc:
            logger.warning(f"Comparison of {good_name} with {bad_name} failed: {exc}")
            report.failures.append(ComparisonFailure(good_name, bad_name, str(exc)))
            continue

        if not is_match(similarity, settings.match_threshold, settings.score_precision):
            continue

        if not dry_run:
            try:
                shutil.copy2(bad_path, bad_dir / good_name)
            except OSError as exc:
                logger.warning(f"Failed to copy {bad_name} to {good_name}, trying next candidate: {exc}")
                continue

        return Replacement(bad_name=bad_name, good_name=good_name, score=similarity)

    return None


def _delete_with_retry(path: Path, settings: Settings) -> bool:
    for attempt in range(1, settings.delete_retries + 1):
        try:
            path.unlink()
            logger.info(f"Removed {path.name}")
            return True
        except FileNotFoundError:
            return True
        except OSError as exc:
            logger.warning(f"Failed to remove {path.name} (attempt {attempt}/{settings.delete_retries}): {exc}")
            if attempt < settings.delete_retries:
                time.sleep(settings.retry_delay.total_seconds())
    return False


def write_processed_log(log_path: Path, names: List[str]) -> None:
    """Append replaced bad file names to the processed log, one per line."""
    try:
        with open(log_path, "a", encoding="utf-8") as handle:
            for name in names:
                handle.write(f"{name}\n")
    except OSError as exc:
        logger.warning(f"Failed to update {log_path}: {exc}")
