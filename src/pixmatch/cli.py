from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import typer

from .config import Settings
from .logging import get_logger
from .imaging.raw import DecodeError, InvalidImageError
from .imaging.thumbnail import ThumbnailRequest, UnsupportedFormatError, save_thumbnail
from .reconcile.compare import compare_files
from .reconcile.model import reconcile_directories
from .reconcile.scan import DirectoryScanError
from .similarity.score import DivisionByZeroError, accumulate_and_score, is_match

app = typer.Typer(help="pixmatch – find and restore near-duplicate images", no_args_is_help=True)

IMAGE_ERRORS = (DecodeError, InvalidImageError, DivisionByZeroError)


def safe_echo(message: str) -> None:
    """Echo message with ASCII fallback for consoles that cannot encode it."""
    try:
        typer.echo(message)
    except UnicodeEncodeError:
        fallback_message = (
            message.replace("✅", "[OK]")
            .replace("🔄", "[REPL]")
            .replace("📁", "[DIR]")
            .replace("⚠️", "[WARN]")
        )
        typer.echo(fallback_message.encode("ascii", "replace").decode("ascii"))


@app.command()
def compare(
    image_a: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Reference image"),
    image_b: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Candidate image"),
    normalize: bool = typer.Option(True, "--normalize/--raw", help="Fit IMAGE_B to IMAGE_A's size before scoring"),
    threshold: float = typer.Option(0.75, help="Match threshold applied to the score rounded to 3 places"),
) -> None:
    """
    Score how closely IMAGE_B matches IMAGE_A and report the match decision.
    """
    logger = get_logger(__name__)

    try:
        settings = Settings(match_threshold=threshold)
    except ValueError as exc:
        logger.error(f"Invalid option: {exc}")
        raise typer.Exit(code=2) from exc

    try:
        if normalize:
            similarity = compare_files(image_a, image_b, settings)
        else:
            similarity = accumulate_and_score(image_a.read_bytes(), image_b.read_bytes())
    except (*IMAGE_ERRORS, UnsupportedFormatError) as exc:
        logger.error(f"Comparison failed: {exc}")
        raise typer.Exit(code=1) from exc

    matched = is_match(similarity, settings.match_threshold, settings.score_precision)
    safe_echo(f"Score: {similarity:.3f}")
    safe_echo(f"Match: {'yes' if matched else 'no'}")


@app.command()
def thumbnail(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Image to resize"),
    output: Path = typer.Argument(..., dir_okay=False, help="Where to write the thumbnail"),
    width: int = typer.Option(0, help="Target width (0 keeps the source width)"),
    height: int = typer.Option(0, help="Target height (0 keeps the source height)"),
    preserve_aspect: bool = typer.Option(True, "--preserve-aspect/--stretch", help="Keep the source aspect ratio"),
    fill: bool = typer.Option(False, "--fill/--contain", help="Cover the target box and crop the overflow"),
    quality: int = typer.Option(100, help="Encoder quality for lossy formats (0-100)"),
    format: Optional[str] = typer.Option(None, "--format", help="Output format (default: from OUTPUT suffix, else PNG)"),
) -> None:
    """
    Resize SOURCE to the requested box and write it to OUTPUT.
    """
    logger = get_logger(__name__)
    output_format = format or output.suffix.lstrip(".") or "PNG"

    try:
        request = ThumbnailRequest(
            width=width,
            height=height,
            preserve_aspect_ratio=preserve_aspect,
            fill_and_crop=fill,
            quality=quality,
            format=output_format,
        )
    except ValueError as exc:
        logger.error(f"Invalid option: {exc}")
        raise typer.Exit(code=2) from exc

    try:
        result = save_thumbnail(source, output, request)
    except UnsupportedFormatError as exc:
        logger.error(f"Unsupported output format: {exc}")
        raise typer.Exit(code=2) from exc
    except (*IMAGE_ERRORS, OSError) as exc:
        logger.error(f"Failed to create thumbnail: {exc}")
        raise typer.Exit(code=1) from exc

    safe_echo(f"✅ {result.width}x{result.height} {result.format} thumbnail written to {output}")


@app.command()
def reconcile(
    good: Path = typer.Option(
        ..., "--good", prompt="Please input the source image directory (good images)",
        exists=True, file_okay=False, help="Directory of correctly named images",
    ),
    bad: Path = typer.Option(
        ..., "--bad", prompt="Please input the destination image directory (incorrect images)",
        exists=True, file_okay=False, help="Directory of misnamed copies",
    ),
    file_type: str = typer.Option("jpg", help="Image file extension to scan"),
    threshold: float = typer.Option(0.75, help="Match threshold applied to the score rounded to 3 places"),
    window_minutes: float = typer.Option(5.0, help="Maximum timestamp distance between a pair, in minutes"),
    cutoff: Optional[datetime] = typer.Option(None, help="Ignore good images stamped after this moment"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report matches without copying or deleting"),
    delete_replaced: bool = typer.Option(False, "--delete-replaced", help="Delete bad copies once restored"),
) -> None:
    """
    Restore good file names onto matching copies in the bad directory.
    """
    logger = get_logger(__name__)

    try:
        settings = Settings(
            match_threshold=threshold,
            time_window=timedelta(minutes=window_minutes),
            file_type=file_type,
            cutoff=cutoff,
            delete_replaced=delete_replaced,
        )
    except ValueError as exc:
        logger.error(f"Invalid option: {exc}")
        raise typer.Exit(code=2) from exc

    try:
        report = reconcile_directories(good, bad, settings, dry_run=dry_run)
    except DirectoryScanError as exc:
        logger.error(f"Bad directory specified: {exc}")
        raise typer.Exit(code=1) from exc

    for replacement in report.replacements:
        safe_echo(f"🔄 {replacement.bad_name} --> {replacement.good_name} ({replacement.score:.3f})")
    for failure in report.failures:
        safe_echo(f"⚠️  {failure.good_name} / {failure.bad_name or '-'}: {failure.reason}")

    safe_echo(f"\n✅ Complete{' (dry run)' if dry_run else ''}")
    safe_echo(f"🔄 Replaced: {len(report.replacements)}")
    safe_echo(f"📁 Already named: {len(report.name_matches)}")
    safe_echo(f"📁 Unmatched: {len(report.unmatched)}")
    if report.skipped:
        safe_echo(f"📁 Skipped after cutoff: {len(report.skipped)}")
    if report.failed_deletes:
        safe_echo(f"⚠️  Could not delete: {', '.join(report.failed_deletes)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
