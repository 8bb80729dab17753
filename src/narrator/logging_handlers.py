"""Custom logging handler and file retention utilities."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional


class DateStampedFileHandler(logging.FileHandler):
    """File handler that stores logs under date-stamped directories (UTC)."""

    def __init__(
        self,
        directory: str | Path,
        *,
        prefix: str = "narrator",
        encoding: str | None = "utf-8",
        mode: str = "a",
        delay: bool = False,
        errors: Optional[str] = None,
        current_time: datetime | None = None,
    ) -> None:
        timestamp = (current_time or datetime.now(timezone.utc)).astimezone(
            timezone.utc
        )
        date_folder = timestamp.strftime("%Y-%m-%d")
        file_name = f"{prefix}_{timestamp.strftime('%Y-%m-%d_%H-%M-%S')}_UTC.log"
        log_path = (Path(directory) / date_folder / file_name).resolve()

        log_path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(
            log_path,
            mode=mode,
            encoding=encoding,
            delay=delay,
            errors=errors,
        )


def cleanup_old_files(
    directories: list[str | Path],
    retention_hours: int,
    *,
    patterns: tuple[str, ...] = ("*.log",),
    logger: logging.Logger | None = None,
    now: datetime | None = None,
) -> tuple[int, int]:
    """
    Delete files older than the specified retention period.

    Args:
        directories: Directories to clean (searched recursively)
        retention_hours: Files older than this many hours are deleted (0 = disabled)
        patterns: Glob patterns selecting which files are eligible
        logger: Optional logger for reporting cleanup activity
        now: Reference time, defaults to the current UTC time

    Returns:
        Tuple of (files_deleted, errors_encountered)
    """
    if retention_hours <= 0:
        return (0, 0)

    cutoff_time = (now or datetime.now(timezone.utc)) - timedelta(hours=retention_hours)
    files_deleted = 0
    errors = 0

    for directory in directories:
        dir_path = Path(directory).resolve()
        if not dir_path.exists():
            continue

        for pattern in patterns:
            for path in dir_path.rglob(pattern):
                try:
                    mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
                    if mtime < cutoff_time:
                        path.unlink()
                        files_deleted += 1
                        if logger:
                            logger.debug(f"Deleted expired file: {path}")
                except OSError as e:
                    errors += 1
                    if logger:
                        logger.warning(f"Failed to delete {path}: {e}")

        # Date folders left empty by the sweep
        for child in dir_path.iterdir():
            if child.is_dir() and not any(child.iterdir()):
                try:
                    child.rmdir()
                except OSError:
                    pass  # Recreated concurrently

    if logger and files_deleted > 0:
        logger.info(
            f"Cleanup complete: {files_deleted} file(s) deleted, "
            f"{errors} error(s) encountered"
        )

    return (files_deleted, errors)


__all__ = ["DateStampedFileHandler", "cleanup_old_files"]
