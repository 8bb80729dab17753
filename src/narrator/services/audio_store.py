"""Disk storage for generated audio files."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from uuid import uuid4

from ..logging_handlers import cleanup_old_files

logger = logging.getLogger(__name__)

AUDIO_URL_PREFIX = "/api/audio"
AUDIO_FILE_PATTERNS = ("*.wav", "*.mp3")

_SAFE_NAME = re.compile(r"^[A-Za-z0-9_-]+\.(wav|mp3)$")


class AudioStoreError(RuntimeError):
    """Base error raised for audio storage failures."""


class AudioNotFound(AudioStoreError):
    """Raised when a requested audio file does not exist."""


class AudioFileStore:
    """Persist assembled audio under a single directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def ensure_directory(self) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)

    async def save(self, content: bytes, extension: str) -> str:
        """Write ``content`` to a new uniquely named file and return its name."""
        filename = f"{uuid4()}{extension}"
        path = self._directory / filename
        await asyncio.to_thread(self._write, path, content)
        logger.info("Stored %d bytes of audio as %s", len(content), filename)
        return filename

    def _write(self, path: Path, content: bytes) -> None:
        self.ensure_directory()
        path.write_bytes(content)

    def resolve(self, filename: str) -> Path:
        """Return the path for a stored file, rejecting anything outside the store."""
        name = Path(filename).name
        if name != filename or not _SAFE_NAME.match(name):
            raise AudioNotFound(filename)
        path = self._directory / name
        if not path.is_file():
            raise AudioNotFound(filename)
        return path

    def url_for(self, filename: str) -> str:
        return f"{AUDIO_URL_PREFIX}/{filename}"

    def cleanup_expired(self, retention_hours: int) -> int:
        deleted, _ = cleanup_old_files(
            [self._directory],
            retention_hours,
            patterns=AUDIO_FILE_PATTERNS,
            logger=logger,
        )
        return deleted


__all__ = [
    "AUDIO_URL_PREFIX",
    "AudioFileStore",
    "AudioNotFound",
    "AudioStoreError",
]
