"""SQLite-backed repository for speech generation requests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

import aiosqlite


class RequestStatus(str, Enum):
    """Lifecycle of a speech generation request."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TtsRequestRecord:
    """Represents a submitted speech generation job."""

    id: int
    text: str
    language: str
    voice: str
    speed: float
    pitch: float
    status: RequestStatus
    created_at: datetime
    updated_at: datetime
    audio_url: str | None = None
    duration: float | None = None
    file_size: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "text": self.text,
            "language": self.language,
            "voice": self.voice,
            "speed": self.speed,
            "pitch": self.pitch,
            "status": self.status.value,
            "audio_url": self.audio_url,
            "duration": self.duration,
            "file_size": self.file_size,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class TtsRequestRepository:
    """Persist and retrieve speech generation requests from SQLite."""

    def __init__(self, database_path: Path):
        self._path = database_path
        self._connection: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Open the SQLite connection and ensure tables exist."""
        if self._connection is not None:
            return

        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._path)
        self._connection.row_factory = aiosqlite.Row
        await self._connection.execute("PRAGMA journal_mode=WAL;")
        await self._create_schema()

    async def _create_schema(self) -> None:
        assert self._connection is not None
        await self._connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS tts_requests (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                text TEXT NOT NULL,
                language TEXT NOT NULL,
                voice TEXT NOT NULL,
                speed REAL NOT NULL DEFAULT 1.0,
                pitch REAL NOT NULL DEFAULT 0.0,
                status TEXT NOT NULL DEFAULT 'pending',
                audio_url TEXT,
                duration REAL,
                file_size INTEGER,
                error TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_tts_requests_status ON tts_requests(status);
            """
        )
        await self._connection.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    def _row_to_record(self, row: aiosqlite.Row) -> TtsRequestRecord:
        return TtsRequestRecord(
            id=row["id"],
            text=row["text"],
            language=row["language"],
            voice=row["voice"],
            speed=row["speed"],
            pitch=row["pitch"],
            status=RequestStatus(row["status"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            audio_url=row["audio_url"],
            duration=row["duration"],
            file_size=row["file_size"],
            error=row["error"],
        )

    async def create_request(
        self,
        *,
        text: str,
        language: str,
        voice: str,
        speed: float = 1.0,
        pitch: float = 0.0,
    ) -> TtsRequestRecord:
        """Create a new pending request with empty audio fields."""
        assert self._connection is not None

        now = datetime.now(timezone.utc)
        cursor = await self._connection.execute(
            """
            INSERT INTO tts_requests
                (text, language, voice, speed, pitch, status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                text,
                language,
                voice,
                speed,
                pitch,
                RequestStatus.PENDING.value,
                now.isoformat(),
                now.isoformat(),
            ),
        )
        request_id = cursor.lastrowid
        await cursor.close()
        await self._connection.commit()
        assert request_id is not None

        return TtsRequestRecord(
            id=request_id,
            text=text,
            language=language,
            voice=voice,
            speed=speed,
            pitch=pitch,
            status=RequestStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    async def get_request(self, request_id: int) -> TtsRequestRecord | None:
        """Retrieve a single request by ID."""
        assert self._connection is not None

        cursor = await self._connection.execute(
            "SELECT * FROM tts_requests WHERE id = ?",
            (request_id,),
        )
        row = await cursor.fetchone()
        await cursor.close()

        if row is None:
            return None
        return self._row_to_record(row)

    async def complete_request(
        self,
        request_id: int,
        *,
        audio_url: str,
        duration: float,
        file_size: int,
    ) -> bool:
        """Attach the generated audio to a pending request."""
        assert self._connection is not None

        now = datetime.now(timezone.utc)
        cursor = await self._connection.execute(
            """
            UPDATE tts_requests
            SET status = ?, audio_url = ?, duration = ?, file_size = ?, updated_at = ?
            WHERE id = ? AND status = ?
            """,
            (
                RequestStatus.COMPLETED.value,
                audio_url,
                duration,
                file_size,
                now.isoformat(),
                request_id,
                RequestStatus.PENDING.value,
            ),
        )
        updated = cursor.rowcount
        await cursor.close()
        await self._connection.commit()
        return bool(updated)

    async def fail_request(self, request_id: int, error: str) -> bool:
        """Mark a pending request as failed; audio fields stay empty."""
        assert self._connection is not None

        now = datetime.now(timezone.utc)
        cursor = await self._connection.execute(
            """
            UPDATE tts_requests
            SET status = ?, error = ?, updated_at = ?
            WHERE id = ? AND status = ?
            """,
            (
                RequestStatus.FAILED.value,
                error,
                now.isoformat(),
                request_id,
                RequestStatus.PENDING.value,
            ),
        )
        updated = cursor.rowcount
        await cursor.close()
        await self._connection.commit()
        return bool(updated)


__all__ = ["RequestStatus", "TtsRequestRecord", "TtsRequestRepository"]
