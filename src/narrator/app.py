"""Application factory for the FastAPI service."""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager, suppress
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .logging_handlers import DateStampedFileHandler, cleanup_old_files
from .repository import TtsRequestRepository
from .routers.audio import router as audio_router
from .routers.tts import router as tts_router
from .routers.voices import router as voices_router
from .services.audio_store import AudioFileStore
from .services.tts_service import TTSService

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _configure_logging() -> None:
    """Configure logging based on LOG_LEVEL / LOG_FILE / LOG_DIR environment variables."""
    # Load .env file first to ensure LOG_FILE is available
    load_dotenv()

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT)

    handlers: list[logging.Handler] = []

    log_file = os.getenv("LOG_FILE")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        dated_handler = DateStampedFileHandler(log_dir)
        dated_handler.setFormatter(formatter)
        handlers.append(dated_handler)

    # Always add console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    logging.getLogger("narrator").setLevel(log_level)

    # Also capture uvicorn logs
    logging.getLogger("uvicorn").setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(log_level)
    logging.getLogger("uvicorn.error").setLevel(log_level)

    # httpx logs every request URL at INFO; only show it when debugging
    if log_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def create_app() -> FastAPI:
    # Configure logging first thing
    _configure_logging()

    settings = get_settings()

    project_root = Path(__file__).resolve().parent.parent.parent

    def _resolve_under(base: Path, p: Path) -> Path:
        # Allow absolute paths as-is (useful for tests and external mounts).
        if p.is_absolute():
            return p.resolve()
        resolved = (base / p).resolve()
        if not resolved.is_relative_to(base):
            raise ValueError(f"Configured path {resolved} escapes project root {base}")
        return resolved

    audio_store = AudioFileStore(_resolve_under(project_root, settings.audio_dir))
    repository = TtsRequestRepository(_resolve_under(project_root, settings.database_path))
    tts_service = TTSService(settings, audio_store)

    cleanup_interval_seconds = 3600
    cleanup_task: asyncio.Task | None = None
    log_dir = os.getenv("LOG_DIR")

    async def _run_cleanup() -> None:
        await asyncio.to_thread(audio_store.cleanup_expired, settings.audio_retention_hours)
        if log_dir:
            await asyncio.to_thread(
                cleanup_old_files,
                [log_dir],
                settings.audio_retention_hours,
                logger=logging.getLogger("narrator.cleanup"),
            )

    async def _cleanup_loop() -> None:
        while True:
            try:
                await _run_cleanup()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logging.warning("Audio cleanup run failed: %s", exc)
            await asyncio.sleep(cleanup_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        nonlocal cleanup_task
        audio_store.ensure_directory()
        await repository.initialize()
        if settings.audio_retention_hours > 0:
            cleanup_task = asyncio.create_task(_cleanup_loop())
        try:
            yield
        finally:
            if cleanup_task is not None:
                cleanup_task.cancel()
                with suppress(asyncio.CancelledError):
                    await cleanup_task
            try:
                await asyncio.wait_for(tts_service.close(), timeout=10.0)
            except asyncio.TimeoutError:
                logging.warning("TTS client shutdown timed out after 10s")
            await repository.close()

    app = FastAPI(
        title="Narrator TTS Backend",
        version="0.1.0",
        description="Text-to-speech backend that chunks text, synthesizes it with a cloud provider and serves the audio.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.audio_store = audio_store
    app.state.tts_repository = repository
    app.state.tts_service = tts_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tts_router)
    app.include_router(voices_router)
    app.include_router(audio_router)

    @app.get("/health", tags=["health"])
    async def healthcheck() -> dict[str, str | bool]:
        return {
            "status": "ok",
            "provider": settings.tts_provider,
            "configured": settings.provider_configured,
        }

    return app


__all__ = ["create_app"]
