"""Exceptions raised by the speech synthesis pipeline."""

from __future__ import annotations

from typing import Any


class TTSError(RuntimeError):
    """Base error raised for speech generation failures."""


class SynthesisValidationError(TTSError):
    """Raised when a request is rejected before any provider call is made."""


class ConfigurationError(TTSError):
    """Raised when the configured provider cannot be used (e.g. missing API key)."""


class ProviderError(TTSError):
    """Wrap transport or API failures when communicating with a TTS provider."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(str(detail))
        self.status_code = status_code
        self.detail = detail


__all__ = [
    "ConfigurationError",
    "ProviderError",
    "SynthesisValidationError",
    "TTSError",
]
