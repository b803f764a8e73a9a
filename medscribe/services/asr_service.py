# -*- coding: utf-8 -*-
"""ASR (Automatic Speech Recognition) service."""

import logging

from medscribe.core.dependencies import transcribe_file
from medscribe.core.models import TranscriptionResult

__all__ = ["transcribe_audio"]

logger = logging.getLogger(__name__)


def transcribe_audio(audio_path: str, model=None) -> TranscriptionResult:
    """
    Transcribe an audio file.

    Args:
        audio_path: Path to the stored upload
        model: Optional preloaded WhisperModel (defaults to the lazy singleton)

    Returns:
        ``{text}`` on success, ``{error}`` when the model fails or hears nothing
    """
    try:
        text = transcribe_file(audio_path, model=model)
    except Exception as e:
        logger.exception("Transcription failed for %s", audio_path)
        return TranscriptionResult(error=f"{type(e).__name__}: {e}")

    if not text:
        return TranscriptionResult(error="Whisper returned empty transcription.")
    return TranscriptionResult(text=text)
