# -*- coding: utf-8 -*-
"""Request dependencies: caller identity and the ASR model."""

import os
from typing import Optional

from fastapi import Header, HTTPException
from faster_whisper import WhisperModel

from medscribe.config import settings
from medscribe.utils.text_processing import collapse_repeated_tokens

# =========================
# Caller identity
# =========================

def get_owner_id(x_user_id: Optional[str] = Header(None)) -> str:
    """
    Identity of the already-authenticated caller.

    Authentication happens upstream (gateway / auth provider), which forwards
    the user id in ``X-User-Id``; it is not re-checked here.
    """
    owner_id = (x_user_id or "").strip()
    if not owner_id:
        raise HTTPException(401, "Authentication required.")
    return owner_id


# =========================
# ASR configuration
# =========================
ASR_MODEL_NAME     = settings.ASR_MODEL
ASR_LANGUAGE       = settings.ASR_LANGUAGE or None
ASR_COMPUTE_TYPE   = settings.ASR_COMPUTE_TYPE
ASR_BEAM_SIZE      = int(os.getenv("ASR_BEAM_SIZE", "5"))
ASR_VAD_FILTER     = settings.ASR_VAD
ASR_NO_SPEECH_PROB = float(os.getenv("ASR_NO_SPEECH_PROB", "0.6"))

# Post-ASR filters
CLEAN_MIN_CHARS     = int(os.getenv("CLEAN_MIN_CHARS", "2"))
CLEAN_DROP_LOW_PROB = os.getenv("CLEAN_DROP_LOW_PROB", "true").lower() == "true"
CLEAN_LOGPROB_MIN   = float(os.getenv("CLEAN_LOGPROB_MIN", "-1.0"))

_model: Optional[WhisperModel] = None


def get_asr() -> WhisperModel:
    """Lazily load and return the ASR model."""
    global _model
    if _model is None:
        _model = WhisperModel(ASR_MODEL_NAME, compute_type=ASR_COMPUTE_TYPE)
    return _model


def _drop_bad_segment(text: str, avg_logprob: Optional[float]) -> bool:
    """Filter out noise / low-confidence segments."""
    if not text or len(text.strip()) < CLEAN_MIN_CHARS:
        return True
    if CLEAN_DROP_LOW_PROB and avg_logprob is not None and avg_logprob < CLEAN_LOGPROB_MIN:
        return True
    return False


def join_segments(segments) -> str:
    """Join usable segments (objects with .text / .avg_logprob) into one text."""
    parts = []
    for seg in segments:
        text = (getattr(seg, "text", "") or "").strip()
        if _drop_bad_segment(text, getattr(seg, "avg_logprob", None)):
            continue
        parts.append(collapse_repeated_tokens(text))
    return " ".join(parts).strip()


def transcribe_file(audio_path: str, model: Optional[WhisperModel] = None) -> str:
    """Transcribe an audio file into plain text (no diarization)."""
    model = model or get_asr()
    segments, _info = model.transcribe(
        audio_path,
        language=ASR_LANGUAGE,
        beam_size=ASR_BEAM_SIZE,
        vad_filter=ASR_VAD_FILTER,
        no_speech_threshold=ASR_NO_SPEECH_PROB,
    )
    return join_segments(segments)
