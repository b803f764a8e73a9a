# -*- coding: utf-8 -*-
"""Audio ingest routes."""

import logging
import os
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from medscribe.config import settings
from medscribe.core.dependencies import get_owner_id
from medscribe.core.errors import TranscriptionError
from medscribe.services.asr_service import transcribe_audio

router = APIRouter()

logger = logging.getLogger(__name__)


@router.post("/transcribe")
async def transcribe(
    audio: UploadFile = File(..., description="Recorded consultation (webm/ogg/wav/mp3)"),
    owner_id: str = Depends(get_owner_id),
):
    """
    Upload and transcribe an audio recording.

    Returns ``{"text": ...}``; the text feeds ``/nlp/analyze``.
    """
    name = audio.filename or ""
    ext = os.path.splitext(name)[1] or "." + ((audio.content_type or "").split("/")[-1] or "webm")
    path = os.path.join(settings.TMP_DIR, f"{uuid.uuid4().hex[:12]}{ext}")

    raw = await audio.read()
    if not raw:
        return JSONResponse({"error": "Missing audio file for transcription."}, status_code=400)

    try:
        os.makedirs(settings.TMP_DIR, exist_ok=True)
        with open(path, "wb") as f:
            f.write(raw)
    except OSError as e:
        raise HTTPException(500, f"ingest failed: {e}")

    try:
        result = await run_in_threadpool(transcribe_audio, path)
    finally:
        os.remove(path)

    if result.error:
        logger.warning("Transcription for %s failed: %s", owner_id, result.error)
        return JSONResponse(result.model_dump(exclude_none=True), status_code=TranscriptionError.status_code)
    return result.model_dump(exclude_none=True)
