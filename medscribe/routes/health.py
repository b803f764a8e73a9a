# -*- coding: utf-8 -*-
"""Liveness and configuration check."""

from fastapi import APIRouter

from medscribe import __version__
from medscribe.config import settings

router = APIRouter()


@router.get("/health")
async def health():
    # no network calls; a missing key only shows up once /nlp/analyze is hit
    return {
        "status": "ok",
        "service": "medscribe",
        "version": __version__,
        "llm_model": settings.LLM_MODEL,
        "llm_configured": bool(settings.LLM_API_KEY),
        "asr_model": settings.ASR_MODEL,
    }
