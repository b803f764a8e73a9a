# -*- coding: utf-8 -*-
"""Services module for the medscribe API."""

from medscribe.services.asr_service import transcribe_audio
from medscribe.services.nlp_service import analyze_transcript
from medscribe.services.report_service import render_report
from medscribe.services.session_store import SessionStore, PatientRecord, SessionRecord, get_store

__all__ = [
    "transcribe_audio",
    "analyze_transcript",
    "render_report",
    "SessionStore",
    "PatientRecord",
    "SessionRecord",
    "get_store",
]
