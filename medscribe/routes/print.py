# -*- coding: utf-8 -*-
"""Printable report routes."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse

from medscribe.core.dependencies import get_owner_id
from medscribe.core.errors import AnalysisError
from medscribe.services.report_service import render_report
from medscribe.services.session_store import SessionStore, get_store

router = APIRouter()


@router.get("/patients/{patient_id}/sessions/{session_id}", response_class=HTMLResponse)
async def print_session(
    patient_id: str,
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    store: SessionStore = Depends(get_store),
):
    """Render a stored session as an HTML report (print / save as PDF from the browser)."""
    try:
        patient = await run_in_threadpool(store.get_patient, owner_id, patient_id)
        session = await run_in_threadpool(store.get_session, owner_id, patient_id, session_id)
    except AnalysisError as e:
        raise HTTPException(e.status_code, e.error_message)

    html = render_report(
        session.structured_data,
        patient_name=patient.name,
        session_date=session.created_at[:10],
    )
    return HTMLResponse(html, status_code=200)
