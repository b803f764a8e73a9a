# -*- coding: utf-8 -*-
"""Patient and session routes (owner scoped)."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from medscribe.core.dependencies import get_owner_id
from medscribe.core.errors import AnalysisError
from medscribe.core.models import PatientCreateBody
from medscribe.services.session_store import SessionStore, get_store

router = APIRouter()


async def _call(fn, *args):
    """Run a blocking store call off the event loop, mapping store errors to HTTP."""
    try:
        return await run_in_threadpool(fn, *args)
    except AnalysisError as e:
        raise HTTPException(e.status_code, e.error_message)


@router.post("/patients", status_code=201)
async def create_patient(
    body: PatientCreateBody,
    owner_id: str = Depends(get_owner_id),
    store: SessionStore = Depends(get_store),
):
    """Register a patient under the current owner."""
    patient = await _call(store.create_patient, owner_id, body.name, body.date_of_birth, body.gender)
    return patient.to_dict()


@router.get("/patients")
async def list_patients(
    owner_id: str = Depends(get_owner_id),
    store: SessionStore = Depends(get_store),
):
    patients = await _call(store.list_patients, owner_id)
    return {"count": len(patients), "patients": [p.to_dict() for p in patients]}


@router.put("/patients/{patient_id}")
async def update_patient(
    patient_id: str,
    body: PatientCreateBody,
    owner_id: str = Depends(get_owner_id),
    store: SessionStore = Depends(get_store),
):
    patient = await _call(
        store.update_patient, owner_id, patient_id, body.name, body.date_of_birth, body.gender
    )
    return patient.to_dict()


@router.delete("/patients/{patient_id}")
async def delete_patient(
    patient_id: str,
    owner_id: str = Depends(get_owner_id),
    store: SessionStore = Depends(get_store),
):
    """Delete a patient and every session recorded for it."""
    await _call(store.delete_patient, owner_id, patient_id)
    return {"success": True}


@router.get("/patients/{patient_id}/sessions")
async def list_sessions(
    patient_id: str,
    owner_id: str = Depends(get_owner_id),
    store: SessionStore = Depends(get_store),
):
    """Sessions of a patient, newest first."""
    sessions = await _call(store.list_sessions, owner_id, patient_id)
    return {"count": len(sessions), "sessions": [s.to_dict() for s in sessions]}


@router.get("/patients/{patient_id}/sessions/{session_id}")
async def get_session(
    patient_id: str,
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    store: SessionStore = Depends(get_store),
):
    session = await _call(store.get_session, owner_id, patient_id, session_id)
    return session.to_dict()


@router.delete("/patients/{patient_id}/sessions/{session_id}")
async def delete_session(
    patient_id: str,
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    store: SessionStore = Depends(get_store),
):
    """Delete a session after checking the patient belongs to the caller."""
    await _call(store.delete_session, owner_id, patient_id, session_id)
    return {"success": True}
