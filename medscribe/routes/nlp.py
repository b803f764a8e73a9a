# -*- coding: utf-8 -*-
"""NLP processing routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from medscribe.core.dependencies import get_owner_id
from medscribe.core.errors import status_for
from medscribe.core.models import AnalyzeBody
from medscribe.models import LLMClient, get_llm
from medscribe.services.nlp_service import analyze_transcript
from medscribe.services.session_store import SessionStore, get_store

router = APIRouter()


@router.post("/nlp/analyze")
async def analyze(
    body: AnalyzeBody,
    owner_id: str = Depends(get_owner_id),
    llm: LLMClient = Depends(get_llm),
    store: SessionStore = Depends(get_store),
):
    """
    Structure a doctor-patient transcript as a ClinicalRecord.

    With ``patient_id`` the validated record is saved as a new session of that
    patient and ``session_id`` is returned.
    """
    result = await analyze_transcript(
        body.prompt,
        llm=llm,
        store=store,
        owner_id=owner_id,
        patient_id=body.patient_id,
    )
    return JSONResponse(result.model_dump(exclude_none=True), status_code=status_for(result.error))
