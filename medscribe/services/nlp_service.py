# -*- coding: utf-8 -*-
"""Analysis service: transcript in, tagged AnalysisResult out."""

import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from medscribe.core.errors import AnalysisError, PersistenceError, SchemaValidationError, truncate
from medscribe.core.models import AnalysisResult
from medscribe.models import LLMClient
from medscribe.nlp_pipeline import generate_clinical_record
from medscribe.services.session_store import SessionStore
from medscribe.utils.normalization import coerce_list_fields

__all__ = ["analyze_transcript", "error_result"]

logger = logging.getLogger(__name__)


def error_result(err: AnalysisError) -> AnalysisResult:
    """Convert an AnalysisError into its tagged result."""
    issues = err.issues if isinstance(err, SchemaValidationError) else None
    return AnalysisResult(error=err.error_message, details=err.details, issues=issues)


async def analyze_transcript(
    prompt: str,
    *,
    llm: Optional[LLMClient] = None,
    store: Optional[SessionStore] = None,
    owner_id: Optional[str] = None,
    patient_id: Optional[str] = None,
) -> AnalysisResult:
    """
    Analyze a doctor-patient transcript and structure it as a ClinicalRecord.

    Args:
        prompt: Raw transcript text (pasted or from the transcription service)
        llm: Completion client, defaults to the configured singleton
        store: Session store; with ``owner_id`` and ``patient_id`` the record is persisted
        owner_id: Already-authenticated user id
        patient_id: Patient the session belongs to

    Returns:
        ``AnalysisResult`` with ``data`` on success, ``error``/``details`` otherwise.
        Never raises for pipeline failures.
    """
    persist = store is not None and owner_id is not None and patient_id is not None

    try:
        if persist:
            # fail before paying for a completion
            await run_in_threadpool(store.get_patient, owner_id, patient_id)
        record = await generate_clinical_record(prompt, llm=llm)
    except AnalysisError as e:
        logger.warning("Analysis failed: %s", truncate(str(e), 300))
        return error_result(e)
    except Exception as e:
        logger.exception("Unexpected analysis failure")
        return AnalysisResult(error="Action failed", details=truncate(f"{type(e).__name__}: {e}"))

    data = coerce_list_fields(record.to_payload())
    result = AnalysisResult(data=data)

    if persist:
        try:
            result.session_id = await run_in_threadpool(store.save_session, owner_id, patient_id, prompt, data)
        except AnalysisError as e:
            logger.error("Persisting session failed: %s", e)
            result.error = e.error_message
            result.details = e.details
        except Exception as e:
            logger.exception("Unexpected persistence failure")
            result.error = PersistenceError.error_message
            result.details = truncate(f"{type(e).__name__}: {e}")

    return result
