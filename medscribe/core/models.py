# -*- coding: utf-8 -*-
"""Core data models for the medscribe API."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


class ValidationIssue(BaseModel):
    """One non-conforming field of a ClinicalRecord candidate."""

    path: str = Field(..., description="dotted field path, e.g. patient.age")
    expected: str
    received: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: expected {self.expected}, received {self.received}"


class AnalyzeBody(BaseModel):
    """Request body for analyzing a doctor-patient transcript."""

    prompt: str = ""
    patient_id: Optional[str] = None


class AnalysisResult(BaseModel):
    """Either `data` or `error` (+ optional `details`/`issues`)."""

    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    details: Optional[str] = None
    issues: Optional[List[ValidationIssue]] = None
    session_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TranscriptionResult(BaseModel):
    text: Optional[str] = None
    error: Optional[str] = None


class PatientCreateBody(BaseModel):
    """Request body for registering a patient under the current owner."""

    name: str = Field(..., min_length=2)
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return (v or "").strip()
