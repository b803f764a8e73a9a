# -*- coding: utf-8 -*-
"""
ClinicalRecord schema and validation.

The models use snake_case attributes with camelCase aliases, which is the
shape the model is prompted with and the shape persisted/rendered downstream.
Unknown keys are ignored; absent optional sections stay ``None``.
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, NonNegativeInt, ValidationError
from pydantic.alias_generators import to_camel

from medscribe.core.errors import SchemaValidationError
from medscribe.core.models import ValidationIssue

__all__ = [
    "ClinicalRecord",
    "Patient",
    "ChiefComplaint",
    "HistoryOfPresentIllness",
    "Medication",
    "Medications",
    "Assessment",
    "Plan",
    "validate_record",
]


# ===================== Field types =====================

def _scalar_to_text(v: Any) -> Any:
    """Models sometimes answer a text field with a bool or number."""
    if isinstance(v, bool):
        return "yes" if v else "no"
    if isinstance(v, int):
        return str(v)
    if isinstance(v, float):
        return str(int(v)) if v.is_integer() else str(v)
    return v


def _none_to_empty_list(v: Any) -> Any:
    return [] if v is None else v


def _none_to_empty_dict(v: Any) -> Any:
    return {} if v is None else v


# str | int | float | bool accepted, stored as str; objects/arrays rejected
Text = Annotated[Optional[str], BeforeValidator(_scalar_to_text)]
ListItem = Annotated[str, BeforeValidator(_scalar_to_text)]
StrList = Annotated[List[ListItem], BeforeValidator(_none_to_empty_list)]
CategoryLists = Annotated[Dict[str, StrList], BeforeValidator(_none_to_empty_dict)]
CategoryText = Annotated[Dict[str, Text], BeforeValidator(_none_to_empty_dict)]


class _Section(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ===================== Sections =====================

class Patient(_Section):
    full_name: Text = None
    age: Optional[NonNegativeInt] = None
    gender: Text = None
    occupation: Text = None
    marital_status: Text = None
    date_of_visit: Text = None
    source_of_history: Text = None


class ChiefComplaint(_Section):
    complaint: Text = None
    duration: Text = None


class HistoryOfPresentIllness(_Section):
    onset: Text = None
    site: Text = None
    character: Text = None
    radiation: Text = None
    timing: Text = None
    severity: Text = None
    chronological_narrative: Text = None
    associated_symptoms: StrList = Field(default_factory=list)
    exacerbating_factors: StrList = Field(default_factory=list)
    relieving_factors: StrList = Field(default_factory=list)


class Medication(_Section):
    name: ListItem
    dose: Text = None
    frequency: Text = None


class Medications(_Section):
    current: Annotated[List[Medication], BeforeValidator(_none_to_empty_list)] = Field(default_factory=list)
    past: StrList = Field(default_factory=list)
    supplements: StrList = Field(default_factory=list)


class Assessment(_Section):
    summary: Text = None
    differential_diagnoses: StrList = Field(default_factory=list)


class Plan(_Section):
    investigations: StrList = Field(default_factory=list)
    treatment: StrList = Field(default_factory=list)
    follow_up: Text = None


class ClinicalRecord(_Section):
    """One documented patient encounter. Immutable once validated."""

    patient: Patient
    chief_complaint: ChiefComplaint
    history_of_present_illness: Optional[HistoryOfPresentIllness] = None
    review_of_systems: Optional[CategoryLists] = None
    past_medical_history: Optional[CategoryLists] = None
    medications: Optional[Medications] = None
    family_history: Optional[CategoryLists] = None
    social_history: Optional[CategoryText] = None
    preventive_care: Optional[CategoryLists] = None
    assessment: Optional[Assessment] = None
    plan: Optional[Plan] = None

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys (the persisted shape)."""
        return self.model_dump(mode="json", by_alias=True)


# ===================== Validation =====================

_EXPECTED_BY_ERROR_TYPE = {
    "missing": "required field",
    "string_type": "string",
    "int_type": "integer",
    "int_parsing": "integer",
    "int_from_float": "integer",
    "greater_than_equal": "non-negative integer",
    "list_type": "array",
    "dict_type": "object",
    "model_type": "object",
    "model_attributes_type": "object",
}


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _format_loc(loc) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _issue_from_error(err: Dict[str, Any]) -> ValidationIssue:
    err_type = err.get("type", "")
    received = "missing" if err_type == "missing" else _json_type_name(err.get("input"))
    return ValidationIssue(
        path=_format_loc(err.get("loc", ())),
        expected=_EXPECTED_BY_ERROR_TYPE.get(err_type, err.get("msg", err_type)),
        received=received,
    )


def validate_record(normalized: Any) -> ClinicalRecord:
    """
    Validate a normalized object against the ClinicalRecord schema.

    Every non-conforming field is reported, not just the first one.

    Raises:
        SchemaValidationError: with one ValidationIssue per bad field.
    """
    try:
        return ClinicalRecord.model_validate(normalized)
    except ValidationError as e:
        raise SchemaValidationError([_issue_from_error(err) for err in e.errors()]) from e
