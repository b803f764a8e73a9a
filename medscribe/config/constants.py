# -*- coding: utf-8 -*-
"""Constants used throughout the application."""

import re

# ========= Regex Patterns =========

# "45", "45 years", "45 years old"
AGE_REGEX = re.compile(r"^(\d{1,3})\s*(?:years?)?\s*(?:old)?$", re.IGNORECASE)

# Tokens that stand for "no value" in dictated free text
NEGATION_TOKENS = frozenset({"none", "n/a", "no", "nil"})

# ========= Limits =========

# Preview of an unparseable completion kept for diagnostics
MAX_RAW_TEXT_PREVIEW = 200

# Upper bound for the `details` string returned to callers
MAX_ERROR_DETAILS = 1000

# ========= Schema layout =========

# Sections whose values are lists of strings, keyed by category
CATEGORY_LIST_SECTIONS = {
    "reviewOfSystems": (
        "general", "cardiovascular", "respiratory", "gastrointestinal",
        "genitourinary", "neurological", "musculoskeletal", "endocrine",
        "psychiatric", "skin",
    ),
    "pastMedicalHistory": (
        "chronicDiseases", "surgeries", "hospitalizations", "allergies",
        "immunizations", "transfusions",
    ),
    "familyHistory": ("diseases", "relativesAffected", "hereditaryConditions"),
    "preventiveCare": ("immunizations", "screeningTests"),
}

# List leaves of the fixed-shape sections
SECTION_LIST_FIELDS = {
    "historyOfPresentIllness": ("associatedSymptoms", "exacerbatingFactors", "relievingFactors"),
    "medications": ("current", "past", "supplements"),
    "assessment": ("differentialDiagnoses",),
    "plan": ("investigations", "treatment"),
}

SOCIAL_HISTORY_FIELDS = (
    "smoking", "alcohol", "drugs", "diet", "exercise",
    "occupationHazards", "livingConditions", "sexualHistory",
)

# Scalar text leaves; commas inside them are prose, not list separators
FREE_TEXT_FIELDS = frozenset({
    "fullName", "gender", "occupation", "maritalStatus", "dateOfVisit", "sourceOfHistory",
    "complaint", "duration",
    "onset", "site", "character", "radiation", "timing", "severity", "chronologicalNarrative",
    "name", "dose", "frequency",
    "summary", "followUp",
})

# ========= Default Prompts =========

CLINICAL_RECORD_SCHEMA_TEXT = """
{
  "patient": {
    "fullName": "string",
    "age": number | null,
    "gender": "string",
    "occupation": "string",
    "maritalStatus": "string",
    "dateOfVisit": "string (ISO date)",
    "sourceOfHistory": "string"
  },
  "chiefComplaint": {
    "complaint": "string",
    "duration": "string"
  },
  "historyOfPresentIllness": {
    "onset": "string",
    "site": "string",
    "character": "string",
    "radiation": "string",
    "associatedSymptoms": ["string"],
    "timing": "string",
    "exacerbatingFactors": ["string"],
    "relievingFactors": ["string"],
    "severity": "string",
    "chronologicalNarrative": "string"
  },
  "reviewOfSystems": {
    "general": ["string"],
    "cardiovascular": ["string"],
    "respiratory": ["string"],
    "gastrointestinal": ["string"],
    "genitourinary": ["string"],
    "neurological": ["string"],
    "musculoskeletal": ["string"],
    "endocrine": ["string"],
    "psychiatric": ["string"],
    "skin": ["string"]
  },
  "pastMedicalHistory": {
    "chronicDiseases": ["string"],
    "surgeries": ["string"],
    "hospitalizations": ["string"],
    "allergies": ["string"],
    "immunizations": ["string"],
    "transfusions": ["string"]
  },
  "medications": {
    "current": [{"name": "string", "dose": "string", "frequency": "string"}],
    "past": ["string"],
    "supplements": ["string"]
  },
  "familyHistory": {
    "diseases": ["string"],
    "relativesAffected": ["string"],
    "hereditaryConditions": ["string"]
  },
  "socialHistory": {
    "smoking": "string",
    "alcohol": "string",
    "drugs": "string",
    "diet": "string",
    "exercise": "string",
    "occupationHazards": "string",
    "livingConditions": "string",
    "sexualHistory": "string"
  },
  "preventiveCare": {
    "immunizations": ["string"],
    "screeningTests": ["string"]
  },
  "assessment": {
    "summary": "string",
    "differentialDiagnoses": ["string"]
  },
  "plan": {
    "investigations": ["string"],
    "treatment": ["string"],
    "followUp": "string"
  }
}
""".strip()

DEFAULT_SYSTEM_PROMPT = (
    "You are a professional medical documentation assistant. Your task is to analyze raw "
    "doctor-patient conversation transcripts, even if they include typos, speech recognition "
    "errors or informal expressions.\n\n"
    "Your goal:\n"
    "1. Correct spelling and grammar where needed.\n"
    "2. Interpret the intended meaning of phrases using context.\n"
    "3. Extract and organize all medically relevant information into a JSON object that "
    "follows this schema exactly:\n\n"
    "{schema}\n\n"
    "Rules:\n"
    "- Return ONLY a valid JSON object: no markdown, no code fences, no commentary.\n"
    "- The response must start with '{{' and end with '}}'.\n"
    "- All keys and string values must be enclosed in double quotes.\n"
    "- If a scalar value is missing or uncertain, set it to null.\n"
    "- If a list is unknown, use an empty array (e.g. \"associatedSymptoms\": []).\n"
    "- Use concise, formal clinical language in English "
    "(e.g. \"shortness of breath\" instead of \"hard to breathe\").\n"
    "- Dates must be ISO strings (e.g. \"2025-10-07\").\n"
    "- Booleans should not appear; use \"yes\"/\"no\" strings or null instead.\n"
)

USER_PROMPT_PREFIX = "Doctor–patient conversation:\n"
