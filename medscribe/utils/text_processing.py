# -*- coding: utf-8 -*-
"""Text processing utilities: transcript pre-cleaning before it reaches the model."""

import re
from types import MappingProxyType

__all__ = ["CORRECTION_MAP", "clean_transcription_text", "collapse_repeated_tokens"]


# ========= Correction table =========

CORRECTION_MAP = MappingProxyType({
    # general misspellings / phonetic errors
    "ptint": "patient",
    "patent": "patient",
    "pationt": "patient",
    "docter": "doctor",
    "temparature": "temperature",
    "temprature": "temperature",
    "inflamation": "inflammation",
    "diaebtes": "diabetes",
    "diabetus": "diabetes",
    "hipertnsion": "hypertension",
    "hipertenion": "hypertension",
    "hypertention": "hypertension",
    "presure": "pressure",
    "feaver": "fever",
    "faver": "fever",
    "couh": "cough",
    "sour": "sore",
    "throght": "throat",
    "breth": "breath",
    "shorntess": "shortness",
    "hart": "heart",
    "stomac": "stomach",
    "liverd": "liver",
    "kidny": "kidney",
    "alergie": "allergy",
    "medicne": "medicine",
    "injction": "injection",
    "opertion": "operation",
    "surgury": "surgery",
    "abdomnal": "abdominal",
    "painfull": "painful",
    "ankel": "ankle",
    "chiken": "chicken",
    "diareah": "diarrhea",
    "vomting": "vomiting",
    "constpation": "constipation",
    # abbreviations common in dictation
    "bp": "blood pressure",
    "hr": "heart rate",
    "rr": "respiratory rate",
    "temp": "temperature",
    "hx": "history",
    "dx": "diagnosis",
    "tx": "treatment",
    "sx": "symptoms",
    "rx": "prescription",
})

# Longest key first, so overlapping keys would always resolve to the longest match
_CORRECTION_RX = re.compile(
    r"\b(" + "|".join(re.escape(k) for k in sorted(CORRECTION_MAP, key=lambda k: (-len(k), k))) + r")\b",
    re.IGNORECASE,
)
SPACE_RX = re.compile(r"\s+")


def clean_transcription_text(text: str) -> str:
    """
    Clean dictated/pasted transcript text before prompting the model.

    - Lower-cases the input
    - Replaces known typos and abbreviations (whole words only)
    - Collapses whitespace and trims

    Total and deterministic: ``None`` or blank input yields ``""``.
    """
    out = (text or "").lower()
    out = _CORRECTION_RX.sub(lambda m: CORRECTION_MAP[m.group(1).lower()], out)
    return SPACE_RX.sub(" ", out).strip()


# ========= ASR cleanup =========

ISOLATED_LETTERS_RX = re.compile(r"\b([a-zA-Z])(?:\s+\1){2,}\b", re.IGNORECASE)
WORD_TRIPLE_RX = re.compile(r"\b([a-zA-Z]{2,})\b(?:\s+\1\b){2,}", re.IGNORECASE)


def collapse_repeated_tokens(text: str) -> str:
    """Collapse ASR stutter such as 's s s s' or 'the the the'."""
    t = ISOLATED_LETTERS_RX.sub(lambda m: m.group(1), text or "")
    t = WORD_TRIPLE_RX.sub(lambda m: m.group(1), t)
    return SPACE_RX.sub(" ", t).strip()
