# -*- coding: utf-8 -*-
"""Configuration module for the medscribe API."""

from .settings import settings
from .constants import (
    AGE_REGEX,
    NEGATION_TOKENS,
    MAX_RAW_TEXT_PREVIEW,
    MAX_ERROR_DETAILS,
    CLINICAL_RECORD_SCHEMA_TEXT,
    DEFAULT_SYSTEM_PROMPT,
)

__all__ = [
    "settings",
    "AGE_REGEX",
    "NEGATION_TOKENS",
    "MAX_RAW_TEXT_PREVIEW",
    "MAX_ERROR_DETAILS",
    "CLINICAL_RECORD_SCHEMA_TEXT",
    "DEFAULT_SYSTEM_PROMPT",
]
