# -*- coding: utf-8 -*-
"""
Structural normalization of model output into the canonical clinical vocabulary.

Two phases:

1. ``normalize`` walks the JSON value tree bottom-up and rewrites scalars
   (booleans -> "yes"/"no", age strings -> int, negation tokens -> None,
   comma lists -> arrays). The walk carries the key path so field-aware rules
   can override the generic ones: free-text scalars are never comma-split and
   social-history answers keep a literal "no".
2. ``coerce_list_fields`` repairs the known list-typed leaves afterwards:
   bare strings become lists, null/missing becomes ``[]``, and current
   medications without a name are dropped.

Both phases are pure and idempotent.
"""

from typing import Any, Dict, List, Tuple

from medscribe.config.constants import (
    AGE_REGEX,
    CATEGORY_LIST_SECTIONS,
    FREE_TEXT_FIELDS,
    NEGATION_TOKENS,
    SECTION_LIST_FIELDS,
)

__all__ = ["normalize", "coerce_list_fields", "normalize_record"]

Path = Tuple[str, ...]

SOCIAL_HISTORY = "socialHistory"
CURRENT_MEDICATIONS = ("medications", "current")


# ===================== Generic pass =====================

def _is_free_text(path: Path) -> bool:
    if not path:
        return False
    return path[0] == SOCIAL_HISTORY or path[-1] in FREE_TEXT_FIELDS


def _split_commas(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def _normalize_str(value: str, path: Path) -> Any:
    trimmed = value.strip()

    m = AGE_REGEX.match(trimmed)
    if m:
        return int(m.group(1))

    low = trimmed.lower()
    if low in NEGATION_TOKENS:
        # yes/no answers in social history ("smoking": "no") are data, not absence
        if low == "no" and path[:1] == (SOCIAL_HISTORY,):
            return "no"
        return None

    if "," in trimmed and not _is_free_text(path):
        return _normalize_list(_split_commas(trimmed), path)

    if low == "true":
        return "yes"
    if low == "false":
        return "no"
    return trimmed


def _normalize_list(values: List[Any], path: Path) -> List[Any]:
    out = []
    for item in values:
        result = _visit(item, path)
        if result is None:
            continue
        # ["a, b"] splices into the array; it never nests
        if isinstance(item, str) and isinstance(result, list):
            out.extend(result)
        else:
            out.append(result)
    return out


def _visit(value: Any, path: Path) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return _normalize_str(value, path)
    if isinstance(value, (list, tuple)):
        return _normalize_list(list(value), path)
    if isinstance(value, dict):
        return {k: _visit(v, path + (str(k),)) for k, v in value.items()}
    return value


def normalize(value: Any) -> Any:
    """Recursively normalize a parsed completion (any JSON value)."""
    return _visit(value, ())


# ===================== Post-pass =====================

def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return _split_commas(value)
    return value


def _as_medication_list(value: Any) -> Any:
    value = _as_list(value)
    if not isinstance(value, list):
        return value
    meds = []
    for item in value:
        if isinstance(item, str):
            item = {"name": item}
        # {"name": "none"} is how models say "no current medications"
        if isinstance(item, dict) and not item.get("name"):
            continue
        meds.append(item)
    return meds


def _coerce_section(section: Dict[str, Any], section_name: str, fields) -> Dict[str, Any]:
    out = dict(section)
    for field in fields:
        if (section_name, field) == CURRENT_MEDICATIONS:
            out[field] = _as_medication_list(out.get(field))
        else:
            out[field] = _as_list(out.get(field))
    return out


def coerce_list_fields(record: Any) -> Any:
    """
    Force the known list-typed leaves of a record into lists.

    Only sections already present are touched; absent sections stay absent.
    Returns a new mapping, the input is not mutated.
    """
    if not isinstance(record, dict):
        return record

    out = dict(record)
    for section_name, fields in CATEGORY_LIST_SECTIONS.items():
        section = out.get(section_name)
        if isinstance(section, dict):
            # extra categories the model invented get the same treatment
            extra = tuple(k for k in section if k not in fields)
            out[section_name] = _coerce_section(section, section_name, fields + extra)

    for section_name, fields in SECTION_LIST_FIELDS.items():
        section = out.get(section_name)
        if isinstance(section, dict):
            out[section_name] = _coerce_section(section, section_name, fields)
    return out


def normalize_record(value: Any) -> Any:
    """Generic pass followed by the field-aware list post-pass."""
    return coerce_list_fields(normalize(value))
