# -*- coding: utf-8 -*-
"""Report rendering: validated ClinicalRecord -> printable HTML."""

import re
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from medscribe.config.constants import CATEGORY_LIST_SECTIONS, SOCIAL_HISTORY_FIELDS
from medscribe.schema import ClinicalRecord

__all__ = ["render_report", "humanize_key", "ordered_items", "TEMPLATES_DIR"]

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

_CAMEL_BOUNDARY_RX = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def humanize_key(key: str) -> str:
    """'occupationHazards' -> 'Occupation Hazards'."""
    return " ".join(w[:1].upper() + w[1:] for w in _CAMEL_BOUNDARY_RX.split(key or ""))


SECTION_ORDER = dict(CATEGORY_LIST_SECTIONS, socialHistory=SOCIAL_HISTORY_FIELDS)


def ordered_items(section: Dict[str, Any], section_name: str) -> List[Tuple[str, Any]]:
    """Known keys in canonical order, then any extra keys as given."""
    section = section or {}
    known = SECTION_ORDER.get(section_name, ())
    items = [(k, section[k]) for k in known if k in section]
    items.extend((k, v) for k, v in section.items() if k not in known)
    return items


def _display(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return "" if value is None else str(value)


env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)
env.filters["humanize"] = humanize_key
env.filters["display"] = _display
env.filters["ordered_items"] = ordered_items


def render_report(record: Union[ClinicalRecord, Dict[str, Any]], **context: Any) -> str:
    """
    Render the structured history as HTML.

    ``record`` may be a ClinicalRecord or its persisted camelCase payload.
    Extra keyword arguments (patient name, session date, ...) go to the template.
    """
    data = record.to_payload() if isinstance(record, ClinicalRecord) else dict(record or {})
    tpl = env.get_template("report.html")
    return tpl.render(data=data, **context)
