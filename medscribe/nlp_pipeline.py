# -*- coding: utf-8 -*-
import logging
from typing import NamedTuple, Optional

from medscribe.config.constants import CLINICAL_RECORD_SCHEMA_TEXT, DEFAULT_SYSTEM_PROMPT, USER_PROMPT_PREFIX
from medscribe.config.settings import settings
from medscribe.core.errors import ConfigurationError, InputError
from medscribe.models import LLMClient, get_llm
from medscribe.schema import ClinicalRecord, validate_record
from medscribe.utils.json_repair import repair_and_parse
from medscribe.utils.normalization import normalize_record
from medscribe.utils.text_processing import clean_transcription_text

__all__ = ["Prompt", "build_prompt", "generate_clinical_record"]

logger = logging.getLogger(__name__)


# ===================== Prompt =====================

class Prompt(NamedTuple):
    system_prompt: str
    user_prompt: str


def build_prompt(cleaned_text: str, system_template: Optional[str] = None) -> Prompt:
    """Fill the schema into the system prompt and wrap the transcript as the user turn."""
    template = system_template or settings.SYSTEM_PROMPT or DEFAULT_SYSTEM_PROMPT
    try:
        system_prompt = template.format(schema=CLINICAL_RECORD_SCHEMA_TEXT)
    except (KeyError, IndexError, ValueError) as e:
        # literal braces in an override must be doubled: {{ }}
        logger.error("System prompt template is not formattable: %r", e)
        raise ConfigurationError(f"system prompt template: {type(e).__name__}: {e}") from e
    return Prompt(
        system_prompt=system_prompt,
        user_prompt=f"{USER_PROMPT_PREFIX}{cleaned_text}",
    )


# ===================== Pipeline =====================

async def generate_clinical_record(text: str, llm: Optional[LLMClient] = None) -> ClinicalRecord:
    """
    Transcript -> validated ClinicalRecord.

    clean -> prompt -> completion -> repair/parse -> normalize -> validate

    Raises:
        InputError, ConfigurationError, UpstreamApiError, MalformedOutputError, SchemaValidationError
    """
    if not (text or "").strip():
        raise InputError()

    cleaned = clean_transcription_text(text)
    prompt = build_prompt(cleaned)

    llm = llm or get_llm()
    raw_text = await llm.fetch_completion(prompt.system_prompt, prompt.user_prompt)
    logger.info("Completion received (%d chars)", len(raw_text))

    parsed = repair_and_parse(raw_text)
    return validate_record(normalize_record(parsed))
