# -*- coding: utf-8 -*-
"""Application settings and configuration."""

import os
from typing import List, Optional


class Settings:
    """Application settings loaded from environment variables."""

    # ========= API / Infra =========
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8080"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info")

    # CORS - comma separated list; '*' allows everything in dev
    CORS_ALLOWED: List[str] = [
        o.strip() for o in os.getenv("CORS_ALLOWED", "*").split(",")
    ]

    # ========= Directories =========
    TMP_DIR: str = os.getenv("TMP_DIR", "/tmp")
    DATA_DIR: str = os.getenv("DATA_DIR", "/data")

    # ========= LLM (OpenAI-compatible chat completions) =========
    LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1")
    LLM_API_KEY: str = os.getenv("LLM_API_KEY") or os.getenv("OPENROUTER_API_KEY") or ""
    LLM_MODEL: str = os.getenv("LLM_MODEL", "qwen/qwen3-30b-a3b:free")
    LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "90"))

    # Override for the system prompt; must contain a {schema} placeholder
    SYSTEM_PROMPT: Optional[str] = os.getenv("SYSTEM_PROMPT") or None

    # ========= ASR (faster-whisper) =========
    ASR_MODEL: str = os.getenv("ASR_MODEL", "base")
    ASR_COMPUTE_TYPE: str = os.getenv("ASR_COMPUTE_TYPE", "int8")
    ASR_LANGUAGE: str = os.getenv("ASR_LANGUAGE", "en")
    ASR_VAD: bool = os.getenv("ASR_VAD", "true").lower() == "true"


# Singleton instance
settings = Settings()
