# -*- coding: utf-8 -*-
import logging
from typing import Any, Dict, List, Optional

import httpx

from medscribe.config.settings import settings
from medscribe.core.errors import UpstreamApiError

__all__ = ["LLMClient", "get_llm", "extract_completion_text"]

logger = logging.getLogger(__name__)


def extract_completion_text(data: Any) -> str:
    """
    Pull the completion text out of a chat-completions response.

    Providers disagree on where the text lives, so fall back in order:
    choices[0].message.content -> choices[0].text -> error.message -> "".
    """
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices") or []
    first = choices[0] if choices and isinstance(choices[0], dict) else {}
    message = first.get("message")
    if isinstance(message, dict) and message.get("content") is not None:
        return message["content"]
    if first.get("text") is not None:
        return first["text"]
    error = data.get("error")
    if isinstance(error, dict) and error.get("message") is not None:
        return error["message"]
    return ""


class LLMClient:
    """
    Minimal client for an OpenAI-compatible /chat/completions endpoint.

    One request per call, no retries: every attempt is a billed completion
    and analysis is user-initiated, so retry policy belongs to the caller.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout: float = 90.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.transport = transport

    async def chat(self, messages: List[Dict[str, str]]) -> str:
        """
        POST the messages and return the raw completion text.

        messages = [{"role":"system"|"user"|"assistant","content":"..."}]

        Raises:
            UpstreamApiError: non-2xx status, transport failure or non-JSON body.
        """
        payload = {"model": self.model, "messages": messages}
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Completion request failed: %s: %s", type(e).__name__, e)
            raise UpstreamApiError(None, f"{type(e).__name__}: {e}") from e

        if r.is_error:
            logger.error("Completion API error %s: %.200s", r.status_code, r.text)
            raise UpstreamApiError(r.status_code, r.text)

        try:
            data = r.json()
        except ValueError as e:
            logger.error("Completion API returned a non-JSON body: %.200s", r.text)
            raise UpstreamApiError(r.status_code, r.text) from e

        return extract_completion_text(data)

    async def fetch_completion(self, system_prompt: str, user_prompt: str) -> str:
        return await self.chat([
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ])


# Singleton
_llm_singleton: Optional[LLMClient] = None


def get_llm() -> LLMClient:
    global _llm_singleton
    if _llm_singleton is None:
        _llm_singleton = LLMClient(
            base_url=settings.LLM_BASE_URL,
            api_key=settings.LLM_API_KEY,
            model=settings.LLM_MODEL,
            timeout=settings.LLM_TIMEOUT,
        )
    return _llm_singleton
