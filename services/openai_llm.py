# services/openai_llm.py
from __future__ import annotations

import logging
from functools import lru_cache

from openai import AsyncOpenAI

from api.app.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def _client(api_key: str) -> AsyncOpenAI:
    # One attempt per enrichment; the SDK would otherwise retry twice.
    return AsyncOpenAI(api_key=api_key, max_retries=0)


async def extract_json(system_prompt: str, user_message: str) -> str:
    """Ask the model for a JSON object and return the raw message text, possibly empty."""
    settings = get_settings()

    logger.info("LLM: extracting fields from %d chars with %s", len(user_message), settings.openai_model)
    response = await _client(settings.openai_api_key).chat.completions.create(
        model=settings.openai_model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ],
        temperature=0.2,
        max_tokens=1024,
        response_format={"type": "json_object"},
    )
    choice = response.choices[0]
    text = choice.message.content or ""
    logger.info("LLM: got %d chars (finish_reason=%s)", len(text), choice.finish_reason)
    return text
