"""
OpenAI client wrapper with automatic retry and JSON-response parsing.
"""

from __future__ import annotations

import json
import os

from dotenv import load_dotenv
from openai import BadRequestError, OpenAI
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

import config
from fmtrans.errors import BackendError
from fmtrans.prompts import SYSTEM_PROMPT, build_user_prompt

load_dotenv()

_client: OpenAI | None = None


def _get_client() -> OpenAI:
    global _client
    if _client is None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise EnvironmentError(
                "OPENAI_API_KEY is not set. "
                "Export it or add it to a .env file."
            )
        _client = OpenAI(
            api_key=api_key,
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            timeout=config.REQUEST_TIMEOUT,
        )
    return _client


def _strip_fences(raw: str) -> str:
    """Strip markdown fences if the model wraps the array in ```json … ```."""
    if raw.startswith("```"):
        raw = raw.split("```")[1]
        if raw.startswith("json"):
            raw = raw[4:]
        raw = raw.strip()
    return raw


@retry(
    retry=retry_if_exception_type(Exception),
    wait=wait_exponential(multiplier=1, min=2, max=30),
    stop=stop_after_attempt(4),
    reraise=True,
)
def translate_batch(
    texts: list[str],
    source_language: str,
    target_language: str,
    model: str = config.MODEL,
    temperature: float = config.TEMPERATURE,
) -> list[str]:
    """
    Send a batch of strings to the OpenAI API and return translations.

    Args:
        texts:           List of source strings.
        source_language: Language code of `texts`, e.g. "en".
        target_language: Language code to translate into, e.g. "fr".
        model:           OpenAI model identifier.
        temperature:     Sampling temperature.

    Returns:
        List of translated strings, in input order. The length is not checked
        here; callers compare it against the batch they sent.

    Raises:
        BackendError: If the model returns an unparseable response.
    """
    if not texts:
        return []

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user",   "content": build_user_prompt(source_language, target_language, texts)},
    ]

    # Some newer models only accept the default temperature (1).
    # Try with the configured temperature first; if the API rejects it, retry
    # without the parameter so the model uses its default.
    try:
        response = _get_client().chat.completions.create(
            model=model,
            temperature=temperature,
            messages=messages,
        )
    except BadRequestError as e:
        if "temperature" in str(e):
            response = _get_client().chat.completions.create(
                model=model,
                messages=messages,
            )
        else:
            raise

    raw = _strip_fences((response.choices[0].message.content or "").strip())

    try:
        translated = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise BackendError(f"Model returned non-JSON output:\n{raw}") from exc

    if not isinstance(translated, list):
        raise BackendError(f"Expected a JSON array, got: {type(translated).__name__}")

    return [str(t) for t in translated]
