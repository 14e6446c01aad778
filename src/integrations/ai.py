"""Anthropic Messages API wrapper returning parsed JSON."""
import json
import logging
import re

import anthropic
from django.conf import settings

from integrations.exceptions import AIError
from integrations.http import require_setting

logger = logging.getLogger("portal")

_FENCE_START = re.compile(r"^```\w*\n?")
_FENCE_END = re.compile(r"\n?```$")


def strip_code_fences(text: str) -> str:
    text = (text or "").strip()
    text = _FENCE_START.sub("", text)
    text = _FENCE_END.sub("", text)
    return text.strip()


def complete_json(*, system: str, prompt: str, max_tokens: int, purpose: str = "AI"):
    """Send ``prompt`` and decode the model's answer as JSON.

    Raises :class:`AIError` when the call fails or the answer is empty or
    not valid JSON.
    """
    client = anthropic.Anthropic(
        api_key=require_setting("ANTHROPIC_API_KEY"),
        timeout=getattr(settings, "ANTHROPIC_TIMEOUT", 120),
    )
    try:
        response = client.messages.create(
            model=settings.ANTHROPIC_MODEL,
            max_tokens=max_tokens,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
    except anthropic.APIError as exc:
        logger.warning("%s call failed: %s", purpose, exc)
        raise AIError(f"{purpose} failed: {exc}") from exc

    text = "".join(
        block.text for block in response.content if getattr(block, "type", None) == "text"
    )
    if not text.strip():
        raise AIError(f"No text response from {purpose}")
    try:
        return json.loads(strip_code_fences(text))
    except json.JSONDecodeError as exc:
        logger.warning("%s response was not valid JSON: %s", purpose, text[:200])
        raise AIError(f"Failed to parse {purpose} response as JSON") from exc
