"""LLM wrapper for structured (JSON) generation.

Primary: Google Gemini if GEMINI_API_KEY is set (native response schema).
Fallbacks: Groq, then OpenRouter (OpenAI-compatible JSON mode).

Every function returns the raw JSON text or None; parsing is up to the caller.
"""

from __future__ import annotations

import json
import logging

import requests

import config

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"
OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"


def _first_item(data, key: str) -> dict:
    """First element of data[key] when it is an object, else an empty dict."""
    items = data.get(key) if isinstance(data, dict) else None
    first = items[0] if isinstance(items, list) and items else None
    return first if isinstance(first, dict) else {}


def _first_choice_content(data) -> str | None:
    message = _first_item(data, "choices").get("message")
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None


def gemini_generate(prompt: str, schema: dict, *, model: str | None = None) -> str | None:
    key = config.GEMINI_API_KEY
    if not key:
        return None
    url = GEMINI_URL.format(model=model or config.GEMINI_MODEL)
    payload = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": schema,
        },
    }
    try:
        r = requests.post(
            url,
            headers={"x-goog-api-key": key, "Content-Type": "application/json"},
            json=payload,
            timeout=config.LLM_TIMEOUT,
        )
        r.raise_for_status()
        data = r.json() or {}
    except (requests.RequestException, ValueError) as e:
        logger.warning("Gemini request failed: %s", e)
        return None

    if not isinstance(data, dict):
        logger.warning("Gemini returned an unexpected payload: %s", type(data).__name__)
        return None
    candidate = _first_item(data, "candidates")
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    text = "".join(
        p["text"] for p in (parts if isinstance(parts, list) else [])
        if isinstance(p, dict) and isinstance(p.get("text"), str)
    )
    if not text:
        logger.warning("Gemini returned no text (finishReason=%s)", candidate.get("finishReason"))
        return None
    return text


def _openai_compatible_json(url: str, key: str, model: str, messages: list[dict], *, extra_headers: dict | None = None) -> str | None:
    payload = {
        "model": model,
        "messages": messages,
        "temperature": 0.4,
        "max_tokens": config.LLM_MAX_TOKENS,
        "response_format": {"type": "json_object"},
    }
    headers = {"Authorization": f"Bearer {key}", "Content-Type": "application/json"}
    headers.update(extra_headers or {})
    try:
        r = requests.post(url, headers=headers, data=json.dumps(payload), timeout=config.LLM_TIMEOUT)
        r.raise_for_status()
        data = r.json() or {}
    except (requests.RequestException, ValueError) as e:
        logger.warning("Chat completion request to %s failed: %s", url, e)
        return None
    text = _first_choice_content(data)
    if text is None:
        logger.warning("Chat completion from %s had no message content", url)
    return text


def _schema_messages(prompt: str, schema: dict) -> list[dict]:
    system = (
        "Respond only with a JSON object that validates against this JSON schema, "
        "with no markdown and no extra keys:\n" + json.dumps(schema, ensure_ascii=False)
    )
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]


def groq_generate(prompt: str, schema: dict, *, model: str | None = None) -> str | None:
    key = config.GROQ_API_KEY
    if not key:
        return None
    return _openai_compatible_json(GROQ_URL, key, model or config.GROQ_MODEL, _schema_messages(prompt, schema))


def openrouter_generate(prompt: str, schema: dict, *, model: str | None = None) -> str | None:
    key = config.OPENROUTER_API_KEY
    if not key:
        return None
    return _openai_compatible_json(
        OPENROUTER_URL,
        key,
        model or config.OPENROUTER_MODEL,
        _schema_messages(prompt, schema),
        # optional but recommended by OpenRouter
        extra_headers={"HTTP-Referer": config.OPENROUTER_SITE, "X-Title": config.OPENROUTER_APP},
    )


PROVIDERS = (
    ("gemini", gemini_generate),
    ("groq", groq_generate),
    ("openrouter", openrouter_generate),
)


def generate_json(prompt: str, schema: dict) -> str | None:
    """Ask each configured provider in turn; first non-empty answer wins."""
    for name, provider in PROVIDERS:
        text = provider(prompt, schema)
        if text and text.strip():
            logger.info("Structured response generated by %s", name)
            return text.strip()
    logger.error("No LLM provider produced a response (check GEMINI_API_KEY / GROQ_API_KEY / OPENROUTER_API_KEY)")
    return None
