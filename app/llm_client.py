"""
app/llm_client.py
-----------------------------------------------------------------------------
Thin synchronous wrapper around an OpenAI-compatible chat-completion API.

Why synchronous?
----------------
The route handlers that call this module are plain ``def`` functions, so
FastAPI runs them in its thread-pool executor.  A slow completion therefore
blocks only the request that asked for it, never the event loop or other
requests.

Chat completion reference
-------------------------
POST {base_url}/chat/completions
Authorization: Bearer <api key>
{
    "model":    "<model identifier>",
    "messages": [
        {"role": "system", "content": "<system prompt>"},
        {"role": "user",   "content": "<user prompt>"}
    ]
}

Response:
{
    "choices": [{"message": {"role": "assistant", "content": "<text>"}}],
    "usage":   {"prompt_tokens": <int>, "completion_tokens": <int>, ...},
    ...
}

Environment variables
---------------------
OPENAI_API_KEY  – Bearer credential.  Required; a call without it fails with
                  ``UpstreamError`` before any network traffic.
OPENAI_BASE_URL – API root (default: https://api.openai.com/v1).

Both are read once at import time so the values are consistent for the
lifetime of the process.

Failure policy
--------------
Every failure (missing key, timeout, transport error, non-2xx status,
malformed body, empty content) surfaces as a single ``UpstreamError``.  No
retries are attempted: the caller gets the error immediately.
"""

from __future__ import annotations

import logging
import os

import httpx
from dotenv import load_dotenv

from app.errors import UpstreamError

# Load .env if present (no-op if the file doesn't exist)
load_dotenv()

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

_API_KEY: str | None = os.getenv("OPENAI_API_KEY")

# Strip any trailing slash so we can safely append paths.
_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")

_CONNECT_TIMEOUT: float = 10.0

# Generating a whole multi-file site can take well over a minute.
_READ_TIMEOUT: float = 120.0


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def complete(
    *,
    system_prompt: str,
    user_prompt: str,
    model: str,
    api_key: str | None = None,
    base_url: str | None = None,
) -> str:
    """
    Send one system + user turn to the chat-completion endpoint and return
    the assistant's text.

    Parameters
    ----------
    system_prompt : Instructions that constrain the model's behaviour.
    user_prompt   : The user turn (spoken text or intent, already rendered).
    model         : Model identifier, e.g. "gpt-4o-mini".
    api_key       : Optional credential override.  When None the
                    ``OPENAI_API_KEY`` environment value is used.
    base_url      : Optional API root override.  When None the
                    ``OPENAI_BASE_URL`` environment value is used.

    Returns
    -------
    str : The raw message content, exactly as returned by the service.

    Raises
    ------
    UpstreamError : On any failure; see the module docstring.
    """
    key = api_key or _API_KEY
    if not key:
        raise UpstreamError("OPENAI_API_KEY is not configured.")

    root = base_url.rstrip("/") if base_url else _BASE_URL
    url = f"{root}/chat/completions"

    body: dict = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
    }
    headers = {"Authorization": f"Bearer {key}"}

    timeout = httpx.Timeout(connect=_CONNECT_TIMEOUT, read=_READ_TIMEOUT, write=10.0, pool=5.0)

    try:
        with httpx.Client(timeout=timeout) as client:
            response = client.post(url, json=body, headers=headers)
            response.raise_for_status()
        data = response.json()
    except httpx.TimeoutException as exc:
        logger.warning("Completion request to %s timed out (model=%s)", url, model)
        raise UpstreamError(f"Model '{model}' timed out.") from exc
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "Completion request returned HTTP %s: %s",
            exc.response.status_code,
            exc.response.text[:200],
        )
        raise UpstreamError(
            f"Model service returned HTTP {exc.response.status_code}."
        ) from exc
    except httpx.HTTPError as exc:
        logger.warning("Completion request failed: %s: %s", type(exc).__name__, exc)
        raise UpstreamError(f"Model service unreachable: {type(exc).__name__}") from exc
    except ValueError as exc:
        # response.json() on a non-JSON body
        raise UpstreamError("Model service returned a non-JSON body.") from exc

    content = _message_content(data)
    if content is None or not content.strip():
        raise UpstreamError(f"Model '{model}' returned no content.")

    usage = data.get("usage") or {}
    logger.debug(
        "Completion ok (model=%s, prompt_tokens=%s, completion_tokens=%s)",
        model,
        usage.get("prompt_tokens"),
        usage.get("completion_tokens"),
    )
    return content


def _message_content(data: object) -> str | None:
    """Return ``choices[0].message.content`` or None if the shape is wrong."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None
