"""
app/file_loaders.py
-----------------------------------------------------------------------------
Prompt loading for the Voice Site Builder.

Prompt templates are plain text files in ``app/prompts/``.  Each may contain
``str.format`` placeholders such as ``{source_language}``, ``{spoken_text}``
or ``{intent}``, filled in by :func:`render_prompt`.

All path resolution is relative to this file's parent directory (``app/``),
so the loaders work regardless of the working directory from which uvicorn
is launched.

Exports
-------
load_prompt(name) -> str
    Load a named prompt text file.

render_prompt(name, **values) -> str
    Load a prompt and substitute its placeholders.

Dependencies
------------
Uses ``fastapi.HTTPException`` for error signalling: a missing or broken
prompt file is a deployment fault, reported as a 500.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import HTTPException

logger = logging.getLogger(__name__)

_HERE = Path(__file__).parent
PROMPTS_DIR = _HERE / "prompts"


def load_prompt(name: str) -> str:
    """
    Load a named prompt text file from ``app/prompts/``.

    Parameters
    ----------
    name : Bare filename without extension (e.g. ``"intent_system"``).

    Returns
    -------
    str : The prompt text content, stripped of surrounding whitespace.

    Raises
    ------
    HTTPException(500)
        If the file doesn't exist.
    """
    path = PROMPTS_DIR / f"{name}.txt"
    if not path.exists():
        logger.error("Prompt '%s' not found at %s", name, path)
        raise HTTPException(status_code=500, detail="Prompt configuration error")
    return path.read_text(encoding="utf-8").strip()


def render_prompt(name: str, **values: str) -> str:
    """
    Load a prompt and fill its ``{placeholder}`` fields.

    Substituted values are inserted verbatim; braces inside them are not
    interpreted.

    Raises
    ------
    HTTPException(500)
        If the file is missing or references a placeholder not supplied.
    """
    template = load_prompt(name)
    try:
        return template.format(**values)
    except (KeyError, IndexError, ValueError) as exc:
        logger.error("Prompt '%s' could not be rendered: %r", name, exc)
        raise HTTPException(status_code=500, detail="Prompt configuration error") from exc
