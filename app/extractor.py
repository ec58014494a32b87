"""
app/extractor.py
-----------------------------------------------------------------------------
File-block extraction from free-text model output.

The generation prompt asks the model to answer in this shape::

    --- index.html ---
    <code>
    --- style.css ---
    ```css
    <code>
    ```

This module turns such a completion into a ``{filename: content}`` mapping.
It is a small line scanner, not a parser: there is no grammar beyond the
delimiter line, no error recovery, and the last block wins when a filename
repeats.

Delimiter grammar
-----------------
A delimiter is a whole line of the form::

    [ws] "---" [ws] NAME [ws] "---" [ws]

where ``ws`` is horizontal whitespace (spaces / tabs) and ``NAME`` is one or
more of ``A-Z a-z 0-9 _ . -``, not made of hyphens only.  This grammar is
the contract with the prompt in ``app/prompts/generate_system.txt``; change
both together.

Trust boundary
--------------
Filenames come from the model and are untrusted.  :func:`is_safe_filename`
and :func:`partition_filenames` decide which names may reach the filesystem.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Characters allowed in a filename token.
_NAME_CHARS = r"[A-Za-z0-9_.\-]+"

# A delimiter name needs at least one character besides "-", so horizontal
# rules and setext underlines (a line of hyphens) never split a file.
_NAME_TOKEN = r"[A-Za-z0-9_.\-]*[A-Za-z0-9_.][A-Za-z0-9_.\-]*"

_DELIMITER = re.compile(
    rf"^[ \t]*---[ \t]*({_NAME_TOKEN})[ \t]*---[ \t\r]*$",
    re.MULTILINE,
)

# A delimiter-looking line whose name carries a path (e.g. src/index.js).
# Not a delimiter; only detected so the omission is visible in the logs.
_NESTED_DELIMITER = re.compile(
    r"^[ \t]*---[ \t]*([A-Za-z0-9_.\-]*[/\\][^\s]*)[ \t]*---[ \t\r]*$",
    re.MULTILINE,
)

_SAFE_NAME = re.compile(_NAME_CHARS)

_FENCE = "```"

# Opening fence on a single-line block: the tag counts only when whitespace
# follows it, so "```console.log(1)```" keeps its code.
_INLINE_FENCE = re.compile(r"^```(?:[A-Za-z0-9_+\-]+(?=\s))?")


def extract_files(raw_text: str) -> dict[str, str]:
    """
    Split a model completion into named file blocks.

    Parameters
    ----------
    raw_text : The full completion text.

    Returns
    -------
    dict[str, str] : Filename to content.  Empty when the text contains no
                     delimiter lines; that is not an error.
    """
    for nested in _NESTED_DELIMITER.finditer(raw_text):
        logger.warning(
            "Ignoring delimiter with nested path %r; only flat filenames are supported",
            nested.group(1),
        )

    matches = list(_DELIMITER.finditer(raw_text))
    files: dict[str, str] = {}

    for index, match in enumerate(matches):
        filename = match.group(1)
        start = match.end()
        end = matches[index + 1].start() if index + 1 < len(matches) else len(raw_text)
        content = _strip_fence(raw_text[start:end].strip())

        if filename in files:
            logger.warning("Duplicate block for %r; keeping the later one", filename)
        files[filename] = content

    return files


def _strip_fence(content: str) -> str:
    """Remove a leading ```lang line and one trailing ``` if present."""
    if not content.startswith(_FENCE):
        return content

    if "\n" in content:
        # Drop the whole opening fence line, language tag included.
        _, _, content = content.partition("\n")
    else:
        content = _INLINE_FENCE.sub("", content, count=1)
    content = content.rstrip()
    if content.endswith(_FENCE):
        content = content[: -len(_FENCE)]
    return content.strip()


def is_safe_filename(name: str) -> bool:
    """
    True when ``name`` can be written directly inside the Project Directory.

    A safe name matches the delimiter token grammar (so it cannot contain a
    path separator) and is not made up of dots alone (``.``, ``..``).
    """
    if not _SAFE_NAME.fullmatch(name):
        return False
    return name.strip(".") != ""


def partition_filenames(files: dict[str, str]) -> tuple[dict[str, str], list[str]]:
    """
    Split a file set into the writable part and the rejected names.

    Returns
    -------
    tuple[dict[str, str], list[str]]
        ``(safe, rejected)`` where ``rejected`` is sorted.
    """
    safe: dict[str, str] = {}
    rejected: list[str] = []
    for name, content in files.items():
        if is_safe_filename(name):
            safe[name] = content
        else:
            logger.warning("Rejecting unsafe filename from model output: %r", name)
            rejected.append(name)
    return safe, sorted(rejected)
