"""
app/errors.py
-----------------------------------------------------------------------------
Error taxonomy for the Voice Site Builder.

Domain modules raise these exceptions; route handlers in ``app.main`` log
the underlying cause and translate them into HTTP responses carrying only a
generic message.

ValidationError – the caller sent an empty or missing required field (400).
UpstreamError   – the language-model call failed, timed out, or returned
                  unusable content (500, never retried).
StorageError    – a filesystem operation on the Project Directory failed
                  (500).
"""

from __future__ import annotations


class SiteBuilderError(Exception):
    """Base class for every error raised by the site builder."""

    status_code: int = 500


class ValidationError(SiteBuilderError):
    """Required input was missing, empty, or whitespace-only."""

    status_code = 400


class UpstreamError(SiteBuilderError):
    """The external language-model service could not produce usable text."""


class StorageError(SiteBuilderError):
    """Reading or writing the Project Directory failed."""
