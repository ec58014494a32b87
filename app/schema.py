"""
app/schema.py
-----------------------------------------------------------------------------
Pydantic v2 models for every request / response object in the Voice Site
Builder API.

Design principles
-----------------
• Keep models thin – no business logic here.
• Field names follow the JSON the browser sends and expects (camelCase
  where the frontend uses it), via aliases.
• Empty strings are allowed through the model: blank input is a caller
  mistake the route reports as a 400 with the standard error body, not a
  pydantic 422.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# -----------------------------------------------------------------------------
# POST /intent
# -----------------------------------------------------------------------------


class IntentRequest(BaseModel):
    """Request body for POST /intent."""

    model_config = ConfigDict(populate_by_name=True)

    spoken_text: str = Field(
        default="",
        validation_alias=AliasChoices("spokenText", "tamilText", "spoken_text"),
        description=(
            "Transcribed speech in the configured source language.  "
            "The legacy key 'tamilText' is accepted as well."
        ),
        examples=["எனக்கு ஒரு பேக்கரி இணையதளம் வேண்டும்"],
    )


class IntentResponse(BaseModel):
    """Response body for POST /intent."""

    success: bool = True
    intent: str = Field(..., description="One-sentence English website intent.")


# -----------------------------------------------------------------------------
# POST /generate-code
# -----------------------------------------------------------------------------


class GenerateCodeRequest(BaseModel):
    """Request body for POST /generate-code."""

    intent: str = Field(
        default="",
        description="Natural-language description of the website to build.",
        examples=["A website for a family bakery in Chennai."],
    )


class GenerateCodeResponse(BaseModel):
    """
    Response body for POST /generate-code.

    ``files`` may be empty: a completion with no file blocks is still a
    successful generation (the Project Directory is replaced with an empty
    one).
    """

    success: bool = True
    message: str
    files: list[str] = Field(
        default_factory=list,
        description="Sorted names of the files saved to the Project Directory.",
    )
    rejected: list[str] = Field(
        default_factory=list,
        description="Filenames from the model output that were unsafe and not written.",
    )


# -----------------------------------------------------------------------------
# Shared
# -----------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Body of every JSON error response."""

    success: bool = False
    error: str


class HealthResponse(BaseModel):
    """Response body for GET /api/health."""

    status: str = "ok"
    version: str
    site_files: list[str] = Field(default_factory=list)
