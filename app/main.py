"""
app/main.py
-----------------------------------------------------------------------------
FastAPI application entrypoint for the Voice Site Builder.

This module is a **thin routing layer** — each route handler orchestrates
calls to domain modules and returns the result.  All business logic lives
in dedicated modules:

Domain modules
~~~~~~~~~~~~~~
- ``app.llm_client``    – Synchronous HTTP wrapper around the chat-completion API.
- ``app.extractor``     – ``--- filename ---`` block extraction and filename checks.
- ``app.project_writer`` – Wholesale replacement of the Project Directory.
- ``app.archive``       – Flat zip export of the Project Directory.
- ``app.project_store`` – Lock-guarded handle on the single Project Directory.
- ``app.file_loaders``  – Prompt template loading and rendering.
- ``app.schema``        – Pydantic v2 request / response models.
- ``app.errors``        – ValidationError / UpstreamError / StorageError.

Run with:
    uvicorn app.main:app --reload --host 127.0.0.1 --port 3000
or:
    voice-site-builder

Endpoints
---------
GET  /               → serves index.html (speech capture UI)
GET  /static/*       → frontend assets
POST /intent         → spoken text → one-sentence website intent
POST /generate-code  → intent → generated files saved to the Project Directory
GET  /download       → the Project Directory as generated-site.zip
GET  /preview/*      → the Project Directory served as a static site
GET  /api/health     → version and current file list

Architecture notes
------------------
- Route handlers are regular ``def`` functions.  FastAPI runs them in a
  threadpool, so a model call that takes a minute never blocks other
  requests.
- Every JSON error body has the shape ``{"success": false, "error": ...}``
  and carries a generic message; the cause is logged server-side only.
- The Project Directory is reached through the ``get_project_store``
  dependency, whose lock serialises generations and gives downloads a
  consistent snapshot.
"""

from __future__ import annotations

import io
import logging
import os
import tomllib
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from app.errors import StorageError, UpstreamError, ValidationError
from app.extractor import extract_files, partition_filenames
from app.file_loaders import render_prompt
from app.llm_client import complete
from app.project_store import ProjectStore
from app.schema import (
    ErrorResponse,
    GenerateCodeRequest,
    GenerateCodeResponse,
    HealthResponse,
    IntentRequest,
    IntentResponse,
)

# -----------------------------------------------------------------------------
# Bootstrap
# -----------------------------------------------------------------------------

load_dotenv()

logger = logging.getLogger(__name__)

# Resolve paths relative to this file so the app works regardless of the
# working directory from which uvicorn is launched.
_HERE = Path(__file__).parent
_TEMPLATES_DIR = _HERE / "templates"
_STATIC_DIR = _HERE / "static"
_SITE_DIR = Path(os.getenv("GENERATED_SITE_DIR", str(_HERE.parent / "generated-site")))

_INTENT_MODEL: str = os.getenv("INTENT_MODEL", "gpt-4o-mini")
_GENERATION_MODEL: str = os.getenv("GENERATION_MODEL", "gpt-4")
_SOURCE_LANGUAGE: str = os.getenv("SOURCE_LANGUAGE", "Tamil")

_HOST: str = os.getenv("HOST", "127.0.0.1")
_PORT: int = int(os.getenv("PORT", "3000"))

_ARCHIVE_NAME = "generated-site.zip"

# Read version from pyproject.toml (single source of truth).
_PYPROJECT = _HERE.parent / "pyproject.toml"
with open(_PYPROJECT, "rb") as _f:
    _APP_VERSION: str = tomllib.load(_f)["project"]["version"]

# The one Project Directory.  It must exist before the preview mount serves
# its first request.
project_store = ProjectStore(_SITE_DIR)
project_store.ensure_exists()


def get_project_store() -> ProjectStore:
    """Dependency returning the shared Project Directory handle."""
    return project_store


# -----------------------------------------------------------------------------
# FastAPI app + middleware
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Voice Site Builder",
    description=(
        "Turns spoken text into a website intent and a generated multi-file "
        "static site, with preview and zip download."
    ),
    version=_APP_VERSION,
)

app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="static")

# html=True serves index.html for /preview/.
app.mount(
    "/preview",
    StaticFiles(directory=str(_SITE_DIR), html=True, check_dir=False),
    name="preview",
)

templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))


# -----------------------------------------------------------------------------
# Error responses
# -----------------------------------------------------------------------------


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTPException (routes and static mounts) as an ErrorResponse."""
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed JSON or wrong field types are caller mistakes: 400."""
    logger.warning("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return _error_response(400, "Invalid request body.")


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Empty required input: the message names the field and is safe to return."""
    logger.info("Validation failed on %s: %s", request.url.path, exc)
    return _error_response(exc.status_code, str(exc))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything no route translated: log it, answer with a generic 500."""
    logger.exception("Unhandled error on %s", request.url.path)
    return _error_response(500, "Internal server error")


def _require_text(value: str, message: str) -> str:
    """Return ``value`` stripped, or raise ValidationError if it is blank."""
    stripped = value.strip()
    if not stripped:
        raise ValidationError(message)
    return stripped


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(request: Request) -> HTMLResponse:
    """Serve the single-page speech capture UI."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "app_version": _APP_VERSION,
            "source_language": _SOURCE_LANGUAGE,
            "archive_name": _ARCHIVE_NAME,
        },
    )


@app.post(
    "/intent",
    response_model=IntentResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Turn spoken text into a one-sentence website intent",
)
def detect_intent(req: IntentRequest) -> IntentResponse:
    """
    Ask the intent model what kind of website the speaker wants.

    Blank input is rejected before the model is called.  Any model failure
    is logged and reported as a generic 500.
    """
    spoken_text = _require_text(req.spoken_text, "Spoken text is required")

    try:
        raw = complete(
            system_prompt=render_prompt("intent_system", source_language=_SOURCE_LANGUAGE),
            user_prompt=render_prompt(
                "intent_user",
                source_language=_SOURCE_LANGUAGE,
                spoken_text=spoken_text,
            ),
            model=_INTENT_MODEL,
        )
    except UpstreamError as exc:
        logger.error("Intent detection failed: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to detect intent") from exc

    # complete() guarantees non-blank content.
    intent = raw.strip()
    logger.info("Spoken text: %s", spoken_text)
    logger.info("Intent: %s", intent)
    return IntentResponse(intent=intent)


@app.post(
    "/generate-code",
    response_model=GenerateCodeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Generate a website project for an intent and save it",
)
def generate_code(
    req: GenerateCodeRequest,
    store: ProjectStore = Depends(get_project_store),
) -> GenerateCodeResponse:
    """
    Generate a multi-file site, extract its file blocks, and replace the
    Project Directory with them.

    Unsafe filenames are dropped and listed in ``rejected``.  A completion
    with no file blocks still succeeds, with an empty ``files`` list.
    """
    intent = _require_text(req.intent, "Intent is required to generate code.")

    try:
        raw = complete(
            system_prompt=render_prompt("generate_system"),
            user_prompt=render_prompt("generate_user", intent=intent),
            model=_GENERATION_MODEL,
        )
    except UpstreamError as exc:
        logger.error("Code generation failed: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to generate project code") from exc

    logger.debug("Model code output:\n%s", raw)

    safe, rejected = partition_filenames(extract_files(raw))

    try:
        saved = store.replace(safe)
    except StorageError as exc:
        logger.error("Saving generated project failed: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to generate project code") from exc

    if saved:
        message = "Code generated and saved"
    else:
        logger.warning("Model output for intent %r contained no file blocks", intent)
        message = "No files found in the model output"

    return GenerateCodeResponse(message=message, files=saved, rejected=rejected)


@app.get(
    "/download",
    responses={500: {"model": ErrorResponse}},
    summary="Download the generated site as a zip archive",
)
def download(store: ProjectStore = Depends(get_project_store)) -> StreamingResponse:
    """
    Stream the current Project Directory as ``generated-site.zip``.

    The archive is built under the store lock, so it never mixes files from
    two generations.
    """
    try:
        zip_bytes = store.archive()
    except StorageError as exc:
        logger.error("Archive error: %s", exc)
        raise HTTPException(status_code=500, detail="Could not create archive") from exc

    return StreamingResponse(
        io.BytesIO(zip_bytes),
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={_ARCHIVE_NAME}"},
    )


@app.get("/api/health", response_model=HealthResponse, summary="Service status")
def health(store: ProjectStore = Depends(get_project_store)) -> HealthResponse:
    return HealthResponse(version=_APP_VERSION, site_files=store.list_files())


# -----------------------------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------------------------


def run() -> None:
    """Configure logging and serve the app on the configured host and port."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Serving on http://%s:%d", _HOST, _PORT)
    uvicorn.run(app, host=_HOST, port=_PORT)


if __name__ == "__main__":
    run()
