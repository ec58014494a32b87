"""Shared fixtures for the Voice Site Builder test suite."""

from __future__ import annotations

import os
import tempfile

# Point the app's Project Directory at a scratch location before app.main is
# imported; the module creates it and mounts it for /preview at import time.
os.environ["GENERATED_SITE_DIR"] = tempfile.mkdtemp(prefix="vsb-test-site-")

from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import app, get_project_store  # noqa: E402
from app.project_store import ProjectStore  # noqa: E402


@pytest.fixture()
def site_dir(tmp_path: Path) -> Path:
    """Location of a per-test Project Directory (not created yet)."""
    return tmp_path / "generated-site"


@pytest.fixture()
def store(site_dir: Path) -> ProjectStore:
    return ProjectStore(site_dir)


@pytest.fixture()
def client(store: ProjectStore) -> TestClient:
    """FastAPI test client whose routes use the per-test ``store``."""
    app.dependency_overrides[get_project_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def sample_completion() -> str:
    """A generation completion in the format the prompt asks for."""
    return (
        "Here is your website.\n"
        "--- index.html ---\n"
        "```html\n"
        "<!doctype html>\n"
        "<html><body><h1>Bakery</h1></body></html>\n"
        "```\n"
        "--- style.css ---\n"
        "```css\n"
        "body { margin: 0; }\n"
        "```\n"
        "--- script.js ---\n"
        "console.log('ready');\n"
    )
