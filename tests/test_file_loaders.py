"""
Tests for app/file_loaders.py — prompt loading and rendering.

Happy paths read the real ``app/prompts/`` directory; error cases use
``tmp_path`` + ``patch`` on the module-level ``PROMPTS_DIR``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from app.file_loaders import load_prompt, render_prompt


class TestLoadPrompt:
    @pytest.mark.parametrize(
        "name", ["intent_system", "intent_user", "generate_system", "generate_user"]
    )
    def test_shipped_prompts_load(self, name: str) -> None:
        assert len(load_prompt(name)) > 20

    def test_generate_prompt_describes_delimiter_format(self) -> None:
        prompt = load_prompt("generate_system")
        assert "--- index.html ---" in prompt
        assert "--- package.json ---" in prompt

    def test_missing_prompt_raises_500(self, tmp_path: Path) -> None:
        with patch("app.file_loaders.PROMPTS_DIR", tmp_path):
            with pytest.raises(HTTPException) as exc_info:
                load_prompt("intent_system")
        assert exc_info.value.status_code == 500

    def test_missing_prompt_detail_hides_path(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with patch("app.file_loaders.PROMPTS_DIR", tmp_path):
            with caplog.at_level(logging.ERROR, logger="app.file_loaders"):
                with pytest.raises(HTTPException) as exc_info:
                    load_prompt("intent_system")

        assert exc_info.value.detail == "Prompt configuration error"
        assert str(tmp_path) not in exc_info.value.detail
        assert any(str(tmp_path) in r.getMessage() for r in caplog.records)

    def test_strips_surrounding_whitespace(self, tmp_path: Path) -> None:
        (tmp_path / "p.txt").write_text("\n\n  body  \n", encoding="utf-8")
        with patch("app.file_loaders.PROMPTS_DIR", tmp_path):
            assert load_prompt("p") == "body"


class TestRenderPrompt:
    def test_fills_placeholders(self) -> None:
        text = render_prompt("intent_user", source_language="Tamil", spoken_text="வணக்கம்")
        assert 'Tamil Input: "வணக்கம்"' in text

    def test_values_with_braces_inserted_verbatim(self) -> None:
        text = render_prompt("generate_user", intent="a site with {curly} braces")
        assert "Intent: a site with {curly} braces" in text

    def test_missing_placeholder_raises_500(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            render_prompt("intent_user", source_language="Tamil")
        assert exc_info.value.status_code == 500

    def test_render_failure_detail_is_generic(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="app.file_loaders"):
            with pytest.raises(HTTPException) as exc_info:
                render_prompt("intent_user", source_language="Tamil")

        assert exc_info.value.detail == "Prompt configuration error"
        assert "spoken_text" not in exc_info.value.detail
        assert any("spoken_text" in r.getMessage() for r in caplog.records)
