"""Environment-driven settings with tolerant fallbacks."""

from __future__ import annotations

import os
from pathlib import Path

from core.catalogue.models import SUPPORTED_LANGUAGES, Language

_DEFAULT_DRAFTS_PATH = Path("~/.edocs/drafts.json")
_DEFAULT_LANGUAGE: Language = "en"


def drafts_path() -> Path:
    """JSON file backing the CLI draft store (``EDOCS_DRAFTS_PATH``)."""

    return (_env_path("EDOCS_DRAFTS_PATH") or _DEFAULT_DRAFTS_PATH).expanduser()


def default_language() -> Language:
    raw = os.getenv("EDOCS_DEFAULT_LANGUAGE")
    if raw is None:
        return _DEFAULT_LANGUAGE
    normalized = raw.strip().lower()
    for language in SUPPORTED_LANGUAGES:
        if normalized == language:
            return language
    return _DEFAULT_LANGUAGE


def tamil_font_path() -> Path | None:
    return _env_path("EDOCS_TAMIL_FONT_PATH")


def export_style_path() -> Path | None:
    return _env_path("EDOCS_EXPORT_STYLE")


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return Path(raw.strip()).expanduser()
