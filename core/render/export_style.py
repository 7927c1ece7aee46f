"""Export style loading for the PDF and DOCX writers."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from core.catalogue.models import SUPPORTED_LANGUAGES, Language
from core.utils.settings import export_style_path


class LanguageStyle(BaseModel):
    """Per-language fonts and sizes.

    ``pdf_font_path`` and ``pdf_font_candidates`` are TTF files tried in order;
    relative entries are resolved against the style file's directory.
    """

    model_config = ConfigDict(extra="forbid")

    pdf_font: str
    pdf_bold_font: str
    pdf_font_path: str | None = None
    pdf_font_candidates: tuple[str, ...] = ()
    pdf_size_pt: float = Field(gt=0)
    docx_font: str
    docx_size_pt: float = Field(gt=0)
    docx_title_size_pt: float = Field(gt=0)

    def font_search_paths(self) -> list[Path]:
        entries = (self.pdf_font_path, *self.pdf_font_candidates)
        return [Path(entry) for entry in entries if entry]

    def anchored(self, base_dir: Path) -> LanguageStyle:
        return self.model_copy(
            update={
                "pdf_font_path": _anchor(self.pdf_font_path, base_dir),
                "pdf_font_candidates": tuple(
                    _anchor(entry, base_dir) for entry in self.pdf_font_candidates
                ),
            }
        )


class ExportStyle(BaseModel):
    """Export style loaded from YAML."""

    model_config = ConfigDict(extra="forbid")

    page_size: Literal["A4", "LETTER"]
    margin_left_pt: float = Field(ge=0)
    margin_right_pt: float = Field(ge=0)
    margin_top_pt: float = Field(ge=0)
    margin_bottom_pt: float = Field(ge=0)
    leading_pt: float = Field(gt=0)
    title_size_delta_pt: float = Field(ge=0)
    docx_line_spacing: float = Field(gt=0)
    languages: dict[Language, LanguageStyle]

    @model_validator(mode="after")
    def _check_languages(self) -> ExportStyle:
        missing = [language for language in SUPPORTED_LANGUAGES if language not in self.languages]
        if missing:
            raise ValueError(f"export style is missing languages: {missing}")
        return self

    def for_language(self, language: Language) -> LanguageStyle:
        return self.languages[language]


def load_export_style(path: Path | None = None) -> ExportStyle:
    """Load and validate the export style.

    Resolution order: explicit ``path``, ``EDOCS_EXPORT_STYLE``, bundled default.
    """

    style_path = path or export_style_path() or Path(__file__).with_name("export_style.yaml")

    try:
        raw = yaml.safe_load(style_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Export style file not found: {style_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in export style file: {style_path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Export style file must contain a mapping: {style_path}")

    try:
        style = ExportStyle.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid export style schema: {style_path}") from exc

    base_dir = style_path.resolve().parent
    languages = {language: item.anchored(base_dir) for language, item in style.languages.items()}
    return style.model_copy(update={"languages": languages})


def _anchor(entry: str | None, base_dir: Path) -> str | None:
    if not entry:
        return entry
    expanded = Path(entry).expanduser()
    if expanded.is_absolute():
        return str(expanded)
    return str(base_dir / expanded)
