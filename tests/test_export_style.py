from __future__ import annotations

from pathlib import Path

import pytest

from core.render.export_style import load_export_style


def test_bundled_export_style_covers_both_languages() -> None:
    style = load_export_style()

    assert style.page_size == "A4"
    assert style.for_language("en").docx_font == "Calibri"
    assert style.for_language("ta").docx_font == "Nirmala UI"
    assert style.for_language("ta").pdf_size_pt < style.for_language("en").pdf_size_pt


def test_export_style_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    bundled = Path(__file__).resolve().parents[1] / "core" / "render" / "export_style.yaml"
    custom = tmp_path / "style.yaml"
    custom.write_text(
        bundled.read_text(encoding="utf-8").replace("page_size: A4", "page_size: LETTER"),
        encoding="utf-8",
    )
    monkeypatch.setenv("EDOCS_EXPORT_STYLE", str(custom))

    assert load_export_style().page_size == "LETTER"


def test_export_style_requires_both_languages(tmp_path: Path) -> None:
    path = tmp_path / "style.yaml"
    path.write_text(
        "\n".join(
            [
                "page_size: A4",
                "margin_left_pt: 40",
                "margin_right_pt: 40",
                "margin_top_pt: 60",
                "margin_bottom_pt: 60",
                "leading_pt: 16",
                "title_size_delta_pt: 4",
                "docx_line_spacing: 1.15",
                "languages:",
                "  en: {pdf_font: Helvetica, pdf_bold_font: Helvetica-Bold, pdf_size_pt: 12,"
                " docx_font: Calibri, docx_size_pt: 12, docx_title_size_pt: 16}",
            ]
        ),
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Invalid export style schema"):
        load_export_style(path)


def test_export_style_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not found"):
        load_export_style(tmp_path / "missing.yaml")
