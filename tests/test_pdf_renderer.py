from __future__ import annotations

import logging
import re
from pathlib import Path

import pytest
import reportlab

from core.layout.builder import build_layout
from core.render.export_style import load_export_style
from core.render.pdf_renderer import render_pdf, resolve_pdf_fonts

REPORTLAB_TTF = Path(reportlab.__file__).resolve().parent / "fonts" / "Vera.ttf"
BUNDLED_TAMIL_TTF = (
    Path(__file__).resolve().parents[1] / "core" / "render" / "fonts" / "NotoSansTamil-Regular.ttf"
)
SUBSET_FONT_RE = re.compile(rb"/BaseFont /[A-Z]{6}\+")


def test_pdf_bytes_have_pdf_header() -> None:
    layout = build_layout("NDA\n\n1. PURPOSE. Exchange <data> & more.", "en", {})

    content = render_pdf(layout)

    assert content.startswith(b"%PDF")


def test_pdf_long_document_paginates() -> None:
    body = "\n".join(f"{index}. CLAUSE. Text of clause {index}." for index in range(1, 200))
    layout = build_layout(f"LONG AGREEMENT\n{body}", "en", {})

    content = render_pdf(layout)

    page_count = re.search(rb"/Count (\d+)", content)
    assert page_count is not None
    assert int(page_count.group(1)) > 1


def test_pdf_empty_layout_renders() -> None:
    assert render_pdf(build_layout("", "en", {})).startswith(b"%PDF")


def test_english_uses_base_fonts() -> None:
    assert resolve_pdf_fonts("en", load_export_style()) == ("Helvetica", "Helvetica-Bold")


def test_tamil_missing_font_falls_back_with_warning(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("EDOCS_TAMIL_FONT_PATH", raising=False)
    caplog.set_level(logging.WARNING, logger="edocs.pdf")

    fonts = resolve_pdf_fonts("ta", load_export_style(), tmp_path / "missing.ttf")

    assert fonts == ("Helvetica", "Helvetica-Bold")
    assert any("Tamil font not found" in record.message for record in caplog.records)


def test_tamil_unreadable_font_falls_back_with_warning(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    broken = tmp_path / "broken.ttf"
    broken.write_bytes(b"not a font")
    caplog.set_level(logging.WARNING, logger="edocs.pdf")

    fonts = resolve_pdf_fonts("ta", load_export_style(), broken)

    assert fonts == ("Helvetica", "Helvetica-Bold")
    assert any("could not be loaded" in record.message for record in caplog.records)


def test_tamil_pdf_still_renders_without_font(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("EDOCS_TAMIL_FONT_PATH", raising=False)
    layout = build_layout("ரகசியத்தன்மை ஒப்பந்தம்\nகுத்தகைதாரர்: ராமு", "ta", {})

    content = render_pdf(layout, font_path=tmp_path / "missing.ttf")

    assert content.startswith(b"%PDF")


def test_tamil_export_embeds_font_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDOCS_TAMIL_FONT_PATH", str(REPORTLAB_TTF))
    layout = build_layout("ரகசியத்தன்மை ஒப்பந்தம்\nகுத்தகைதாரர்: ராமு", "ta", {})

    content = render_pdf(layout)

    assert SUBSET_FONT_RE.search(content) is not None


def test_tamil_font_search_skips_missing_entries(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("EDOCS_TAMIL_FONT_PATH", raising=False)
    style = load_export_style()
    tamil = style.for_language("ta").model_copy(
        update={
            "pdf_font_path": str(tmp_path / "missing.ttf"),
            "pdf_font_candidates": (str(tmp_path / "also-missing.ttf"), str(REPORTLAB_TTF)),
        }
    )
    custom = style.model_copy(update={"languages": {**style.languages, "ta": tamil}})

    fonts = resolve_pdf_fonts("ta", custom)

    assert fonts == ("EdocsTamil-Vera", "EdocsTamil-Vera")


def test_tamil_font_search_skips_unreadable_entries(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("EDOCS_TAMIL_FONT_PATH", raising=False)
    broken = tmp_path / "corrupt.ttf"
    broken.write_bytes(b"not a font")
    caplog.set_level(logging.WARNING, logger="edocs.pdf")
    style = load_export_style()
    tamil = style.for_language("ta").model_copy(
        update={"pdf_font_path": str(broken), "pdf_font_candidates": (str(REPORTLAB_TTF),)}
    )
    custom = style.model_copy(update={"languages": {**style.languages, "ta": tamil}})

    fonts = resolve_pdf_fonts("ta", custom)

    assert fonts == ("EdocsTamil-Vera", "EdocsTamil-Vera")
    assert any("could not be loaded" in record.message for record in caplog.records)


def test_bundled_style_points_at_packaged_tamil_font() -> None:
    tamil = load_export_style().for_language("ta")

    assert tamil.pdf_font_path == str(BUNDLED_TAMIL_TTF)
    assert tamil.font_search_paths()[0] == BUNDLED_TAMIL_TTF


@pytest.mark.skipif(not BUNDLED_TAMIL_TTF.is_file(), reason="Noto Sans Tamil not packaged")
def test_default_tamil_export_embeds_bundled_font(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EDOCS_TAMIL_FONT_PATH", raising=False)
    layout = build_layout("ரகசியத்தன்மை ஒப்பந்தம்\nகுத்தகைதாரர்: ராமு", "ta", {})

    content = render_pdf(layout)

    assert SUBSET_FONT_RE.search(content) is not None
    assert b"NotoSansTamil" in content
