"""DOCX writer: one paragraph per layout line."""

from __future__ import annotations

from io import BytesIO

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH

from core.layout.models import DocumentLayout
from core.render.export_style import ExportStyle, load_export_style
from core.utils.docx_xml import set_run_fonts_and_size, set_style_fonts_and_size


def render_docx(layout: DocumentLayout, *, style: ExportStyle | None = None) -> bytes:
    """Render a layout to DOCX bytes.

    The document default font follows the layout language; the title is
    centered and larger, blank lines become empty paragraphs.
    """

    export_style = style or load_export_style()
    language_style = export_style.for_language(layout.language)
    font_name = language_style.docx_font

    document = Document()
    set_style_fonts_and_size(document.styles["Normal"], font_name, language_style.docx_size_pt)

    for line in layout.lines:
        paragraph = document.add_paragraph()
        paragraph.paragraph_format.line_spacing = export_style.docx_line_spacing
        if line.blank:
            continue

        size_pt = language_style.docx_size_pt
        if line.kind == "title":
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
            size_pt = language_style.docx_title_size_pt

        for item in line.runs:
            run = paragraph.add_run(item.text)
            run.bold = item.bold
            set_run_fonts_and_size(run, font_name, size_pt)

    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()
