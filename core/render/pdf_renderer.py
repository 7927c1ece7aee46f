"""PDF writer built on reportlab platypus."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer

from core.catalogue.models import Language
from core.layout.models import DocumentLayout, LayoutLine
from core.render.export_style import ExportStyle, load_export_style
from core.utils.settings import tamil_font_path

logger = logging.getLogger("edocs.pdf")

_PAGE_SIZES = {"A4": A4, "LETTER": LETTER}
_TAMIL_FONT_PREFIX = "EdocsTamil"


def render_pdf(
    layout: DocumentLayout,
    *,
    style: ExportStyle | None = None,
    font_path: Path | None = None,
) -> bytes:
    """Render a layout to PDF bytes; platypus paginates long documents."""

    export_style = style or load_export_style()
    regular_font, bold_font = resolve_pdf_fonts(layout.language, export_style, font_path)
    language_style = export_style.for_language(layout.language)

    body_style = ParagraphStyle(
        "edocs_body",
        fontName=regular_font,
        fontSize=language_style.pdf_size_pt,
        leading=export_style.leading_pt,
        alignment=TA_LEFT,
    )
    title_size = language_style.pdf_size_pt + export_style.title_size_delta_pt
    title_style = ParagraphStyle(
        "edocs_title",
        parent=body_style,
        fontName=bold_font,
        fontSize=title_size,
        leading=max(export_style.leading_pt, title_size + 4),
        alignment=TA_CENTER,
    )

    story: list[Flowable] = []
    for line in layout.lines:
        if line.blank:
            story.append(Spacer(1, export_style.leading_pt))
            continue
        paragraph_style = title_style if line.kind == "title" else body_style
        story.append(Paragraph(_line_markup(line, bold_font), paragraph_style))
    if not story:
        story.append(Spacer(1, export_style.leading_pt))

    buffer = BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=_PAGE_SIZES[export_style.page_size],
        leftMargin=export_style.margin_left_pt,
        rightMargin=export_style.margin_right_pt,
        topMargin=export_style.margin_top_pt,
        bottomMargin=export_style.margin_bottom_pt,
        title=layout.title or "",
    )
    document.build(story)
    return buffer.getvalue()


def resolve_pdf_fonts(
    language: Language,
    style: ExportStyle,
    font_path: Path | None = None,
) -> tuple[str, str]:
    """Return ``(regular, bold)`` font names, registering the Tamil TTF if needed.

    An explicit ``font_path`` or ``EDOCS_TAMIL_FONT_PATH`` is the only file
    tried. Otherwise the style's ``pdf_font_path`` and ``pdf_font_candidates``
    are tried in order and the first file that loads wins. When nothing loads
    the configured base fonts are used with a warning; the document is still
    produced.
    """

    language_style = style.for_language(language)
    fallback = (language_style.pdf_font, language_style.pdf_bold_font)
    if language != "ta":
        return fallback

    override = font_path or tamil_font_path()
    search = [override] if override is not None else language_style.font_search_paths()
    found = [path for path in search if path.is_file()]
    if not found:
        logger.warning(
            "Tamil font not found (%s); falling back to %s",
            ", ".join(str(path) for path in search) or None,
            language_style.pdf_font,
        )
        return fallback

    for path in found:
        font_name = _register_ttf(path)
        if font_name is not None:
            # Single-face TTF: bold runs share the regular face.
            return font_name, font_name

    logger.warning("No usable Tamil font; falling back to %s", language_style.pdf_font)
    return fallback


def _register_ttf(path: Path) -> str | None:
    font_name = f"{_TAMIL_FONT_PREFIX}-{path.stem}"
    if font_name in pdfmetrics.getRegisteredFontNames():
        return font_name
    try:
        pdfmetrics.registerFont(TTFont(font_name, str(path)))
    except TTFError:
        logger.warning("Tamil font could not be loaded (%s)", path)
        return None
    return font_name


def _line_markup(line: LayoutLine, bold_font: str) -> str:
    parts: list[str] = []
    for index, run in enumerate(line.runs):
        text = escape(run.text)
        if index == 0:
            stripped = text.lstrip(" ")
            text = "&nbsp;" * (len(text) - len(stripped)) + stripped
        parts.append(f'<font name="{bold_font}">{text}</font>' if run.bold else text)
    return "".join(parts)
