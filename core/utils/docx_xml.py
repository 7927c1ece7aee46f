"""Utilities for docx XML operations.

All XML-level operations on docx content must be implemented here.
Do not spread XML manipulation logic across other modules.
"""

from __future__ import annotations

from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt
from docx.styles.style import ParagraphStyle
from docx.text.run import Run

_FONT_SLOTS = ("ascii", "hAnsi", "eastAsia", "cs")
_SZ_CS_SUCCESSORS = (
    "w:highlight",
    "w:u",
    "w:effect",
    "w:bdr",
    "w:shd",
    "w:fitText",
    "w:vertAlign",
    "w:rtl",
    "w:cs",
    "w:em",
    "w:lang",
    "w:eastAsianLayout",
    "w:specVanish",
    "w:oMath",
)


def set_run_fonts_and_size(run: Run, font_name: str, size_pt: float) -> None:
    """Set direct run fonts on every script slot plus latin/complex-script size."""

    run.font.name = font_name
    run.font.size = Pt(size_pt)

    r_pr = run._r.get_or_add_rPr()
    _set_font_slots(r_pr, font_name)
    _set_complex_script_size(r_pr, size_pt)


def set_style_fonts_and_size(style: ParagraphStyle, font_name: str, size_pt: float) -> None:
    """Set the style's default fonts so empty paragraphs inherit them too."""

    style.font.name = font_name
    style.font.size = Pt(size_pt)

    r_pr = style.element.get_or_add_rPr()
    _set_font_slots(r_pr, font_name)
    _set_complex_script_size(r_pr, size_pt)


def get_run_font_slots(run: Run) -> dict[str, str | None]:
    """Return direct rPr.rFonts values keyed by slot name."""

    r_pr = run._r.rPr
    if r_pr is None or r_pr.rFonts is None:
        return {slot: None for slot in _FONT_SLOTS}
    return {slot: r_pr.rFonts.get(qn(f"w:{slot}")) for slot in _FONT_SLOTS}


def _set_font_slots(r_pr, font_name: str) -> None:
    r_fonts = r_pr.rFonts
    if r_fonts is None:
        r_fonts = OxmlElement("w:rFonts")
        r_pr.append(r_fonts)
    for slot in _FONT_SLOTS:
        r_fonts.set(qn(f"w:{slot}"), font_name)


def _set_complex_script_size(r_pr, size_pt: float) -> None:
    sz_cs = r_pr.find(qn("w:szCs"))
    if sz_cs is None:
        sz_cs = OxmlElement("w:szCs")
        r_pr.insert_element_before(sz_cs, *_SZ_CS_SUCCESSORS)
    sz_cs.set(qn("w:val"), str(int(round(size_pt * 2))))
