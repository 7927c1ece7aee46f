from __future__ import annotations

from core.layout.builder import build_layout
from core.render.preview_renderer import layout_to_payload, render_preview_html


def test_preview_html_marks_title_and_bold_runs() -> None:
    layout = build_layout("NDA\n\nPROPERTY: 12 Main St", "en", {})

    html = render_preview_html(layout)

    assert html.startswith('<div class="document" lang="en"')
    assert '<p class="title" style="text-align:center"><strong>NDA</strong></p>' in html
    assert '<p class="blank">&nbsp;</p>' in html
    assert '<p class="inline-label"><strong>PROPERTY:</strong> 12 Main St</p>' in html


def test_preview_html_escapes_markup_in_values() -> None:
    layout = build_layout("DEED\nmade by <script>x</script> & co", "en", {"name": "<script>"})

    html = render_preview_html(layout)

    assert "<script>" not in html
    assert "<strong>&lt;script&gt;</strong>" in html
    assert "&amp; co" in html


def test_preview_html_sets_tamil_lang() -> None:
    layout = build_layout("ஒப்பந்தம்", "ta", {})

    assert 'lang="ta"' in render_preview_html(layout)


def test_layout_payload_lists_runs_per_line() -> None:
    layout = build_layout("NDA\n\n1. TERM. Five years.", "en", {})

    payload = layout_to_payload(layout)

    assert payload[0] == {"kind": "title", "blank": False, "runs": [{"text": "NDA", "bold": True}]}
    assert payload[1] == {"kind": "body", "blank": True, "runs": []}
    assert payload[2]["kind"] == "numbered_heading"
    assert payload[2]["runs"][0] == {"text": "1. TERM.", "bold": True}
