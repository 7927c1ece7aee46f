"""Preview rendering: escaped HTML and a JSON-friendly line payload."""

from __future__ import annotations

from html import escape
from typing import Any

from core.layout.models import DocumentLayout, LayoutLine


def render_preview_html(layout: DocumentLayout) -> str:
    """Render one ``<p>`` per line; bold runs become ``<strong>``."""

    lang = "ta" if layout.language == "ta" else "en"
    paragraphs = [_render_line(line) for line in layout.lines]
    return (
        f'<div class="document" lang="{lang}" style="white-space:pre-wrap">'
        + "".join(paragraphs)
        + "</div>"
    )


def layout_to_payload(layout: DocumentLayout) -> list[dict[str, Any]]:
    return [
        {
            "kind": line.kind,
            "blank": line.blank,
            "runs": [{"text": run.text, "bold": run.bold} for run in line.runs],
        }
        for line in layout.lines
    ]


def _render_line(line: LayoutLine) -> str:
    if line.blank:
        return '<p class="blank">&nbsp;</p>'

    parts: list[str] = []
    for run in line.runs:
        text = escape(run.text)
        parts.append(f"<strong>{text}</strong>" if run.bold else text)

    css_class = line.kind.replace("_", "-")
    if line.kind == "title":
        return f'<p class="{css_class}" style="text-align:center">' + "".join(parts) + "</p>"
    return f'<p class="{css_class}">' + "".join(parts) + "</p>"
