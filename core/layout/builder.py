"""Turn generated text into styled lines consumed by every renderer."""

from __future__ import annotations

from collections.abc import Mapping

from core.catalogue.models import Language
from core.layout.classifier import classify_lines
from core.layout.emphasis import split_emphasis
from core.layout.models import (
    ClassifiedLine,
    DocumentLayout,
    EmphasisScope,
    LayoutLine,
    TextRun,
)


def build_layout(
    text: str,
    language: Language,
    values: Mapping[str, object],
    *,
    emphasis_scope: EmphasisScope = "all",
) -> DocumentLayout:
    """Classify ``text`` once and produce bold/plain runs per line.

    ``emphasis_scope="all"`` applies the value pass to body lines and to the
    remainder of labelled lines; ``"rest"`` limits it to the remainder of
    numbered-heading and inline-label lines.
    """

    if emphasis_scope not in {"all", "rest"}:
        raise ValueError(f"Unsupported emphasis scope: {emphasis_scope}")

    layout = DocumentLayout(language=language)
    if not text:
        return layout

    for item in classify_lines(text.split("\n"), language):
        layout.lines.append(_layout_line(item, values, emphasis_scope))
    return layout


def _layout_line(
    item: ClassifiedLine,
    values: Mapping[str, object],
    emphasis_scope: EmphasisScope,
) -> LayoutLine:
    classification = item.classification
    kind = classification.kind

    if kind == "title":
        return LayoutLine(kind=kind, runs=(TextRun(item.text.strip(), bold=True),))

    if kind == "heading":
        return LayoutLine(kind=kind, runs=(TextRun(item.text.strip(), bold=True),))

    if kind == "numbered_heading":
        lead = classification.prefix or ""
        return LayoutLine(kind=kind, runs=_lead_and_rest(lead, classification.rest, values))

    if kind == "inline_label":
        lead = f"{classification.label}:"
        return LayoutLine(kind=kind, runs=_lead_and_rest(lead, classification.rest, values))

    if not item.text.strip():
        return LayoutLine(kind=kind, blank=True)
    if emphasis_scope == "all":
        return LayoutLine(kind=kind, runs=tuple(split_emphasis(item.text, values)))
    return LayoutLine(kind=kind, runs=(TextRun(item.text),))


def _lead_and_rest(
    lead: str,
    rest: str | None,
    values: Mapping[str, object],
) -> tuple[TextRun, ...]:
    runs = [TextRun(lead, bold=True)]
    if rest:
        runs.append(TextRun(" "))
        runs.extend(split_emphasis(rest, values))
    return tuple(runs)
