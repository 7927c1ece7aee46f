"""Human-readable rendering of previews and field listings for CLI output."""

from __future__ import annotations

import typer

from core.catalogue.models import DocumentType, Language
from core.layout.models import DocumentLayout


def render_layout_terminal(layout: DocumentLayout, *, styled: bool = True) -> str:
    """Render layout lines for a terminal; bold runs use ANSI bold when styled."""

    lines: list[str] = []
    for line in layout.lines:
        if line.blank:
            lines.append("")
            continue
        parts = [
            typer.style(run.text, bold=True) if run.bold and styled else run.text
            for run in line.runs
        ]
        lines.append("".join(parts))
    return "\n".join(lines)


def render_field_listing(document_type: DocumentType, language: Language) -> str:
    """Render fields grouped by section; required fields are marked with ``*``."""

    lines: list[str] = [f"{document_type.name.get(language)} ({document_type.id})"]
    for section in document_type.sections:
        fields = document_type.fields_in_section(section.key)
        if not fields:
            continue
        lines.append("")
        lines.append(f"[{section.title.get(language)}]")
        for item in fields:
            marker = "*" if item.required else " "
            details = [item.kind]
            if item.options:
                details.append("|".join(item.option_values()))
            if item.max_length is not None:
                details.append(f"max={item.max_length}")
            if item.fixed_value is not None:
                details.append(f"fixed={item.fixed_value.get(language)}")
            lines.append(
                f" {marker} {item.id:<24} {item.label.get(language)} ({', '.join(details)})"
            )
    return "\n".join(lines)
