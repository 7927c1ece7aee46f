"""Typer CLI entrypoint for edocs."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Literal, cast

import typer

from apps.cli.format_human import render_field_listing, render_layout_terminal
from apps.cli.io import (
    existing_output_files,
    load_values_file,
    parse_assignments,
    write_artifacts_atomic,
)
from core.catalogue.loader import get_document_type, list_document_types
from core.catalogue.models import SUPPORTED_LANGUAGES, DocumentType, Language
from core.orchestrator.pipeline import build_preview, export_documents
from core.render.models import ExportFormat
from core.session.draft_store import JsonFileDraftStore, clear_draft, load_draft, save_draft
from core.utils.errors import ExportError, MissingRequiredFieldsError, UnknownDocumentTypeError
from core.utils.settings import default_language, drafts_path

app = typer.Typer(help="eDocs legal document generator CLI", rich_markup_mode=None)
draft_app = typer.Typer(help="Manage per-type drafts.", rich_markup_mode=None)
app.add_typer(draft_app, name="draft")

ExportFormatOption = Literal["pdf", "docx", "both"]

_EXIT_OK = 0
_EXIT_FAILED = 1
_EXIT_MISSING_REQUIRED = 2
_EXIT_UNKNOWN_TYPE = 3

LanguageOpt = Annotated[
    str | None,
    typer.Option("--language", "-l", help="Output language: en or ta."),
]
DraftsOpt = Annotated[
    Path | None,
    typer.Option("--drafts", help="Draft store JSON file (default: EDOCS_DRAFTS_PATH)."),
]


@app.callback()
def cli_callback() -> None:
    """CLI root callback to keep subcommands explicit."""


@app.command("types")
def types_command(language: LanguageOpt = None) -> None:
    """List document types in display order."""

    selected = _resolve_language(language)
    for document_type in list_document_types():
        typer.echo(
            f"{document_type.id:<22} {document_type.name.get(selected)}  "
            f"[{document_type.category}]"
        )


@app.command("fields")
def fields_command(type_key: Annotated[str, typer.Argument()], language: LanguageOpt = None) -> None:
    """Show the fields of one document type grouped by section."""

    selected = _resolve_language(language)
    document_type = _resolve_type(type_key)
    typer.echo(render_field_listing(document_type, selected))


@app.command("preview")
def preview_command(
    type_key: Annotated[str, typer.Argument()],
    values: Annotated[
        Path | None,
        typer.Option("--values", exists=True, dir_okay=False, help="JSON/YAML field values."),
    ] = None,
    draft: Annotated[bool, typer.Option("--draft", help="Start from the saved draft.")] = False,
    drafts: DraftsOpt = None,
    language: LanguageOpt = None,
    month_of: Annotated[
        str | None,
        typer.Option("--month-of", help="Fix the document month as YYYY-MM."),
    ] = None,
    plain: Annotated[bool, typer.Option("--plain", help="Disable bold styling.")] = False,
) -> None:
    """Print the generated document with its structural emphasis."""

    selected = _resolve_language(language)
    _resolve_type(type_key)
    clock = _resolve_clock(month_of)
    form_values = _collect_values(type_key, values, draft, drafts)

    result = build_preview(type_key, form_values, selected, clock=clock)
    typer.echo(render_layout_terminal(result.layout, styled=not plain))
    if result.validation_message:
        typer.echo("")
        typer.echo(f"WARNING(required): {result.validation_message}")


@app.command("export")
def export_command(
    type_key: Annotated[str, typer.Argument()],
    export_format: Annotated[str, typer.Option("--format", help="pdf, docx or both.")] = "pdf",
    values: Annotated[
        Path | None,
        typer.Option("--values", exists=True, dir_okay=False, help="JSON/YAML field values."),
    ] = None,
    draft: Annotated[bool, typer.Option("--draft", help="Start from the saved draft.")] = False,
    drafts: DraftsOpt = None,
    language: LanguageOpt = None,
    out_dir: Annotated[Path, typer.Option()] = Path("."),
    month_of: Annotated[
        str | None,
        typer.Option("--month-of", help="Fix the document month as YYYY-MM."),
    ] = None,
    allow_incomplete: Annotated[
        bool,
        typer.Option("--allow-incomplete", help="Export even when required fields are blank."),
    ] = False,
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite outputs when they already exist.")
    ] = False,
    no_overwrite: Annotated[
        bool,
        typer.Option(
            "--no-overwrite",
            help="Fail when outputs already exist.",
        ),
    ] = False,
) -> None:
    """Export the document as PDF and/or DOCX into out_dir."""

    selected = _resolve_language(language)
    formats = _resolve_formats(export_format)
    _resolve_type(type_key)
    clock = _resolve_clock(month_of)

    if force and no_overwrite:
        typer.echo("ERROR: --force and --no-overwrite cannot be used together.")
        raise typer.Exit(code=_EXIT_FAILED)

    form_values = _collect_values(type_key, values, draft, drafts)

    try:
        artifacts = export_documents(
            type_key,
            form_values,
            selected,
            formats,
            allow_incomplete=allow_incomplete,
            clock=clock,
        )
    except MissingRequiredFieldsError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=_EXIT_MISSING_REQUIRED) from exc
    except ExportError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=_EXIT_FAILED) from exc
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=_EXIT_FAILED) from exc

    existing = existing_output_files([out_dir / artifact.filename for artifact in artifacts])
    if existing and no_overwrite:
        typer.echo("ERROR: outputs already exist and --no-overwrite is enabled.")
        raise typer.Exit(code=_EXIT_FAILED)
    if existing:
        names = ", ".join(path.name for path in existing)
        typer.echo(f"INFO: overwriting existing outputs: {names}")

    try:
        written = write_artifacts_atomic(out_dir, artifacts)
    except OSError as exc:
        typer.echo(f"ERROR: write output failed: {exc}")
        raise typer.Exit(code=_EXIT_FAILED) from exc

    for path in written:
        typer.echo(f"INFO: wrote {path}")
    typer.echo("INFO: success")


@draft_app.command("show")
def draft_show_command(type_key: Annotated[str, typer.Argument()], drafts: DraftsOpt = None) -> None:
    """Print the saved draft values as JSON."""

    _resolve_type(type_key)
    store = _draft_store(drafts)
    typer.echo(json.dumps(load_draft(store, type_key), ensure_ascii=False, indent=2))


@draft_app.command("set")
def draft_set_command(
    type_key: Annotated[str, typer.Argument()],
    assignments: Annotated[list[str], typer.Argument(help="KEY=VALUE pairs.")],
    drafts: DraftsOpt = None,
) -> None:
    """Merge KEY=VALUE pairs into the saved draft."""

    document_type = _resolve_type(type_key)
    try:
        updates = parse_assignments(assignments)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=_EXIT_FAILED) from exc

    unknown = sorted(key for key in updates if document_type.field(key) is None)
    if unknown:
        typer.echo(f"ERROR: unknown fields for {type_key}: {', '.join(unknown)}")
        raise typer.Exit(code=_EXIT_FAILED)

    read_only = sorted(
        item.id for item in document_type.fields if item.read_only and item.id in updates
    )
    if read_only:
        typer.echo(f"ERROR: read-only fields for {type_key}: {', '.join(read_only)}")
        raise typer.Exit(code=_EXIT_FAILED)

    clamped = document_type.clamp_values(updates)
    for key, value in clamped.items():
        if value != updates[key]:
            typer.echo(f"INFO: truncated {key} to {len(value)} characters")

    store = _draft_store(drafts)
    merged = {**load_draft(store, type_key), **clamped}
    save_draft(store, type_key, merged)
    typer.echo(f"INFO: saved {len(updates)} value(s) for {type_key}")


@draft_app.command("clear")
def draft_clear_command(type_key: Annotated[str, typer.Argument()], drafts: DraftsOpt = None) -> None:
    """Remove the saved draft of one document type."""

    _resolve_type(type_key)
    if clear_draft(_draft_store(drafts), type_key):
        typer.echo(f"INFO: cleared draft for {type_key}")
    else:
        typer.echo(f"INFO: no draft saved for {type_key}")


def _resolve_language(value: str | None) -> Language:
    if value is None:
        return default_language()
    normalized = value.lower().strip()
    if normalized not in SUPPORTED_LANGUAGES:
        typer.echo(f"ERROR: --language must be one of: {', '.join(SUPPORTED_LANGUAGES)}.")
        raise typer.Exit(code=_EXIT_FAILED)
    return cast(Language, normalized)


def _resolve_type(type_key: str) -> DocumentType:
    document_type = get_document_type(type_key)
    if document_type is None:
        typer.echo(f"ERROR: {UnknownDocumentTypeError(type_key)}")
        raise typer.Exit(code=_EXIT_UNKNOWN_TYPE)
    return document_type


def _resolve_formats(value: str) -> list[ExportFormat]:
    normalized = value.lower().strip()
    if normalized not in {"pdf", "docx", "both"}:
        typer.echo("ERROR: --format must be one of: pdf, docx, both.")
        raise typer.Exit(code=_EXIT_FAILED)
    option = cast(ExportFormatOption, normalized)
    if option == "both":
        return ["pdf", "docx"]
    return [cast(ExportFormat, option)]


def _resolve_clock(month_of: str | None) -> Callable[[], date]:
    if month_of is None:
        return date.today
    try:
        fixed = datetime.strptime(month_of.strip(), "%Y-%m").date()
    except ValueError as exc:
        typer.echo("ERROR: --month-of must look like YYYY-MM.")
        raise typer.Exit(code=_EXIT_FAILED) from exc
    return lambda: fixed


def _collect_values(
    type_key: str,
    values_path: Path | None,
    use_draft: bool,
    drafts: Path | None,
) -> dict[str, str]:
    collected: dict[str, str] = {}
    if use_draft:
        collected.update(load_draft(_draft_store(drafts), type_key))
    if values_path is not None:
        try:
            collected.update(load_values_file(values_path))
        except ValueError as exc:
            typer.echo(f"ERROR: {exc}")
            raise typer.Exit(code=_EXIT_FAILED) from exc
    return collected


def _draft_store(path: Path | None) -> JsonFileDraftStore:
    return JsonFileDraftStore(path or drafts_path())


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
