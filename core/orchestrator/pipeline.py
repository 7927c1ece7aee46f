"""Orchestration pipeline: generate -> classify/layout -> render."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from core.catalogue.loader import export_file_name, get_document_type
from core.catalogue.models import DocumentType, Language
from core.generator.content import Clock, effective_values, generate_document
from core.layout.builder import build_layout
from core.layout.models import DocumentLayout
from core.render.docx_renderer import render_docx
from core.render.export_style import ExportStyle
from core.render.models import MEDIA_TYPES, ExportArtifact, ExportFormat
from core.render.pdf_renderer import render_pdf
from core.render.preview_renderer import render_preview_html
from core.session.form_session import missing_required_fields, required_fields_message
from core.utils.errors import ExportError, MissingRequiredFieldsError, UnknownDocumentTypeError

logger = logging.getLogger("edocs.export")


@dataclass(frozen=True)
class PreviewResult:
    """Generated text, its layout and the advisory validation state."""

    type_key: str
    language: Language
    text: str
    layout: DocumentLayout
    html: str
    missing_required: list[str] = field(default_factory=list)
    validation_message: str | None = None

    @property
    def exportable(self) -> bool:
        return not self.missing_required


def build_preview(
    type_key: str,
    values: Mapping[str, object],
    language: Language,
    *,
    clock: Clock = date.today,
) -> PreviewResult:
    """Preview never fails on missing values; it only reports them."""

    document_type = _require_document_type(type_key)
    text = generate_document(type_key, values, language, clock=clock)
    layout = build_layout(
        text,
        language,
        effective_values(document_type, values, language),
        emphasis_scope="all",
    )
    missing = missing_required_fields(document_type, values)
    return PreviewResult(
        type_key=type_key,
        language=language,
        text=text,
        layout=layout,
        html=render_preview_html(layout),
        missing_required=[item.id for item in missing],
        validation_message=required_fields_message(missing, language),
    )


def export_document(
    type_key: str,
    values: Mapping[str, object],
    language: Language,
    export_format: ExportFormat,
    *,
    allow_incomplete: bool = False,
    clock: Clock = date.today,
    style: ExportStyle | None = None,
    font_path: Path | None = None,
) -> ExportArtifact:
    """Render one export artifact.

    Raises:
        UnknownDocumentTypeError: ``type_key`` is not in the catalogue.
        MissingRequiredFieldsError: required values are blank and
            ``allow_incomplete`` is False.
        ExportError: the document writer failed.
    """

    return export_documents(
        type_key,
        values,
        language,
        [export_format],
        allow_incomplete=allow_incomplete,
        clock=clock,
        style=style,
        font_path=font_path,
    )[0]


def export_documents(
    type_key: str,
    values: Mapping[str, object],
    language: Language,
    export_formats: Sequence[ExportFormat],
    *,
    allow_incomplete: bool = False,
    clock: Clock = date.today,
    style: ExportStyle | None = None,
    font_path: Path | None = None,
) -> list[ExportArtifact]:
    """Generate and lay out once, then render every requested format."""

    for export_format in export_formats:
        if export_format not in MEDIA_TYPES:
            raise ValueError(f"Unsupported export format: {export_format}")

    document_type = _require_document_type(type_key)
    _check_required(document_type, values, language, allow_incomplete)

    text = generate_document(type_key, values, language, clock=clock)
    layout = build_layout(
        text,
        language,
        effective_values(document_type, values, language),
        emphasis_scope="rest",
    )

    artifacts: list[ExportArtifact] = []
    for export_format in export_formats:
        logger.info("export start type=%s format=%s language=%s", type_key, export_format, language)
        try:
            if export_format == "pdf":
                content = render_pdf(layout, style=style, font_path=font_path)
            else:
                content = render_docx(layout, style=style)
        except Exception as exc:
            logger.exception("export failed type=%s format=%s", type_key, export_format)
            raise ExportError(
                f"{export_format.upper()} export failed: {exc}",
                export_format=export_format,
                type_key=type_key,
            ) from exc

        artifacts.append(
            ExportArtifact(
                filename=export_file_name(type_key, language, export_format),
                media_type=MEDIA_TYPES[export_format],
                content=content,
            )
        )
        logger.info(
            "export done type=%s format=%s bytes=%d", type_key, export_format, len(content)
        )

    return artifacts


def _require_document_type(type_key: str) -> DocumentType:
    document_type = get_document_type(type_key)
    if document_type is None:
        raise UnknownDocumentTypeError(type_key)
    return document_type


def _check_required(
    document_type: DocumentType,
    values: Mapping[str, object],
    language: Language,
    allow_incomplete: bool,
) -> None:
    if allow_incomplete:
        return
    missing = missing_required_fields(document_type, values)
    if missing:
        raise MissingRequiredFieldsError(
            required_fields_message(missing, language) or "Missing required fields",
            missing_required=[item.id for item in missing],
            missing_labels=[item.label.get(language) for item in missing],
        )
