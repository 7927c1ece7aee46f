"""FastAPI wrapper for the edocs generation pipeline."""

from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import date
from typing import Any
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.catalogue.loader import get_document_type, list_document_types
from core.catalogue.models import SUPPORTED_LANGUAGES, DocumentType, Language
from core.orchestrator.pipeline import build_preview, export_document
from core.render.models import MEDIA_TYPES, ExportFormat
from core.render.preview_renderer import layout_to_payload
from core.utils.errors import ExportError, MissingRequiredFieldsError, UnknownDocumentTypeError

app = FastAPI(title="edocs API", version="0.1.0")
logger = logging.getLogger("edocs.api")

_REQUEST_ID_HEADER = "X-Edocs-Request-Id"


class PreviewRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    document_type: str
    language: Language = "en"
    values: dict[str, str | int | float | None] = Field(default_factory=dict)
    as_of: date | None = None

    @field_validator("values", mode="after")
    @classmethod
    def _stringify_values(cls, values: dict[str, str | int | float | None]) -> dict[str, str]:
        return {key: "" if value is None else str(value) for key, value in values.items()}


class ExportRequest(PreviewRequest):
    allow_incomplete: bool = False


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Ensure every response has a request id header."""

    request_id = uuid.uuid4().hex
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception:  # noqa: BLE001
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="INTERNAL_ERROR",
            status_code=500,
            failure_stage="middleware",
        )
        response = _error_response(
            status_code=500,
            error_code="INTERNAL_ERROR",
            message="internal server error",
            request_id=request_id,
            detail={"path": request.url.path},
        )
    response.headers.setdefault(_REQUEST_ID_HEADER, request_id)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    request_id = _request_id_from_request(request)
    _log_event(
        logging.ERROR,
        "error",
        request_id,
        error_code="INVALID_REQUEST",
        status_code=422,
        failure_stage="validate_request",
    )
    return _error_response(
        status_code=422,
        error_code="INVALID_REQUEST",
        message="invalid request body",
        request_id=request_id,
        detail={"errors": json.loads(json.dumps(exc.errors(), default=str))},
    )


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    """Liveness endpoint."""

    return {"status": "ok"}


@app.get("/v1/meta")
async def meta_v1(request: Request) -> JSONResponse:
    """Catalogue metadata for bootstrap clients."""

    request_id = _request_id_from_request(request)
    payload = {
        "document_types": [
            {
                "id": document_type.id,
                "name": document_type.name.model_dump(),
                "description": document_type.description.model_dump(),
                "category": document_type.category,
            }
            for document_type in list_document_types()
        ],
        "languages": list(SUPPORTED_LANGUAGES),
        "export_formats": list(MEDIA_TYPES),
        "version": app.version,
    }
    return JSONResponse(status_code=200, headers={_REQUEST_ID_HEADER: request_id}, content=payload)


@app.get("/v1/document-types/{type_key}")
async def document_type_v1(
    request: Request,
    type_key: str,
    language: str = "en",
) -> JSONResponse:
    """Sections of one document type with their localized fields."""

    request_id = _request_id_from_request(request)
    if language not in SUPPORTED_LANGUAGES:
        return _error_response(
            status_code=400,
            error_code="INVALID_ARGUMENT",
            message="invalid language",
            request_id=request_id,
            detail={"field": "language", "value": language, "allowed": list(SUPPORTED_LANGUAGES)},
        )

    document_type = get_document_type(type_key)
    if document_type is None:
        return _unknown_type_response(type_key, request_id, failure_stage="lookup")

    return JSONResponse(
        status_code=200,
        headers={_REQUEST_ID_HEADER: request_id},
        content=_document_type_payload(document_type, language),  # type: ignore[arg-type]
    )


@app.post("/v1/preview")
async def preview_v1(request: Request, body: PreviewRequest) -> JSONResponse:
    """Generate text, classified lines and HTML for the given values."""

    request_started = time.perf_counter()
    request_id = _request_id_from_request(request)
    _log_event(
        logging.INFO,
        "start",
        request_id,
        endpoint="preview",
        document_type=body.document_type,
        language=body.language,
    )

    try:
        result = build_preview(
            body.document_type,
            body.values,
            body.language,
            clock=_clock_for(body.as_of),
        )
    except UnknownDocumentTypeError:
        return _unknown_type_response(body.document_type, request_id, failure_stage="generate")

    _log_event(
        logging.INFO,
        "done",
        request_id,
        endpoint="preview",
        status_code=200,
        total_ms=_elapsed_ms(request_started),
    )
    return JSONResponse(
        status_code=200,
        headers={_REQUEST_ID_HEADER: request_id},
        content={
            "text": result.text,
            "lines": layout_to_payload(result.layout),
            "html": result.html,
            "missing_required": result.missing_required,
            "validation_message": result.validation_message,
            "exportable": result.exportable,
        },
    )


@app.post("/v1/export/{export_format}", response_model=None)
async def export_v1(
    request: Request,
    export_format: str,
    body: ExportRequest,
) -> StreamingResponse | JSONResponse:
    """Render a PDF or DOCX and stream it back as an attachment."""

    request_started = time.perf_counter()
    request_id = _request_id_from_request(request)
    failure_stage = "validate_inputs"

    if export_format not in MEDIA_TYPES:
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="INVALID_ARGUMENT",
            status_code=400,
            failure_stage=failure_stage,
        )
        return _error_response(
            status_code=400,
            error_code="INVALID_ARGUMENT",
            message="invalid export format",
            request_id=request_id,
            detail={"field": "format", "value": export_format, "allowed": list(MEDIA_TYPES)},
        )

    _log_event(
        logging.INFO,
        "start",
        request_id,
        endpoint="export",
        export_format=export_format,
        document_type=body.document_type,
        language=body.language,
        allow_incomplete=body.allow_incomplete,
    )

    try:
        failure_stage = "render"
        artifact = export_document(
            body.document_type,
            body.values,
            body.language,
            export_format,  # type: ignore[arg-type]
            allow_incomplete=body.allow_incomplete,
            clock=_clock_for(body.as_of),
        )
    except UnknownDocumentTypeError:
        return _unknown_type_response(body.document_type, request_id, failure_stage=failure_stage)
    except MissingRequiredFieldsError as exc:
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="MISSING_REQUIRED_FIELDS",
            status_code=422,
            failure_stage="validate_required",
        )
        return _error_response(
            status_code=422,
            error_code="MISSING_REQUIRED_FIELDS",
            message=str(exc),
            request_id=request_id,
            detail={
                "missing_required": exc.missing_required,
                "missing_labels": exc.missing_labels,
            },
        )
    except ExportError as exc:
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="EXPORT_FAILED",
            status_code=500,
            failure_stage=failure_stage,
        )
        return _error_response(
            status_code=500,
            error_code="EXPORT_FAILED",
            message="export failed",
            request_id=request_id,
            detail={"export_format": exc.export_format, "reason": str(exc)},
        )

    _log_event(
        logging.INFO,
        "done",
        request_id,
        endpoint="export",
        status_code=200,
        export_format=export_format,
        bytes=len(artifact.content),
        total_ms=_elapsed_ms(request_started),
    )
    return StreamingResponse(
        iter([artifact.content]),
        media_type=artifact.media_type,
        headers={
            _REQUEST_ID_HEADER: request_id,
            "Content-Disposition": _content_disposition(artifact.filename, export_format),
        },
    )


def _document_type_payload(document_type: DocumentType, language: Language) -> dict[str, Any]:
    sections: list[dict[str, Any]] = []
    for section in document_type.sections:
        fields = [
            {
                "id": item.id,
                "label": item.label.get(language),
                "kind": item.kind,
                "required": item.required,
                "options": [
                    {"value": option.value, "label": option.label.get(language)}
                    for option in item.options
                ],
                "placeholder": item.placeholder.get(language) if item.placeholder else None,
                "max_length": item.max_length,
                "read_only": item.read_only,
                "fixed_value": item.fixed_value.get(language) if item.fixed_value else None,
            }
            for item in document_type.fields_in_section(section.key)
        ]
        sections.append({"key": section.key, "title": section.title.get(language), "fields": fields})

    return {
        "id": document_type.id,
        "name": document_type.name.get(language),
        "description": document_type.description.get(language),
        "category": document_type.category,
        "language": language,
        "sections": sections,
    }


def _clock_for(as_of: date | None):
    if as_of is None:
        return date.today
    return lambda: as_of


def _content_disposition(filename: str, export_format: ExportFormat | str) -> str:
    try:
        filename.encode("ascii")
        ascii_name = filename
    except UnicodeEncodeError:
        ascii_name = f"document.{export_format}"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


def _unknown_type_response(type_key: str, request_id: str, *, failure_stage: str) -> JSONResponse:
    _log_event(
        logging.ERROR,
        "error",
        request_id,
        error_code="UNKNOWN_DOCUMENT_TYPE",
        status_code=404,
        failure_stage=failure_stage,
    )
    return _error_response(
        status_code=404,
        error_code="UNKNOWN_DOCUMENT_TYPE",
        message="unknown document type",
        request_id=request_id,
        detail={"document_type": type_key},
    )


def _request_id_from_request(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str) and request_id:
        return request_id
    generated = uuid.uuid4().hex
    request.state.request_id = generated
    return generated


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def _error_response(
    *,
    status_code: int,
    error_code: str,
    message: str,
    request_id: str,
    detail: dict[str, Any] | None = None,
) -> JSONResponse:
    payload_detail = dict(detail or {})
    payload_detail["request_id"] = request_id

    return JSONResponse(
        status_code=status_code,
        headers={_REQUEST_ID_HEADER: request_id},
        content={
            "error_code": error_code,
            "message": message,
            "detail": payload_detail,
        },
    )


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _log_event(level: int, event: str, request_id: str, **fields: Any) -> None:
    payload = {
        "event": event,
        "request_id": request_id,
        **fields,
    }
    logger.log(level, _dump_json(payload))
