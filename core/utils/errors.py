"""Custom exceptions for core logic."""

from __future__ import annotations


class TemplateError(Exception):
    """Raised when a template bank entry contains unsupported placeholders."""

    def __init__(self, message: str, *, tokens: list[str] | None = None) -> None:
        super().__init__(message)
        self.tokens = tokens or []


class UnknownDocumentTypeError(LookupError):
    """Raised when a document type key is not part of the catalogue."""

    def __init__(self, type_key: str) -> None:
        super().__init__(f"Unknown document type: {type_key}")
        self.type_key = type_key


class MissingRequiredFieldsError(Exception):
    """Raised when an export is requested while required fields are blank."""

    def __init__(
        self,
        message: str,
        *,
        missing_required: list[str],
        missing_labels: list[str],
    ) -> None:
        super().__init__(message)
        self.missing_required = missing_required
        self.missing_labels = missing_labels


class ExportError(Exception):
    """Raised when a PDF/DOCX writer fails to serialize a document."""

    def __init__(self, message: str, *, export_format: str, type_key: str | None = None) -> None:
        super().__init__(message)
        self.export_format = export_format
        self.type_key = type_key
