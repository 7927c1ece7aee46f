"""Catalogue loading utilities for document types, sections and fields."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from core.catalogue.models import DocumentType, Language

_DATA_DIR = Path(__file__).with_name("data")
_INDEX_FILE = "index.yaml"
_FALLBACK_FILE_STEM = "document"


def load_catalogue(data_dir: Path | None = None) -> Mapping[str, DocumentType]:
    """Load and validate every document type listed in ``index.yaml``.

    The returned mapping preserves the index order, which is the display order.
    """

    root = data_dir or _DATA_DIR
    index = _read_yaml(root / _INDEX_FILE)
    keys = index.get("document_types")
    if not isinstance(keys, list) or not all(isinstance(key, str) for key in keys):
        raise ValueError(f"Catalogue index must list document_types: {root / _INDEX_FILE}")
    if len(keys) != len(set(keys)):
        raise ValueError(f"Duplicate document types in catalogue index: {root / _INDEX_FILE}")

    entries: dict[str, DocumentType] = {}
    for key in keys:
        path = root / f"{key}.yaml"
        raw = _read_yaml(path)
        try:
            document_type = DocumentType.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid catalogue entry: {path}") from exc
        if document_type.id != key:
            raise ValueError(f"Catalogue entry id '{document_type.id}' does not match {path.name}")
        entries[key] = document_type

    return MappingProxyType(entries)


@lru_cache(maxsize=1)
def default_catalogue() -> Mapping[str, DocumentType]:
    return load_catalogue()


def get_document_type(type_key: str | None) -> DocumentType | None:
    """Return the catalogue entry for ``type_key`` or None when unknown."""

    if not type_key:
        return None
    return default_catalogue().get(type_key)


def list_document_types() -> list[DocumentType]:
    """Return document types in display order."""

    return list(default_catalogue().values())


def supported_document_types() -> list[str]:
    return list(default_catalogue())


def export_file_name(type_key: str | None, language: Language, extension: str) -> str:
    """Build the export filename from the localized document-type name."""

    document_type = get_document_type(type_key)
    stem = document_type.name.get(language) if document_type else _FALLBACK_FILE_STEM
    return f"{stem}.{extension}"


def _read_yaml(path: Path) -> dict[object, object]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Catalogue file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in catalogue file: {path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Catalogue file must contain a mapping: {path}")
    return raw
