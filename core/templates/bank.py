"""Template bank loading: one YAML file per document type."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from core.catalogue.models import SUPPORTED_LANGUAGES, DocumentType, Language
from core.templates.models import ParseResult, TemplateEntry
from core.templates.placeholder_parser import parse_placeholders
from core.utils.errors import TemplateError

_BANK_DIR = Path(__file__).with_name("data")


def load_template_bank(bank_dir: Path | None = None) -> Mapping[str, TemplateEntry]:
    """Load and validate every ``*.yaml`` template entry in ``bank_dir``.

    Placeholders are parsed strictly and every phrase-table reference must
    resolve inside the same entry; both problems raise ``ValueError`` naming the
    offending file.
    """

    root = bank_dir or _BANK_DIR
    entries: dict[str, TemplateEntry] = {}

    for path in sorted(root.glob("*.yaml")):
        raw = _read_yaml(path)
        try:
            entry = TemplateEntry.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid template bank entry: {path}") from exc
        if entry.id != path.stem:
            raise ValueError(f"Template entry id '{entry.id}' does not match {path.name}")

        for language in SUPPORTED_LANGUAGES:
            try:
                parsed = parse_placeholders(entry.templates.get(language), strict=True)
            except TemplateError as exc:
                raise ValueError(
                    f"Unsupported placeholders {exc.tokens} in {language} template: {path}"
                ) from exc
            unknown_tables = sorted(set(parsed.tables) - set(entry.phrases))
            if unknown_tables:
                raise ValueError(
                    f"Unknown phrase tables {unknown_tables} in {language} template: {path}"
                )

        entries[entry.id] = entry

    return MappingProxyType(entries)


@lru_cache(maxsize=1)
def default_template_bank() -> Mapping[str, TemplateEntry]:
    return load_template_bank()


def get_template_entry(type_key: str) -> TemplateEntry | None:
    return default_template_bank().get(type_key)


def template_fields(entry: TemplateEntry, language: Language) -> list[str]:
    """Return field ids referenced by the entry's template in first-use order."""

    result: ParseResult = parse_placeholders(entry.templates.get(language))
    return result.fields


def check_alignment(
    catalogue: Mapping[str, DocumentType],
    bank: Mapping[str, TemplateEntry],
) -> None:
    """Fail fast when catalogue keys or field ids diverge from the template bank."""

    catalogue_keys = set(catalogue)
    bank_keys = set(bank)
    if catalogue_keys != bank_keys:
        raise RuntimeError(
            "Template bank keys must match catalogue document types: "
            f"catalogue={sorted(catalogue_keys)}, bank={sorted(bank_keys)}"
        )

    for key, entry in bank.items():
        known_fields = {item.id for item in catalogue[key].fields}
        for language in SUPPORTED_LANGUAGES:
            unknown = sorted(set(template_fields(entry, language)) - known_fields)
            if unknown:
                raise RuntimeError(
                    f"Template {key}/{language} references fields missing from the catalogue: "
                    f"{unknown}"
                )


def _read_yaml(path: Path) -> dict[object, object]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in template bank file: {path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Template bank file must contain a mapping: {path}")
    return raw
