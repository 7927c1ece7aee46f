"""Content generation: resolve a template bank entry against form values."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date
from types import MappingProxyType

from core.catalogue.loader import default_catalogue, get_document_type
from core.catalogue.models import DocumentType, Language
from core.templates.bank import check_alignment, default_template_bank, get_template_entry
from core.templates.models import PhraseTable, PlaceholderToken
from core.templates.placeholder_parser import parse_placeholders

Clock = Callable[[], date]

DEFAULT_BLANK = "________"

MONTH_NAMES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "en": (
            "January",
            "February",
            "March",
            "April",
            "May",
            "June",
            "July",
            "August",
            "September",
            "October",
            "November",
            "December",
        ),
        "ta": (
            "ஜனவரி",
            "பிப்ரவரி",
            "மார்ச்",
            "ஏப்ரல்",
            "மே",
            "ஜூன்",
            "ஜூலை",
            "ஆகஸ்ட்",
            "செப்டம்பர்",
            "அக்டோபர்",
            "நவம்பர்",
            "டிசம்பர்",
        ),
    }
)


def month_year(language: Language, today: date) -> str:
    """Return the localized "Month YYYY" string for ``today``."""

    names = MONTH_NAMES["ta" if language == "ta" else "en"]
    return f"{names[today.month - 1]} {today.year}"


def clean_value(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def effective_values(
    document_type: DocumentType,
    values: Mapping[str, object],
    language: Language,
) -> dict[str, str]:
    """Clamp and trim stored values, then apply read-only fixed values over them."""

    clamped = document_type.clamp_values(values)
    resolved = {key: clean_value(value) for key, value in clamped.items()}
    resolved.update(document_type.fixed_values(language))
    return resolved


def generate_document(
    type_key: str | None,
    values: Mapping[str, object],
    language: Language,
    *,
    clock: Clock = date.today,
) -> str:
    """Produce the full document text for a type, value mapping and language.

    Unknown document types produce an empty string. Blank or absent values are
    replaced by the token's fallback or the default blank, never by ``None``.
    """

    document_type = get_document_type(type_key)
    entry = get_template_entry(type_key) if type_key else None
    if document_type is None or entry is None:
        return ""

    template = entry.templates.get(language)
    resolved = effective_values(document_type, values, language)
    today = clock()

    parsed = parse_placeholders(template)
    chunks: list[str] = []
    cursor = 0
    for token in parsed.tokens:
        chunks.append(template[cursor : token.start])
        chunks.append(_resolve_token(token, resolved, language, entry.phrases, today))
        cursor = token.end
    chunks.append(template[cursor:])

    return "".join(chunks).strip()


def _resolve_token(
    token: PlaceholderToken,
    values: Mapping[str, str],
    language: Language,
    phrases: Mapping[str, PhraseTable],
    today: date,
) -> str:
    if token.builtin == "month_year":
        return month_year(language, today)

    value = values.get(token.field_id or "", "")
    if token.table is not None:
        table = phrases[token.table]
        if not value:
            return token.fallback if token.fallback is not None else table.default.get(language)
        return table.phrase(value, language)

    if value:
        return value
    return token.fallback if token.fallback is not None else DEFAULT_BLANK


def _assert_bank_alignment() -> None:
    """Fail fast when the template bank and the catalogue disagree."""

    check_alignment(default_catalogue(), default_template_bank())


_assert_bank_alignment()
