"""Placeholder parser for template bank text.

Supported forms:
- ``【fieldId】``
- ``【fieldId|fallback】``
- ``【fieldId@table】`` and ``【fieldId@table|fallback】``
- ``【$builtin】``
"""

from __future__ import annotations

import re

from core.templates.models import ParseResult, PlaceholderToken, UnsupportedToken
from core.utils.errors import TemplateError

BUILTINS = frozenset({"month_year"})

_VALID_PLACEHOLDER_RE = re.compile(
    r"【(?:\$(?P<builtin>[a-z_]+)"
    r"|(?P<field>[A-Za-z][A-Za-z0-9_]*)(?:@(?P<table>[a-z][a-z0-9_]*))?(?:\|(?P<fallback>[^】【]*))?)】"
)
_BRACKETED_RE = re.compile(r"【([^】]*)】")
_OPEN_BRACKET = "【"
_CLOSE_BRACKET = "】"


def parse_placeholders(text: str, strict: bool = False) -> ParseResult:
    """Parse placeholders from one template.

    Args:
        text: Template text.
        strict: When True, raise TemplateError if any unsupported item exists.

    Returns:
        ParseResult with tokens in text order, referenced fields and tables.
    """

    result = ParseResult()
    seen_fields: set[str] = set()
    seen_tables: set[str] = set()
    valid_spans: set[tuple[int, int]] = set()

    for match in _VALID_PLACEHOLDER_RE.finditer(text):
        builtin = match.group("builtin")
        if builtin is not None and builtin not in BUILTINS:
            result.unsupported.append(
                UnsupportedToken(
                    kind="unknown_builtin",
                    text=match.group(0),
                    start=match.start(),
                    end=match.end(),
                )
            )
            valid_spans.add(match.span())
            continue

        token = PlaceholderToken(
            text=match.group(0),
            start=match.start(),
            end=match.end(),
            field_id=match.group("field"),
            table=match.group("table"),
            fallback=match.group("fallback"),
            builtin=builtin,
        )
        result.tokens.append(token)
        valid_spans.add(match.span())

        if token.field_id and token.field_id not in seen_fields:
            result.fields.append(token.field_id)
            seen_fields.add(token.field_id)
        if token.table and token.table not in seen_tables:
            result.tables.append(token.table)
            seen_tables.add(token.table)

    for match in _BRACKETED_RE.finditer(text):
        if match.span() in valid_spans:
            continue
        result.unsupported.append(
            UnsupportedToken(
                kind="invalid_format",
                text=match.group(0),
                start=match.start(),
                end=match.end(),
            )
        )

    for kind, start, end, fragment in _find_unbalanced_brackets(text):
        result.unsupported.append(UnsupportedToken(kind=kind, text=fragment, start=start, end=end))

    if strict and result.unsupported:
        raise TemplateError(
            "Unsupported placeholders found in template",
            tokens=[item.text for item in result.unsupported],
        )

    return result


def _find_unbalanced_brackets(text: str) -> list[tuple[str, int, int, str]]:
    issues: list[tuple[str, int, int, str]] = []
    open_positions: list[int] = []

    for index, char in enumerate(text):
        if char == _OPEN_BRACKET:
            open_positions.append(index)
            continue

        if char == _CLOSE_BRACKET:
            if open_positions:
                open_positions.pop()
            else:
                issues.append(("stray_close", index, index + 1, _CLOSE_BRACKET))

    for start in open_positions:
        issues.append(("unclosed_bracket", start, len(text), text[start : start + 20]))

    return issues
