"""Data models for the template bank and placeholder parsing."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.catalogue.models import Language, LocalizedText


@dataclass(frozen=True)
class PlaceholderToken:
    """A supported ``【...】`` token found in template text."""

    text: str
    start: int
    end: int
    field_id: str | None = None
    table: str | None = None
    fallback: str | None = None
    builtin: str | None = None


@dataclass(frozen=True)
class UnsupportedToken:
    """A placeholder-like token that the generator cannot resolve."""

    kind: str
    text: str
    start: int
    end: int


@dataclass
class ParseResult:
    """Placeholder parsing output for one template."""

    fields: list[str] = field(default_factory=list)
    tables: list[str] = field(default_factory=list)
    tokens: list[PlaceholderToken] = field(default_factory=list)
    unsupported: list[UnsupportedToken] = field(default_factory=list)


class PhraseTable(BaseModel):
    """Bilingual wording keyed by a stored option code."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    default: LocalizedText
    choices: dict[str, LocalizedText] = Field(default_factory=dict)

    def phrase(self, code: str, language: Language) -> str:
        choice = self.choices.get(code)
        return (choice or self.default).get(language)


class TemplateEntry(BaseModel):
    """Template bank entry: one template per language plus phrase tables."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    templates: LocalizedText
    phrases: dict[str, PhraseTable] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_templates(self) -> TemplateEntry:
        if not self.templates.en.strip() or not self.templates.ta.strip():
            raise ValueError(f"template entry {self.id} needs both en and ta text")
        return self
