"""Data models for the document-type catalogue."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Language = Literal["en", "ta"]
FieldKind = Literal["text", "textarea", "date", "number", "radio", "select"]

SUPPORTED_LANGUAGES: tuple[Language, ...] = ("en", "ta")


class LocalizedText(BaseModel):
    """English/Tamil text pair."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    en: str
    ta: str

    def get(self, language: Language) -> str:
        return self.ta if language == "ta" else self.en


class FieldOption(BaseModel):
    """One selectable value of a radio/select field."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: str
    label: LocalizedText


class SectionDescriptor(BaseModel):
    """Visual grouping of fields on the form."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    title: LocalizedText


class FieldDescriptor(BaseModel):
    """Static schema entry for one form input."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    label: LocalizedText
    kind: FieldKind
    required: bool
    section: str
    options: tuple[FieldOption, ...] = ()
    placeholder: LocalizedText | None = None
    max_length: int | None = Field(default=None, gt=0)
    read_only: bool = False
    fixed_value: LocalizedText | None = None

    @model_validator(mode="after")
    def _check_options(self) -> FieldDescriptor:
        if self.kind in {"radio", "select"} and not self.options:
            raise ValueError(f"field {self.id} of kind {self.kind} needs options")
        if self.fixed_value is not None and not self.read_only:
            raise ValueError(f"field {self.id} has a fixed value but is editable")
        return self

    def option_values(self) -> list[str]:
        return [option.value for option in self.options]

    def limit(self, value: str) -> str:
        """Cut ``value`` to ``max_length`` characters, like a form input would."""

        if self.max_length is None:
            return value
        return value[: self.max_length]


class DocumentType(BaseModel):
    """One legal instrument: metadata, sections and ordered fields."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: LocalizedText
    description: LocalizedText
    category: str
    sections: tuple[SectionDescriptor, ...]
    fields: tuple[FieldDescriptor, ...]

    @model_validator(mode="after")
    def _check_sections(self) -> DocumentType:
        section_keys = [section.key for section in self.sections]
        if len(section_keys) != len(set(section_keys)):
            raise ValueError(f"duplicate section keys in {self.id}")
        field_ids = [item.id for item in self.fields]
        if len(field_ids) != len(set(field_ids)):
            raise ValueError(f"duplicate field ids in {self.id}")
        unknown = sorted({item.section for item in self.fields} - set(section_keys))
        if unknown:
            raise ValueError(f"fields of {self.id} reference unknown sections: {unknown}")
        return self

    def field(self, field_id: str) -> FieldDescriptor | None:
        for item in self.fields:
            if item.id == field_id:
                return item
        return None

    def fields_in_section(self, section_key: str) -> list[FieldDescriptor]:
        return [item for item in self.fields if item.section == section_key]

    def required_fields(self) -> list[FieldDescriptor]:
        return [item for item in self.fields if item.required]

    def fixed_values(self, language: Language) -> dict[str, str]:
        """Return the read-only overrides that replace stored input."""

        return {
            item.id: item.fixed_value.get(language)
            for item in self.fields
            if item.fixed_value is not None
        }

    def clamp_values(self, values: Mapping[str, object]) -> dict[str, str]:
        """Stringify values and apply each known field's ``max_length``."""

        clamped: dict[str, str] = {}
        for key, value in values.items():
            text = "" if value is None else str(value)
            item = self.field(key)
            clamped[key] = item.limit(text) if item is not None else text
        return clamped
