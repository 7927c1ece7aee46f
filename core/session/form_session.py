"""Form session: active document type, its values and the per-type draft cache."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date

from core.catalogue.loader import get_document_type
from core.catalogue.models import DocumentType, FieldDescriptor, Language
from core.generator.content import Clock, effective_values, generate_document
from core.session.draft_store import DraftStore, MemoryDraftStore, load_draft, save_draft

MISSING_FIELDS_PREFIX: Mapping[str, str] = {
    "en": "Please fill the required fields: ",
    "ta": "தயவுசெய்து தேவையான புலங்களை நிரப்பவும்: ",
}
MISSING_FIELDS_LIMIT = 3


def missing_required_fields(
    document_type: DocumentType,
    values: Mapping[str, object],
) -> list[FieldDescriptor]:
    """Return required fields whose value is absent or whitespace-only, in form order."""

    missing: list[FieldDescriptor] = []
    for item in document_type.required_fields():
        value = values.get(item.id)
        if value is None or not str(value).strip():
            missing.append(item)
    return missing


def required_fields_message(
    missing: list[FieldDescriptor],
    language: Language,
    limit: int = MISSING_FIELDS_LIMIT,
) -> str | None:
    """Localized validation message naming the first ``limit`` missing fields."""

    if not missing:
        return None
    labels = ", ".join(item.label.get(language) for item in missing[:limit])
    suffix = " …" if len(missing) > limit else ""
    return f"{MISSING_FIELDS_PREFIX['ta' if language == 'ta' else 'en']}{labels}{suffix}"


class FormSession:
    """Holds the values of the selected document type.

    Every edit is written through to the injected draft store under the type's
    key; selecting a type loads its draft, selecting none clears the values.
    """

    def __init__(
        self,
        store: DraftStore | None = None,
        *,
        language: Language = "en",
        clock: Clock = date.today,
    ) -> None:
        self._store: DraftStore = store if store is not None else MemoryDraftStore()
        self._language: Language = language
        self._clock = clock
        self._type_key: str | None = None
        self._values: dict[str, str] = {}

    @property
    def type_key(self) -> str | None:
        return self._type_key

    @property
    def document_type(self) -> DocumentType | None:
        return get_document_type(self._type_key)

    @property
    def language(self) -> Language:
        return self._language

    @property
    def values(self) -> dict[str, str]:
        return dict(self._values)

    def set_language(self, language: Language) -> None:
        self._language = language

    def select_type(self, type_key: str | None) -> None:
        self._type_key = type_key
        self._values = load_draft(self._store, type_key) if type_key else {}

    def set_field(self, field_id: str, value: str) -> None:
        self._values = {**self._values, **self._clamp({field_id: value})}
        if self._type_key:
            save_draft(self._store, self._type_key, self._values)

    def update(self, values: Mapping[str, str]) -> None:
        self._values = {**self._values, **self._clamp(values)}
        if self._type_key:
            save_draft(self._store, self._type_key, self._values)

    def effective_values(self) -> dict[str, str]:
        """Trimmed values with read-only fixed values applied."""

        document_type = self.document_type
        if document_type is None:
            return {}
        return effective_values(document_type, self._values, self._language)

    def missing_required(self) -> list[FieldDescriptor]:
        document_type = self.document_type
        if document_type is None:
            return []
        return missing_required_fields(document_type, self._values)

    def validation_message(self) -> str | None:
        return required_fields_message(self.missing_required(), self._language)

    def is_exportable(self) -> bool:
        return self.document_type is not None and not self.missing_required()

    def generate(self) -> str:
        return generate_document(self._type_key, self._values, self._language, clock=self._clock)

    def _clamp(self, values: Mapping[str, str]) -> dict[str, str]:
        document_type = self.document_type
        if document_type is None:
            return dict(values)
        return document_type.clamp_values(values)
