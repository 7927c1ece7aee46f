from __future__ import annotations

from pathlib import Path
from types import MappingProxyType

import pytest

from core.catalogue.loader import default_catalogue
from core.templates.bank import (
    check_alignment,
    default_template_bank,
    get_template_entry,
    load_template_bank,
    template_fields,
)
from core.templates.models import TemplateEntry


def test_bank_covers_every_catalogue_type() -> None:
    assert set(default_template_bank()) == set(default_catalogue())
    check_alignment(default_catalogue(), default_template_bank())


def test_template_fields_are_in_first_use_order() -> None:
    entry = get_template_entry("nda")
    assert entry is not None

    assert template_fields(entry, "en") == [
        "effectiveDate",
        "partyOneName",
        "partyTwoName",
        "purpose",
        "duration",
        "governingLaw",
    ]


def test_phrase_table_falls_back_to_default_for_unknown_code() -> None:
    entry = get_template_entry("rental-agreement")
    assert entry is not None
    utilities = entry.phrases["utilities"]

    assert utilities.phrase("landlord", "en") == "Landlord"
    assert utilities.phrase("landlord", "ta") == "உரிமையாளர்"
    assert utilities.phrase("someone-else", "en") == "Tenant"
    assert utilities.phrase("someone-else", "ta") == "குத்தகைதாரர்"


def test_check_alignment_rejects_missing_bank_entry() -> None:
    bank = dict(default_template_bank())
    bank.pop("nda")

    with pytest.raises(RuntimeError, match="Template bank keys"):
        check_alignment(default_catalogue(), MappingProxyType(bank))


def test_check_alignment_rejects_unknown_template_field() -> None:
    bank = dict(default_template_bank())
    bank["nda"] = TemplateEntry.model_validate(
        {"id": "nda", "templates": {"en": "【partyOneName】 【ghost】", "ta": "【partyOneName】"}}
    )

    with pytest.raises(RuntimeError, match="ghost"):
        check_alignment(default_catalogue(), MappingProxyType(bank))


def test_load_template_bank_rejects_unknown_phrase_table(tmp_path: Path) -> None:
    (tmp_path / "demo.yaml").write_text(
        "id: demo\ntemplates:\n  en: '【kind@missing】'\n  ta: 'x'\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Unknown phrase tables"):
        load_template_bank(tmp_path)


def test_load_template_bank_rejects_unsupported_placeholder(tmp_path: Path) -> None:
    (tmp_path / "demo.yaml").write_text(
        "id: demo\ntemplates:\n  en: '【bad name】'\n  ta: 'x'\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Unsupported placeholders"):
        load_template_bank(tmp_path)


def test_load_template_bank_requires_both_languages(tmp_path: Path) -> None:
    (tmp_path / "demo.yaml").write_text(
        "id: demo\ntemplates:\n  en: 'text'\n  ta: '   '\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Invalid template bank entry"):
        load_template_bank(tmp_path)
