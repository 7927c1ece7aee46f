from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from core.session.draft_store import (
    JsonFileDraftStore,
    MemoryDraftStore,
    clear_draft,
    draft_key,
    load_draft,
    save_draft,
)


def test_draft_key_uses_prefix() -> None:
    assert draft_key("sale-deed") == "docform-sale-deed"


def test_memory_store_round_trip_and_clear() -> None:
    store = MemoryDraftStore()

    save_draft(store, "nda", {"purpose": "research"})

    assert store.keys() == ["docform-nda"]
    assert load_draft(store, "nda") == {"purpose": "research"}
    assert clear_draft(store, "nda") is True
    assert clear_draft(store, "nda") is False
    assert load_draft(store, "nda") == {}


def test_load_draft_ignores_malformed_entry(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="edocs.drafts")
    store = MemoryDraftStore({"docform-nda": "{not json", "docform-will-agreement": "[1, 2]"})

    assert load_draft(store, "nda") == {}
    assert load_draft(store, "will-agreement") == {}
    messages = [record.message for record in caplog.records if record.name == "edocs.drafts"]
    assert any("malformed draft for nda" in message for message in messages)
    assert any("non-object draft for will-agreement" in message for message in messages)


def test_load_draft_stringifies_scalars_and_drops_nulls() -> None:
    store = MemoryDraftStore({"docform-nda": json.dumps({"duration": 5, "purpose": None})})

    assert load_draft(store, "nda") == {"duration": "5"}


def test_json_file_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "drafts.json"

    save_draft(JsonFileDraftStore(path), "nda", {"partyOneName": "அக்மே"})

    reopened = JsonFileDraftStore(path)
    assert load_draft(reopened, "nda") == {"partyOneName": "அக்மே"}
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["version"] == 1
    assert list(raw["drafts"]) == ["docform-nda"]
    assert not list(path.parent.glob("*.tmp"))


def test_json_file_store_corrupt_file_reads_empty_and_is_replaced(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING, logger="edocs.drafts")
    path = tmp_path / "drafts.json"
    path.write_text("{broken", encoding="utf-8")
    store = JsonFileDraftStore(path)

    assert load_draft(store, "nda") == {}
    assert any("unreadable draft store" in record.message for record in caplog.records)

    save_draft(store, "nda", {"purpose": "x"})
    assert load_draft(JsonFileDraftStore(path), "nda") == {"purpose": "x"}


def test_json_file_store_clear(tmp_path: Path) -> None:
    store = JsonFileDraftStore(tmp_path / "drafts.json")
    save_draft(store, "nda", {"purpose": "x"})
    save_draft(store, "gift-deed", {"donorName": "y"})

    assert clear_draft(store, "nda") is True
    assert store.keys() == ["docform-gift-deed"]
    assert clear_draft(store, "nda") is False
