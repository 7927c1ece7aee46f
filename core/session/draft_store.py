"""Key-value draft stores holding one serialized FormValues map per document type."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

logger = logging.getLogger("edocs.drafts")

DRAFT_KEY_PREFIX = "docform-"
_STORE_VERSION = 1


class DraftStore(Protocol):
    """Injected string key-value store (the local-storage analogue)."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def clear(self, key: str) -> bool: ...

    def keys(self) -> list[str]: ...


class MemoryDraftStore:
    """In-process draft store used by the API and tests."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def clear(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._items)


class JsonFileDraftStore:
    """Persist drafts in one JSON file; writes go through a temp file + replace.

    A corrupt file reads as empty (with a warning) and is replaced on the next
    write.
    """

    def __init__(self, store_path: Path) -> None:
        self._store_path = store_path

    @property
    def path(self) -> Path:
        return self._store_path

    def get(self, key: str) -> str | None:
        return self._read_items().get(key)

    def set(self, key: str, value: str) -> None:
        items = self._read_items()
        items[key] = value
        self._write_items(items)

    def clear(self, key: str) -> bool:
        items = self._read_items()
        if key not in items:
            return False
        del items[key]
        self._write_items(items)
        return True

    def keys(self) -> list[str]:
        return sorted(self._read_items())

    def _read_items(self) -> dict[str, str]:
        if not self._store_path.exists():
            return {}

        try:
            raw = json.loads(self._store_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable draft store %s: %s", self._store_path, exc)
            return {}

        drafts = raw.get("drafts") if isinstance(raw, dict) else None
        if not isinstance(drafts, dict):
            logger.warning("Ignoring draft store without a drafts mapping: %s", self._store_path)
            return {}
        return {str(key): value for key, value in drafts.items() if isinstance(value, str)}

    def _write_items(self, items: dict[str, str]) -> None:
        self._store_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": _STORE_VERSION,
            "drafts": {key: items[key] for key in sorted(items)},
        }

        fd, raw_tmp_path = tempfile.mkstemp(
            dir=self._store_path.parent,
            prefix=f"{self._store_path.name}.",
            suffix=".tmp",
        )
        os.close(fd)
        tmp_path = Path(raw_tmp_path)

        try:
            tmp_path.write_text(
                json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2),
                encoding="utf-8",
            )
            tmp_path.replace(self._store_path)
        except Exception:
            if tmp_path.exists():
                tmp_path.unlink(missing_ok=True)
            raise


def draft_key(type_key: str) -> str:
    return f"{DRAFT_KEY_PREFIX}{type_key}"


def load_draft(store: DraftStore, type_key: str) -> dict[str, str]:
    """Return the saved values for ``type_key``; malformed entries read as empty."""

    raw = store.get(draft_key(type_key))
    if raw is None:
        return {}

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed draft for %s", type_key)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Ignoring non-object draft for %s", type_key)
        return {}

    return {
        str(key): value if isinstance(value, str) else str(value)
        for key, value in parsed.items()
        if value is not None
    }


def save_draft(store: DraftStore, type_key: str, values: Mapping[str, str]) -> None:
    store.set(draft_key(type_key), json.dumps(dict(values), ensure_ascii=False))


def clear_draft(store: DraftStore, type_key: str) -> bool:
    return store.clear(draft_key(type_key))
