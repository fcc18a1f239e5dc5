"""Local Storage - on-device key-value persistence, one JSON document per collection.

Invariants:
    - Keys are fixed per collection: "invoices", "customers", "users", "settings"
    - Every read/write moves the WHOLE collection (no partial documents)
    - Writes are atomic (temp file + os.replace): a crash never leaves half a document
    - Read-modify-write per key is serialized by an asyncio.Lock, so concurrent
      persists of different records do not drop each other
    - OSError / malformed JSON mapped to LocalStorageError

Design Decisions:
    - File IO pushed to a worker thread (asyncio.to_thread): the event loop never blocks
    - Missing document == empty collection / no settings
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Generic, TypeVar

from invoice_desk.core.domain_types import EntityKind
from invoice_desk.core.entities import BusinessSettings
from invoice_desk.core.entity_codec import (
    DECODERS, ENCODERS, settings_from_dict, settings_to_dict,
)
from invoice_desk.core.errors import LocalStorageError
from invoice_desk.core.repository_protocols import PersistenceBackend

logger = logging.getLogger(__name__)

E = TypeVar("E")

SETTINGS_KEY = "settings"


class LocalKeyValueStore:
    """Directory of <key>.json documents."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def _read_sync(self, key: str) -> Any:
        path = self._path(key)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def _write_sync(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(value, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)

    async def read(self, key: str) -> Any:
        try:
            return await asyncio.to_thread(self._read_sync, key)
        except (OSError, ValueError) as e:
            logger.error(f"Local storage read failed for {key}: {e}")
            raise LocalStorageError(str(e), "read")

    async def write(self, key: str, value: Any) -> None:
        try:
            await asyncio.to_thread(self._write_sync, key, value)
        except (OSError, TypeError) as e:
            logger.error(f"Local storage write failed for {key}: {e}")
            raise LocalStorageError(str(e), "write")

    async def health_check(self) -> bool:
        try:
            await asyncio.to_thread(self.directory.mkdir, parents=True, exist_ok=True)
            return os.access(self.directory, os.W_OK)
        except OSError as e:
            logger.error(f"Local storage health check failed: {e}")
            return False


class LocalCollectionRepository(Generic[E]):
    """EntityRepository over one whole-collection document."""

    def __init__(
        self, store: LocalKeyValueStore, kind: EntityKind, newest_first: bool = False,
    ):
        self._store = store
        self._key = kind.value
        self._encode = ENCODERS[kind]
        self._decode = DECODERS[kind]
        self._newest_first = newest_first

    async def _documents(self) -> list[dict]:
        docs = await self._store.read(self._key)
        if docs is None:
            return []
        if not isinstance(docs, list):
            raise LocalStorageError(f"{self._key} document is not a list", "read")
        return docs

    async def fetch_all(self) -> list[E]:
        try:
            return [self._decode(d) for d in await self._documents()]
        except (KeyError, ValueError, ArithmeticError) as e:
            raise LocalStorageError(f"Malformed {self._key} record: {e}", "read")

    async def upsert(self, entity: E) -> None:
        doc = self._encode(entity)
        async with self._store.lock(self._key):
            docs = await self._documents()
            for i, existing in enumerate(docs):
                if existing.get("id") == doc["id"]:
                    docs[i] = doc
                    break
            else:
                if self._newest_first:
                    docs.insert(0, doc)
                else:
                    docs.append(doc)
            await self._store.write(self._key, docs)

    async def delete_by_id(self, entity_id: str) -> None:
        async with self._store.lock(self._key):
            docs = await self._documents()
            kept = [d for d in docs if d.get("id") != entity_id]
            if len(kept) != len(docs):
                await self._store.write(self._key, kept)


class LocalSettingsRepository:
    """SettingsRepository over the single "settings" document."""

    def __init__(self, store: LocalKeyValueStore):
        self._store = store

    async def fetch_settings(self) -> BusinessSettings | None:
        doc = await self._store.read(SETTINGS_KEY)
        if doc is None:
            return None
        if not isinstance(doc, dict):
            raise LocalStorageError("settings document is not an object", "read")
        return settings_from_dict(doc)

    async def save_settings(self, settings: BusinessSettings) -> None:
        async with self._store.lock(SETTINGS_KEY):
            await self._store.write(SETTINGS_KEY, settings_to_dict(settings))


def build_local_backend(directory: str | Path) -> PersistenceBackend:
    store = LocalKeyValueStore(directory)
    return PersistenceBackend(
        name="local",
        invoices=LocalCollectionRepository(store, EntityKind.INVOICE, newest_first=True),
        customers=LocalCollectionRepository(store, EntityKind.CUSTOMER),
        users=LocalCollectionRepository(store, EntityKind.USER),
        settings=LocalSettingsRepository(store),
        health=store,
    )
