"""Entity Sync - optimistic in-memory writes followed by fire-and-forget persistence.

Invariants:
    - apply_* mutates the EntityStore immediately and unconditionally (synchronous)
    - persist_* asks the backend for the same write; it NEVER touches the store,
      so a failed persist leaves the optimistic state in place (no rollback)
    - Every persist failure is logged and published on the NotificationFeed
    - persist_* never raises: it returns True on success, False on failure
    - load() fills the store from the backend at startup; a failing collection
      is logged, reported, and left empty

Design Decisions:
    - apply and persist are separate methods so routes schedule them in two steps
      (apply in the handler, persist as a BackgroundTask) and tests drive each alone
    - No retry, no queue: a later apply may race an earlier in-flight persist
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from invoice_desk.core.domain_types import EntityKind
from invoice_desk.core.entities import BusinessSettings
from invoice_desk.core.entity_store import EntityStore
from invoice_desk.core.errors import PersistenceError
from invoice_desk.core.repository_protocols import EntityRepository, PersistenceBackend

logger = logging.getLogger(__name__)

_SETTINGS_KIND = "settings"

_FAILURE_MESSAGES = {
    EntityKind.INVOICE: "Failed to save invoice to cloud. Please check connection.",
    EntityKind.CUSTOMER: "Failed to save customer to cloud.",
    EntityKind.USER: "Failed to save user.",
    _SETTINGS_KIND: "Failed to save settings.",
}


@dataclass(frozen=True)
class PersistenceNotice:
    """User-visible report of a durable write that did not happen."""
    entity_kind: str
    entity_id: str | None
    operation: str
    message: str
    error_code: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationFeed:
    """Bounded FIFO of pending notices; oldest dropped when full."""

    def __init__(self, limit: int = 50):
        self._notices: deque[PersistenceNotice] = deque(maxlen=limit)

    def __len__(self) -> int:
        return len(self._notices)

    def publish(self, notice: PersistenceNotice) -> None:
        self._notices.append(notice)

    def drain(self) -> list[PersistenceNotice]:
        notices = list(self._notices)
        self._notices.clear()
        return notices


class EntitySync:
    """Owns the store for one app and keeps the backend following it."""

    def __init__(
        self,
        store: EntityStore,
        backend: PersistenceBackend,
        notifications: NotificationFeed | None = None,
    ):
        self.store = store
        self.backend = backend
        self.notifications = notifications or NotificationFeed()

    # ─── Startup ─────────────────────────────────────────────────

    async def load(self) -> None:
        """Initialise the in-memory store from the backend."""
        for kind in EntityKind:
            try:
                entities = await self._repository(kind).fetch_all()
            except Exception as e:
                self._report(kind, None, "fetch_all", e)
                continue
            self.store.collection(kind).load(entities)
            logger.info(
                f"Loaded {len(entities)} {kind.value}",
                extra={"entity_kind": kind.value, "backend": self.backend.name},
            )
        try:
            settings = await self.backend.settings.fetch_settings()
        except Exception as e:
            self._report(_SETTINGS_KIND, None, "fetch_settings", e)
            return
        if settings is not None:
            self.store.settings.save(settings)

    # ─── Step 1: optimistic, synchronous ─────────────────────────

    def apply_upsert(self, kind: EntityKind, entity: Any) -> Any:
        """Apply to memory now. Invoices get their totals recomputed."""
        if kind == EntityKind.INVOICE:
            return self.store.upsert_invoice(entity)
        self.store.collection(kind).upsert(entity)
        return entity

    def apply_delete(self, kind: EntityKind, entity_id: str) -> bool:
        return self.store.collection(kind).delete(entity_id)

    def apply_settings(self, settings: BusinessSettings) -> BusinessSettings:
        return self.store.settings.save(settings)

    # ─── Step 2: durable, asynchronous, failure reported ─────────

    async def persist_upsert(self, kind: EntityKind, entity: Any) -> bool:
        try:
            await self._repository(kind).upsert(entity)
        except Exception as e:
            self._report(kind, entity.id, "upsert", e)
            return False
        return True

    async def persist_delete(self, kind: EntityKind, entity_id: str) -> bool:
        try:
            await self._repository(kind).delete_by_id(entity_id)
        except Exception as e:
            self._report(kind, entity_id, "delete", e)
            return False
        return True

    async def persist_settings(self, settings: BusinessSettings) -> bool:
        try:
            await self.backend.settings.save_settings(settings)
        except Exception as e:
            self._report(_SETTINGS_KIND, None, "save_settings", e)
            return False
        return True

    # ─── Internals ───────────────────────────────────────────────

    def _repository(self, kind: EntityKind) -> EntityRepository:
        match kind:
            case EntityKind.INVOICE:
                return self.backend.invoices
            case EntityKind.CUSTOMER:
                return self.backend.customers
            case EntityKind.USER:
                return self.backend.users
        raise ValueError(f"Unknown entity kind: {kind}")

    def _report(
        self, kind: EntityKind | str, entity_id: str | None, operation: str, exc: Exception,
    ) -> None:
        kind_value = kind.value if isinstance(kind, EntityKind) else kind
        error_code = exc.code if isinstance(exc, PersistenceError) else "PERSISTENCE_ERROR"
        logger.error(
            f"Persistence {operation} failed for {kind_value}: {exc}",
            exc_info=not isinstance(exc, PersistenceError),
            extra={
                "entity_kind": kind_value,
                "entity_id": entity_id,
                "operation": operation,
                "error_code": error_code,
                "backend": self.backend.name,
            },
        )
        if operation.startswith("fetch"):
            message = f"Failed to load {kind_value} from storage."
        elif operation == "delete":
            message = f"Failed to delete {kind_value[:-1]} from storage."
        else:
            message = _FAILURE_MESSAGES.get(kind, "Failed to save changes.")
        self.notifications.publish(PersistenceNotice(
            entity_kind=kind_value,
            entity_id=entity_id,
            operation=operation,
            message=message,
            error_code=error_code,
        ))
