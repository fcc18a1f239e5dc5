"""Entity Store - canonical in-memory collections for invoices, customers, users and settings.

Invariants:
    - upsert replaces a record with the same id entirely (no merge), else inserts it
    - New invoices are inserted first (most-recent-first); new customers/users last
    - delete of an absent id is a no-op; get of an absent id returns None
    - upsert_invoice always recomputes subtotal/tax/total before storing
    - Settings live in a slot with no id: at most one record can ever exist

Design Decisions:
    - Explicit store object, created per app (or per test), no module-level state
    - Pure and synchronous: persistence is orchestrated by services/entity_sync.py
"""

from typing import Generic, Iterable, Protocol, TypeVar

from invoice_desk.core.domain_types import EntityKind
from invoice_desk.core.entities import BusinessSettings, Invoice
from invoice_desk.core.invoice_totals import with_computed_totals


class HasId(Protocol):
    @property
    def id(self) -> str: ...


E = TypeVar("E", bound=HasId)


class EntityCollection(Generic[E]):
    """Ordered, id-keyed collection with upsert/delete-by-id semantics."""

    def __init__(self, entities: Iterable[E] = (), *, newest_first: bool = False):
        self.newest_first = newest_first
        self._entities: list[E] = list(entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return self._index_of(entity_id) is not None

    def all(self) -> list[E]:
        return list(self._entities)

    def get(self, entity_id: str) -> E | None:
        index = self._index_of(entity_id)
        return None if index is None else self._entities[index]

    def upsert(self, entity: E) -> bool:
        """Replace or insert. Returns True when the entity was new."""
        index = self._index_of(entity.id)
        if index is not None:
            self._entities[index] = entity
            return False
        if self.newest_first:
            self._entities.insert(0, entity)
        else:
            self._entities.append(entity)
        return True

    def delete(self, entity_id: str) -> bool:
        """Remove by id. Returns True when something was removed."""
        index = self._index_of(entity_id)
        if index is None:
            return False
        del self._entities[index]
        return True

    def load(self, entities: Iterable[E]) -> None:
        """Replace the whole collection (startup load)."""
        self._entities = list(entities)

    def _index_of(self, entity_id: object) -> int | None:
        for i, entity in enumerate(self._entities):
            if entity.id == entity_id:
                return i
        return None


class SettingsSlot:
    """Holder for the singleton BusinessSettings record."""

    def __init__(self, settings: BusinessSettings | None = None):
        self._settings = settings or BusinessSettings()

    @property
    def current(self) -> BusinessSettings:
        return self._settings

    def save(self, settings: BusinessSettings) -> BusinessSettings:
        self._settings = settings
        return settings


class EntityStore:
    """All in-memory state of one running application."""

    def __init__(self, settings: BusinessSettings | None = None):
        self.invoices: EntityCollection[Invoice] = EntityCollection(newest_first=True)
        self.customers = EntityCollection()
        self.users = EntityCollection()
        self.settings = SettingsSlot(settings)

    def collection(self, kind: EntityKind) -> EntityCollection:
        match kind:
            case EntityKind.INVOICE:
                return self.invoices
            case EntityKind.CUSTOMER:
                return self.customers
            case EntityKind.USER:
                return self.users
        raise ValueError(f"Unknown entity kind: {kind}")

    def upsert_invoice(self, invoice: Invoice) -> Invoice:
        """Recompute derived totals, then upsert. Returns the stored invoice."""
        stored = with_computed_totals(invoice)
        self.invoices.upsert(stored)
        return stored
