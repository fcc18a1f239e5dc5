"""Boundary Protocols - persistence contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Every durable operation is reached through these Protocol types
    - Implementations raise PersistenceError subclasses on failure
    - At most one BusinessSettings record exists in any backend

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, while the store logic that
      surrounds them stays synchronous
"""

from dataclasses import dataclass
from typing import Protocol, TypeVar

from invoice_desk.core.entities import BusinessSettings, Customer, Invoice, User

E = TypeVar("E")


class EntityRepository(Protocol[E]):
    """Contract for one keyed entity collection."""
    async def fetch_all(self) -> list[E]: ...
    async def upsert(self, entity: E) -> None: ...
    async def delete_by_id(self, entity_id: str) -> None: ...


class SettingsRepository(Protocol):
    """Contract for the singleton settings record."""
    async def fetch_settings(self) -> BusinessSettings | None: ...
    async def save_settings(self, settings: BusinessSettings) -> None: ...


class HealthCheck(Protocol):
    async def health_check(self) -> bool: ...


@dataclass
class PersistenceBackend:
    """All repositories of one wired-in backend."""
    name: str
    invoices: EntityRepository[Invoice]
    customers: EntityRepository[Customer]
    users: EntityRepository[User]
    settings: SettingsRepository
    health: HealthCheck
