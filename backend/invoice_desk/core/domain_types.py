"""Domain Types - identity aliases, enums and fixed constants of the invoicing domain.

Invariants:
    - Identifiers are opaque strings (client- or server-generated UUID text)
    - All valid states encoded as Enums, no raw string matching
    - TAX_RATE is a system constant (8% GST), never configurable per invoice
    - SETTINGS_ID is the only identity a settings record is ever stored under

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from decimal import Decimal
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

InvoiceId = NewType("InvoiceId", str)
CustomerId = NewType("CustomerId", str)
UserId = NewType("UserId", str)
ItemId = NewType("ItemId", str)


# ─── Constants ───────────────────────────────────────────────────

TAX_RATE = Decimal("0.08")
CENT = Decimal("0.01")
ZERO = Decimal("0")

SETTINGS_ID = 1
TREND_MONTHS = 6
RECENT_INVOICES_LIMIT = 5


# ─── Enums ───────────────────────────────────────────────────────

class InvoiceStatus(str, Enum):
    """Invoice lifecycle tag, set manually by the user."""
    DRAFT = "Draft"
    PENDING = "Pending"
    PAID = "Paid"
    OVERDUE = "Overdue"


class UserRole(str, Enum):
    """User role. Presentational only, not enforced."""
    ADMIN = "Admin"
    EDITOR = "Editor"
    VIEWER = "Viewer"


class EntityKind(str, Enum):
    """Keyed entity collections held by the store."""
    INVOICE = "invoices"
    CUSTOMER = "customers"
    USER = "users"
