"""ORM Models - SQLAlchemy declarative models backing the database persistence backend.

Invariants:
    - All models inherit from Base (db/base.py)
    - Records mirror core entities; conversion lives in infrastructure/sql_repositories.py

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete for create_all/alembic
"""

from invoice_desk.models.invoice import InvoiceRecord  # noqa: F401
from invoice_desk.models.customer import CustomerRecord  # noqa: F401
from invoice_desk.models.user import UserRecord  # noqa: F401
from invoice_desk.models.business_settings import BusinessSettingsRecord  # noqa: F401
