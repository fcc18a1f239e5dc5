"""Business Settings ORM - the single settings row.

Invariants:
    - Only id == SETTINGS_ID is ever written (enforced by SqlSettingsRepository)
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from invoice_desk.db.base import Base


class BusinessSettingsRecord(Base):
    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    business_subtitle: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    gst_tin: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
