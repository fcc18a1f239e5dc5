"""Assistant & Notification Schemas - AI suggestion requests and pending persistence notices."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from invoice_desk.schemas.invoice import Money


class LineItemSuggestionRequest(BaseModel):
    """Rough description of the work to bill."""
    description: str = Field(min_length=1, max_length=2000)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description cannot be empty or whitespace")
        return v


class SuggestedLineItem(BaseModel):
    id: str
    description: str
    quantity: Money
    rate: Money


class LineItemSuggestionResponse(BaseModel):
    items: list[SuggestedLineItem]


class NotificationResponse(BaseModel):
    entity_kind: str
    entity_id: str | None
    operation: str
    message: str
    error_code: str
    timestamp: datetime


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
