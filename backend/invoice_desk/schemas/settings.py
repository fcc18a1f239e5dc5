"""Business Settings Schema - the singleton profile as read and written by the API."""

from pydantic import BaseModel, Field

from invoice_desk.core.entities import BusinessSettings


class BusinessSettingsBody(BaseModel):
    business_name: str = Field("", max_length=200)
    business_subtitle: str = Field("", max_length=200)
    address: str = Field("", max_length=2000)
    email: str = Field("", max_length=320)
    phone: str = Field("", max_length=50)
    gst_tin: str = Field("", max_length=50)
    logo_url: str | None = Field(None, max_length=2048)

    def to_entity(self) -> BusinessSettings:
        return BusinessSettings(**self.model_dump())

    @classmethod
    def from_entity(cls, settings: BusinessSettings) -> "BusinessSettingsBody":
        return cls(
            business_name=settings.business_name,
            business_subtitle=settings.business_subtitle,
            address=settings.address,
            email=settings.email,
            phone=settings.phone,
            gst_tin=settings.gst_tin,
            logo_url=settings.logo_url,
        )
