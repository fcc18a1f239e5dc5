"""Directory Schemas - customers and users at the API boundary.

Invariants:
    - Names are stripped and non-empty
    - Customer contact fields are optional and default to ""
    - User role must be one of UserRole
"""

from pydantic import BaseModel, Field, field_validator

from invoice_desk.core.domain_types import CustomerId, UserId, UserRole
from invoice_desk.core.entities import Customer, User


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty or whitespace")
    return v


class CustomerUpsert(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    company_name: str = Field("", max_length=200)
    email: str = Field("", max_length=320)
    phone: str = Field("", max_length=50)
    address: str = Field("", max_length=2000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)

    def to_entity(self, customer_id: str) -> Customer:
        return Customer(
            id=CustomerId(customer_id),
            name=self.name,
            company_name=self.company_name,
            email=self.email,
            phone=self.phone,
            address=self.address,
        )


class CustomerCreate(CustomerUpsert):
    id: str | None = Field(None, min_length=1, max_length=64)


class CustomerResponse(BaseModel):
    id: str
    name: str
    company_name: str
    email: str
    phone: str
    address: str

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerResponse":
        return cls(
            id=customer.id,
            name=customer.name,
            company_name=customer.company_name,
            email=customer.email,
            phone=customer.phone,
            address=customer.address,
        )


class ClientFieldsResponse(BaseModel):
    """Fields an invoice copies from the selected customer."""
    client_name: str
    client_email: str
    client_address: str


class UserUpsert(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=320)
    role: UserRole = UserRole.VIEWER

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    def to_entity(self, user_id: str) -> User:
        return User(
            id=UserId(user_id), name=self.name, email=self.email, role=self.role,
        )


class UserCreate(UserUpsert):
    id: str | None = Field(None, min_length=1, max_length=64)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)
