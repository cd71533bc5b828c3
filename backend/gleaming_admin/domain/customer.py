"""
Customer Domain Model

A storefront user record. Admin access is granted by ``isAdmin`` on this
record, not by the auth service.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from gleaming_admin.domain.order import Address


class Customer(BaseModel):
    id: str = Field(..., description="Document id (auth user id for storefront sign-ups)")
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: Optional[str] = None
    address: Optional[Address] = None
    is_admin: bool = False

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['full_name'] = self.full_name
        return data


class CustomerInput(BaseModel):
    """Schema for creating or editing a customer record"""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    is_admin: bool = False

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_document(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": str(self.email),
            "phone": self.phone,
            "address": {
                "street": self.street,
                "city": self.city,
                "state": self.state,
                "zip": self.zip,
                "country": self.country,
            },
            "isAdmin": self.is_admin,
        }
