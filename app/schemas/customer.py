"""
Pydantic schemas for customers.

Company details (company/trading name, ABN, addresses) are stored on the
linked business but are read and written here as part of the profile.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core import validation


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class BusinessFields(BaseModel):
    """Company details shared by registration and profile updates"""
    company_name: Optional[str] = Field(None, max_length=255, description="Legal entity name")
    trading_name: Optional[str] = Field(None, max_length=255, description="Trading (business) name")
    abn: Optional[str] = Field(None, description="Australian Business Number, any spacing")
    delivery_address: Optional[str] = Field(None, description="Delivery address")
    billing_address: Optional[str] = Field(None, description="Billing address")
    phone: Optional[str] = Field(None, max_length=50, description="Contact phone")

    @field_validator("company_name", "trading_name", "delivery_address", "billing_address", "phone")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return _clean(v)

    @field_validator("abn")
    @classmethod
    def check_abn(cls, v: Optional[str]) -> Optional[str]:
        abn = validation.normalize_abn(v)
        if not abn:
            return None
        error = validation.validate_abn(abn)
        if error:
            raise ValueError(error)
        return abn

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: Optional[str]) -> Optional[str]:
        if not validation.is_valid_phone(v):
            raise ValueError("Please provide a valid phone number.")
        return v

    def has_business_details(self) -> bool:
        return any([self.company_name, self.trading_name, self.abn, self.delivery_address, self.billing_address])


class CustomerRegister(BusinessFields):
    """Schema for registering a new customer"""
    email: EmailStr = Field(..., description="Email address (unique)")
    password: str = Field(..., description="Plain text password (will be hashed)")
    name: str = Field(..., description="Display name")

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        error = validation.validate_password(v)
        if error:
            raise ValueError(error)
        return v

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        error = validation.validate_name(v)
        if error:
            raise ValueError(error)
        return v.strip()


class CustomerLogin(BaseModel):
    """Schema for customer sign in"""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field("", description="Plain text password")


class ProfileUpdate(BusinessFields):
    """Schema for updating the signed-in customer's profile"""
    name: Optional[str] = Field(None, max_length=255, description="Display name")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean(v)


class CustomerProfile(BaseModel):
    """Schema for a customer with their linked business details"""
    id: int
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    trading_name: Optional[str] = None
    abn: Optional[str] = None
    delivery_address: Optional[str] = None
    billing_address: Optional[str] = None
    business_id: Optional[int] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None


# ============================================================================
# Admin Schemas
# ============================================================================

class PasswordReset(BaseModel):
    password: str = Field(..., description="New plain text password")

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        error = validation.validate_password(v)
        if error:
            raise ValueError(error)
        return v


class AdminFlagUpdate(BaseModel):
    is_admin: bool


class BusinessLinkUpdate(BaseModel):
    business_id: Optional[int] = Field(None, description="Business to link, or null to unlink")


class OkResponse(BaseModel):
    ok: bool = True
