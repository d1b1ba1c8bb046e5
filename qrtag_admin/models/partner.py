import re
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field, field_validator

from qrtag_admin.models.common import EMAIL_PATTERN, PHONE_PATTERN, PINCODE_PATTERN, ApiModel, ListFilters


class PartnerStatus(str, Enum):
    Active = "active"
    Inactive = "inactive"
    Suspended = "suspended"


class AffiliatePartnerFilters(ListFilters):
    status: Optional[str] = None  # PartnerStatus value or "all"


def _check_email(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("Email is required")
    if not re.match(EMAIL_PATTERN, v):
        raise ValueError("Please enter a valid email")
    return v


def _check_phone(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("Phone is required")
    if not re.match(PHONE_PATTERN, v):
        raise ValueError("Please enter a valid 10-digit phone number")
    return v


def _check_pincode(v: Optional[str]) -> Optional[str]:
    # optional field; blank is allowed
    if v is None or not v.strip():
        return v
    v = v.strip()
    if not re.match(PINCODE_PATTERN, v):
        raise ValueError("Please enter a valid 6-digit pincode")
    return v


def _check_commission(v: Optional[float]) -> Optional[float]:
    if v is not None and (v < 0 or v > 100):
        raise ValueError("Commission rate must be between 0 and 100")
    return v


class AffiliatePartnerForm(ApiModel):
    """Add Affiliate Partner form."""

    name: str
    email: str
    phone: str
    password: str
    company: Optional[str] = Field(default=None, validation_alias=AliasChoices("company", "companyName"))
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    commission_rate: float = Field(
        validation_alias=AliasChoices("commissionRate", "commissionPercentage", "commission_rate"),
    )
    status: Optional[PartnerStatus] = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str) -> str:
        return _check_phone(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("pincode")
    @classmethod
    def pincode_valid(cls, v: Optional[str]) -> Optional[str]:
        return _check_pincode(v)

    @field_validator("commission_rate")
    @classmethod
    def commission_bounds(cls, v: float) -> float:
        return _check_commission(v)

    def to_request(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "password": self.password,
            "role": "Affiliate",
            "address": self.address or "",
            "city": self.city or "",
            "state": self.state or "",
            "pincode": self.pincode or "",
            "companyName": self.company or "",
            "commissionPercentage": self.commission_rate or 0,
        }


class AffiliatePartnerUpdate(ApiModel):
    """Edit Affiliate Partner form; only the provided fields are sent upstream."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    company: Optional[str] = Field(default=None, validation_alias=AliasChoices("company", "companyName"))
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    commission_rate: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("commissionRate", "commissionPercentage", "commission_rate"),
    )
    status: Optional[PartnerStatus] = None

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_email(v)

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_phone(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: Optional[str]) -> Optional[str]:
        # blank keeps the current password
        if v and v.strip() and len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("pincode")
    @classmethod
    def pincode_valid(cls, v: Optional[str]) -> Optional[str]:
        return _check_pincode(v)

    @field_validator("commission_rate")
    @classmethod
    def commission_bounds(cls, v: Optional[float]) -> Optional[float]:
        return _check_commission(v)

    def to_request(self) -> Dict[str, Any]:
        provided = self.model_fields_set
        payload: Dict[str, Any] = {}
        if self.name:
            payload["name"] = self.name
        if self.email:
            payload["email"] = self.email
        if self.phone:
            payload["phone"] = self.phone
        if self.password and self.password.strip():
            payload["password"] = self.password
        for key in ("address", "city", "state", "pincode"):
            if key in provided:
                payload[key] = getattr(self, key) or ""
        if "company" in provided:
            payload["companyName"] = self.company or ""
        if "commission_rate" in provided:
            payload["commissionPercentage"] = self.commission_rate or 0
        # status is not accepted by the update endpoint
        return payload
