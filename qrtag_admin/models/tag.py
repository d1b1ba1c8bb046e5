import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from qrtag_admin.models.common import OTP_PATTERN, PHONE_PATTERN, ApiModel, ListFilters


class TagStatus(str, Enum):
    Generated = "generated"
    Assigned = "assigned"
    Activated = "activated"
    Archived = "archived"


class TagListFilters(ListFilters):
    status: Optional[str] = None  # TagStatus value or "all"
    batch_name: Optional[str] = Field(default=None, alias="batchName")


@dataclass(frozen=True)
class TagVerifyResult:
    """Tag looked up by short code, flattened with its owner contact fields."""

    id: str
    short_code: str
    short_url: Optional[str] = None
    qr_url: Optional[str] = None
    status: Optional[str] = None
    batch_name: Optional[str] = None
    assigned_to: Optional[str] = None
    owner_id: Optional[str] = None
    owner_full_name: Optional[str] = None
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None
    vehicle_number: Optional[str] = None
    vehicle_type: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            "_id": data["id"],
            "shortCode": data["short_code"],
            "shortUrl": data["short_url"],
            "qrUrl": data["qr_url"],
            "status": data["status"],
            "batchName": data["batch_name"],
            "assignedTo": data["assigned_to"],
            "ownerId": data["owner_id"],
            "ownerFullName": data["owner_full_name"],
            "ownerPhone": data["owner_phone"],
            "ownerEmail": data["owner_email"],
            "vehicleNumber": data["vehicle_number"],
            "vehicleType": data["vehicle_type"],
            "createdAt": data["created_at"],
            "updatedAt": data["updated_at"],
        }


class QrConfig(ApiModel):
    margin: Optional[int] = Field(default=None, ge=0)
    scale: Optional[int] = Field(default=None, ge=1, le=16)
    dark_color: Optional[str] = Field(default=None, alias="darkColor")
    light_color: Optional[str] = Field(default=None, alias="lightColor")


class GenerateBulkRequest(ApiModel):
    count: int
    batch_name: Optional[str] = Field(default=None, alias="batchName")
    metadata: Optional[Dict[str, Any]] = None
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo")
    qr_config: Optional[QrConfig] = Field(default=None, alias="qrConfig")

    @field_validator("count")
    @classmethod
    def count_in_range(cls, v: int) -> int:
        if v < 1 or v > 500:
            raise ValueError("Count must be between 1 and 500")
        return v

    @field_validator("batch_name", "assigned_to", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class UpdateTagStatusRequest(ApiModel):
    status: TagStatus


class RequestOtpForm(ApiModel):
    phone: str

    @field_validator("phone")
    @classmethod
    def phone_ten_digits(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Phone number is required")
        if not re.match(PHONE_PATTERN, v):
            raise ValueError("Please enter a valid 10-digit phone number")
        return v


class ConfirmActivationForm(ApiModel):
    otp: str
    full_name: str = Field(alias="fullName")
    vehicle_number: str = Field(alias="vehicleNumber")
    vehicle_type: str = Field(alias="vehicleType")
    email: Optional[str] = None
    city: Optional[str] = None
    sms: bool = True
    whatsapp: bool = True
    call: bool = True

    @field_validator("otp")
    @classmethod
    def otp_six_digits(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("OTP is required")
        if not re.match(OTP_PATTERN, v):
            raise ValueError("OTP must be 6 digits")
        return v

    @field_validator("full_name", "vehicle_number", "vehicle_type")
    @classmethod
    def required_text(cls, v: str, info) -> str:
        if not v or not v.strip():
            label = {
                "full_name": "Full name",
                "vehicle_number": "Vehicle number",
                "vehicle_type": "Vehicle type",
            }[info.field_name]
            raise ValueError(f"{label} is required")
        return v.strip()

    @field_validator("email", "city", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_request(self, short_code: str, phone: str) -> Dict[str, Any]:
        """Payload for the upstream confirm call."""
        payload: Dict[str, Any] = {
            "shortCode": short_code,
            "otp": self.otp,
            "fullName": self.full_name,
            "phone": phone,
            "vehicleNumber": self.vehicle_number,
            "vehicleType": self.vehicle_type,
            "preferences": {
                "sms": self.sms,
                "whatsapp": self.whatsapp,
                "call": self.call,
            },
        }
        if self.email is not None:
            payload["email"] = self.email
        if self.city is not None:
            payload["city"] = self.city
        return payload
