from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator

from qrtag_admin.models.common import ApiModel, ListFilters


class SaleType(str, Enum):
    Online = "online"
    Offline = "offline"
    NotConfirmed = "not-confirmed"


class SalesPersonRole(str, Enum):
    Affiliate = "Affiliate"
    SupportAdmin = "Support Admin"
    Admin = "Admin"
    SuperAdmin = "Super Admin"


class PaymentStatus(str, Enum):
    Pending = "pending"
    Completed = "completed"
    Cancelled = "cancelled"


ADMIN_ROLES = (SalesPersonRole.SuperAdmin.value, SalesPersonRole.SupportAdmin.value, SalesPersonRole.Admin.value)


class TagSaleFilters(ListFilters):
    sale_type: Optional[str] = Field(default=None, alias="saleType")
    payment_status: Optional[str] = Field(default=None, alias="paymentStatus")
    varification_status: Optional[str] = Field(default=None, alias="varificationStatus")
    sales_person_role: Optional[str] = Field(default=None, alias="salesPersonRole")
    affiliate_partner_id: Optional[str] = Field(default=None, alias="affiliatePartnerId")
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")


def _non_negative(v: Optional[float]) -> Optional[float]:
    if v is not None and v < 0:
        raise ValueError("Amount must not be negative")
    return v


class SaleForm(ApiModel):
    """Add Sale form. The tag itself is resolved by short-code verification."""

    tag_short_code: str = Field(alias="tagShortCode")
    owner: Optional[str] = None
    sales_person: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("SalesPerson", "salesPerson", "sales_person")
    )
    sale_date: datetime = Field(alias="saleDate")
    sale_type: SaleType = Field(alias="saleType")
    sales_person_role: SalesPersonRole = Field(alias="salesPersonRole")
    total_sale_amount: float = Field(alias="totalSaleAmount")
    commision_amount_of_sales_person: Optional[float] = Field(default=None, alias="commisionAmountOfSalesPerson")
    commision_amount_of_owner: Optional[float] = Field(default=None, alias="commisionAmountOfOwner")
    cast_amount_of_product_and_services: Optional[float] = Field(default=None, alias="castAmountOfProductAndServices")
    payment_status: PaymentStatus = Field(default=PaymentStatus.Pending.value, alias="paymentStatus")
    varification_status: PaymentStatus = Field(default=PaymentStatus.Pending.value, alias="varificationStatus")
    message: Optional[str] = None
    payment_image_or_screenshot: Optional[str] = Field(default=None, alias="paymentImageOrScreenShot")

    @field_validator("tag_short_code")
    @classmethod
    def short_code_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Tag short code is required")
        return v.strip()

    @field_validator("total_sale_amount")
    @classmethod
    def total_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Total sale amount must be greater than zero")
        return v

    @field_validator(
        "commision_amount_of_sales_person",
        "commision_amount_of_owner",
        "cast_amount_of_product_and_services",
    )
    @classmethod
    def amounts_non_negative(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v)

    @field_validator("owner", "sales_person", "message", "payment_image_or_screenshot", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class SaleUpdate(ApiModel):
    """Edit Sale form; every field optional."""

    tag: Optional[str] = None
    owner: Optional[str] = None
    sales_person: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("SalesPerson", "salesPerson", "sales_person")
    )
    sale_date: Optional[datetime] = Field(default=None, alias="saleDate")
    sale_type: Optional[SaleType] = Field(default=None, alias="saleType")
    total_sale_amount: Optional[float] = Field(default=None, alias="totalSaleAmount")
    commision_amount_of_sales_person: Optional[float] = Field(default=None, alias="commisionAmountOfSalesPerson")
    commision_amount_of_owner: Optional[float] = Field(default=None, alias="commisionAmountOfOwner")
    cast_amount_of_product_and_services: Optional[float] = Field(default=None, alias="castAmountOfProductAndServices")
    payment_status: Optional[PaymentStatus] = Field(default=None, alias="paymentStatus")
    varification_status: Optional[PaymentStatus] = Field(default=None, alias="varificationStatus")
    message: Optional[List[Dict[str, Any]]] = None
    payment_image_or_screenshot: Optional[str] = Field(default=None, alias="paymentImageOrScreenShot")

    @field_validator(
        "total_sale_amount",
        "commision_amount_of_sales_person",
        "commision_amount_of_owner",
        "cast_amount_of_product_and_services",
    )
    @classmethod
    def amounts_non_negative(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v)

    def to_changes(self) -> Dict[str, Any]:
        """Changes in TagSale record shape, for SaleService.update_tag_sale."""
        changes: Dict[str, Any] = {
            "tag": self.tag,
            "owner": self.owner,
            "SalesPerson": self.sales_person,
            "saleDate": self.sale_date.isoformat() if self.sale_date else None,
            "saleType": self.sale_type,
            "totalSaleAmount": self.total_sale_amount,
            "commisionAmountOfSalesPerson": self.commision_amount_of_sales_person,
            "commisionAmountOfOwner": self.commision_amount_of_owner,
            "castAmountOfProductAndServices": self.cast_amount_of_product_and_services,
            "paymentStatus": self.payment_status,
            "varificationStatus": self.varification_status,
            "message": self.message,
            "paymentImageOrScreenShot": self.payment_image_or_screenshot,
        }
        return {key: value for key, value in changes.items() if value is not None}
