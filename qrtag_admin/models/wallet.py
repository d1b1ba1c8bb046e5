from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from qrtag_admin.models.common import ApiModel


class WalletTransactionStatus(str, Enum):
    Pending = "pending"
    Completed = "completed"
    Cancelled = "cancelled"


class WithdrawForm(ApiModel):
    amount: float
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Withdrawal amount must be greater than zero")
        return v


class ManualCreditForm(ApiModel):
    user_id: str = Field(alias="userId")
    amount: float
    description: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = Field(default=None, max_length=500)
    sale_id: Optional[str] = Field(default=None, alias="saleId")

    @field_validator("user_id")
    @classmethod
    def user_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("User ID is required")
        return v.strip()

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Amount must be greater than zero")
        return v


class TransactionStatusForm(ApiModel):
    status: WalletTransactionStatus
    notes: Optional[str] = Field(default=None, max_length=500)
