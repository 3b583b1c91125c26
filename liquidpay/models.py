from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class WireModel(BaseModel):
    """Backend payloads are camelCase; fields accept either spelling."""

    model_config = ConfigDict(populate_by_name=True)


class User(BaseModel):
    uid: str
    phone_number: Optional[str] = None
    email: Optional[str] = None


class Order(WireModel):
    order_id: str = Field(alias="orderId")
    amount: int                                    # minor units
    currency: str
    key_id: str = Field(alias="keyId")             # vendor publishable key


class Payment(BaseModel):
    id: str
    user_id: str
    bill_id: Optional[str] = None
    amount_paise: int
    status: PaymentStatus
    vendor_payment_id: Optional[str] = None
    order_id: Optional[str] = None
    recipient: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime


class PaymentRecord(WireModel):
    user_id: str = Field(alias="userId")
    bill_id: Optional[str] = Field(default=None, alias="billId")
    amount_paise: int = Field(alias="amountPaise")
    status: PaymentStatus
    vendor_payment_id: Optional[str] = Field(default=None, alias="vendorPaymentId")
    order_id: Optional[str] = Field(default=None, alias="orderId")
    recipient: Optional[str] = None
    first_attempt_at: Optional[datetime] = Field(default=None, alias="firstAttemptAt")


class RewardOffer(BaseModel):
    title: str
    reason: str
    coins: int
