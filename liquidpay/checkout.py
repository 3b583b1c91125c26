"""Checkout SDK port: abstract interface for vendor checkout sheets."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from liquidpay import config


class Succeeded(BaseModel):
    model_config = ConfigDict(frozen=True)

    payment_id: str
    data: Optional[Dict[str, Any]] = None


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: int
    message: str
    data: Optional[Dict[str, Any]] = None


CheckoutResult = Union[Succeeded, Failed]


class CheckoutDelegate(ABC):
    """Receives the outcome of a checkout sheet.

    The SDK calls exactly one of these, exactly once per ``open``, on a
    thread of its choosing.
    """

    @abstractmethod
    def on_payment_error(self, code: int, message: str, data: Optional[Dict[str, Any]] = None):
        ...

    @abstractmethod
    def on_payment_success(self, payment_id: str, data: Optional[Dict[str, Any]] = None):
        ...


def deliver(result: CheckoutResult, delegate: CheckoutDelegate):
    if isinstance(result, Succeeded):
        return delegate.on_payment_success(result.payment_id, result.data)
    if isinstance(result, Failed):
        return delegate.on_payment_error(result.code, result.message, result.data)
    raise TypeError(f"Unknown checkout result: {result!r}")


class CheckoutOptions(BaseModel):
    amount: int
    currency: str
    order_id: str
    description: str = config.CHECKOUT_DESCRIPTION
    theme_color: str = config.CHECKOUT_THEME_COLOR
    notes: Dict[str, str] = Field(default_factory=dict)
    contact: str = ""
    email: str = config.PREFILL_EMAIL

    def to_options(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "currency": self.currency,
            "description": self.description,
            "theme": {"color": self.theme_color},
            "order_id": self.order_id,
            "notes": dict(self.notes),
            "prefill": {"contact": self.contact, "email": self.email},
        }


class CheckoutSDK(ABC):
    """Abstract interface for vendor checkout adapters."""

    @abstractmethod
    def open(
        self,
        key_id: str,
        options: Dict[str, Any],
        surface: Any,
        delegate: CheckoutDelegate,
    ) -> None:
        """Present the checkout sheet on ``surface``.

        Returns immediately; the outcome arrives later through ``delegate``.
        """
        ...
