"""Local notifications shown after a checkout completes."""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class NotificationPort(ABC):
    """Abstract interface for local notification delivery."""

    @abstractmethod
    def send(self, title: str, body: str, data: Optional[dict] = None) -> None:
        ...


class LogNotifier(NotificationPort):
    """Writes notifications to the log; used where no OS notifier is wired in."""

    def send(self, title: str, body: str, data: Optional[dict] = None) -> None:
        logger.info("Local notification", title=title, body=body, data=data)


def format_rupees(amount_paise: int) -> str:
    return f"₹{amount_paise / 100:.2f}"


class NotificationService:
    def __init__(self, port: Optional[NotificationPort] = None):
        self.port = port or LogNotifier()

    def send_payment_success_notification(self, amount: int, coins_earned: int) -> None:
        self.port.send(
            title="Payment Successful",
            body=f"You paid {format_rupees(amount)} and earned {coins_earned} coins.",
            data={"type": "payment_success", "amountPaise": amount, "coins": coins_earned},
        )
